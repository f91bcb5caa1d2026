"""Exported tree nodes and a compressed form of the export stream.

Compression drops branch keys (they can be rebuilt on import), delta-encodes
leaf keys against the previous leaf, and stores branch versions as a delta
against the larger version of their two children.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Iterator, Protocol

from iavl.encoding import EncodingError, decode_uvarint, encode_uvarint


@dataclass
class ExportNode:
    """A tree node as exported, in depth-first post-order."""

    key: bytes | None = None
    value: bytes | None = None
    version: int = 0
    height: int = 0


class NodeImporter(Protocol):
    """Anything that accepts exported nodes one at a time."""

    def add(self, node: ExportNode) -> None: ...


def diff_offset(a: bytes, b: bytes) -> int:
    """Return the index of the first byte where ``a`` and ``b`` differ."""
    for offset, (x, y) in enumerate(zip(a, b)):
        if x != y:
            return offset
    return min(len(a), len(b))


def delta_encode(key: bytes, last_key: bytes | None) -> bytes:
    """Encode ``key`` as the shared-prefix length with ``last_key`` followed by the rest."""
    shared = diff_offset(last_key or b"", key)
    return encode_uvarint(shared) + bytes(key[shared:])


def delta_decode(key: bytes, last_key: bytes | None) -> bytes:
    """Rebuild a key encoded by ``delta_encode`` against ``last_key``."""
    try:
        shared, n = decode_uvarint(key)
    except EncodingError as exc:
        raise EncodingError(f"uvarint parse failed {-exc.consumed}", exc.consumed) from exc
    rest = bytes(key[n:])
    if shared == 0:
        return rest
    last_key = last_key or b""
    if shared > len(last_key):
        raise EncodingError(
            f"shared prefix length {shared} exceeds previous key length {len(last_key)}", n
        )
    return bytes(last_key[:shared]) + rest


def _max_of_top_two(stack: list[int]) -> int:
    if len(stack) < 2:
        raise ValueError("branch node without two children in the export stream")
    return max(stack[-1], stack[-2])


class CompressExporter:
    """Iterates an export stream, yielding the compressed form of each node."""

    def __init__(self, exporter: Iterable[ExportNode]) -> None:
        self._inner: Iterator[ExportNode] = iter(exporter)
        self._last_key: bytes | None = None
        self._version_stack: list[int] = []

    def __iter__(self) -> CompressExporter:
        return self

    def __next__(self) -> ExportNode:
        node = next(self._inner)
        if node.height == 0:
            key = node.key or b""
            encoded = delta_encode(key, self._last_key)
            self._last_key = key
            self._version_stack.append(node.version)
            return replace(node, key=encoded)

        max_version = _max_of_top_two(self._version_stack)
        self._version_stack.pop()
        self._version_stack[-1] = node.version
        return replace(node, key=None, version=node.version - max_version)


class CompressImporter:
    """Decompresses nodes before handing them to an inner importer."""

    def __init__(self, importer: NodeImporter) -> None:
        self._inner = importer
        self._last_key: bytes | None = None
        self._min_key_stack: list[bytes] = []
        self._version_stack: list[int] = []

    def add(self, node: ExportNode) -> None:
        """Decode ``node`` and pass it on."""
        if node.height == 0:
            key = delta_decode(node.key or b"", self._last_key)
            self._last_key = key
            self._min_key_stack.append(key)
            self._version_stack.append(node.version)
            decoded = replace(node, key=key)
        else:
            if not self._min_key_stack:
                raise ValueError("branch node without children in the import stream")
            # The branch key is the smallest key of its right subtree.
            key = self._min_key_stack.pop()
            max_version = _max_of_top_two(self._version_stack)
            version = node.version + max_version
            self._version_stack.pop()
            self._version_stack[-1] = version
            decoded = replace(node, key=key, version=version)
        self._inner.add(decoded)