"""A least-recently-used cache of nodes keyed by their byte keys."""

from __future__ import annotations

from collections import OrderedDict
from typing import Protocol, runtime_checkable


@runtime_checkable
class CacheNode(Protocol):
    """Anything that can be cached: it exposes its byte key."""

    @property
    def key(self) -> bytes: ...


class LRUCache:
    """LRU cache holding at most ``max_element_count`` nodes."""

    def __init__(self, max_element_count: int) -> None:
        self._max = max_element_count
        # Most recently used entries sit at the end.
        self._entries: OrderedDict[bytes, CacheNode] = OrderedDict()

    def add(self, node: CacheNode) -> CacheNode | None:
        """Add a node.

        Returns the node it replaced when the key was present. Otherwise, when
        the cache overflows, returns the evicted least recently used node.
        Returns None when nothing was replaced or evicted.
        """
        key = bytes(node.key)
        old = self._entries.get(key)
        if old is not None:
            self._entries[key] = node
            self._entries.move_to_end(key)
            return old

        self._entries[key] = node
        if len(self._entries) > self._max:
            _, evicted = self._entries.popitem(last=False)
            return evicted
        return None

    def get(self, key: bytes) -> CacheNode | None:
        """Return the node for ``key`` and mark it recently used, or None."""
        key = bytes(key)
        node = self._entries.get(key)
        if node is not None:
            self._entries.move_to_end(key)
        return node

    def has(self, key: bytes) -> bool:
        """Return whether a node with ``key`` is cached, without touching its recency."""
        return bytes(key) in self._entries

    def remove(self, key: bytes) -> CacheNode | None:
        """Remove and return the node for ``key``, or None if absent."""
        return self._entries.pop(bytes(key), None)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, (bytes, bytearray)) and self.has(key)

    def __len__(self) -> int:
        return len(self._entries)