"""Fast nodes: the latest value of a key with the version it was last updated at."""

from __future__ import annotations

from dataclasses import dataclass

from iavl.encoding import (
    EncodingError,
    decode_bytes,
    decode_varint,
    encode_bytes,
    encode_bytes_size,
    encode_varint,
    encode_varint_size,
)


@dataclass
class FastNode:
    """A key's live value together with the version that last set it."""

    key: bytes = b""
    value: bytes = b""
    version_last_updated_at: int = 0

    @classmethod
    def deserialize(cls, key: bytes, buf: bytes) -> FastNode:
        """Build a node for ``key`` from its encoded form."""
        try:
            version, n = decode_varint(buf)
        except EncodingError as exc:
            raise EncodingError(f"decoding fastnode.version, {exc}", exc.consumed) from exc
        try:
            value, _ = decode_bytes(buf[n:])
        except EncodingError as exc:
            raise EncodingError(f"decoding fastnode.value, {exc}", exc.consumed) from exc
        return cls(key=key, value=value, version_last_updated_at=version)

    def encoded_size(self) -> int:
        """Return the length of ``to_bytes()``."""
        return encode_varint_size(self.version_last_updated_at) + encode_bytes_size(self.value)

    def to_bytes(self) -> bytes:
        """Serialise the version and value; the key is stored separately."""
        return encode_varint(self.version_last_updated_at) + encode_bytes(self.value)