"""Byte strings that serialise as upper-case hex, and byte copy helpers."""

from __future__ import annotations

import binascii


class HexBytes(bytes):
    """Bytes whose JSON and string forms are upper-case hexadecimal."""

    def marshal(self) -> bytes:
        """Return the raw bytes."""
        return bytes(self)

    @classmethod
    def unmarshal(cls, data: bytes) -> HexBytes:
        """Build from raw bytes."""
        return cls(data)

    def to_json(self) -> bytes:
        """Return the value as a quoted upper-case hex JSON string."""
        return b'"' + self.hex().upper().encode("ascii") + b'"'

    @classmethod
    def from_json(cls, data: bytes | str) -> HexBytes:
        """Parse a quoted hex JSON string."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        if len(data) < 2 or data[:1] != b'"' or data[-1:] != b'"':
            raise ValueError(f"invalid hex string: {data!r}")
        return cls(binascii.unhexlify(data[1:-1]))

    def __str__(self) -> str:
        return self.hex().upper()


def cp(bz: bytes) -> bytes:
    """Return a copy of ``bz``."""
    return bytes(bz)


def cp_incr(bz: bytes) -> bytes | None:
    """Return ``bz`` incremented by one as a big-endian number of the same length.

    Returns None on overflow, when every byte is 0xFF.
    """
    if len(bz) == 0:
        raise ValueError("cp_incr expects non-zero bz length")
    ret = bytearray(bz)
    for i in reversed(range(len(ret))):
        if ret[i] < 0xFF:
            ret[i] += 1
            return bytes(ret)
        ret[i] = 0x00
    return None