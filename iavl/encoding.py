"""Varint and length-prefixed byte encoding used by the tree's storage format."""

from __future__ import annotations

MAX_VARINT_LEN64 = 10

_UINT64_MAX = (1 << 64) - 1
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1

_HASH_LEN_PREFIX = b"\x20"


class EncodingError(ValueError):
    """Raised when bytes cannot be decoded or a value cannot be encoded.

    ``consumed`` holds the number of input bytes read before the failure.
    """

    def __init__(self, message: str, consumed: int = 0) -> None:
        super().__init__(message)
        self.consumed = consumed


def _read_uvarint(bz: bytes) -> tuple[int, int]:
    """Decode a uvarint; return (value, n) where n is 0 for short input and negative on overflow."""
    x = 0
    shift = 0
    for i, b in enumerate(bz):
        if i == MAX_VARINT_LEN64:
            return 0, -(i + 1)
        if b < 0x80:
            if i == MAX_VARINT_LEN64 - 1 and b > 1:
                return 0, -(i + 1)
            return x | (b << shift), i + 1
        x |= (b & 0x7F) << shift
        shift += 7
    return 0, 0


def decode_uvarint(bz: bytes) -> tuple[int, int]:
    """Decode an unsigned varint, returning the value and the number of bytes read."""
    value, n = _read_uvarint(bz)
    if n == 0:
        raise EncodingError("buffer too small", 0)
    if n < 0:
        raise EncodingError("EOF decoding uvarint", -n)
    return value, n


def decode_varint(bz: bytes) -> tuple[int, int]:
    """Decode a zig-zag signed varint, returning the value and the number of bytes read."""
    ux, n = _read_uvarint(bz)
    if n == 0:
        raise EncodingError("buffer too small", 0)
    if n < 0:
        raise EncodingError("EOF decoding varint", -n)
    value = ux >> 1
    if ux & 1:
        value = ~value
    return value, n


def decode_bytes(bz: bytes) -> tuple[bytes, int]:
    """Decode a uvarint length-prefixed byte string, returning it and the bytes read."""
    size, n = decode_uvarint(bz)
    if size >= _INT64_MAX:
        raise EncodingError(f"invalid out of range length {size} decoding []byte", n)
    end = n + size
    if len(bz) < end:
        raise EncodingError(f"insufficient bytes decoding []byte of length {size}", n)
    return bytes(bz[n:end]), end


def encode_uvarint(u: int) -> bytes:
    """Encode an unsigned 64-bit integer as a varint."""
    if not 0 <= u <= _UINT64_MAX:
        raise EncodingError(f"value {u} out of range for uint64")
    out = bytearray()
    while u >= 0x80:
        out.append((u & 0x7F) | 0x80)
        u >>= 7
    out.append(u)
    return bytes(out)


def _zigzag(i: int) -> int:
    if not _INT64_MIN <= i <= _INT64_MAX:
        raise EncodingError(f"value {i} out of range for int64")
    return (i << 1) ^ (i >> 63)


def encode_varint(i: int) -> bytes:
    """Encode a signed 64-bit integer as a zig-zag varint."""
    return encode_uvarint(_zigzag(i))


def encode_bytes(bz: bytes) -> bytes:
    """Length-prefix a byte string with its uvarint length."""
    return encode_uvarint(len(bz)) + bytes(bz)


def encode_32bytes_hash(bz: bytes) -> bytes:
    """Length-prefix a 32-byte hash with the constant length byte."""
    return _HASH_LEN_PREFIX + bytes(bz)


def encode_uvarint_size(u: int) -> int:
    """Return the number of bytes the varint encoding of ``u`` takes."""
    if u == 0:
        return 1
    return (u.bit_length() + 6) // 7


def encode_varint_size(i: int) -> int:
    """Return the number of bytes the zig-zag varint encoding of ``i`` takes."""
    return encode_uvarint_size(_zigzag(i))


def encode_bytes_size(bz: bytes) -> int:
    """Return the size of ``bz`` once length-prefixed."""
    return encode_uvarint_size(len(bz)) + len(bz)