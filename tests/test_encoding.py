import pytest

from iavl.encoding import (
    EncodingError,
    decode_bytes,
    decode_uvarint,
    decode_varint,
    encode_32bytes_hash,
    encode_bytes,
    encode_bytes_size,
    encode_uvarint,
    encode_uvarint_size,
    encode_varint,
    encode_varint_size,
)

MAX_INT32 = 2**31 - 1
MAX_UINT32 = 2**32 - 1
MAX_INT64 = 2**63 - 1
MAX_UINT64 = 2**64 - 1

BZ = bytes([0, 1, 2, 3, 4, 5, 6, 7])

DECODE_CASES = {
    "full": (BZ, 8, BZ, False),
    "empty": (BZ, 0, b"", False),
    "partial": (BZ, 3, bytes([0, 1, 2]), False),
    "out of bounds": (BZ, 9, None, True),
    "empty input": (b"", 0, b"", False),
    "empty input out of bounds": (b"", 1, None, True),
    "max int32": (BZ, MAX_INT32, None, True),
    "max int32 -1": (BZ, MAX_INT32 - 1, None, True),
    "max int32 -10": (BZ, MAX_INT32 - 10, None, True),
    "max int32 +1": (BZ, MAX_INT32 + 1, None, True),
    "max int32 +10": (BZ, MAX_INT32 + 10, None, True),
    "max int32*2": (BZ, MAX_INT32 * 2, None, True),
    "max int32*2 -1": (BZ, MAX_INT32 * 2 - 1, None, True),
    "max int32*2 -10": (BZ, MAX_INT32 * 2 - 10, None, True),
    "max int32*2 +1": (BZ, MAX_INT32 * 2 + 1, None, True),
    "max int32*2 +10": (BZ, MAX_INT32 * 2 + 10, None, True),
    "max uint32": (BZ, MAX_UINT32, None, True),
    "max uint32 -1": (BZ, MAX_UINT32 - 1, None, True),
    "max uint32 -10": (BZ, MAX_UINT32 - 10, None, True),
    "max uint32 +1": (BZ, MAX_UINT32 + 1, None, True),
    "max uint32 +10": (BZ, MAX_UINT32 + 10, None, True),
    "max uint32*2": (BZ, MAX_UINT32 * 2, None, True),
    "max uint32*2 -1": (BZ, MAX_UINT32 * 2 - 1, None, True),
    "max uint32*2 -10": (BZ, MAX_UINT32 * 2 - 10, None, True),
    "max uint32*2 +1": (BZ, MAX_UINT32 * 2 + 1, None, True),
    "max uint32*2 +10": (BZ, MAX_UINT32 * 2 + 10, None, True),
    "max int64": (BZ, MAX_INT64, None, True),
    "max int64 -1": (BZ, MAX_INT64 - 1, None, True),
    "max int64 -10": (BZ, MAX_INT64 - 10, None, True),
    "max int64 +1": (BZ, MAX_INT64 + 1, None, True),
    "max int64 +10": (BZ, MAX_INT64 + 10, None, True),
    "max uint64": (BZ, MAX_UINT64, None, True),
    "max uint64 -1": (BZ, MAX_UINT64 - 1, None, True),
    "max uint64 -10": (BZ, MAX_UINT64 - 10, None, True),
}


@pytest.mark.parametrize(
    "bz,length_prefix,expect,expect_err",
    list(DECODE_CASES.values()),
    ids=list(DECODE_CASES.keys()),
)
def test_decode_bytes(bz, length_prefix, expect, expect_err):
    prefix = encode_uvarint(length_prefix)
    buf = prefix + bz
    if expect_err:
        with pytest.raises(EncodingError) as info:
            decode_bytes(buf)
        assert info.value.consumed == len(prefix)
    else:
        b, n = decode_bytes(buf)
        assert n == len(prefix) + length_prefix
        assert b == expect


def test_decode_bytes_invalid_varint():
    with pytest.raises(EncodingError):
        decode_bytes(bytes([0xFF]))


ENC_VALUES = [
    -1, -100, -(1 << 32),
    0, 1, 100, 1 << 32,
    -(1 << 52), 1 << 52, 17,
    19, 28, 37, 388888888,
    -99999999999, 99999999999,
    MAX_INT64, -(2**63),
]


@pytest.mark.parametrize("value", ENC_VALUES)
def test_encode_varint_round_trip(value):
    encoded = encode_varint(value)
    assert decode_varint(encoded) == (value, len(encoded))
    assert encode_varint_size(value) == len(encoded)


def test_encode_varint_known_bytes():
    assert encode_varint(0) == b"\x00"
    assert encode_varint(1) == b"\x02"
    assert encode_varint(-1) == b"\x01"
    assert encode_varint(MAX_INT64) == b"\xfe" + b"\xff" * 8 + b"\x01"
    assert encode_varint(-(2**63)) == b"\xff" * 9 + b"\x01"


@pytest.mark.parametrize("value", [0, 1, 127, 128, 300, MAX_UINT32, MAX_UINT64])
def test_uvarint_round_trip(value):
    encoded = encode_uvarint(value)
    assert decode_uvarint(encoded) == (value, len(encoded))
    assert encode_uvarint_size(value) == len(encoded)


def test_uvarint_known_bytes():
    assert encode_uvarint(300) == b"\xac\x02"
    assert encode_uvarint(MAX_UINT64) == b"\xff" * 9 + b"\x01"


def test_encode_out_of_range():
    with pytest.raises(EncodingError):
        encode_uvarint(-1)
    with pytest.raises(EncodingError):
        encode_uvarint(2**64)
    with pytest.raises(EncodingError):
        encode_varint(2**63)


def test_decode_uvarint_empty():
    with pytest.raises(EncodingError) as info:
        decode_uvarint(b"")
    assert info.value.consumed == 0


def test_decode_uvarint_overflow():
    with pytest.raises(EncodingError) as info:
        decode_uvarint(b"\xff" * 9 + b"\x02")
    assert info.value.consumed == 10
    with pytest.raises(EncodingError):
        decode_varint(b"\xff" * 11)


def test_encode_bytes_round_trip():
    data = b"hello world"
    encoded = encode_bytes(data)
    assert encoded[0] == len(data)
    assert decode_bytes(encoded) == (data, len(encoded))
    assert encode_bytes_size(data) == len(encoded)


def test_encode_32bytes_hash():
    digest = bytes(range(32))
    encoded = encode_32bytes_hash(digest)
    assert decode_bytes(encoded) == (digest, 33)