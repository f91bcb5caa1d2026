import pytest

from iavl.encoding import EncodingError
from iavl.fastnode import FastNode
from iavl.rand import rand_bytes


def test_encoded_size():
    node = FastNode(key=rand_bytes(10), value=rand_bytes(20), version_last_updated_at=1)
    expected = 1 + len(node.value) + 1
    assert node.encoded_size() == expected
    assert len(node.to_bytes()) == expected


@pytest.mark.parametrize(
    "node,expect_hex",
    [
        (FastNode(), "0000"),
        (FastNode(key=b"\x04", value=b"\x02", version_last_updated_at=1), "020102"),
    ],
    ids=["empty", "inner"],
)
def test_encode_decode(node, expect_hex):
    encoded = node.to_bytes()
    assert encoded.hex() == expect_hex
    decoded = FastNode.deserialize(node.key, encoded)
    assert decoded == node


def test_deserialize_empty_buffer_fails():
    with pytest.raises(EncodingError, match="decoding fastnode.version"):
        FastNode.deserialize(b"k", b"")


def test_deserialize_truncated_value_fails():
    with pytest.raises(EncodingError, match="decoding fastnode.value"):
        FastNode.deserialize(b"k", b"\x02\x05ab")


def test_roundtrip_negative_version():
    node = FastNode(key=b"abc", value=b"hello", version_last_updated_at=-5)
    assert FastNode.deserialize(b"abc", node.to_bytes()) == node