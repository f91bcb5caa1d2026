import pytest

from iavl.db.base import (
    Batch,
    BatchClosedError,
    DBError,
    KeyEmptyError,
    KVIterator,
    KVStore,
    ValueNilError,
)
from iavl.db.memdb import MemDB


def test_error_messages():
    assert str(KeyEmptyError()) == "key cannot be empty"
    assert str(ValueNilError()) == "value cannot be nil"
    assert str(BatchClosedError()) == "batch has been written or closed"


def test_empty_key_error_caught_as_db_error():
    db = MemDB()
    with pytest.raises(DBError) as excinfo:
        db.get(b"")
    assert isinstance(excinfo.value, KeyEmptyError)
    assert str(excinfo.value) == "key cannot be empty"


def test_empty_key_error_caught_as_value_error():
    db = MemDB()
    with pytest.raises(ValueError) as excinfo:
        db.set(b"", b"v")
    assert str(excinfo.value) == "key cannot be empty"


def test_nil_value_error_caught_as_db_error():
    db = MemDB()
    with pytest.raises(DBError) as excinfo:
        db.set(b"k", None)
    assert isinstance(excinfo.value, ValueNilError)
    assert str(excinfo.value) == "value cannot be nil"


def test_closed_batch_error_caught_as_db_error():
    db = MemDB()
    batch = db.new_batch()
    batch.close()
    with pytest.raises(DBError) as excinfo:
        batch.set(b"k", b"v")
    assert isinstance(excinfo.value, BatchClosedError)
    assert str(excinfo.value) == "batch has been written or closed"


def test_iterator_yields_pairs():
    db = MemDB()
    db.set(b"a", b"1")
    db.set(b"b", b"2")
    itr = db.iterator(None, None)
    assert isinstance(itr, KVIterator)
    assert list(itr) == [(b"a", b"1"), (b"b", b"2")]


def test_iterator_context_manager_closes():
    db = MemDB()
    db.set(b"a", b"1")
    itr = db.iterator(None, None)
    with itr as entered:
        assert entered is itr
        assert itr.valid()
    assert not itr.valid()


def test_batch_context_manager_closes():
    db = MemDB()
    batch = db.new_batch()
    assert isinstance(batch, Batch)
    with batch:
        batch.set(b"k", b"v")
        assert batch.get_byte_size() == 2
    with pytest.raises(BatchClosedError):
        batch.get_byte_size()


@pytest.mark.parametrize("cls", [KVIterator, Batch, KVStore])
def test_abstract_classes_cannot_be_instantiated(cls):
    with pytest.raises(TypeError):
        cls()