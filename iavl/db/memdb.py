"""An in-memory ordered key-value store, mainly for tests."""

from __future__ import annotations

import enum
import threading
from typing import Iterator, NamedTuple

from sortedcontainers import SortedDict

from iavl.db.base import (
    Batch,
    BatchClosedError,
    DBError,
    KeyEmptyError,
    KVIterator,
    KVStore,
    ValueNilError,
)


def _check_domain(start: bytes | None, end: bytes | None) -> None:
    if (start is not None and len(start) == 0) or (end is not None and len(end) == 0):
        raise KeyEmptyError()


class MemDB(KVStore):
    """An in-memory store kept in key order."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tree: SortedDict = SortedDict()

    def get(self, key: bytes) -> bytes | None:
        if not key:
            raise KeyEmptyError()
        with self._lock:
            return self._tree.get(bytes(key))

    def has(self, key: bytes) -> bool:
        if not key:
            raise KeyEmptyError()
        with self._lock:
            return bytes(key) in self._tree

    def set(self, key: bytes, value: bytes) -> None:
        if not key:
            raise KeyEmptyError()
        if value is None:
            raise ValueNilError()
        with self._lock:
            self._set_unlocked(key, value)

    def _set_unlocked(self, key: bytes, value: bytes) -> None:
        self._tree[bytes(key)] = bytes(value)

    def set_sync(self, key: bytes, value: bytes) -> None:
        self.set(key, value)

    def delete(self, key: bytes) -> None:
        if not key:
            raise KeyEmptyError()
        with self._lock:
            self._delete_unlocked(key)

    def _delete_unlocked(self, key: bytes) -> None:
        self._tree.pop(bytes(key), None)

    def delete_sync(self, key: bytes) -> None:
        self.delete(key)

    def close(self) -> None:
        """Do nothing: closing must not lose the in-memory contents."""

    def print(self) -> None:
        """Print every entry as hex."""
        with self._lock:
            for key, value in self._tree.items():
                print(f"[{key.hex().upper()}]:\t[{value.hex().upper()}]")

    def stats(self) -> dict[str, str]:
        with self._lock:
            return {"database.type": "memDB", "database.size": str(len(self._tree))}

    def new_batch(self) -> MemDBBatch:
        return MemDBBatch(self)

    def new_batch_with_size(self, size: int) -> MemDBBatch:
        """Same as new_batch: the in-memory batch cannot pre-allocate."""
        return MemDBBatch(self)

    def _pairs(
        self, start: bytes | None, end: bytes | None, reverse: bool
    ) -> Iterator[tuple[bytes, bytes]]:
        tree = self._tree
        for key in tree.irange(start, end, inclusive=(True, False), reverse=reverse):
            yield key, tree[key]

    def _snapshot(
        self, start: bytes | None, end: bytes | None, reverse: bool
    ) -> Iterator[tuple[bytes, bytes]]:
        with self._lock:
            return iter(list(self._pairs(start, end, reverse)))

    def iterator(self, start: bytes | None, end: bytes | None) -> MemDBIterator:
        """Iterate ascending over [start, end) on a snapshot taken under the lock."""
        _check_domain(start, end)
        return MemDBIterator(self._snapshot(start, end, False), start, end)

    def reverse_iterator(self, start: bytes | None, end: bytes | None) -> MemDBIterator:
        """Iterate descending over [start, end) on a snapshot taken under the lock."""
        _check_domain(start, end)
        return MemDBIterator(self._snapshot(start, end, True), start, end)

    def iterator_no_mtx(self, start: bytes | None, end: bytes | None) -> MemDBIterator:
        """Iterate ascending over [start, end) lazily, without taking the lock."""
        _check_domain(start, end)
        return MemDBIterator(self._pairs(start, end, False), start, end)

    def reverse_iterator_no_mtx(self, start: bytes | None, end: bytes | None) -> MemDBIterator:
        """Iterate descending over [start, end) lazily, without taking the lock."""
        _check_domain(start, end)
        return MemDBIterator(self._pairs(start, end, True), start, end)


class MemDBIterator(KVIterator):
    """Cursor over a stream of MemDB entries."""

    def __init__(
        self,
        source: Iterator[tuple[bytes, bytes]],
        start: bytes | None,
        end: bytes | None,
    ) -> None:
        self._source = source
        self._start = start
        self._end = end
        self._item: tuple[bytes, bytes] | None = next(source, None)

    def domain(self) -> tuple[bytes | None, bytes | None]:
        return self._start, self._end

    def valid(self) -> bool:
        return self._item is not None

    def _require_valid(self) -> tuple[bytes, bytes]:
        if self._item is None:
            raise DBError("iterator is invalid")
        return self._item

    def next(self) -> None:
        self._require_valid()
        self._item = next(self._source, None)

    def key(self) -> bytes:
        return self._require_valid()[0]

    def value(self) -> bytes:
        return self._require_valid()[1]

    def error(self) -> Exception | None:
        return None

    def close(self) -> None:
        self._source = iter(())
        self._item = None


class _OpType(enum.Enum):
    SET = enum.auto()
    DELETE = enum.auto()


class _Operation(NamedTuple):
    op_type: _OpType
    key: bytes
    value: bytes | None


class MemDBBatch(Batch):
    """Writes queued for a MemDB, applied together under its lock."""

    def __init__(self, db: MemDB) -> None:
        self._db = db
        self._ops: list[_Operation] | None = []
        self._size = 0

    def set(self, key: bytes, value: bytes) -> None:
        if not key:
            raise KeyEmptyError()
        if value is None:
            raise ValueNilError()
        if self._ops is None:
            raise BatchClosedError()
        self._size += len(key) + len(value)
        self._ops.append(_Operation(_OpType.SET, bytes(key), bytes(value)))

    def delete(self, key: bytes) -> None:
        if not key:
            raise KeyEmptyError()
        if self._ops is None:
            raise BatchClosedError()
        self._size += len(key)
        self._ops.append(_Operation(_OpType.DELETE, bytes(key), None))

    def write(self) -> None:
        """Apply the queued writes; the batch is closed afterwards."""
        if self._ops is None:
            raise BatchClosedError()
        with self._db._lock:
            for op in self._ops:
                if op.op_type is _OpType.SET:
                    self._db._set_unlocked(op.key, op.value)
                else:
                    self._db._delete_unlocked(op.key)
        self.close()

    def write_sync(self) -> None:
        self.write()

    def close(self) -> None:
        self._ops = None
        self._size = 0

    def get_byte_size(self) -> int:
        if self._ops is None:
            raise BatchClosedError()
        return self._size