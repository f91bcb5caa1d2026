"""A logical key-value store living under a key prefix of another store."""

from __future__ import annotations

import threading

from iavl.db.base import (
    Batch,
    DBError,
    KeyEmptyError,
    KVIterator,
    KVStore,
    ValueNilError,
)
from iavl.hexbytes import cp, cp_incr


def _check_domain(start: bytes | None, end: bytes | None) -> None:
    if (start is not None and len(start) == 0) or (end is not None and len(end) == 0):
        raise KeyEmptyError("key is empty")


class PrefixDB(KVStore):
    """Namespaces keys of an underlying store under a fixed prefix."""

    def __init__(self, db: KVStore, prefix: bytes) -> None:
        self._lock = threading.Lock()
        self._prefix = bytes(prefix)
        self._db = db

    @property
    def prefix(self) -> bytes:
        return self._prefix

    def _prefixed(self, key: bytes) -> bytes:
        return self._prefix + bytes(key)

    def get(self, key: bytes) -> bytes | None:
        if not key:
            raise KeyEmptyError("key is empty")
        return self._db.get(self._prefixed(key))

    def has(self, key: bytes) -> bool:
        if not key:
            raise KeyEmptyError("key is empty")
        return self._db.has(self._prefixed(key))

    def set(self, key: bytes, value: bytes) -> None:
        if not key:
            raise KeyEmptyError("key is empty")
        self._db.set(self._prefixed(key), value)

    def delete(self, key: bytes) -> None:
        if not key:
            raise KeyEmptyError("key is empty")
        self._db.delete(self._prefixed(key))

    def _bounds(self, start: bytes | None, end: bytes | None) -> tuple[bytes, bytes | None]:
        pstart = self._prefix + (bytes(start) if start is not None else b"")
        if end is None:
            pend = cp_incr(self._prefix)
        else:
            pend = self._prefix + bytes(end)
        return pstart, pend

    def iterator(self, start: bytes | None, end: bytes | None) -> PrefixIterator:
        """Iterate ascending over [start, end) within the prefix."""
        _check_domain(start, end)
        pstart, pend = self._bounds(start, end)
        source = self._db.iterator(pstart, pend)
        return PrefixIterator(self._prefix, start, end, source)

    def reverse_iterator(self, start: bytes | None, end: bytes | None) -> PrefixIterator:
        """Iterate descending over [start, end) within the prefix."""
        _check_domain(start, end)
        pstart, pend = self._bounds(start, end)
        source = self._db.reverse_iterator(pstart, pend)
        return PrefixIterator(self._prefix, start, end, source)

    def new_batch(self) -> PrefixBatch:
        return PrefixBatch(self._prefix, self._db.new_batch())

    def new_batch_with_size(self, size: int) -> PrefixBatch:
        return PrefixBatch(self._prefix, self._db.new_batch_with_size(size))

    def close(self) -> None:
        with self._lock:
            self._db.close()

    def print(self) -> None:
        """Print the prefix and every entry under it as hex."""
        print(f"prefix: {self._prefix.hex().upper()}")
        with self.iterator(None, None) as itr:
            for key, value in itr:
                print(f"[{key.hex().upper()}]:\t[{value.hex().upper()}]")


def iterate_prefix(db: KVStore, prefix: bytes) -> KVIterator:
    """Iterate over the keys of ``db`` that start with ``prefix``, unstripped."""
    if not prefix:
        start: bytes | None = None
        end: bytes | None = None
    else:
        start = cp(prefix)
        end = cp_incr(prefix)
    return db.iterator(start, end)


class PrefixIterator(KVIterator):
    """Strips the prefix from the keys of an underlying iterator."""

    def __init__(
        self,
        prefix: bytes,
        start: bytes | None,
        end: bytes | None,
        source: KVIterator,
    ) -> None:
        self._prefix = prefix
        self._start = start
        self._end = end
        self._source = source
        self._err: Exception | None = None

        # Empty keys are not allowed, so an entry exactly equal to the prefix is skipped.
        if source.valid() and source.key() == prefix:
            source.next()
        self._valid = source.valid() and source.key().startswith(prefix)

    def domain(self) -> tuple[bytes | None, bytes | None]:
        return self._start, self._end

    def valid(self) -> bool:
        if not self._valid or self._err is not None or not self._source.valid():
            return False
        key = self._source.key()
        if not key.startswith(self._prefix):
            self._err = DBError(
                f"received invalid key from backend: {key.hex()} "
                f"(expected prefix {self._prefix.hex()})"
            )
            return False
        return True

    def _require_valid(self) -> None:
        if not self.valid():
            raise DBError("iterator is invalid")

    def next(self) -> None:
        self._require_valid()
        while True:
            self._source.next()
            if not self._source.valid() or not self._source.key().startswith(self._prefix):
                self._valid = False
                return
            if self._source.key() != self._prefix:
                return

    def key(self) -> bytes:
        self._require_valid()
        return self._source.key()[len(self._prefix):]

    def value(self) -> bytes:
        self._require_valid()
        return self._source.value()

    def error(self) -> Exception | None:
        source_err = self._source.error()
        if source_err is not None:
            return source_err
        return self._err

    def close(self) -> None:
        self._source.close()


class PrefixBatch(Batch):
    """A batch that prefixes every key before handing it to the source batch."""

    def __init__(self, prefix: bytes, source: Batch | None) -> None:
        self._prefix = prefix
        self._source = source

    def _require_source(self) -> Batch:
        if self._source is None:
            raise DBError("source batch is nil")
        return self._source

    def set(self, key: bytes, value: bytes) -> None:
        if not key:
            raise KeyEmptyError("key is empty")
        if value is None:
            raise ValueNilError("value is nil")
        self._require_source().set(self._prefix + bytes(key), value)

    def delete(self, key: bytes) -> None:
        if not key:
            raise KeyEmptyError("key is empty")
        self._require_source().delete(self._prefix + bytes(key))

    def write(self) -> None:
        self._require_source().write()

    def write_sync(self) -> None:
        self._require_source().write_sync()

    def close(self) -> None:
        self._require_source().close()

    def get_byte_size(self) -> int:
        return self._require_source().get_byte_size()