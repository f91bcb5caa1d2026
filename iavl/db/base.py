"""Interfaces and errors shared by the key-value store backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator


class DBError(Exception):
    """Base class for key-value store errors."""


class BatchClosedError(DBError):
    """Raised when a closed or written batch is used."""

    def __init__(self, message: str = "batch has been written or closed") -> None:
        super().__init__(message)


class KeyEmptyError(DBError, ValueError):
    """Raised when an empty key is used."""

    def __init__(self, message: str = "key cannot be empty") -> None:
        super().__init__(message)


class ValueNilError(DBError, ValueError):
    """Raised when a missing value is set."""

    def __init__(self, message: str = "value cannot be nil") -> None:
        super().__init__(message)


class KVIterator(ABC):
    """A cursor over a key domain [start, end).

    It can also be used as a Python iterator of (key, value) pairs and as a
    context manager that closes it.
    """

    @abstractmethod
    def domain(self) -> tuple[bytes | None, bytes | None]:
        """Return the (start, end) the iterator was created with."""

    @abstractmethod
    def valid(self) -> bool:
        """Return whether the cursor points at an item."""

    @abstractmethod
    def next(self) -> None:
        """Move to the next item."""

    @abstractmethod
    def key(self) -> bytes:
        """Return the current key."""

    @abstractmethod
    def value(self) -> bytes:
        """Return the current value."""

    @abstractmethod
    def error(self) -> Exception | None:
        """Return the error the iterator hit, if any."""

    @abstractmethod
    def close(self) -> None:
        """Release the iterator's resources."""

    def __iter__(self) -> Iterator[tuple[bytes, bytes]]:
        while self.valid():
            yield self.key(), self.value()
            self.next()

    def __enter__(self) -> KVIterator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class Batch(ABC):
    """A set of writes applied together."""

    @abstractmethod
    def set(self, key: bytes, value: bytes) -> None:
        """Queue setting ``key`` to ``value``."""

    @abstractmethod
    def delete(self, key: bytes) -> None:
        """Queue deleting ``key``."""

    @abstractmethod
    def write(self) -> None:
        """Apply the queued writes."""

    @abstractmethod
    def write_sync(self) -> None:
        """Apply the queued writes and flush them to durable storage."""

    @abstractmethod
    def close(self) -> None:
        """Discard the batch."""

    @abstractmethod
    def get_byte_size(self) -> int:
        """Return the approximate size of the queued writes."""

    def __enter__(self) -> Batch:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class KVStore(ABC):
    """An ordered byte key-value store that can create batches."""

    @abstractmethod
    def get(self, key: bytes) -> bytes | None:
        """Return the value of ``key``, or None if absent."""

    @abstractmethod
    def has(self, key: bytes) -> bool:
        """Return whether ``key`` exists."""

    @abstractmethod
    def set(self, key: bytes, value: bytes) -> None:
        """Set ``key`` to ``value``."""

    @abstractmethod
    def delete(self, key: bytes) -> None:
        """Delete ``key``."""

    @abstractmethod
    def iterator(self, start: bytes | None, end: bytes | None) -> KVIterator:
        """Iterate ascending over [start, end); None leaves a side open."""

    @abstractmethod
    def reverse_iterator(self, start: bytes | None, end: bytes | None) -> KVIterator:
        """Iterate descending over [start, end); None leaves a side open."""

    @abstractmethod
    def close(self) -> None:
        """Close the store."""

    @abstractmethod
    def new_batch(self) -> Batch:
        """Create a batch of writes."""

    @abstractmethod
    def new_batch_with_size(self, size: int) -> Batch:
        """Create a batch, pre-allocating ``size`` bytes where supported."""

    def __enter__(self) -> KVStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()