"""A batch that flushes itself to the store once it grows past a threshold."""

from __future__ import annotations

import threading

from iavl.db.base import Batch, KVStore

# Extra bytes counted per entry to over-account for backend batch overhead.
_ENTRY_OVERHEAD = 100


class BatchWithFlusher(Batch):
    """Wraps a store's batch and writes it out when its size exceeds ``flush_threshold``."""

    def __init__(self, db: KVStore, flush_threshold: int) -> None:
        self._lock = threading.Lock()
        self._db = db
        self._flush_threshold = flush_threshold
        self._batch = db.new_batch_with_size(flush_threshold)

    def _estimate_size_after(self, key: bytes, value: bytes) -> int:
        return self._batch.get_byte_size() + len(key) + len(value) + _ENTRY_OVERHEAD

    def _flush(self, sync: bool) -> None:
        if sync:
            self._batch.write_sync()
        else:
            self._batch.write()
        self._batch.close()
        self._batch = self._db.new_batch_with_size(self._flush_threshold)

    def set(self, key: bytes, value: bytes) -> None:
        """Queue a set, first flushing the batch if it would exceed the threshold."""
        with self._lock:
            if self._estimate_size_after(key, value) > self._flush_threshold:
                self._flush(sync=False)
            self._batch.set(key, value)

    def delete(self, key: bytes) -> None:
        """Queue a delete, first flushing the batch if it would exceed the threshold."""
        with self._lock:
            if self._estimate_size_after(key, b"") > self._flush_threshold:
                self._flush(sync=False)
            self._batch.delete(key)

    def write(self) -> None:
        """Write the queued entries and start a fresh batch."""
        with self._lock:
            self._flush(sync=False)

    def write_sync(self) -> None:
        """Write the queued entries durably and start a fresh batch."""
        with self._lock:
            self._flush(sync=True)

    def close(self) -> None:
        with self._lock:
            self._batch.close()

    def get_byte_size(self) -> int:
        return self._batch.get_byte_size()