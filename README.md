# iavl

Building blocks for a versioned AVL+ key-value store: the storage encodings,
a node cache, fast-node records, ordered key-value stores, a self-flushing
write batch and compression for exported node streams.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `iavl.encoding`: `encode_uvarint` / `decode_uvarint`, zig-zag
  `encode_varint` / `decode_varint`, uvarint length-prefixed `encode_bytes` /
  `decode_bytes`, `encode_32bytes_hash`, and the size helpers
  `encode_uvarint_size`, `encode_varint_size` and `encode_bytes_size`. The
  decoders return `(value, bytes_read)`. Short, overflowing or out-of-range
  input raises `EncodingError`, whose `consumed` attribute holds the number of
  bytes read before the failure.
- `iavl.hexbytes`: `HexBytes`, a `bytes` subclass whose `str()` and `to_json()`
  forms are upper-case hex (`from_json` parses a quoted hex string back;
  `marshal` / `unmarshal` pass raw bytes through). Also `cp`, which copies
  bytes, and `cp_incr`, which increments a non-empty key as a big-endian
  number and returns `None` when every byte is `0xFF`.
- `iavl.color`: `green`, `blue` and `cyan` wrap each argument in an ANSI
  colour unless it already starts with an escape sequence. `colored_bytes`
  renders printable bytes with one colour function and the rest as two-digit
  hex with another, but only when the environment variable
  `TENDERMINT_IAVL_COLORS_ON` is non-empty; otherwise it returns just the
  first byte as a character (or `""` for empty data).
- `iavl.rand`: `Rand`, a lock-guarded pseudo-random source seeded from
  `os.urandom` unless a seed is given, with integer, float, byte, string,
  boolean and permutation helpers. Module-level `seed`, `rand_str`,
  `rand_int`, `rand_int31`, `rand_bytes` and `rand_perm` use a shared
  instance. Not for cryptographic use.
- `iavl.cache`: `LRUCache(max_element_count)` holds objects exposing a
  `key` attribute (the `CacheNode` protocol). `add` returns the node it
  replaced, or the evicted least recently used node on overflow, or `None`;
  `get`, `has`, `remove`, `len()` and `in` work as expected.
- `iavl.fastnode`: `FastNode(key, value, version_last_updated_at)` with
  `to_bytes()`, `encoded_size()` and `FastNode.deserialize(key, buf)`. The
  key is not part of the encoding.
- `iavl.db.base`: the abstract `KVStore`, `Batch` and `KVIterator` interfaces
  and the errors `DBError`, `KeyEmptyError`, `ValueNilError` and
  `BatchClosedError`. Iterators cover `[start, end)`, with `None` leaving a
  side open; every `KVIterator` is also a Python iterator of `(key, value)`
  pairs, and iterators, batches and stores are context managers that close
  themselves.
- `iavl.db.memdb`: `MemDB`, an in-memory ordered store backed by
  `sortedcontainers`, with ascending and descending iterators (snapshot taken
  under a lock, or lazy via `iterator_no_mtx` / `reverse_iterator_no_mtx`),
  `MemDBBatch`, `stats()` and `print()`.
- `iavl.db.prefixdb`: `PrefixDB(db, prefix)` exposes the keys of another
  store that start with `prefix`, with the prefix stripped; `PrefixIterator`
  and `PrefixBatch` do the same for iteration and batches.
  `iterate_prefix(db, prefix)` iterates the matching keys without stripping.
- `iavl.batch`: `BatchWithFlusher(db, flush_threshold)` writes its batch out
  and starts a new one whenever a `set` or `delete` would push the estimated
  size (current size + key + value + 100 bytes) past the threshold.
- `iavl.compress`: `ExportNode(key, value, version, height)`;
  `CompressExporter` wraps any iterable of export nodes, dropping branch keys,
  delta-encoding leaf keys against the previous leaf and storing branch
  versions relative to the larger of their children's versions;
  `CompressImporter` reverses this before passing each node to an inner
  object with an `add` method. `delta_encode`, `delta_decode` and
  `diff_offset` are available on their own.

## Example

```python
from iavl.batch import BatchWithFlusher
from iavl.db.memdb import MemDB

db = MemDB()
batch = BatchWithFlusher(db, 100_000)
batch.set(b"alice", b"abc")
batch.set(b"bob", b"xyz")
batch.write()

assert db.get(b"alice") == b"abc"

with db.iterator(None, None) as it:
    for key, value in it:
        print(key, value)
```

Encodings round-trip:

```python
from iavl.encoding import decode_varint, encode_varint

data = encode_varint(-100)
value, read = decode_varint(data)
assert value == -100 and read == len(data)
```

Compressing an export stream and reading it back:

```python
from iavl.compress import CompressExporter, CompressImporter, ExportNode

nodes = [
    ExportNode(key=b"a", value=b"\x01", version=1, height=0),
    ExportNode(key=b"ab", value=b"\x02", version=2, height=0),
    ExportNode(key=b"ab", value=None, version=2, height=1),
]

class Collector:
    def __init__(self):
        self.nodes = []

    def add(self, node):
        self.nodes.append(node)

collector = Collector()
importer = CompressImporter(collector)
for node in CompressExporter(nodes):
    importer.add(node)
assert collector.nodes == nodes
```

## What this package does not do

It holds no AVL+ tree: there is no mutable or immutable tree, no versioning,
hashing, proofs, or exporter and importer over a tree. The only stores are
the in-memory `MemDB` and `PrefixDB` layered over another store; there is no
on-disk backend. There is no command-line tool.