"""Building blocks for a versioned AVL+ key-value store: encodings, cache, stores, batching and export compression."""

__version__ = "0.1.0"