"""Key-value store interfaces with an in-memory store and a prefixed view of another store."""