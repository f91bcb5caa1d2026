"""A thread-safe pseudo-random generator seeded from OS randomness.

None of these functions are suitable for cryptographic use.
"""

from __future__ import annotations

import os
import random
import threading

STR_CHARS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"

_MASK64 = (1 << 64) - 1


def _to_signed(value: int, bits: int) -> int:
    value &= (1 << bits) - 1
    if value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


def _os_seed() -> int:
    seed = 0
    for b in os.urandom(8):
        seed |= b
        seed = (seed << 8) & _MASK64
    return _to_signed(seed, 64)


class Rand:
    """Pseudo-random generator guarded by a lock for concurrent use."""

    def __init__(self, seed: int | None = None) -> None:
        self._lock = threading.Lock()
        self._rng = random.Random(_os_seed() if seed is None else seed)

    def seed(self, seed: int) -> None:
        """Reset the generator with the given seed."""
        with self._lock:
            self._rng = random.Random(seed)

    def string(self, length: int) -> str:
        """Return a random alphanumeric string of the given length."""
        chars: list[str] = []
        while len(chars) < length:
            val = self.int63()
            for _ in range(10):
                v = val & 0x3F
                val >>= 6
                if v >= len(STR_CHARS):
                    continue
                chars.append(STR_CHARS[v])
                if len(chars) == length:
                    break
        return "".join(chars)

    def uint16(self) -> int:
        return self.uint32() & 0xFFFF

    def uint32(self) -> int:
        with self._lock:
            return self._rng.getrandbits(32)

    def uint64(self) -> int:
        return ((self.uint32() << 32) + self.uint32()) & _MASK64

    def uint(self) -> int:
        with self._lock:
            return self._rng.getrandbits(63)

    def int16(self) -> int:
        return _to_signed(self.uint32() & 0xFFFF, 16)

    def int32(self) -> int:
        return _to_signed(self.uint32(), 32)

    def int64(self) -> int:
        return _to_signed(self.uint64(), 64)

    def int(self) -> int:
        """Return a non-negative 63-bit integer."""
        with self._lock:
            return self._rng.getrandbits(63)

    def int31(self) -> int:
        with self._lock:
            return self._rng.getrandbits(31)

    def int31n(self, n: int) -> int:
        """Return an integer in [0, n); n must be positive."""
        if n <= 0:
            raise ValueError("invalid argument to int31n")
        with self._lock:
            return self._rng.randrange(n)

    def int63(self) -> int:
        with self._lock:
            return self._rng.getrandbits(63)

    def int63n(self, n: int) -> int:
        """Return an integer in [0, n); n must be positive."""
        if n <= 0:
            raise ValueError("invalid argument to int63n")
        with self._lock:
            return self._rng.randrange(n)

    def float32(self) -> float:
        with self._lock:
            return self._rng.random()

    def float64(self) -> float:
        with self._lock:
            return self._rng.random()

    def time(self) -> int:
        """Return a random instant as signed seconds since the Unix epoch."""
        return _to_signed(self.uint64(), 64)

    def bytes(self, n: int) -> bytes:
        """Return n random bytes from the internal generator."""
        return bytes(self.int() & 0xFF for _ in range(n))

    def intn(self, n: int) -> int:
        """Return an integer in [0, n); n must be positive."""
        if n <= 0:
            raise ValueError("invalid argument to intn")
        with self._lock:
            return self._rng.randrange(n)

    def bool(self) -> bool:
        return self.int63() % 2 == 0

    def perm(self, n: int) -> list[int]:
        """Return a random permutation of range(n)."""
        if n < 0:
            raise ValueError("invalid argument to perm")
        values = list(range(n))
        with self._lock:
            self._rng.shuffle(values)
        return values


_grand = Rand()


def seed(seed: int) -> None:
    """Reseed the shared generator."""
    _grand.seed(seed)


def rand_str(length: int) -> str:
    return _grand.string(length)


def rand_int() -> int:
    return _grand.int()


def rand_int31() -> int:
    return _grand.int31()


def rand_bytes(n: int) -> bytes:
    return _grand.bytes(n)


def rand_perm(n: int) -> list[int]:
    return _grand.perm(n)