"""
Deterministic random numbers for seeded games.

A random source is anything with a random() method returning a float in
[0, 1): SeededRandom, random.Random and random.SystemRandom all qualify, so
seeded and unseeded code paths are the same.

SeededRandom is a mulberry32 generator over a 32-bit FNV-1a hash of the seed.
All arithmetic is masked to 32 bits so a seed reproduces the same sequence on
every platform.
"""
import random
from typing import Protocol, Sequence, TypeVar

T = TypeVar('T')

_MASK = 0xFFFFFFFF
_FNV_OFFSET = 2166136261
_FNV_PRIME = 16777619
_MULBERRY_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


class RandomSource(Protocol):
    def random(self) -> float:
        ...


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK


def hash_seed(seed: str) -> int:
    """
    FNV-1a 32-bit hash of a seed string.

    Hashes UTF-16 code units so non-ASCII seeds hash the same everywhere.
    """
    h = _FNV_OFFSET
    data = seed.encode('utf-16-le')
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = _imul(h, _FNV_PRIME)
    return h


class SeededRandom:
    """Mulberry32 generator seeded from a string."""

    def __init__(self, seed: str):
        self.seed = seed
        self._state = hash_seed(seed) or 1

    def random(self) -> float:
        self._state = (self._state + _MULBERRY_INCREMENT) & _MASK
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK
        return ((t ^ (t >> 14)) & _MASK) / _TWO_POW_32


def system_random() -> RandomSource:
    """Non-deterministic source used when a game has no seed."""
    return random.SystemRandom()


def pick_index(rng: RandomSource, size: int) -> int:
    """Uniform index in [0, size) drawn from a random source."""
    if size <= 0:
        raise ValueError('Cannot pick from an empty sequence')
    return min(int(rng.random() * size), size - 1)


def choose(rng: RandomSource, items: Sequence[T]) -> T:
    """Pick one item from a non-empty sequence."""
    return items[pick_index(rng, len(items))]
