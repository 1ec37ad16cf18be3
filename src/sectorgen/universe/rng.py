"""
Seeded pseudo-random stream for universe generation.

Implements mulberry32 with 32-bit wrap-around arithmetic so that a seed
produces the same stream in every process and in every language that
implements the same mixing function.
"""

from __future__ import annotations

from typing import MutableSequence, Sequence, TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """Low 32 bits of a 32-bit integer product."""
    return (a * b) & _MASK32


class SeededRng:
    """
    Deterministic mulberry32 generator.

    The state is a single unsigned 32-bit integer. Each draw advances the
    state by a constant, mixes it with two multiply-xor-shift rounds and
    normalizes the result to [0, 1).

    Example:
        rng = SeededRng(42)
        value = rng()            # float in [0, 1)
        index = rng.below(10)    # int in [0, 10)
    """

    __slots__ = ("_state",)

    def __init__(self, seed: int) -> None:
        self._state = seed & _MASK32

    @property
    def state(self) -> int:
        """Current unsigned 32-bit state."""
        return self._state

    def __call__(self) -> float:
        return self.next_float()

    def next_float(self) -> float:
        """Advance the stream and return a float in [0, 1)."""
        s = (self._state + _INCREMENT) & _MASK32
        self._state = s

        t = _imul(s ^ (s >> 15), s | 1)
        t = ((t + _imul(t ^ (t >> 7), t | 61)) & _MASK32) ^ t
        return ((t ^ (t >> 14)) & _MASK32) / _TWO_POW_32

    def below(self, n: int) -> int:
        """Uniform integer in [0, n), computed as floor(draw * n)."""
        return int(self.next_float() * n)

    def choice(self, items: Sequence[T]) -> T:
        """Uniformly pick one element of a non-empty sequence."""
        return items[self.below(len(items))]

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """
        Return a Fisher-Yates shuffled copy of ``items``.

        Walks from the last index down to 1, swapping each position with a
        uniformly drawn earlier-or-equal position. The input is not modified.
        """
        shuffled: MutableSequence[T] = list(items)
        for i in range(len(shuffled) - 1, 0, -1):
            j = self.below(i + 1)
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return list(shuffled)
