"""Uniform shuffling used for question order and answer order."""

from __future__ import annotations

import random
from typing import Sequence, TypeVar

T = TypeVar("T")


class Shuffler:
    """Fisher-Yates shuffle backed by an injectable random generator.

    Pass a seed (or a seeded ``random.Random``) to make assembly reproducible in tests.
    """

    def __init__(self, rng: random.Random | None = None, seed: int | None = None) -> None:
        if rng is None:
            rng = random.Random(seed)
        self._rng = rng

    def shuffle(self, sequence: Sequence[T]) -> list[T]:
        """Return a uniformly permuted copy of ``sequence``; the input is untouched."""
        shuffled = list(sequence)
        for i in range(len(shuffled) - 1, 0, -1):
            j = self._rng.randint(0, i)
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return shuffled


def shuffle(sequence: Sequence[T]) -> list[T]:
    """Shuffle with a fresh, independently seeded generator."""
    return Shuffler().shuffle(sequence)
