# src/goodstein/sequence.py
"""Goodstein sequences, one symbolic step at a time."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from goodstein.decomposition import Decomposition, decompose


@dataclass(frozen=True)
class GoodsteinStep:
    index: int
    base: int                   # base the decomposition is written in
    decomposition: Decomposition

    @property
    def value(self) -> int:
        # Not cached: the value may be astronomically large
        return self.decomposition.evaluate()

    def is_zero(self) -> bool:
        return self.decomposition.is_zero()


def goodstein_step(d: Decomposition) -> Decomposition:
    """Bump the base everywhere in the tree, then subtract one."""
    return d.increment_base().decrement()


def sequence(base: int, n: int, max_steps: int | None = None) -> Iterator[GoodsteinStep]:
    """
    Yield the Goodstein sequence of n starting in `base`.

    Step 0 is the plain hereditary decomposition. The generator ends right
    after yielding zero, or once `max_steps` steps past the start have been
    produced (None or 0 means no limit).
    """
    d = decompose(base, n)
    index = 0
    yield GoodsteinStep(index, base, d)

    while not d.is_zero():
        if max_steps and index >= max_steps:
            return
        d = goodstein_step(d)
        base += 1
        index += 1
        yield GoodsteinStep(index, base, d)
