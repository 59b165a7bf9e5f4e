"""Weighted sampling without replacement over integer ticket counts."""

from __future__ import annotations

import random
import secrets
from typing import Hashable, Optional, Sequence, Tuple, TypeVar

from .errors import InsufficientPoolError

K = TypeVar("K", bound=Hashable)


def default_rng(seed: Optional[int] = None) -> random.Random:
    """Return a ``random.Random`` for drawing.

    A fixed ``seed`` makes draws reproducible; without one the generator is
    seeded from the operating system's secure entropy source.
    """
    if seed is None:
        seed = secrets.randbits(128)
    return random.Random(seed)


def _validated(pool: Sequence[Tuple[K, int]]) -> list[Tuple[K, int]]:
    seen: set = set()
    remaining: list[Tuple[K, int]] = []
    for key, weight in pool:
        if isinstance(weight, bool) or not isinstance(weight, int):
            raise ValueError(f"weight for {key!r} must be an integer, got {weight!r}")
        if weight < 0:
            raise ValueError(f"weight for {key!r} must be non-negative, got {weight}")
        if key in seen:
            raise ValueError(f"duplicate id {key!r} in pool")
        seen.add(key)
        remaining.append((key, weight))
    return remaining


def sample_unique(
    pool: Sequence[Tuple[K, int]],
    k: int,
    rng: random.Random,
) -> list[K]:
    """Draw ``k`` distinct ids, each step proportional to the remaining weights.

    Parameters
    ----------
    pool : Sequence[tuple[K, int]]
        ``(id, weight)`` pairs. Ids must be unique and weights non-negative
        integers. The pool order fixes the cumulative walk order.
    k : int
        Number of ids to draw. Must not exceed ``len(pool)``; callers clamp.
    rng : random.Random
        Source of randomness. Only ``randrange`` is used.

    Returns
    -------
    list[K]
        Selected ids in the order they were drawn (rank order).

    Raises
    ------
    InsufficientPoolError
        If ``k`` is larger than the pool.
    ValueError
        If ``k`` is negative, an id repeats, or a weight is not a
        non-negative integer.

    Notes
    -----
    After every pick the winner is removed and the total is recomputed, so
    each remaining id keeps a chance proportional to its own weight. When
    every remaining weight is zero the pick falls back to a uniform choice,
    which keeps zero-ticket candidates drawable once nobody else is left.
    All comparisons are exact integer arithmetic.
    """
    if k < 0:
        raise ValueError("k must be non-negative")
    remaining = _validated(pool)
    if k > len(remaining):
        raise InsufficientPoolError(k, len(remaining))
    if k == 0:
        return []

    selected: list[K] = []
    total = sum(weight for _, weight in remaining)
    for _ in range(k):
        if total > 0:
            target = rng.randrange(total)
            running = 0
            index = 0
            for index, (_, weight) in enumerate(remaining):
                running += weight
                if running > target:
                    break
        else:
            index = rng.randrange(len(remaining))

        key, weight = remaining.pop(index)
        total -= weight
        selected.append(key)

    return selected


__all__ = ["default_rng", "sample_unique"]
