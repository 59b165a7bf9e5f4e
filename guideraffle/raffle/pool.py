"""Eligibility rules that turn the roster into a drawable pool."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from ..models import Candidate, RaffleSettings, Winner


def eligible(
    roster: Sequence[Candidate],
    winners: Iterable[Winner],
    settings: RaffleSettings,
) -> list[Candidate]:
    """Return the candidates that may win the next draw.

    Guides already recorded in ``winners`` are always excluded. When
    ``settings`` selects specific categories the pool is further narrowed to
    those departments; otherwise the rest of the roster is returned in
    roster order. An empty result is not an error here.
    """
    excluded = {winner.guide_id for winner in winners}
    base = [candidate for candidate in roster if candidate.id not in excluded]
    if not settings.is_filtered:
        return base
    categories = settings.selected_categories
    return [candidate for candidate in base if candidate.department in categories]


def weighted_pool(candidates: Sequence[Candidate]) -> list[tuple[str, int]]:
    """Return ``(id, total_tickets)`` pairs in pool order for the sampler."""

    return [(candidate.id, candidate.total_tickets) for candidate in candidates]


@dataclass(frozen=True)
class PoolSummary:
    """Headline numbers for a pool of eligible candidates."""

    available: int
    total_tickets: int
    average_nps: float


def summarize_pool(candidates: Sequence[Candidate]) -> PoolSummary:
    if not candidates:
        return PoolSummary(available=0, total_tickets=0, average_nps=0.0)
    return PoolSummary(
        available=len(candidates),
        total_tickets=sum(c.total_tickets for c in candidates),
        average_nps=sum(c.nps for c in candidates) / len(candidates),
    )


__all__ = ["PoolSummary", "eligible", "summarize_pool", "weighted_pool"]
