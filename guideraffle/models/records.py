"""Plain immutable records shared by the raffle services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Optional

MIN_WINNERS = 1
MAX_WINNERS = 28
DEFAULT_MAX_WINNERS = 5


@dataclass(frozen=True)
class Candidate:
    """A guide on the roster.

    Attributes
    ----------
    id : str
        Stable roster identity, unique within the roster.
    name : str
        Display name of the guide.
    department : str
        Department used for category filtering.
    supervisor : str
        Supervisor name; carried through to the winner snapshot.
    total_tickets : int
        Non-negative ticket count used as the sampling weight.
    nps, nrpc, refund_percent : float
        Performance attributes. The draw never reads them.
    """

    id: str
    name: str
    department: str
    supervisor: str
    total_tickets: int
    nps: float = 0.0
    nrpc: float = 0.0
    refund_percent: float = 0.0


@dataclass(frozen=True)
class Winner:
    """Snapshot of a :class:`Candidate` taken when it was drawn.

    ``guide_id`` is the candidate id, while ``id`` is freshly generated for
    every winner. ``recorded_at`` is only known once the ledger has stored
    the winner.
    """

    id: str
    guide_id: str
    name: str
    department: str
    supervisor: str
    total_tickets: int
    nps: float
    nrpc: float
    refund_percent: float
    won_at: datetime
    recorded_at: Optional[datetime] = None

    @classmethod
    def from_candidate(
        cls, candidate: Candidate, *, winner_id: str, won_at: datetime
    ) -> "Winner":
        return cls(
            id=winner_id,
            guide_id=candidate.id,
            name=candidate.name,
            department=candidate.department,
            supervisor=candidate.supervisor,
            total_tickets=candidate.total_tickets,
            nps=candidate.nps,
            nrpc=candidate.nrpc,
            refund_percent=candidate.refund_percent,
            won_at=won_at,
        )


class DrawFrom(str, Enum):
    """Which part of the roster a draw is taken from."""

    ALL = "all"
    FILTERED = "filtered"


def clamp_max_winners(value: Any) -> int:
    """Coerce raw input into a winner count within ``[1, 28]``.

    Values that cannot be read as an integer fall back to 1.
    """
    try:
        number = int(value)
    except (TypeError, ValueError):
        number = MIN_WINNERS
    return min(MAX_WINNERS, max(MIN_WINNERS, number))


@dataclass(frozen=True)
class RaffleSettings:
    """Caller-supplied draw configuration.

    ``selected_categories`` only matters when ``draw_from`` is
    :attr:`DrawFrom.FILTERED`; an empty selection then means the whole
    roster.
    """

    max_winners: int = DEFAULT_MAX_WINNERS
    draw_from: DrawFrom = DrawFrom.ALL
    selected_categories: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        # Accept plain strings and any iterable of names from callers.
        object.__setattr__(self, "draw_from", DrawFrom(self.draw_from))
        object.__setattr__(
            self, "selected_categories", frozenset(self.selected_categories)
        )

    @property
    def is_filtered(self) -> bool:
        return self.draw_from is DrawFrom.FILTERED and bool(self.selected_categories)

    @classmethod
    def from_input(
        cls,
        max_winners: Any = DEFAULT_MAX_WINNERS,
        draw_from: str = DrawFrom.ALL.value,
        selected_categories: Optional[Iterable[str]] = None,
    ) -> "RaffleSettings":
        """Build settings from raw form input, clamping ``max_winners``.

        Switching to :attr:`DrawFrom.ALL` clears any category selection.
        """
        mode = DrawFrom(draw_from)
        categories = frozenset(selected_categories or ())
        if mode is DrawFrom.ALL:
            categories = frozenset()
        return cls(
            max_winners=clamp_max_winners(max_winners),
            draw_from=mode,
            selected_categories=categories,
        )


__all__ = [
    "Candidate",
    "DEFAULT_MAX_WINNERS",
    "DrawFrom",
    "MAX_WINNERS",
    "MIN_WINNERS",
    "RaffleSettings",
    "Winner",
    "clamp_max_winners",
]
