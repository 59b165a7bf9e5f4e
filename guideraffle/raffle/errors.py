"""Error taxonomy for raffle configuration, draws and persistence."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from ..models import Winner


class RaffleError(Exception):
    """Base class for every error raised by the raffle services."""


class InvalidSettingsError(RaffleError, ValueError):
    """Settings were rejected by :meth:`RaffleOrchestrator.configure`."""


class RosterError(RaffleError, ValueError):
    """The supplied roster is malformed."""


class InsufficientPoolError(RaffleError):
    """The sampler was asked for more winners than the pool holds.

    The orchestrator clamps the winner count before sampling, so this
    signals a programming error rather than a user-facing condition.
    """

    def __init__(self, requested: int, available: int) -> None:
        self.requested = requested
        self.available = available
        super().__init__(
            f"cannot draw {requested} unique winners from a pool of {available}"
        )


class DrawError(RaffleError):
    """Base class for failures reported by :meth:`RaffleOrchestrator.run_draw`."""


class ConcurrentDrawError(DrawError):
    """A draw was requested while another one was still running."""


class EmptyPoolError(DrawError):
    """No eligible candidates remain under the current settings."""


class PersistenceError(DrawError):
    """The ledger could not durably record a batch of winners.

    ``winners`` holds the discarded batch, if known. Nothing from the batch
    was committed, so the draw can safely be retried.
    """

    def __init__(
        self, message: str, winners: Optional[Sequence["Winner"]] = None
    ) -> None:
        self.winners = tuple(winners or ())
        super().__init__(message)


class DuplicateWinnerError(PersistenceError):
    """A batch named a guide that has already won (or appears twice)."""

    def __init__(
        self,
        guide_ids: Iterable[str],
        winners: Optional[Sequence["Winner"]] = None,
    ) -> None:
        self.guide_ids = frozenset(guide_ids)
        listed = ", ".join(sorted(self.guide_ids)) or "<unknown>"
        super().__init__(f"guides already recorded as winners: {listed}", winners)


__all__ = [
    "ConcurrentDrawError",
    "DrawError",
    "DuplicateWinnerError",
    "EmptyPoolError",
    "InsufficientPoolError",
    "InvalidSettingsError",
    "PersistenceError",
    "RaffleError",
    "RosterError",
]
