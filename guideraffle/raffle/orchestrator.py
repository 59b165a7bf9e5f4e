"""Coordinates a single raffle draw from configuration to persisted winners."""

from __future__ import annotations

import logging
import random
import threading
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional, Sequence

from ..models import (
    Candidate,
    DrawFrom,
    MAX_WINNERS,
    MIN_WINNERS,
    RaffleSettings,
    Winner,
)
from .errors import (
    ConcurrentDrawError,
    EmptyPoolError,
    InsufficientPoolError,
    InvalidSettingsError,
    PersistenceError,
)
from .ledger import WinnerStore
from .pool import PoolSummary, eligible, summarize_pool, weighted_pool
from .roster import departments, validate_roster
from .sampler import default_rng, sample_unique

logger = logging.getLogger(__name__)


class DrawState(str, Enum):
    IDLE = "idle"
    DRAWING = "drawing"


def _new_winner_id() -> str:
    return str(uuid.uuid4())


class RaffleOrchestrator:
    """Runs draws against a fixed roster and a winner ledger.

    Only one draw may be in flight at a time. A second :meth:`run_draw` call
    made while a draw is running fails with :class:`ConcurrentDrawError`
    instead of waiting.
    """

    def __init__(
        self,
        roster: Sequence[Candidate],
        ledger: WinnerStore,
        *,
        settings: Optional[RaffleSettings] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        """Create an orchestrator.

        Parameters
        ----------
        roster : Sequence[Candidate]
            Full, read-only roster. Its order fixes the sampling walk order.
        ledger : WinnerStore
            Ledger used both for exclusion and for recording winners.
        settings : Optional[RaffleSettings], default: None
            Initial configuration, validated like :meth:`configure`. Defaults
            to :class:`RaffleSettings` defaults.
        rng : Optional[random.Random], default: None
            Random source. Pass a seeded ``random.Random`` for reproducible
            draws; omitted, a securely seeded generator is used.
        clock : Optional[Callable[[], datetime]], default: None
            Source of ``won_at`` timestamps.
        id_factory : Optional[Callable[[], str]], default: None
            Generator of winner ids. Defaults to random UUID strings.

        Raises
        ------
        RosterError
            If the roster repeats an id or holds an invalid ticket count.
        InvalidSettingsError
            If ``settings`` is given and fails validation.
        """

        self._roster = validate_roster(roster)
        self._departments = frozenset(departments(self._roster))
        self._ledger = ledger
        self._rng = rng or default_rng()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._id_factory = id_factory or _new_winner_id
        self._draw_lock = threading.Lock()
        self._state = DrawState.IDLE
        self._settings = RaffleSettings()
        if settings is not None:
            self.configure(settings)

    @property
    def roster(self) -> tuple[Candidate, ...]:
        return self._roster

    @property
    def ledger(self) -> WinnerStore:
        return self._ledger

    @property
    def settings(self) -> RaffleSettings:
        return self._settings

    @property
    def state(self) -> DrawState:
        return self._state

    @property
    def is_drawing(self) -> bool:
        return self._state is DrawState.DRAWING

    def departments(self) -> list[str]:
        """Return the roster's department names, sorted."""

        return sorted(self._departments)

    def configure(self, settings: RaffleSettings) -> RaffleSettings:
        """Validate and adopt ``settings`` for subsequent draws.

        A draw that is already running keeps the settings it started with.

        Raises
        ------
        InvalidSettingsError
            If ``max_winners`` is outside ``[1, 28]`` or a selected category is
            not a roster department.
        """

        if not isinstance(settings, RaffleSettings):
            raise InvalidSettingsError(
                f"expected RaffleSettings, got {type(settings).__name__}"
            )
        max_winners = settings.max_winners
        if isinstance(max_winners, bool) or not isinstance(max_winners, int):
            raise InvalidSettingsError(f"max_winners must be an integer, got {max_winners!r}")
        if not MIN_WINNERS <= max_winners <= MAX_WINNERS:
            raise InvalidSettingsError(
                f"max_winners must be between {MIN_WINNERS} and {MAX_WINNERS}, got {max_winners}"
            )
        if settings.draw_from is DrawFrom.FILTERED:
            unknown = settings.selected_categories - self._departments
            if unknown:
                raise InvalidSettingsError(
                    "unknown departments: " + ", ".join(sorted(unknown))
                )

        self._settings = settings
        logger.debug(f"Raffle configured: {settings}")
        return settings

    def current_eligible_pool(self) -> list[Candidate]:
        """Return the candidates the next draw would choose from."""

        return eligible(self._roster, self._ledger.list_all(), self._settings)

    def pool_summary(self) -> PoolSummary:
        return summarize_pool(self.current_eligible_pool())

    def run_draw(self) -> list[Winner]:
        """Draw winners under the current settings and record them.

        Returns
        -------
        list[Winner]
            Winners in draw (rank) order, as stored by the ledger.

        Raises
        ------
        ConcurrentDrawError
            If another draw is still running. That draw is unaffected.
        EmptyPoolError
            If no candidate is eligible under the current settings.
        PersistenceError
            If the ledger could not record the batch. Nothing was committed;
            the same candidates stay eligible for a retry.
        """

        if not self._draw_lock.acquire(blocking=False):
            raise ConcurrentDrawError("a draw is already in progress")
        try:
            self._state = DrawState.DRAWING
            return self._draw(self._settings)
        finally:
            self._state = DrawState.IDLE
            self._draw_lock.release()

    def _draw(self, settings: RaffleSettings) -> list[Winner]:
        pool = eligible(self._roster, self._ledger.list_all(), settings)
        if not pool:
            logger.info("No eligible guides for the current settings")
            raise EmptyPoolError("no eligible candidates remain under the current settings")

        count = min(settings.max_winners, len(pool))
        logger.debug(f"Drawing {count} winners from a pool of {len(pool)}")
        try:
            selected_ids = sample_unique(weighted_pool(pool), count, self._rng)
        except InsufficientPoolError:
            logger.critical(f"Sampler asked for {count} winners from {len(pool)} candidates")
            raise

        by_id = {candidate.id: candidate for candidate in pool}
        won_at = self._clock()
        winners = [
            Winner.from_candidate(by_id[guide_id], winner_id=self._id_factory(), won_at=won_at)
            for guide_id in selected_ids
        ]

        try:
            stored = self._ledger.append(winners)
        except PersistenceError:
            logger.error(f"Discarding {len(winners)} drawn winners; ledger write failed")
            raise
        except Exception as exc:
            logger.error(f"Discarding {len(winners)} drawn winners; ledger raised {exc!r}")
            raise PersistenceError(f"Failed to record winners: {exc}", winners) from exc

        logger.info(f"Draw complete with {len(winners)} winners")
        return list(stored) if stored is not None else winners


__all__ = ["DrawState", "RaffleOrchestrator"]
