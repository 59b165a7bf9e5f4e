"""Append-only winner ledger backed by SQLAlchemy."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..db.engine import get_sessionmaker
from ..models import Base, Winner, WinnerRecord
from .errors import DuplicateWinnerError, PersistenceError

logger = logging.getLogger(__name__)


class WinnerStore(Protocol):
    """What the orchestrator needs from a ledger."""

    def append(self, winners: Sequence[Winner]) -> Sequence[Winner]: ...

    def list_all(self) -> Sequence[Winner]: ...


class WinnerLedger:
    """Persistent, append-only record of every raffle winner.

    The ledger is the single source of truth for who has already won. Each
    call to :meth:`append` stores a whole batch in one transaction, and a
    guide can appear in the ledger at most once.
    """

    def __init__(
        self,
        engine: Engine,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """Create a ledger bound to ``engine``.

        Parameters
        ----------
        engine : Engine
            Engine for the database holding the ``winners`` table.
        clock : Optional[Callable[[], datetime]], default: None
            Source of ``recorded_at`` timestamps. Defaults to the current UTC
            time.
        """

        self._engine = engine
        self._sessionmaker = get_sessionmaker(engine)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # -------- lifecycle --------
    def initialize(self) -> "WinnerLedger":
        """Create the ``winners`` table when it does not exist yet."""

        Base.metadata.create_all(self._engine, tables=[WinnerRecord.__table__])
        return self

    def close(self) -> None:
        """Release pooled database connections."""

        self._engine.dispose()

    def __enter__(self) -> "WinnerLedger":
        return self.initialize()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -------- queries --------
    def list_all(self) -> list[Winner]:
        """Return every recorded winner in insertion order."""

        try:
            with self._sessionmaker() as session:
                rows = session.scalars(
                    select(WinnerRecord).order_by(WinnerRecord.pk.asc())
                ).all()
                return [row.to_winner() for row in rows]
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to read the winner ledger: {exc}") from exc

    def guide_ids(self) -> set[str]:
        """Return the roster ids of every guide that has already won."""

        try:
            with self._sessionmaker() as session:
                return WinnerRecord.recorded_guide_ids(session)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to read the winner ledger: {exc}") from exc

    # -------- writes --------
    def append(self, winners: Iterable[Winner]) -> list[Winner]:
        """Atomically record a batch of winners.

        Parameters
        ----------
        winners : Iterable[Winner]
            Winners produced by a single draw.

        Returns
        -------
        list[Winner]
            The stored winners, with ``recorded_at`` populated.

        Raises
        ------
        DuplicateWinnerError
            If a guide in the batch has already won or is listed twice. No
            row from the batch is written.
        PersistenceError
            If the database rejects the write. The transaction is rolled back,
            so none of the batch becomes visible.
        """

        batch = list(winners)
        if not batch:
            return []

        repeated = [gid for gid, count in Counter(w.guide_id for w in batch).items() if count > 1]
        if repeated:
            raise DuplicateWinnerError(repeated, batch)

        batch_ids = {w.guide_id for w in batch}
        try:
            with self._sessionmaker.begin() as session:
                already = set(
                    session.scalars(
                        select(WinnerRecord.guide_id).where(
                            WinnerRecord.guide_id.in_(batch_ids)
                        )
                    ).all()
                )
                if already:
                    raise DuplicateWinnerError(already, batch)

                recorded_at = self._clock()
                records = [WinnerRecord.from_winner(w, recorded_at) for w in batch]
                session.add_all(records)
                session.flush()
                stored = [record.to_winner() for record in records]
        except IntegrityError as exc:
            # A concurrent writer may have recorded one of these guides first.
            clashing = self._clashing_guide_ids(batch_ids)
            if clashing:
                raise DuplicateWinnerError(clashing, batch) from exc
            logger.error(f"Ledger rejected a batch of {len(batch)} winners: {exc}")
            raise PersistenceError(f"Failed to record winners: {exc}", batch) from exc
        except SQLAlchemyError as exc:
            logger.error(f"Ledger write failed for {len(batch)} winners: {exc}")
            raise PersistenceError(f"Failed to record winners: {exc}", batch) from exc

        logger.info(f"Recorded {len(stored)} winners")
        return stored

    def _clashing_guide_ids(self, guide_ids: set[str]) -> set[str]:
        try:
            return self.guide_ids() & guide_ids
        except PersistenceError:
            logger.debug("Could not re-read ledger after integrity failure")
            return set()


__all__ = ["WinnerLedger", "WinnerStore"]
