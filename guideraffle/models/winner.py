"""Database model for the winner ledger."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Integer,
    String,
    DateTime,
    Float,
    UniqueConstraint,
    Index,
    select,
)
from sqlalchemy.orm import Mapped, mapped_column, Session

from .base import Base
from .id_type import ID_TYPE
from .records import Winner
from ..db.utils import as_utc


class WinnerRecord(Base):
    """Append-only row recording a single raffle win."""

    __tablename__ = "winners"

    pk: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    """Surrogate primary key; also breaks ties in insertion order."""

    id: Mapped[str] = mapped_column(String(64), nullable=False)
    """Winner identifier generated at draw time."""

    guide_id: Mapped[str] = mapped_column(String(64), nullable=False)
    """Roster id of the guide who won. A guide can win only once."""

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    """Guide name at the time of the win."""

    supervisor: Mapped[str] = mapped_column(String(255), nullable=False)
    """Supervisor at the time of the win."""

    department: Mapped[str] = mapped_column(String(255), nullable=False)
    """Department at the time of the win."""

    nps: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    """NPS score snapshot."""

    nrpc: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    """NRPC score snapshot."""

    refund_percent: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    """Refund percentage snapshot."""

    total_tickets: Mapped[int] = mapped_column(Integer, nullable=False)
    """Ticket count the guide held when drawn."""

    won_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    """Timestamp of the draw that produced this winner."""

    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    """Timestamp when the ledger stored the row."""

    __table_args__ = (
        UniqueConstraint("id", name="winners_id_key"),
        UniqueConstraint("guide_id", name="winners_guide_id_key"),
        Index("ix_winners_department", "department"),
    )

    def __init__(
        self,
        *,
        id: str,
        guide_id: str,
        name: str,
        supervisor: str,
        department: str,
        total_tickets: int,
        won_at: datetime,
        nps: float = 0.0,
        nrpc: float = 0.0,
        refund_percent: float = 0.0,
        recorded_at: Optional[datetime] = None,
    ) -> None:
        self.id = id
        self.guide_id = guide_id
        self.name = name
        self.supervisor = supervisor
        self.department = department
        self.total_tickets = total_tickets
        self.won_at = won_at
        self.nps = nps
        self.nrpc = nrpc
        self.refund_percent = refund_percent
        if recorded_at is not None:
            self.recorded_at = recorded_at

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<WinnerRecord(pk={pk}, id={id}, guide_id={guide_id}, department={dept})>".format(
            pk=self.pk,
            id=self.id,
            guide_id=self.guide_id,
            dept=self.department,
        )

    @classmethod
    def from_winner(cls, winner: Winner, recorded_at: datetime) -> "WinnerRecord":
        """Build an unsaved row from an in-memory :class:`Winner`."""

        return cls(
            id=winner.id,
            guide_id=winner.guide_id,
            name=winner.name,
            supervisor=winner.supervisor,
            department=winner.department,
            total_tickets=winner.total_tickets,
            won_at=winner.won_at,
            nps=winner.nps,
            nrpc=winner.nrpc,
            refund_percent=winner.refund_percent,
            recorded_at=recorded_at,
        )

    def to_winner(self) -> Winner:
        """Return the immutable record for this row."""

        return Winner(
            id=self.id,
            guide_id=self.guide_id,
            name=self.name,
            department=self.department,
            supervisor=self.supervisor,
            total_tickets=self.total_tickets,
            nps=self.nps,
            nrpc=self.nrpc,
            refund_percent=self.refund_percent,
            won_at=as_utc(self.won_at),
            recorded_at=as_utc(self.recorded_at),
        )

    @classmethod
    def recorded_guide_ids(cls, session: Session) -> set[str]:
        """Return the ids of every guide already present in the ledger."""

        return set(session.scalars(select(cls.guide_id)).all())


__all__ = ["WinnerRecord"]
