"""Environment-driven configuration for wiring up a raffle."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .db.engine import DEFAULT_SQLITE_URL, ROOT_DIR
from .db.utils import resolve_sqlite_url
from .models import DEFAULT_MAX_WINNERS, clamp_max_winners


def _optional_int(env: Mapping[str, str], name: str) -> Optional[int]:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable '{name}' must be an integer") from exc


@dataclass(frozen=True)
class RaffleConfig:
    """Settings needed to assemble a ledger, roster, and orchestrator.

    Attributes
    ----------
    database_url : str
        SQLAlchemy URL of the winner ledger (``DB_URL``).
    roster_path : Optional[Path]
        Roster JSON file (``RAFFLE_ROSTER_PATH``).
    seed : Optional[int]
        Fixed RNG seed (``RAFFLE_SEED``); ``None`` means securely seeded.
    max_winners : int
        Default winner count (``RAFFLE_MAX_WINNERS``), clamped to ``[1, 28]``.
    """

    database_url: str = DEFAULT_SQLITE_URL
    roster_path: Optional[Path] = None
    seed: Optional[int] = None
    max_winners: int = DEFAULT_MAX_WINNERS

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "RaffleConfig":
        """Read configuration from ``env`` (``os.environ`` after ``.env`` loading)."""

        if env is None:
            load_dotenv()
            env = os.environ

        database_url = env.get("DB_URL")
        roster_path = env.get("RAFFLE_ROSTER_PATH")
        max_winners = _optional_int(env, "RAFFLE_MAX_WINNERS")
        return cls(
            database_url=(
                resolve_sqlite_url(database_url, ROOT_DIR)
                if database_url
                else DEFAULT_SQLITE_URL
            ),
            roster_path=Path(roster_path) if roster_path else None,
            seed=_optional_int(env, "RAFFLE_SEED"),
            max_winners=(
                clamp_max_winners(max_winners)
                if max_winners is not None
                else DEFAULT_MAX_WINNERS
            ),
        )


__all__ = ["RaffleConfig"]
