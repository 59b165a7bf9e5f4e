from .base import Base

# import models so Alembic/autoloaders can discover mappers
from .records import (  # noqa: F401
    Candidate,
    DrawFrom,
    RaffleSettings,
    Winner,
    clamp_max_winners,
    DEFAULT_MAX_WINNERS,
    MAX_WINNERS,
    MIN_WINNERS,
)
from .winner import WinnerRecord  # noqa: F401

__all__ = [
    "Base",
    "Candidate",
    "DrawFrom",
    "RaffleSettings",
    "Winner",
    "WinnerRecord",
    "clamp_max_winners",
    "DEFAULT_MAX_WINNERS",
    "MAX_WINNERS",
    "MIN_WINNERS",
]
