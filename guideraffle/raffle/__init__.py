"""Services for drawing unique, ticket-weighted raffle winners."""

from .errors import (
    ConcurrentDrawError,
    DrawError,
    DuplicateWinnerError,
    EmptyPoolError,
    InsufficientPoolError,
    InvalidSettingsError,
    PersistenceError,
    RaffleError,
    RosterError,
)
from .ledger import WinnerLedger, WinnerStore
from .orchestrator import DrawState, RaffleOrchestrator
from .pool import PoolSummary, eligible, summarize_pool
from .roster import build_roster, departments, load_roster, validate_roster
from .sampler import default_rng, sample_unique

__all__ = [
    "ConcurrentDrawError",
    "DrawError",
    "DrawState",
    "DuplicateWinnerError",
    "EmptyPoolError",
    "InsufficientPoolError",
    "InvalidSettingsError",
    "PersistenceError",
    "PoolSummary",
    "RaffleError",
    "RaffleOrchestrator",
    "RosterError",
    "WinnerLedger",
    "WinnerStore",
    "build_roster",
    "default_rng",
    "departments",
    "eligible",
    "load_roster",
    "sample_unique",
    "summarize_pool",
    "validate_roster",
]
