"""Loading and validating the guide roster."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence, Union

from ..models import Candidate
from .errors import RosterError

logger = logging.getLogger(__name__)

_REQUIRED_KEYS = ("id", "name", "department", "supervisor", "totalTickets")


def _check_tickets(label: str, tickets: Any) -> None:
    if isinstance(tickets, bool) or not isinstance(tickets, int):
        raise RosterError(f"{label} has non-integer totalTickets {tickets!r}")
    if tickets < 0:
        raise RosterError(f"{label} has negative totalTickets {tickets}")


def _candidate_from_row(index: int, row: Mapping[str, Any]) -> Candidate:
    missing = [key for key in _REQUIRED_KEYS if key not in row]
    if missing:
        raise RosterError(f"roster entry {index} is missing {', '.join(missing)}")

    tickets = row["totalTickets"]
    _check_tickets(f"roster entry {index}", tickets)

    try:
        return Candidate(
            id=str(row["id"]),
            name=str(row["name"]),
            department=str(row["department"]),
            supervisor=str(row["supervisor"]),
            total_tickets=tickets,
            nps=float(row.get("nps", 0.0)),
            nrpc=float(row.get("nrpc", 0.0)),
            refund_percent=float(row.get("refundPercent", 0.0)),
        )
    except (TypeError, ValueError) as exc:
        raise RosterError(f"roster entry {index} is malformed: {exc}") from exc


def build_roster(rows: Iterable[Mapping[str, Any]]) -> tuple[Candidate, ...]:
    """Convert parsed guide mappings into an immutable roster.

    Parameters
    ----------
    rows : Iterable[Mapping[str, Any]]
        Guide objects using the roster file keys (``id``, ``name``,
        ``department``, ``supervisor``, ``nps``, ``nrpc``, ``refundPercent``,
        ``totalTickets``).

    Returns
    -------
    tuple[Candidate, ...]
        Candidates in input order.

    Raises
    ------
    RosterError
        If an entry is incomplete, has an invalid ticket count, or reuses an
        id.
    """
    roster: list[Candidate] = []
    seen: set[str] = set()
    for index, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise RosterError(f"roster entry {index} is not an object")
        candidate = _candidate_from_row(index, row)
        if candidate.id in seen:
            raise RosterError(f"duplicate roster id {candidate.id!r}")
        seen.add(candidate.id)
        roster.append(candidate)
    return tuple(roster)


def load_roster(path: Union[str, Path]) -> tuple[Candidate, ...]:
    """Read a roster JSON file (an array of guide objects)."""

    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as exc:
        raise RosterError(f"roster file {path} is not valid JSON: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise RosterError(f"roster file {path} is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise RosterError(f"roster file {path} could not be read: {exc}") from exc
    if not isinstance(payload, list):
        raise RosterError(f"roster file {path} must contain a JSON array")

    roster = build_roster(payload)
    logger.info(f"Loaded {len(roster)} guides from {path}")
    return roster


def validate_roster(roster: Iterable[Candidate]) -> tuple[Candidate, ...]:
    """Check an already-built roster and return it as a tuple.

    Rosters assembled without :func:`build_roster` get the same guarantees:
    unique ids and non-negative integer ticket counts.

    Raises
    ------
    RosterError
        If an id repeats or a ticket count is invalid.
    """
    checked: list[Candidate] = []
    seen: set[str] = set()
    for candidate in roster:
        if not isinstance(candidate, Candidate):
            raise RosterError(f"roster entries must be Candidate, got {type(candidate).__name__}")
        _check_tickets(f"guide {candidate.id!r}", candidate.total_tickets)
        if candidate.id in seen:
            raise RosterError(f"duplicate roster id {candidate.id!r}")
        seen.add(candidate.id)
        checked.append(candidate)
    return tuple(checked)


def departments(roster: Sequence[Candidate]) -> list[str]:
    """Return the distinct department names on the roster, sorted."""

    return sorted({candidate.department for candidate in roster})


__all__ = ["build_roster", "departments", "load_roster", "validate_roster"]
