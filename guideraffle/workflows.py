from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from .config import RaffleConfig
from .db.engine import make_engine
from .models import Candidate, RaffleSettings, Winner
from .raffle.ledger import WinnerLedger
from .raffle.orchestrator import RaffleOrchestrator
from .raffle.roster import load_roster
from .raffle.sampler import default_rng


def open_raffle(
    config: Optional[RaffleConfig] = None,
    *,
    roster: Optional[Sequence[Candidate]] = None,
) -> RaffleOrchestrator:
    """Assemble a ready-to-use orchestrator from configuration.

    The workflow performs the following steps:

    1. Create an engine for ``config.database_url`` and initialize the
       winner ledger (the ``winners`` table is created if missing).
    2. Load the roster from ``config.roster_path`` unless ``roster`` is given.
    3. Build the orchestrator with a seeded RNG when ``config.seed`` is set.

    Parameters
    ----------
    config : Optional[RaffleConfig]
        Configuration to use. When omitted, it is read from the environment.
    roster : Optional[Sequence[Candidate]]
        Pre-loaded roster, which takes precedence over ``config.roster_path``.

    Returns
    -------
    RaffleOrchestrator
        Orchestrator with default settings of ``config.max_winners`` winners
        from the whole roster. Call :func:`close_raffle` when done.

    Raises
    ------
    ValueError
        If neither ``roster`` nor ``config.roster_path`` is available.
    """

    config = config or RaffleConfig.from_env()
    if roster is None:
        if config.roster_path is None:
            raise ValueError("A roster or RAFFLE_ROSTER_PATH is required to open a raffle.")
        roster = load_roster(config.roster_path)

    ledger = WinnerLedger(make_engine(config.database_url)).initialize()
    return RaffleOrchestrator(
        roster,
        ledger,
        settings=RaffleSettings(max_winners=config.max_winners),
        rng=default_rng(config.seed),
    )


def close_raffle(orchestrator: RaffleOrchestrator) -> None:
    """Release the resources held by an orchestrator built by :func:`open_raffle`."""

    close = getattr(orchestrator.ledger, "close", None)
    if close is not None:
        close()


def run_raffle(
    orchestrator: RaffleOrchestrator,
    settings: Optional[RaffleSettings] = None,
) -> list[Winner]:
    """Optionally reconfigure ``orchestrator`` and run one draw.

    Errors from :meth:`RaffleOrchestrator.configure` and
    :meth:`RaffleOrchestrator.run_draw` propagate unchanged.
    """

    if settings is not None:
        orchestrator.configure(settings)
    return orchestrator.run_draw()


@dataclass(frozen=True)
class WinnerSummary:
    """Aggregate figures over recorded winners."""

    total_winners: int
    total_tickets: int
    average_nps: float
    average_nrpc: float
    by_department: list[tuple[str, int]]


def summarize_winners(winners: Iterable[Winner]) -> WinnerSummary:
    """Summarize winners for display.

    ``by_department`` lists ``(department, count)`` pairs ordered by count,
    highest first, with ties broken by department name.
    """

    winners = list(winners)
    if not winners:
        return WinnerSummary(0, 0, 0.0, 0.0, [])

    counts: dict[str, int] = {}
    for winner in winners:
        counts[winner.department] = counts.get(winner.department, 0) + 1

    return WinnerSummary(
        total_winners=len(winners),
        total_tickets=sum(w.total_tickets for w in winners),
        average_nps=sum(w.nps for w in winners) / len(winners),
        average_nrpc=sum(w.nrpc for w in winners) / len(winners),
        by_department=sorted(counts.items(), key=lambda item: (-item[1], item[0])),
    )
