import json
import random
from pathlib import Path

from guideraffle.config import RaffleConfig
from guideraffle.db.engine import make_engine
from guideraffle.models import WinnerRecord

DEPARTMENTS = ["Billing", "Onboarding", "Retention", "Technical Support"]
SUPERVISORS = ["A. Rivera", "K. Osei", "M. Tanaka", "S. Novak"]


def sample_roster(size: int = 40, seed: int = 7) -> list[dict]:
    """Return ``size`` fake guides in the roster file format."""
    rng = random.Random(seed)
    guides = []
    for n in range(1, size + 1):
        guides.append(
            {
                "id": f"guide-{n:03d}",
                "name": f"Guide {n:03d}",
                "department": DEPARTMENTS[n % len(DEPARTMENTS)],
                "supervisor": SUPERVISORS[n % len(SUPERVISORS)],
                "nps": round(rng.uniform(40, 100), 1),
                "nrpc": round(rng.uniform(40, 100), 1),
                "refundPercent": round(rng.uniform(0, 15), 2),
                "totalTickets": rng.choice([0, 5, 10, 20, 35, 50]),
            }
        )
    return guides


def main() -> None:
    """Write a sample roster and reset the development winner ledger."""
    config = RaffleConfig.from_env()
    roster_path = config.roster_path or Path("guides.json")
    roster_path.write_text(json.dumps(sample_roster(), indent=2), encoding="utf-8")
    print(f"Wrote sample roster to {roster_path}")

    engine = make_engine(config.database_url)
    try:
        WinnerRecord.__table__.drop(engine, checkfirst=True)
        WinnerRecord.__table__.create(engine)
    finally:
        engine.dispose()
    print("Reset winners table")


if __name__ == "__main__":
    main()
