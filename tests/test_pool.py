from __future__ import annotations

import unittest
from datetime import datetime, timezone

from guideraffle.models import Candidate, DrawFrom, RaffleSettings, Winner
from guideraffle.raffle import eligible, summarize_pool
from guideraffle.raffle.pool import weighted_pool


def _candidate(cid: str, department: str, tickets: int = 10, nps: float = 50.0) -> Candidate:
    return Candidate(
        id=cid,
        name=f"Guide {cid}",
        department=department,
        supervisor="Sam",
        total_tickets=tickets,
        nps=nps,
    )


def _winner_for(candidate: Candidate) -> Winner:
    return Winner.from_candidate(
        candidate,
        winner_id=f"w-{candidate.id}",
        won_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


class EligiblePoolTests(unittest.TestCase):
    def setUp(self) -> None:
        self.roster = (
            _candidate("1", "Billing"),
            _candidate("2", "Support"),
            _candidate("3", "Billing"),
            _candidate("4", "Retention"),
        )

    def test_all_returns_roster_without_winners(self) -> None:
        pool = eligible(self.roster, [_winner_for(self.roster[1])], RaffleSettings())
        self.assertEqual([c.id for c in pool], ["1", "3", "4"])

    def test_filtered_restricts_to_selected_departments(self) -> None:
        settings = RaffleSettings(
            draw_from=DrawFrom.FILTERED, selected_categories={"Billing", "Retention"}
        )
        pool = eligible(self.roster, [_winner_for(self.roster[0])], settings)
        self.assertEqual([c.id for c in pool], ["3", "4"])

    def test_filtered_with_no_categories_means_entire_roster(self) -> None:
        settings = RaffleSettings(draw_from=DrawFrom.FILTERED)
        self.assertEqual(list(eligible(self.roster, [], settings)), list(self.roster))

    def test_categories_are_ignored_when_drawing_from_all(self) -> None:
        settings = RaffleSettings(draw_from="all", selected_categories={"Support"})
        self.assertEqual(len(eligible(self.roster, [], settings)), 4)

    def test_every_winner_is_excluded(self) -> None:
        winners = [_winner_for(c) for c in self.roster]
        self.assertEqual(eligible(self.roster, winners, RaffleSettings()), [])

    def test_weighted_pool_pairs_ids_with_tickets(self) -> None:
        roster = (_candidate("a", "X", tickets=0), _candidate("b", "X", tickets=7))
        self.assertEqual(weighted_pool(roster), [("a", 0), ("b", 7)])


class PoolSummaryTests(unittest.TestCase):
    def test_summary_of_candidates(self) -> None:
        summary = summarize_pool(
            [
                _candidate("1", "A", tickets=10, nps=80.0),
                _candidate("2", "A", tickets=30, nps=60.0),
            ]
        )
        self.assertEqual(summary.available, 2)
        self.assertEqual(summary.total_tickets, 40)
        self.assertAlmostEqual(summary.average_nps, 70.0)

    def test_empty_summary_is_zeroed(self) -> None:
        summary = summarize_pool([])
        self.assertEqual((summary.available, summary.total_tickets), (0, 0))
        self.assertEqual(summary.average_nps, 0.0)


if __name__ == "__main__":
    unittest.main()
