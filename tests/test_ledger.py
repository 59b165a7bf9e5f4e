from __future__ import annotations

import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

from sqlalchemy import create_engine, inspect
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from guideraffle.models import Winner, WinnerRecord
from guideraffle.raffle import DuplicateWinnerError, PersistenceError, WinnerLedger

WON_AT = datetime(2026, 3, 14, 15, 9, 26, tzinfo=timezone.utc)


def _winner(guide_id: str, *, name: str = "Guide", winner_id: str | None = None) -> Winner:
    return Winner(
        id=winner_id or f"w-{guide_id}",
        guide_id=guide_id,
        name=name,
        department="Billing",
        supervisor="Kim",
        total_tickets=10,
        nps=70.0,
        nrpc=55.5,
        refund_percent=1.25,
        won_at=WON_AT,
    )


class WinnerLedgerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
        self.clock_value = datetime(2026, 3, 14, 16, 0, tzinfo=timezone.utc)
        self.ledger = WinnerLedger(self.engine, clock=lambda: self.clock_value).initialize()

    def tearDown(self) -> None:
        self.ledger.close()

    def test_initialize_creates_table_and_is_repeatable(self) -> None:
        self.ledger.initialize()
        self.assertIn("winners", inspect(self.engine).get_table_names())

    def test_append_and_list_preserve_insertion_order(self) -> None:
        stored = self.ledger.append([_winner("3"), _winner("1")])
        self.clock_value += timedelta(minutes=5)
        self.ledger.append([_winner("2")])

        listed = self.ledger.list_all()
        self.assertEqual([w.guide_id for w in listed], ["3", "1", "2"])
        self.assertEqual([w.guide_id for w in stored], ["3", "1"])
        self.assertEqual(stored[0].recorded_at, datetime(2026, 3, 14, 16, 0, tzinfo=timezone.utc))
        self.assertEqual(listed[2].recorded_at, datetime(2026, 3, 14, 16, 5, tzinfo=timezone.utc))

    def test_round_trip_keeps_snapshot_fields(self) -> None:
        self.ledger.append([_winner("7", name="Robin")])
        winner = self.ledger.list_all()[0]
        self.assertEqual(winner.id, "w-7")
        self.assertEqual(winner.name, "Robin")
        self.assertEqual(winner.nrpc, 55.5)
        self.assertEqual(winner.refund_percent, 1.25)
        self.assertEqual(winner.won_at, WON_AT)

    def test_empty_batch_is_a_no_op(self) -> None:
        self.assertEqual(self.ledger.append([]), [])
        self.assertEqual(self.ledger.list_all(), [])

    def test_guide_ids(self) -> None:
        self.ledger.append([_winner("a"), _winner("b")])
        self.assertEqual(self.ledger.guide_ids(), {"a", "b"})

    def test_batch_with_previous_winner_is_rejected_whole(self) -> None:
        self.ledger.append([_winner("1")])
        with self.assertRaises(DuplicateWinnerError) as ctx:
            self.ledger.append([_winner("2"), _winner("1", winner_id="w-again")])
        self.assertEqual(ctx.exception.guide_ids, frozenset({"1"}))
        self.assertEqual(len(ctx.exception.winners), 2)
        self.assertEqual([w.guide_id for w in self.ledger.list_all()], ["1"])

    def test_batch_repeating_a_guide_is_rejected(self) -> None:
        with self.assertRaises(DuplicateWinnerError):
            self.ledger.append([_winner("5"), _winner("5", winner_id="w-5b")])
        self.assertEqual(self.ledger.list_all(), [])

    def test_failed_row_rolls_back_the_batch(self) -> None:
        bad = _winner("2", name=None)  # type: ignore[arg-type]
        with self.assertRaises(PersistenceError) as ctx:
            self.ledger.append([_winner("1"), bad, _winner("3")])
        self.assertNotIsInstance(ctx.exception, DuplicateWinnerError)
        self.assertIsInstance(ctx.exception.__cause__, IntegrityError)
        self.assertEqual(self.ledger.list_all(), [])

    def test_simulated_write_fault_leaves_nothing_behind(self) -> None:
        fault = OperationalError("INSERT INTO winners", {}, Exception("disk I/O error"))
        with patch.object(Session, "flush", side_effect=fault):
            with self.assertRaises(PersistenceError):
                self.ledger.append([_winner("1"), _winner("2")])
        self.assertEqual(self.ledger.list_all(), [])
        # The same batch succeeds once the fault clears.
        self.assertEqual(len(self.ledger.append([_winner("1"), _winner("2")])), 2)

    def test_store_enforces_one_win_per_guide(self) -> None:
        self.ledger.append([_winner("1")])
        Session_ = sessionmaker(bind=self.engine, future=True)
        with self.assertRaises(IntegrityError):
            with Session_.begin() as session:
                session.add(
                    WinnerRecord.from_winner(
                        _winner("1", winner_id="w-direct"), self.clock_value
                    )
                )

    def test_guide_recorded_by_another_writer_is_reported_as_duplicate(self) -> None:
        self.ledger.append([_winner("1")])
        real_scalars = Session.scalars
        calls = []

        def stale_first_read(session, *args, **kwargs):
            # The pre-insert check sees the ledger as it was before "1" won.
            calls.append(args)
            if len(calls) == 1:
                empty = MagicMock()
                empty.all.return_value = []
                return empty
            return real_scalars(session, *args, **kwargs)

        with patch.object(Session, "scalars", new=stale_first_read):
            with self.assertRaises(DuplicateWinnerError) as ctx:
                self.ledger.append([_winner("2"), _winner("1", winner_id="w-late")])

        self.assertEqual(ctx.exception.guide_ids, frozenset({"1"}))
        self.assertIsInstance(ctx.exception.__cause__, IntegrityError)
        self.assertEqual([w.guide_id for w in self.ledger.list_all()], ["1"])
        self.assertEqual([w.id for w in self.ledger.list_all()], ["w-1"])

    def test_context_manager_initializes(self) -> None:
        engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
        with WinnerLedger(engine) as ledger:
            ledger.append([_winner("9")])
            self.assertEqual(len(ledger.list_all()), 1)


if __name__ == "__main__":
    unittest.main()
