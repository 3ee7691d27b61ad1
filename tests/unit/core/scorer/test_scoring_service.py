#!/usr/bin/env python3
"""
Test suite for ScoringService with a mocked repository.
"""

import unittest
from datetime import timedelta
from unittest.mock import Mock

from core.config_loader import ScorerConfig
from core.exceptions import MalformedHistoryException, WorkerNotFoundException
from core.scorer import ScoringService
from core.scorer.models import Flag, Tier
from tests import BASE_TIME, make_history


def _row(**kwargs):
    row = Mock()
    for key, value in kwargs.items():
        setattr(row, key, value)
    return row


class TestScoringService(unittest.TestCase):
    """Test ScoringService recompute flow."""

    def setUp(self):
        self.now = BASE_TIME + timedelta(days=90)
        self.repo = Mock()
        self.repo.assignments.list_assignments_by_worker.return_value = []
        self.repo.assignments.list_events_by_assignments.return_value = {}
        self.repo.assignments.get_staff_ratings.return_value = {}
        self.repo.assignments.get_customer_ratings.return_value = {}

        self.worker = _row(id="worker-1", severe_incident=False)
        self.repo.workers.get_worker.return_value = self.worker

        self.scorer = ScoringService(repo=self.repo, config=ScorerConfig(), clock=lambda: self.now)

    def test_unknown_worker_raises_without_write(self):
        self.repo.workers.get_worker.return_value = None

        with self.assertRaises(WorkerNotFoundException) as ctx:
            self.scorer.recalculate("missing")

        self.assertEqual(ctx.exception.worker_id, "missing")
        self.repo.workers.update_snapshot.assert_not_called()

    def test_zero_history_snapshot(self):
        snapshot = self.scorer.recalculate("worker-1")

        self.assertEqual(snapshot.performance_score, 0.0)
        self.assertEqual(snapshot.reliability_score, 5.0)
        self.assertEqual(snapshot.late_rate, 0.0)
        self.assertEqual(snapshot.ncns_rate, 0.0)
        self.assertEqual(snapshot.tier, Tier.CRITICAL)
        # Score 0 is below the review threshold
        self.assertEqual(snapshot.flags, (Flag.NEEDS_REVIEW,))

    def test_snapshot_written_with_scored_at(self):
        self.scorer.recalculate("worker-1")

        self.repo.workers.update_snapshot.assert_called_once()
        worker, values = self.repo.workers.update_snapshot.call_args[0]
        self.assertIs(worker, self.worker)
        self.assertEqual(values['scored_at'], self.now)
        self.assertEqual(values['tier'], "Critical")
        self.assertEqual(values['flags'], ["needs-review"])

    def test_history_loaded_from_repository(self):
        assignment = _row(id="a-1", category="warehouse", scheduled_start=BASE_TIME)
        self.repo.assignments.list_assignments_by_worker.return_value = [assignment]
        self.repo.assignments.list_events_by_assignments.return_value = {
            "a-1": [_row(event_type="late", occurred_at=BASE_TIME)]
        }
        self.repo.assignments.get_staff_ratings.return_value = {"a-1": _row(overall=4)}
        self.repo.assignments.get_customer_ratings.return_value = {"a-1": _row(overall=5)}

        snapshot = self.scorer.recalculate("worker-1")

        # 0.65 * 5 + 0.35 * 4 = 4.65
        self.assertEqual(snapshot.performance_score, 4.65)
        self.assertEqual(snapshot.tier, Tier.ELITE)
        self.assertEqual(snapshot.late_count, 1)
        self.assertEqual(snapshot.late_rate, 1.0)
        self.assertEqual(snapshot.reliability_score, 4.7)
        self.repo.assignments.list_events_by_assignments.assert_called_once_with(["a-1"])

    def test_unknown_event_type_is_malformed(self):
        assignment = _row(id="a-1", category="warehouse", scheduled_start=BASE_TIME)
        self.repo.assignments.list_assignments_by_worker.return_value = [assignment]
        self.repo.assignments.list_events_by_assignments.return_value = {
            "a-1": [_row(event_type="vanished", occurred_at=BASE_TIME)]
        }

        with self.assertRaises(MalformedHistoryException):
            self.scorer.recalculate("worker-1")
        self.repo.workers.update_snapshot.assert_not_called()

    def test_severe_incident_flag_comes_from_worker(self):
        self.worker.severe_incident = True

        snapshot = self.scorer.recalculate("worker-1")

        self.assertTrue(snapshot.has_flag(Flag.TERMINATE_RECOMMENDED))
        self.assertIn("Severe incident on record", snapshot.flag_reasons["terminate-recommended"])


class TestComputeSnapshot(unittest.TestCase):
    """Pure recompute, no repository involved."""

    def setUp(self):
        self.scorer = ScoringService(repo=Mock(), config=ScorerConfig())
        self.now = BASE_TIME + timedelta(days=60)

    def test_excellent_but_often_late_worker(self):
        history = [
            make_history(f"a{i}", days=i, staff=5, customer=5, events=["late"])
            for i in range(5)
        ]
        snapshot = self.scorer.compute_snapshot("w", history, self.now)

        self.assertEqual(snapshot.performance_score, 5.0)
        self.assertEqual(snapshot.tier, Tier.ELITE)
        self.assertEqual(snapshot.late_rate, 1.0)
        self.assertEqual(snapshot.reliability_score, 4.7)
        # Five late events long before the 30 day window, no NCNS, no low score
        self.assertEqual(snapshot.flags, ())

    def test_idempotent(self):
        history = [
            make_history("a1", days=1, customer=3, events=["ncns"]),
            make_history("a2", days=2, staff=4, events=["completed"]),
        ]
        first = self.scorer.compute_snapshot("w", history, self.now)
        second = self.scorer.compute_snapshot("w", history, self.now)
        self.assertEqual(first, second)

    def test_snapshot_to_dict(self):
        history = [make_history("a1", days=50, customer=4, events=["completed"])]
        data = self.scorer.compute_snapshot("w", history, self.now).to_dict()

        self.assertEqual(data['tier'], "Strong")
        self.assertEqual(data['flags'], [])
        self.assertEqual(data['last_30_day_score'], 4.0)
        self.assertEqual(data['completion_rate'], 1.0)
        self.assertEqual(data['category_metrics'][0]['trend'], "flat")


if __name__ == '__main__':
    unittest.main()
