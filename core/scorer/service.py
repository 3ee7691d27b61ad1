#!/usr/bin/env python3
"""
Scoring Service - Full recompute of a worker's scoring snapshot.

recalculate(worker_id) reads the worker's complete history, derives the
scoring inputs, runs the scoring primitives and flag policy, and overwrites
the worker's snapshot. There are no running totals: every call recomputes
from scratch, so two calls with no history change in between produce the
same snapshot.

The caller is responsible for serialising recomputes of the same worker
(one unit of work per write, see database.uow).
"""

from datetime import datetime
from typing import Any, Callable, List, Optional
import logging

from database.repository import StaffingRepository
from core.config_loader import ScorerConfig
from core.exceptions import MalformedHistoryException, WorkerNotFoundException
from core.scorer.models import (
    AssignmentHistory, AttendanceRecord, EventType, NeedsReviewInput,
    TerminateRecommendedInput, WorkerSnapshot
)
from core.scorer import flags as flag_policy
from core.scorer import history as history_derivation
from core.scorer import persistence
from core.scorer import ratings, reliability
from core.scorer.tiers import map_tier
from core.utils import utc_now

logger = logging.getLogger(__name__)


def _parse_event_type(value: str) -> EventType:
    try:
        return EventType(value)
    except ValueError:
        raise MalformedHistoryException(f"Unknown attendance event type: {value!r}") from None


def _load_history(repo: StaffingRepository, worker_id: Any) -> List[AssignmentHistory]:
    """Read every assignment of the worker with its events and ratings.

    Events and ratings are fetched with one IN query each rather than one
    query per assignment.
    """
    assignments = repo.assignments.list_assignments_by_worker(worker_id)
    assignment_ids = [a.id for a in assignments]

    events = repo.assignments.list_events_by_assignments(assignment_ids)
    staff_ratings = repo.assignments.get_staff_ratings(assignment_ids)
    customer_ratings = repo.assignments.get_customer_ratings(assignment_ids)

    history = []
    for assignment in assignments:
        staff = staff_ratings.get(assignment.id)
        customer = customer_ratings.get(assignment.id)
        history.append(AssignmentHistory(
            assignment_id=assignment.id,
            category=assignment.category,
            scheduled_start=assignment.scheduled_start,
            staff_rating=staff.overall if staff is not None else None,
            customer_rating=customer.overall if customer is not None else None,
            events=[
                AttendanceRecord(
                    event_type=_parse_event_type(event.event_type),
                    occurred_at=event.occurred_at
                )
                for event in events.get(assignment.id, [])
            ]
        ))
    return history


class ScoringService:
    """
    Service for recomputing worker scoring snapshots.

    Usage:
        with staffing_uow() as repo:
            scorer = ScoringService(repo, config.scorer)
            snapshot = scorer.recalculate(worker_id)
    """

    def __init__(
        self,
        repo: StaffingRepository,
        config: Optional[ScorerConfig] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.repo = repo
        self.config = config or ScorerConfig()
        self.clock = clock or utc_now

    def compute_snapshot(
        self,
        worker_id: Any,
        history: List[AssignmentHistory],
        now: datetime,
        severe_incident: bool = False
    ) -> WorkerSnapshot:
        """Pure part of the recompute: history in, snapshot out."""
        config = self.config
        inputs = history_derivation.derive_inputs(history, now, config)
        counts = inputs.counts

        performance_score = ratings.calculate_performance_score(
            inputs.rated_jobs, config.rating_weights
        )
        reliability_score = reliability.calculate_reliability_score(
            counts, config.incident_penalties, config.max_score
        )
        late_rate = reliability.calculate_late_rate(counts)
        ncns_rate = reliability.calculate_ncns_rate(counts)

        flag_result = flag_policy.evaluate_flags(
            NeedsReviewInput(
                performance_score=performance_score,
                ncns_rate=ncns_rate,
                incidents_in_window=inputs.incidents_in_window,
                recent_scores=inputs.recent_scores
            ),
            TerminateRecommendedInput(
                performance_score=performance_score,
                total_jobs=inputs.total_jobs,
                ncns_rate=ncns_rate,
                ncns_in_recent_assignments=inputs.ncns_in_recent_assignments,
                severe_incident=severe_incident
            ),
            config
        )

        return WorkerSnapshot(
            worker_id=worker_id,
            performance_score=performance_score,
            reliability_score=reliability_score,
            late_rate=late_rate,
            ncns_rate=ncns_rate,
            tier=map_tier(performance_score, config.tiers),
            flags=tuple(flag_result.flags),
            total_jobs=inputs.total_jobs,
            completed_count=counts.completed,
            late_count=counts.late,
            sent_home_count=counts.sent_home,
            ncns_count=counts.ncns,
            completion_rate=reliability.calculate_completion_rate(counts),
            sent_home_rate=reliability.calculate_sent_home_rate(counts),
            last_30_day_score=ratings.calculate_recent_score(
                history, now, config.recent_score_window_days, config.rating_weights
            ),
            category_metrics=ratings.calculate_category_metrics(history, config),
            flag_reasons=flag_result.reasons
        )

    def recalculate(self, worker_id: Any) -> WorkerSnapshot:
        """Recompute and overwrite one worker's snapshot.

        Raises:
            WorkerNotFoundException: worker_id does not exist (nothing is written)
            MalformedHistoryException: stored history violates the engine's
                input contract (nothing is written)
        """
        worker = self.repo.workers.get_worker(worker_id)
        if worker is None:
            raise WorkerNotFoundException(worker_id)

        now = self.clock()
        history = _load_history(self.repo, worker_id)
        snapshot = self.compute_snapshot(
            worker_id=worker.id,
            history=history,
            now=now,
            severe_incident=bool(worker.severe_incident)
        )

        persistence.save_snapshot(self.repo, worker, snapshot, scored_at=now)

        logger.info(
            f"Recalculated worker {worker.id}: performance={snapshot.performance_score:.2f}, "
            f"reliability={snapshot.reliability_score:.2f}, tier={snapshot.tier.value}, "
            f"flags={[f.value for f in snapshot.flags]}"
        )
        return snapshot

    def current_snapshot(self, worker_id: Any) -> WorkerSnapshot:
        """Read the stored snapshot without recomputing."""
        worker = self.repo.workers.get_worker(worker_id)
        if worker is None:
            raise WorkerNotFoundException(worker_id)
        return persistence.load_snapshot(worker)
