#!/usr/bin/env python3
"""
Staffing Service - History writes that trigger a worker recompute.

Every mutating operation here is followed, synchronously and
unconditionally, by ScoringService.recalculate() for the one worker the
write affected. Nothing here ever recomputes the whole worker population.

Run each call inside its own unit of work (database.uow.staffing_uow) so the
write and the snapshot overwrite commit or roll back together.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
import logging

from database.repository import StaffingRepository
from core.config_loader import ScorerConfig
from core.exceptions import (
    AssignmentNotFoundException, DuplicateRatingException, DuplicateWorkerException,
    MalformedHistoryException, WorkerNotFoundException
)
from core.scorer.models import EventType, JobCategory, WorkerSnapshot
from core.scorer.ratings import validate_rating
from core.scorer.service import ScoringService
from core.utils import utc_now

logger = logging.getLogger(__name__)

CUSTOMER_SUB_SCORES = ('punctuality', 'work_ethic', 'attitude', 'quality', 'safety')


@dataclass
class WriteResult:
    """The row a write created plus the worker snapshot it produced."""
    record: Any
    snapshot: WorkerSnapshot


def _parse_category(category: str) -> str:
    try:
        return JobCategory(category.strip().lower()).value
    except (AttributeError, ValueError):
        raise MalformedHistoryException(f"Unknown job category: {category!r}") from None


def _parse_event_type(event_type: str) -> str:
    try:
        return EventType(event_type.strip().lower()).value
    except (AttributeError, ValueError):
        raise MalformedHistoryException(f"Unknown attendance event type: {event_type!r}") from None


class StaffingService:
    """
    Write operations over worker history.

    Usage:
        with staffing_uow() as repo:
            staffing = StaffingService(repo, config.scorer)
            result = staffing.create_assignment(worker_id, "warehouse", start)
            result.snapshot.tier
    """

    def __init__(
        self,
        repo: StaffingRepository,
        config: Optional[ScorerConfig] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.repo = repo
        self.clock = clock or utc_now
        self.scorer = ScoringService(repo, config, clock=self.clock)

    def _require_assignment(self, assignment_id: Any):
        assignment = self.repo.assignments.get_assignment(assignment_id)
        if assignment is None:
            raise AssignmentNotFoundException(assignment_id)
        return assignment

    def register_worker(
        self,
        employee_code: str,
        first_name: str,
        last_name: str,
        phone: Optional[str] = None,
        email: Optional[str] = None
    ) -> WriteResult:
        """Create a worker and give them their zero-history snapshot."""
        if self.repo.workers.get_by_employee_code(employee_code) is not None:
            raise DuplicateWorkerException(employee_code)

        worker = self.repo.workers.create_worker(
            employee_code=employee_code,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            email=email
        )
        logger.info(f"Registered worker {worker.id} ({employee_code})")
        return WriteResult(worker, self.scorer.recalculate(worker.id))

    def create_assignment(
        self,
        worker_id: Any,
        category: str,
        scheduled_start: datetime,
        created_by: Optional[str] = None
    ) -> WriteResult:
        if self.repo.workers.get_worker(worker_id) is None:
            raise WorkerNotFoundException(worker_id)

        assignment = self.repo.assignments.create_assignment(
            worker_id=worker_id,
            category=_parse_category(category),
            scheduled_start=scheduled_start,
            created_by=created_by
        )
        logger.info(f"Created assignment {assignment.id} for worker {worker_id}")
        return WriteResult(assignment, self.scorer.recalculate(worker_id))

    def record_attendance_event(
        self,
        assignment_id: Any,
        event_type: str,
        occurred_at: Optional[datetime] = None,
        recorded_by: Optional[str] = None
    ) -> WriteResult:
        """Append an attendance event. Earlier events on the assignment are kept."""
        assignment = self._require_assignment(assignment_id)

        event = self.repo.assignments.record_event(
            assignment_id=assignment.id,
            event_type=_parse_event_type(event_type),
            occurred_at=occurred_at or self.clock(),
            recorded_by=recorded_by
        )
        logger.info(f"Recorded '{event.event_type}' for assignment {assignment.id}")
        return WriteResult(event, self.scorer.recalculate(assignment.worker_id))

    def submit_staff_rating(
        self,
        assignment_id: Any,
        overall: int,
        tags: Optional[List[str]] = None,
        notes: Optional[str] = None,
        rated_by: Optional[str] = None
    ) -> WriteResult:
        """Submit the one staff rating an assignment may have. Duplicates are rejected."""
        assignment = self._require_assignment(assignment_id)
        validate_rating(overall, "staff")
        if overall is None:
            raise MalformedHistoryException("staff rating overall is required")

        if self.repo.assignments.get_staff_rating(assignment.id) is not None:
            raise DuplicateRatingException(assignment.id, "staff")

        rating = self.repo.assignments.add_staff_rating(
            assignment_id=assignment.id,
            overall=overall,
            tags=tags,
            notes=notes,
            rated_by=rated_by
        )
        return WriteResult(rating, self.scorer.recalculate(assignment.worker_id))

    def submit_customer_rating(
        self,
        assignment_id: Any,
        overall: int,
        sub_scores: Optional[Dict[str, Optional[int]]] = None,
        would_rehire: Optional[bool] = None,
        comments: Optional[str] = None
    ) -> WriteResult:
        """Submit the one customer rating an assignment may have. Duplicates are rejected."""
        assignment = self._require_assignment(assignment_id)
        validate_rating(overall, "customer")
        if overall is None:
            raise MalformedHistoryException("customer rating overall is required")

        sub_scores = sub_scores or {}
        unknown = set(sub_scores) - set(CUSTOMER_SUB_SCORES)
        if unknown:
            raise MalformedHistoryException(f"Unknown customer sub-scores: {sorted(unknown)}")
        for name, value in sub_scores.items():
            validate_rating(value, f"customer {name}")

        if self.repo.assignments.get_customer_rating(assignment.id) is not None:
            raise DuplicateRatingException(assignment.id, "customer")

        rating = self.repo.assignments.add_customer_rating(
            assignment_id=assignment.id,
            overall=overall,
            sub_scores=sub_scores,
            would_rehire=would_rehire,
            comments=comments
        )
        return WriteResult(rating, self.scorer.recalculate(assignment.worker_id))

    def set_severe_incident(self, worker_id: Any, severe_incident: bool = True) -> WriteResult:
        """Record the external severe-incident classification for a worker."""
        worker = self.repo.workers.get_worker(worker_id)
        if worker is None:
            raise WorkerNotFoundException(worker_id)

        self.repo.workers.set_severe_incident(worker, severe_incident)
        logger.warning(f"Severe incident marker for worker {worker_id} set to {severe_incident}")
        return WriteResult(worker, self.scorer.recalculate(worker_id))
