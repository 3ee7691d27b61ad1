import logging
from datetime import datetime
from typing import List, Optional, Any, Dict, Iterable
from sqlalchemy import select

from database.models import Assignment, AttendanceEvent, StaffRating, CustomerRating
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class AssignmentRepository(BaseRepository):
    # === Assignments ===

    def get_assignment(self, assignment_id: Any) -> Optional[Assignment]:
        stmt = select(Assignment).where(Assignment.id == assignment_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_assignments_by_worker(self, worker_id: Any) -> List[Assignment]:
        stmt = (
            select(Assignment)
            .where(Assignment.worker_id == worker_id)
            .order_by(Assignment.scheduled_start, Assignment.id)
        )
        return self.db.execute(stmt).scalars().all()

    def create_assignment(
        self,
        worker_id: Any,
        category: str,
        scheduled_start: datetime,
        created_by: Optional[str] = None
    ) -> Assignment:
        assignment = Assignment(
            worker_id=worker_id,
            category=category,
            scheduled_start=scheduled_start,
            created_by=created_by
        )
        return self._add(assignment)

    # === Attendance events ===

    def record_event(
        self,
        assignment_id: Any,
        event_type: str,
        occurred_at: datetime,
        recorded_by: Optional[str] = None
    ) -> AttendanceEvent:
        event = AttendanceEvent(
            assignment_id=assignment_id,
            event_type=event_type,
            occurred_at=occurred_at,
            recorded_by=recorded_by
        )
        return self._add(event)

    def list_events_by_assignment(self, assignment_id: Any) -> List[AttendanceEvent]:
        stmt = (
            select(AttendanceEvent)
            .where(AttendanceEvent.assignment_id == assignment_id)
            .order_by(AttendanceEvent.occurred_at, AttendanceEvent.id)
        )
        return self.db.execute(stmt).scalars().all()

    def list_events_by_assignments(self, assignment_ids: Iterable[Any]) -> Dict[Any, List[AttendanceEvent]]:
        """Batch variant: one IN query, grouped by assignment id."""
        ids = list(assignment_ids)
        if not ids:
            return {}

        stmt = (
            select(AttendanceEvent)
            .where(AttendanceEvent.assignment_id.in_(ids))
            .order_by(AttendanceEvent.occurred_at, AttendanceEvent.id)
        )
        result: Dict[Any, List[AttendanceEvent]] = {assignment_id: [] for assignment_id in ids}
        for event in self.db.execute(stmt).scalars().all():
            result[event.assignment_id].append(event)
        return result

    # === Ratings ===

    def get_staff_rating(self, assignment_id: Any) -> Optional[StaffRating]:
        stmt = select(StaffRating).where(StaffRating.assignment_id == assignment_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_customer_rating(self, assignment_id: Any) -> Optional[CustomerRating]:
        stmt = select(CustomerRating).where(CustomerRating.assignment_id == assignment_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_staff_ratings(self, assignment_ids: Iterable[Any]) -> Dict[Any, StaffRating]:
        ids = list(assignment_ids)
        if not ids:
            return {}
        stmt = select(StaffRating).where(StaffRating.assignment_id.in_(ids))
        return {r.assignment_id: r for r in self.db.execute(stmt).scalars().all()}

    def get_customer_ratings(self, assignment_ids: Iterable[Any]) -> Dict[Any, CustomerRating]:
        ids = list(assignment_ids)
        if not ids:
            return {}
        stmt = select(CustomerRating).where(CustomerRating.assignment_id.in_(ids))
        return {r.assignment_id: r for r in self.db.execute(stmt).scalars().all()}

    def add_staff_rating(
        self,
        assignment_id: Any,
        overall: int,
        tags: Optional[List[str]] = None,
        notes: Optional[str] = None,
        rated_by: Optional[str] = None
    ) -> StaffRating:
        rating = StaffRating(
            assignment_id=assignment_id,
            overall=overall,
            tags=list(tags or []),
            notes=notes,
            rated_by=rated_by
        )
        return self._add(rating)

    def add_customer_rating(
        self,
        assignment_id: Any,
        overall: int,
        sub_scores: Optional[Dict[str, Optional[int]]] = None,
        would_rehire: Optional[bool] = None,
        comments: Optional[str] = None
    ) -> CustomerRating:
        sub_scores = sub_scores or {}
        rating = CustomerRating(
            assignment_id=assignment_id,
            overall=overall,
            punctuality=sub_scores.get('punctuality'),
            work_ethic=sub_scores.get('work_ethic'),
            attitude=sub_scores.get('attitude'),
            quality=sub_scores.get('quality'),
            safety=sub_scores.get('safety'),
            would_rehire=would_rehire,
            comments=comments
        )
        return self._add(rating)
