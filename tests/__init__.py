#!/usr/bin/env python3
"""
Test suite configuration and utilities.

All tests can be run with standard Python tools:

    # Run all tests
    python -m pytest tests/ -v

    # Run only pure unit tests (no database session)
    python -m pytest tests/unit -v

    # Run only DB-backed tests
    python -m pytest tests/ -v -m "db"

Database Setup:
    DB-backed tests run against an in-memory SQLite database created per
    test (see tests/conftest.py), so no external service is needed.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from core.scorer.models import AssignmentHistory, AttendanceRecord, EventType

BASE_TIME = datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)


def make_history(
    assignment_id: str,
    days: int = 0,
    category: str = "warehouse",
    staff: Optional[int] = None,
    customer: Optional[int] = None,
    events: Optional[List[str]] = None,
    event_time: Optional[datetime] = None
) -> AssignmentHistory:
    """Build an AssignmentHistory scheduled `days` after BASE_TIME."""
    start = BASE_TIME + timedelta(days=days)
    return AssignmentHistory(
        assignment_id=assignment_id,
        category=category,
        scheduled_start=start,
        staff_rating=staff,
        customer_rating=customer,
        events=[
            AttendanceRecord(event_type=EventType(e), occurred_at=event_time or start)
            for e in (events or [])
        ]
    )
