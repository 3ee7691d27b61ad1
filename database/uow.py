import contextlib
import logging
from typing import Callable, Optional

from sqlalchemy.orm import Session

from database.repository import StaffingRepository

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def staffing_uow(session_factory: Optional[Callable[[], Session]] = None):
    """Per-unit-of-work transaction scope.

    Yields a StaffingRepository bound to a fresh Session. Commits on success,
    rolls back on exception, always closes.

    Usage:
        with staffing_uow() as repo:
            staffing = StaffingService(repo, config)
            staffing.record_attendance_event(assignment_id, "late", occurred_at)
        # commit happens automatically on successful exit
    """
    if session_factory is None:
        from database.database import SessionLocal
        session_factory = SessionLocal

    session = session_factory()
    try:
        repo = StaffingRepository(session)
        yield repo
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
