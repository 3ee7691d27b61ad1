import logging

from sqlalchemy.orm import Session

from database.repositories.worker import WorkerRepository
from database.repositories.assignment import AssignmentRepository

logger = logging.getLogger(__name__)


class StaffingRepository:
    """Single entry point over the worker and assignment repositories.

    Both sub-repositories share one Session, so everything done through a
    StaffingRepository commits or rolls back together.
    """

    def __init__(self, db: Session):
        self.db = db
        self.workers = WorkerRepository(db)
        self.assignments = AssignmentRepository(db)
