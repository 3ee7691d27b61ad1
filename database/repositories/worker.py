import logging
from typing import List, Optional, Any, Dict
from sqlalchemy import select

from database.models import Worker
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class WorkerRepository(BaseRepository):
    def get_worker(self, worker_id: Any) -> Optional[Worker]:
        stmt = select(Worker).where(Worker.id == worker_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_employee_code(self, employee_code: str) -> Optional[Worker]:
        stmt = select(Worker).where(Worker.employee_code == employee_code)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_workers(self, tier: Optional[str] = None) -> List[Worker]:
        stmt = select(Worker)
        if tier is not None:
            stmt = stmt.where(Worker.tier == tier)
        stmt = stmt.order_by(Worker.performance_score.desc(), Worker.employee_code)
        return self.db.execute(stmt).scalars().all()

    def create_worker(
        self,
        employee_code: str,
        first_name: str,
        last_name: str,
        phone: Optional[str] = None,
        email: Optional[str] = None
    ) -> Worker:
        worker = Worker(
            employee_code=employee_code,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            email=email,
            severe_incident=False,
            flags=[],
            flag_reasons={},
            category_metrics=[]
        )
        return self._add(worker)

    def set_severe_incident(self, worker: Worker, severe_incident: bool) -> None:
        worker.severe_incident = severe_incident
        self.db.flush()

    def update_snapshot(self, worker: Worker, values: Dict[str, Any]) -> None:
        """Overwrite every snapshot column in one flush."""
        for key, value in values.items():
            if not hasattr(Worker, key):
                raise AttributeError(f"Worker has no snapshot column '{key}'")
            setattr(worker, key, value)
        self.db.flush()
