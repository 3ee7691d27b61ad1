import uuid

from sqlalchemy import Column, Text, Boolean, Integer, Numeric, TIMESTAMP, JSON, func, Index
from sqlalchemy.orm import relationship

from .base import Base


def _uuid_str() -> str:
    return str(uuid.uuid4())


class Worker(Base):
    """
    Temporary-staffing worker plus their current scoring snapshot.

    The snapshot columns are owned by the ScoringService and are overwritten
    together on every recompute. Defaults are the zero-valued snapshot a
    worker carries before the first recompute.
    """
    __tablename__ = 'worker'

    id = Column(Text, primary_key=True, default=_uuid_str)
    employee_code = Column(Text, nullable=False, unique=True)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    phone = Column(Text)
    email = Column(Text)

    # Set by an external incident classification; read by the terminate policy
    severe_incident = Column(Boolean, nullable=False, default=False)

    # === Snapshot ===
    performance_score = Column(Numeric(4, 2, asdecimal=False), nullable=False, default=0)
    reliability_score = Column(Numeric(4, 2, asdecimal=False), nullable=False, default=0)
    late_rate = Column(Numeric(5, 4, asdecimal=False), nullable=False, default=0)
    ncns_rate = Column(Numeric(5, 4, asdecimal=False), nullable=False, default=0)
    tier = Column(Text, nullable=False, default='Critical')
    flags = Column(JSON, nullable=False, default=list)
    flag_reasons = Column(JSON, nullable=False, default=dict)

    total_jobs = Column(Integer, nullable=False, default=0)
    completed_count = Column(Integer, nullable=False, default=0)
    late_count = Column(Integer, nullable=False, default=0)
    sent_home_count = Column(Integer, nullable=False, default=0)
    ncns_count = Column(Integer, nullable=False, default=0)
    completion_rate = Column(Numeric(5, 4, asdecimal=False), nullable=False, default=0)
    sent_home_rate = Column(Numeric(5, 4, asdecimal=False), nullable=False, default=0)
    last_30_day_score = Column(Numeric(4, 2, asdecimal=False), nullable=False, default=0)
    category_metrics = Column(JSON, nullable=False, default=list)
    scored_at = Column(TIMESTAMP(timezone=True))

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    assignments = relationship("Assignment", back_populates="worker", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_worker_tier', 'tier'),
    )

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
