import uuid

from sqlalchemy import (
    Column, Text, Boolean, Integer, TIMESTAMP, JSON, ForeignKey, CheckConstraint, Index, func
)
from sqlalchemy.orm import relationship

from .base import Base


def _uuid_str() -> str:
    return str(uuid.uuid4())


class Assignment(Base):
    """
    One engagement of a worker in a job category. Immutable once created.
    """
    __tablename__ = 'assignment'

    id = Column(Text, primary_key=True, default=_uuid_str)
    worker_id = Column(Text, ForeignKey('worker.id', ondelete='CASCADE'), nullable=False)
    category = Column(Text, nullable=False)
    scheduled_start = Column(TIMESTAMP(timezone=True), nullable=False)
    created_by = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    worker = relationship("Worker", back_populates="assignments")
    events = relationship("AttendanceEvent", back_populates="assignment", cascade="all, delete-orphan")
    staff_rating = relationship("StaffRating", back_populates="assignment", uselist=False, cascade="all, delete-orphan")
    customer_rating = relationship("CustomerRating", back_populates="assignment", uselist=False, cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_assignment_worker_start', 'worker_id', 'scheduled_start'),
    )


class AttendanceEvent(Base):
    """
    Append-only attendance outcome: completed | late | sent_home | ncns.
    Several events may exist for one assignment; all of them count.
    """
    __tablename__ = 'attendance_event'

    id = Column(Text, primary_key=True, default=_uuid_str)
    assignment_id = Column(Text, ForeignKey('assignment.id', ondelete='CASCADE'), nullable=False)
    event_type = Column(Text, nullable=False)
    occurred_at = Column(TIMESTAMP(timezone=True), nullable=False)
    recorded_by = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    assignment = relationship("Assignment", back_populates="events")

    __table_args__ = (
        Index('idx_attendance_event_assignment', 'assignment_id'),
    )


class StaffRating(Base):
    """Internal rating, at most one per assignment."""
    __tablename__ = 'staff_rating'

    id = Column(Text, primary_key=True, default=_uuid_str)
    assignment_id = Column(Text, ForeignKey('assignment.id', ondelete='CASCADE'), nullable=False, unique=True)
    overall = Column(Integer, nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    notes = Column(Text)
    rated_by = Column(Text)
    rated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    assignment = relationship("Assignment", back_populates="staff_rating")

    __table_args__ = (
        CheckConstraint('overall BETWEEN 1 AND 5', name='ck_staff_rating_overall'),
    )


class CustomerRating(Base):
    """External rating with optional sub-dimensions, at most one per assignment."""
    __tablename__ = 'customer_rating'

    id = Column(Text, primary_key=True, default=_uuid_str)
    assignment_id = Column(Text, ForeignKey('assignment.id', ondelete='CASCADE'), nullable=False, unique=True)
    overall = Column(Integer, nullable=False)

    # Sub-dimensions (1-5 when present)
    punctuality = Column(Integer)
    work_ethic = Column(Integer)
    attitude = Column(Integer)
    quality = Column(Integer)
    safety = Column(Integer)
    would_rehire = Column(Boolean)
    comments = Column(Text)
    rated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    assignment = relationship("Assignment", back_populates="customer_rating")

    __table_args__ = (
        CheckConstraint('overall BETWEEN 1 AND 5', name='ck_customer_rating_overall'),
    )
