from .base import Base
from .worker import Worker
from .assignment import Assignment, AttendanceEvent, StaffRating, CustomerRating

__all__ = [
    'Base',
    'Worker',
    'Assignment',
    'AttendanceEvent',
    'StaffRating',
    'CustomerRating',
]
