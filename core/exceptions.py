#!/usr/bin/env python3
"""
Custom exceptions for the scoring and staffing services.
"""


class ServiceException(Exception):
    """Base exception for service layer errors."""
    pass


class WorkerNotFoundException(ServiceException):
    """Raised when a worker id does not resolve to a worker."""

    def __init__(self, worker_id):
        super().__init__(f"Worker not found: {worker_id}")
        self.worker_id = worker_id


class AssignmentNotFoundException(ServiceException):
    """Raised when an assignment id does not resolve to an assignment."""

    def __init__(self, assignment_id):
        super().__init__(f"Assignment not found: {assignment_id}")
        self.assignment_id = assignment_id


class DuplicateRatingException(ServiceException):
    """Raised when a rating of the same kind already exists for an assignment."""

    def __init__(self, assignment_id, kind: str):
        super().__init__(f"{kind} rating already submitted for assignment {assignment_id}")
        self.assignment_id = assignment_id
        self.kind = kind


class MalformedHistoryException(ServiceException, ValueError):
    """Raised when history handed to the engine violates its input contract."""
    pass


class DuplicateWorkerException(ServiceException):
    """Raised when an employee code is already registered."""

    def __init__(self, employee_code: str):
        super().__init__(f"Employee code already registered: {employee_code}")
        self.employee_code = employee_code
