from database.repositories.base import BaseRepository
from database.repositories.worker import WorkerRepository
from database.repositories.assignment import AssignmentRepository

__all__ = [
    'BaseRepository',
    'WorkerRepository',
    'AssignmentRepository',
]
