from database.repositories.base import BaseRepository
from database.repositories.employee import EmployeeRepository
from database.repositories.task import TaskRepository
from database.repositories.score_log import ScoreLogRepository

__all__ = [
    'BaseRepository',
    'EmployeeRepository',
    'TaskRepository',
    'ScoreLogRepository',
]
