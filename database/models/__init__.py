from .base import Base
from .organization import Organization
from .employee import Employee
from .task import Task, TaskStatus
from .score_log import ScoreLog

__all__ = [
    'Base',
    'Organization',
    'Employee',
    'Task',
    'TaskStatus',
    'ScoreLog',
]
