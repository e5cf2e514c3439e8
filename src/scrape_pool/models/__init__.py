"""
Модели данных для пула.
"""

from .task import Task, TaskResult, TaskStatus
from .worker import WorkerStats, WorkerStatus
from .summary import RunSummary, RunReport

__all__ = [
    "Task",
    "TaskResult",
    "TaskStatus",
    "WorkerStats",
    "WorkerStatus",
    "RunSummary",
    "RunReport"
]
