"""
Модели задач и результатов.
"""

import uuid
from enum import Enum
from typing import Any, Optional
from dataclasses import dataclass, field
from datetime import datetime


class TaskStatus(Enum):
    """Итоговые статусы задач."""
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class Task:
    """
    Единица работы.

    Содержимое payload пулом не анализируется: оно целиком передается
    в функцию обработки.
    """

    index: int
    payload: Any
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        """Валидация после инициализации."""
        if self.index < 0:
            raise ValueError("Task index must be >= 0")


@dataclass(frozen=True)
class TaskResult:
    """Результат обработки одной задачи."""

    task: Task
    status: TaskStatus
    outcome: Optional[Any] = None
    error: Optional[BaseException] = None
    duration: float = 0.0
    worker_id: str = ""
    completed_at: datetime = field(default_factory=datetime.now)

    @property
    def task_index(self) -> int:
        return self.task.index

    @property
    def payload(self) -> Any:
        return self.task.payload

    def is_success(self) -> bool:
        """Проверка успешности выполнения."""
        return self.status == TaskStatus.COMPLETED

    def is_failure(self) -> bool:
        """Проверка неудачного выполнения."""
        return self.status == TaskStatus.FAILED
