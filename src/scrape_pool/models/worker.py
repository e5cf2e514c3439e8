"""
Модели воркеров.
"""

from enum import Enum
from typing import Optional
from dataclasses import dataclass
from datetime import datetime


class WorkerStatus(Enum):
    """Статусы воркеров."""
    IDLE = "idle"
    BUSY = "busy"
    STOPPED = "stopped"


@dataclass
class WorkerStats:
    """
    Статистика одного воркера.

    Пишется только потоком своего воркера; пул читает ее после того,
    как барьер завершения отпустил всех воркеров.
    """

    worker_id: str
    status: WorkerStatus = WorkerStatus.IDLE
    tasks_processed: int = 0
    tasks_failed: int = 0
    busy_time: float = 0.0
    started_at: Optional[datetime] = None
    stopped_at: Optional[datetime] = None
    fatal_error: Optional[BaseException] = None

    def start(self):
        """Запуск воркера."""
        self.status = WorkerStatus.IDLE
        self.started_at = datetime.now()

    def stop(self):
        """Остановка воркера."""
        self.status = WorkerStatus.STOPPED
        self.stopped_at = datetime.now()

    def record(self, duration: float, success: bool):
        """Учет обработанной задачи."""
        self.tasks_processed += 1
        self.busy_time += duration
        if not success:
            self.tasks_failed += 1

    def get_uptime(self) -> float:
        """Получение времени работы."""
        if not self.started_at:
            return 0.0
        end = self.stopped_at or datetime.now()
        return (end - self.started_at).total_seconds()

    def get_utilization(self) -> float:
        """Доля времени работы, проведенная за задачами (в процентах)."""
        uptime = self.get_uptime()
        if uptime <= 0:
            return 0.0
        return min(self.busy_time / uptime, 1.0) * 100
