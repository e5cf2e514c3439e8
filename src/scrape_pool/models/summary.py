"""
Итоги прогона пула.
"""

from typing import Dict, Optional, Tuple, Any, Sequence
from dataclasses import dataclass, field

from .task import TaskResult
from .worker import WorkerStats
from ..utils.monitoring import ResourceUsage


@dataclass(frozen=True)
class RunSummary:
    """Сводная статистика одного прогона."""

    workers: int
    total_tasks: int
    succeeded: int
    failed: int
    wall_time: float
    total_task_time: float
    tasks_per_worker: Dict[str, int] = field(default_factory=dict)
    resources: Optional[ResourceUsage] = None

    @classmethod
    def from_results(
        cls,
        results: Sequence[TaskResult],
        workers: int,
        wall_time: float,
        worker_stats: Sequence[WorkerStats] = (),
        resources: Optional[ResourceUsage] = None
    ) -> 'RunSummary':
        """Расчет сводки по финальной коллекции результатов."""
        succeeded = sum(1 for r in results if r.is_success())
        return cls(
            workers=workers,
            total_tasks=len(results),
            succeeded=succeeded,
            failed=len(results) - succeeded,
            wall_time=wall_time,
            total_task_time=sum(r.duration for r in results),
            tasks_per_worker={s.worker_id: s.tasks_processed for s in worker_stats},
            resources=resources
        )

    @property
    def speedup(self) -> float:
        """Во сколько раз прогон быстрее последовательной обработки."""
        if self.wall_time <= 0:
            return 0.0
        return self.total_task_time / self.wall_time

    @property
    def parallelism_efficiency(self) -> float:
        """
        Диагностический показатель загрузки воркеров, в процентах.

        Сумма длительностей задач / (время прогона * число воркеров).
        """
        if self.wall_time <= 0 or self.workers <= 0:
            return 0.0
        return self.total_task_time / (self.wall_time * self.workers) * 100

    @property
    def success_rate(self) -> float:
        if self.total_tasks == 0:
            return 0.0
        return self.succeeded / self.total_tasks * 100

    def to_dict(self) -> Dict[str, Any]:
        """Преобразование в словарь."""
        return {
            'workers': self.workers,
            'total_tasks': self.total_tasks,
            'succeeded': self.succeeded,
            'failed': self.failed,
            'success_rate': self.success_rate,
            'wall_time': self.wall_time,
            'total_task_time': self.total_task_time,
            'speedup': self.speedup,
            'parallelism_efficiency': self.parallelism_efficiency,
            'tasks_per_worker': dict(self.tasks_per_worker),
            'resources': self.resources.to_dict() if self.resources else None
        }


@dataclass(frozen=True)
class RunReport:
    """Финальная коллекция результатов (в порядке поступления) и сводка."""

    results: Tuple[TaskResult, ...]
    summary: RunSummary

    @property
    def failures(self) -> Tuple[TaskResult, ...]:
        return tuple(r for r in self.results if r.is_failure())

    @property
    def successes(self) -> Tuple[TaskResult, ...]:
        return tuple(r for r in self.results if r.is_success())

    def in_submission_order(self) -> Tuple[TaskResult, ...]:
        """Результаты, упорядоченные по позиции задачи в источнике."""
        return tuple(sorted(self.results, key=lambda r: r.task_index))

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self):
        return iter(self.results)
