"""
Менеджер воркеров фиксированного размера.
"""

import threading
from typing import List, Optional

from .barrier import CompletionBarrier
from .channel import Channel
from .task_executor import TaskExecutor
from ..models.worker import WorkerStats
from ..utils.logger import get_logger
from ..exceptions import ConfigurationError, ScrapePoolError


logger = get_logger(__name__)


class WorkerManager:
    """
    Запускает N одинаковых воркеров, конкурирующих за общий канал задач.

    Каждый воркер отправляет ровно один результат на задачу и
    ровно один раз сигнализирует барьеру о своем завершении.
    """

    def __init__(self, size: int, executor: TaskExecutor):
        if not isinstance(size, int) or isinstance(size, bool) or size < 1:
            raise ConfigurationError(f"Worker count must be a positive integer, got {size!r}")

        self.size = size
        self._executor = executor
        self._workers: List[WorkerStats] = [
            WorkerStats(worker_id=f"worker-{i}") for i in range(1, size + 1)
        ]
        self._threads: List[threading.Thread] = []

    @property
    def worker_ids(self) -> List[str]:
        return [w.worker_id for w in self._workers]

    def start(self, task_channel: Channel, result_channel: Channel, barrier: CompletionBarrier):
        """Запуск потоков воркеров."""
        if self._threads:
            raise ScrapePoolError("WorkerManager has already been started")

        logger.info(f"Starting worker pool with {self.size} workers")

        for worker in self._workers:
            thread = threading.Thread(
                target=self._worker_loop,
                args=(worker, task_channel, result_channel, barrier),
                name=worker.worker_id,
                daemon=True
            )
            self._threads.append(thread)
            thread.start()

    def _worker_loop(
        self,
        worker: WorkerStats,
        task_channel: Channel,
        result_channel: Channel,
        barrier: CompletionBarrier
    ):
        """Основной цикл воркера."""
        worker.start()
        logger.info(f"{worker.worker_id} started")

        try:
            for task in task_channel:
                result = self._executor.execute_task(task, worker)
                result_channel.send(result)
                self._executor.settle(worker)
        except Exception as e:
            worker.fatal_error = e
            logger.exception(f"Fatal error in {worker.worker_id}: {e}")
        finally:
            self._executor.settle(worker)
            worker.stop()
            logger.info(
                f"{worker.worker_id} finished - no more tasks "
                f"({worker.tasks_processed} processed, {worker.tasks_failed} failed)"
            )
            barrier.done(worker.worker_id)

    def join(self, timeout: Optional[float] = None) -> bool:
        """Ожидание потоков воркеров; False если кто-то еще жив."""
        for thread in self._threads:
            thread.join(timeout=timeout)
        return not any(t.is_alive() for t in self._threads)

    def get_workers(self) -> List[WorkerStats]:
        """Получение статистики воркеров."""
        return list(self._workers)

    def __repr__(self) -> str:
        alive = sum(1 for t in self._threads if t.is_alive())
        return f"WorkerManager(size={self.size}, alive={alive})"
