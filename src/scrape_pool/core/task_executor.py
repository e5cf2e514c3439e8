"""
Исполнитель единицы работы для воркеров пула.
"""

import concurrent.futures
import threading
import time
from typing import Any, Callable, Dict, Optional
from dataclasses import dataclass

from ..models.task import Task, TaskResult, TaskStatus
from ..models.worker import WorkerStats, WorkerStatus
from ..utils.logger import get_logger
from ..exceptions import ConfigurationError, TaskTimeoutError


logger = get_logger(__name__)


@dataclass
class ExecutionConfig:
    """Конфигурация выполнения задач."""
    timeout: Optional[float] = None
    log_execution_details: bool = True


class TaskExecutor:
    """
    Выполняет функцию обработки для одной задачи и строит TaskResult.

    Ошибка функции становится данными результата, а не исключением:
    воркер после нее продолжает работу.
    """

    def __init__(self, work: Callable[[Any], Any], config: Optional[ExecutionConfig] = None):
        if not callable(work):
            raise ConfigurationError("Unit-of-work must be callable")

        self.work = work
        self.config = config or ExecutionConfig()

        if self.config.timeout is not None and self.config.timeout <= 0:
            raise ConfigurationError("Execution timeout must be > 0")

        # Вызовы, брошенные по таймауту, по id воркера
        self._abandoned: Dict[str, concurrent.futures.Future] = {}
        self._lock = threading.Lock()

    def execute_task(self, task: Task, worker: WorkerStats) -> TaskResult:
        """
        Выполнение задачи.

        Args:
            task: Задача для выполнения
            worker: Статистика воркера, выполняющего задачу

        Returns:
            Ровно один результат для задачи
        """
        worker.status = WorkerStatus.BUSY
        start_time = time.perf_counter()

        if self.config.log_execution_details:
            logger.info(f"{worker.worker_id} processing: {task.payload}")

        try:
            if self.config.timeout:
                outcome = self._execute_with_timeout(task, worker)
            else:
                outcome = self.work(task.payload)

            result = TaskResult(
                task=task,
                status=TaskStatus.COMPLETED,
                outcome=outcome,
                duration=time.perf_counter() - start_time,
                worker_id=worker.worker_id
            )

            if self.config.log_execution_details:
                logger.info(f"{worker.worker_id} finished: {task.payload} in {result.duration:.3f}s")

        except Exception as e:
            result = TaskResult(
                task=task,
                status=TaskStatus.FAILED,
                error=e,
                duration=time.perf_counter() - start_time,
                worker_id=worker.worker_id
            )

            logger.warning(f"{worker.worker_id} failed: {task.payload} after {result.duration:.3f}s: {e}")

        finally:
            worker.status = WorkerStatus.IDLE

        worker.record(result.duration, result.is_success())
        return result

    def _execute_with_timeout(self, task: Task, worker: WorkerStats) -> Any:
        """
        Выполнение задачи с таймаутом во вспомогательном потоке.

        Зависший вызов прервать нельзя: после таймаута он остается
        за воркером, и settle() ждет его до следующей задачи.
        """
        future: concurrent.futures.Future = concurrent.futures.Future()

        def call():
            if not future.set_running_or_notify_cancel():
                return
            try:
                future.set_result(self.work(task.payload))
            except BaseException as e:
                future.set_exception(e)

        threading.Thread(target=call, name=f"{worker.worker_id}-call", daemon=True).start()

        try:
            return future.result(timeout=self.config.timeout)
        except concurrent.futures.TimeoutError:
            with self._lock:
                self._abandoned[worker.worker_id] = future
            raise TaskTimeoutError(
                f"Task {task.index} timed out after {self.config.timeout}s"
            ) from None

    def settle(self, worker: WorkerStats) -> None:
        """
        Ожидание вызова, брошенного воркером по таймауту.

        Воркер вызывает settle() после отправки результата и до получения
        следующей задачи, поэтому одновременно идет не больше N вызовов.
        """
        with self._lock:
            future = self._abandoned.pop(worker.worker_id, None)

        if future is None:
            return

        worker.status = WorkerStatus.BUSY
        logger.debug(f"{worker.worker_id} waiting for timed-out call to return")
        concurrent.futures.wait([future])
        worker.status = WorkerStatus.IDLE

    def __repr__(self) -> str:
        name = getattr(self.work, '__name__', repr(self.work))
        return f"TaskExecutor(work={name}, timeout={self.config.timeout})"
