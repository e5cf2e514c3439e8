"""
Основной класс пула: связывает источник, воркеров, координатор и сборщик.
"""

import dataclasses
import threading
import time
from typing import Any, Callable, Iterable, List, Optional
from dataclasses import dataclass, field

from .barrier import Completion, CompletionBarrier
from .channel import Channel
from .collector import ResultCollector
from .graceful_shutdown import GracefulShutdown, ShutdownCoordinator
from .task_executor import ExecutionConfig, TaskExecutor
from .task_source import TaskSource
from .worker_manager import WorkerManager

from ..models.task import TaskResult
from ..models.worker import WorkerStats
from ..models.summary import RunReport, RunSummary
from ..utils.logger import get_logger
from ..utils.monitoring import ResourceSnapshot, ResourceUsage
from ..exceptions import (
    CompletionError,
    ConfigurationError,
    PoolTimeoutError,
    TaskSourceError,
    WorkerCrashError
)


logger = get_logger(__name__)


@dataclass
class WorkerPoolConfig:
    """Конфигурация пула воркеров."""

    workers: int = 4
    task_buffer: int = 0  # 0 - небуферизованный канал задач
    result_buffer: int = 0  # 0 - небуферизованная передача результатов
    handle_signals: bool = False  # SIGINT/SIGTERM отменяют прогон
    execution_config: ExecutionConfig = field(default_factory=ExecutionConfig)

    def validate(self) -> None:
        """Валидация до запуска каких-либо потоков."""
        errors = []

        def is_int(value):
            return isinstance(value, int) and not isinstance(value, bool)

        if not is_int(self.workers) or self.workers < 1:
            errors.append(f"workers must be a positive integer (got {self.workers!r})")

        if not is_int(self.task_buffer) or self.task_buffer < 0:
            errors.append(f"task_buffer must be an integer >= 0 (got {self.task_buffer!r})")

        if not is_int(self.result_buffer) or self.result_buffer < 0:
            errors.append(f"result_buffer must be an integer >= 0 (got {self.result_buffer!r})")

        timeout = self.execution_config.timeout
        if timeout is not None and (
            not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout <= 0
        ):
            errors.append(f"execution timeout must be a number > 0 (got {timeout!r})")

        if errors:
            raise ConfigurationError(f"Invalid pool configuration: {'; '.join(errors)}")


class PoolRun:
    """Запущенный прогон пула."""

    def __init__(
        self,
        manager: WorkerManager,
        source: TaskSource,
        completion: Completion,
        cancel_event: threading.Event,
        shutdown: Optional[GracefulShutdown] = None
    ):
        self._manager = manager
        self._source = source
        self._completion = completion
        self._cancel_event = cancel_event
        self._shutdown = shutdown
        self._report: Optional[RunReport] = None
        self._crashed: List[WorkerStats] = []
        self._lock = threading.Lock()

        self._threads: List[threading.Thread] = []
        self._resources_start = ResourceSnapshot.take()
        self._resources_running: Optional[ResourceSnapshot] = None
        self.started_at = time.perf_counter()

    def _start_thread(self, target: Callable, name: str):
        thread = threading.Thread(target=target, name=name, daemon=True)
        self._threads.append(thread)
        thread.start()

    def cancel(self) -> None:
        """
        Запрос отмены: источник перестает выдавать задачи.

        Уже полученные воркерами задачи дорабатываются, их результаты
        попадают в итоговую коллекцию.
        """
        if not self._cancel_event.is_set():
            logger.info("Cancellation requested")
            self._cancel_event.set()

    def is_cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def done(self) -> bool:
        """Доставлена ли итоговая коллекция."""
        return self._completion.is_delivered()

    def wait(self, timeout: Optional[float] = None) -> RunReport:
        """
        Ожидание итоговой коллекции результатов.

        Args:
            timeout: Таймаут ожидания; сам прогон при этом продолжается

        Returns:
            Отчет с результатами в порядке поступления

        Raises:
            PoolTimeoutError: Истек таймаут ожидания
            TaskSourceError: Итерация исходной последовательности упала
            WorkerCrashError: Воркер упал вне функции обработки
        """
        with self._lock:
            if self._report is None:
                self._report = self._finish(timeout)

        if self._crashed:
            error = WorkerCrashError(
                f"{len(self._crashed)} worker(s) crashed: "
                + "; ".join(f"{w.worker_id}: {w.fatal_error}" for w in self._crashed)
            )
            error.report = self._report
            raise error from self._crashed[0].fatal_error

        if self._source.error is not None:
            error = TaskSourceError(f"Task source failed: {self._source.error}")
            error.report = self._report
            raise error from self._source.error

        return self._report

    def _finish(self, timeout: Optional[float]) -> RunReport:
        try:
            results = self._completion.wait(timeout)
        except CompletionError:
            raise PoolTimeoutError(f"Run did not complete within {timeout}s") from None

        wall_time = self._completion.delivered_at - self.started_at

        # Барьер уже пройден, потоки воркеров завершаются
        self._manager.join()
        for thread in self._threads:
            thread.join()

        if self._shutdown is not None:
            self._shutdown.restore()

        workers = self._manager.get_workers()
        self._crashed = [w for w in workers if w.fatal_error is not None]

        samples = [self._resources_running] if self._resources_running else []
        resources = ResourceUsage.between(self._resources_start, ResourceSnapshot.take(), *samples)
        summary = RunSummary.from_results(
            results,
            workers=self._manager.size,
            wall_time=wall_time,
            worker_stats=workers,
            resources=resources
        )

        logger.info(
            f"Run finished: {summary.total_tasks} tasks, {summary.succeeded} succeeded, "
            f"{summary.failed} failed in {summary.wall_time:.3f}s "
            f"(efficiency {summary.parallelism_efficiency:.1f}%)"
        )
        return RunReport(results=results, summary=summary)

    def __repr__(self) -> str:
        state = "done" if self.done() else "running"
        return f"PoolRun(workers={self._manager.size}, state={state})"


class WorkerPool:
    """
    Пул из N воркеров для конечного или потокового набора задач.

    Каждый прогон создает свои каналы, барьер и сигнал завершения:
    N воркеров, источник, сборщик и координатор - всего N+3 потока.
    """

    def __init__(
        self,
        work: Callable[[Any], Any],
        config: Optional[WorkerPoolConfig] = None,
        workers: Optional[int] = None
    ):
        self.config = config or WorkerPoolConfig()
        if workers is not None:
            self.config = dataclasses.replace(self.config, workers=workers)

        self.config.validate()
        self._executor = TaskExecutor(work, self.config.execution_config)

        logger.debug(f"WorkerPool initialized with config: {self.config}")

    def submit(
        self,
        tasks: Iterable[Any],
        on_result: Optional[Callable[[TaskResult], None]] = None
    ) -> PoolRun:
        """
        Запуск прогона без ожидания.

        Args:
            tasks: Конечная последовательность или генератор элементов
            on_result: Callback на каждый результат по мере поступления

        Returns:
            Дескриптор прогона
        """
        source = TaskSource(tasks)
        task_channel = Channel(self.config.task_buffer, name="tasks")
        result_channel = Channel(self.config.result_buffer, name="results")

        manager = WorkerManager(self.config.workers, self._executor)
        barrier = CompletionBarrier(manager.worker_ids)
        completion = Completion()
        cancel_event = threading.Event()

        shutdown = None
        if self.config.handle_signals:
            shutdown = GracefulShutdown(cancel_event)
            shutdown.install()

        # Обработчики сигналов отпускаются, как только результаты собраны
        collector = ResultCollector(
            result_channel,
            completion,
            on_result,
            on_drained=shutdown.release if shutdown else None
        )
        coordinator = ShutdownCoordinator(barrier, result_channel)

        run = PoolRun(manager, source, completion, cancel_event, shutdown)

        run._start_thread(lambda: source.feed(task_channel, cancel_event), "task-feeder")
        run._start_thread(collector.run, "result-collector")
        manager.start(task_channel, result_channel, barrier)
        run._start_thread(coordinator.run, "shutdown-coordinator")
        run._resources_running = ResourceSnapshot.take()

        return run

    def run(
        self,
        tasks: Iterable[Any],
        on_result: Optional[Callable[[TaskResult], None]] = None,
        timeout: Optional[float] = None
    ) -> RunReport:
        """Запуск прогона и ожидание итоговой коллекции."""
        return self.submit(tasks, on_result=on_result).wait(timeout)

    @property
    def workers(self) -> int:
        return self.config.workers

    def __repr__(self) -> str:
        return f"WorkerPool(workers={self.config.workers}, executor={self._executor})"


def run_pool(
    tasks: Iterable[Any],
    work: Callable[[Any], Any],
    workers: int = 4,
    task_timeout: Optional[float] = None,
    on_result: Optional[Callable[[TaskResult], None]] = None,
    timeout: Optional[float] = None
) -> RunReport:
    """
    Обработка задач пулом из workers воркеров.

    Пример:
        report = run_pool(urls, fetch_url, workers=4)
    """
    config = WorkerPoolConfig(
        workers=workers,
        execution_config=ExecutionConfig(timeout=task_timeout)
    )
    return WorkerPool(work, config).run(tasks, on_result=on_result, timeout=timeout)
