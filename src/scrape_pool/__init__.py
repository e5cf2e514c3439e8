"""
Ограниченный конкурентный пул воркеров с двумя каналами и барьером завершения.

Основные компоненты:
- WorkerPool: запуск N воркеров над конечным или потоковым набором задач
- Channel: закрываемый канал (небуферизованный - с обратным давлением)
- CompletionBarrier: ожидание ровно N сигналов завершения воркеров
- ResultCollector: единственный получатель результатов
- fetch_url: HTTP-обработчик для скрапинга списка URL
"""

from .core.worker_pool import WorkerPool, WorkerPoolConfig, PoolRun, run_pool
from .core.channel import Channel
from .core.barrier import CompletionBarrier, Completion
from .core.task_executor import ExecutionConfig
from .models.task import Task, TaskResult, TaskStatus
from .models.summary import RunReport, RunSummary
from .fetch import FetchOutcome, fetch_url, make_fetcher
from .utils.config import Config, load_config
from .utils.logger import get_logger, setup_logging
from .exceptions import (
    ScrapePoolError,
    ConfigurationError,
    ChannelClosedError,
    TaskSourceError,
    TaskTimeoutError,
    PoolTimeoutError,
    WorkerCrashError
)

__version__ = "1.0.0"

__all__ = [
    "WorkerPool",
    "WorkerPoolConfig",
    "PoolRun",
    "run_pool",
    "Channel",
    "CompletionBarrier",
    "Completion",
    "ExecutionConfig",
    "Task",
    "TaskResult",
    "TaskStatus",
    "RunReport",
    "RunSummary",
    "FetchOutcome",
    "fetch_url",
    "make_fetcher",
    "Config",
    "load_config",
    "get_logger",
    "setup_logging",
    "ScrapePoolError",
    "ConfigurationError",
    "ChannelClosedError",
    "TaskSourceError",
    "TaskTimeoutError",
    "PoolTimeoutError",
    "WorkerCrashError"
]
