"""
Основные компоненты пула.
"""

from .channel import Channel
from .barrier import CompletionBarrier, Completion
from .task_source import TaskSource
from .task_executor import TaskExecutor, ExecutionConfig
from .worker_manager import WorkerManager
from .collector import ResultCollector
from .graceful_shutdown import ShutdownCoordinator, CoordinatorState, GracefulShutdown
from .worker_pool import WorkerPool, WorkerPoolConfig, PoolRun, run_pool

__all__ = [
    "Channel",
    "CompletionBarrier",
    "Completion",
    "TaskSource",
    "TaskExecutor",
    "ExecutionConfig",
    "WorkerManager",
    "ResultCollector",
    "ShutdownCoordinator",
    "CoordinatorState",
    "GracefulShutdown",
    "WorkerPool",
    "WorkerPoolConfig",
    "PoolRun",
    "run_pool"
]
