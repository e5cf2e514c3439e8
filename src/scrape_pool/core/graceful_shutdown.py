"""
Протокол завершения прогона.

ShutdownCoordinator закрывает канал результатов ровно тогда, когда
завершились все воркеры. GracefulShutdown переводит SIGINT/SIGTERM
в отмену прогона: источник перестает выдавать задачи, а воркеры
дорабатывают уже полученные.
"""

import signal
import threading
from enum import Enum
from typing import Dict, Iterable, Optional

from .barrier import CompletionBarrier
from .channel import Channel
from ..utils.logger import get_logger
from ..exceptions import ShutdownError


logger = get_logger(__name__)


class CoordinatorState(Enum):
    """Состояния координатора завершения."""
    WAITING = "waiting"
    CLOSED = "closed"


class ShutdownCoordinator:
    """Ждет барьер завершения воркеров и закрывает канал результатов."""

    def __init__(self, barrier: CompletionBarrier, result_channel: Channel):
        self._barrier = barrier
        self._result_channel = result_channel
        self._lock = threading.Lock()
        self._entered = False
        self.state = CoordinatorState.WAITING

    def run(self) -> None:
        """
        WAITING(count=N) -> CLOSED.

        Raises:
            ShutdownError: При повторном запуске
        """
        with self._lock:
            if self._entered:
                raise ShutdownError("Shutdown coordinator cannot be re-entered")
            self._entered = True

        logger.debug(f"Shutdown coordinator waiting for {self._barrier.parties} workers")
        self._barrier.wait()

        self._result_channel.close()
        self.state = CoordinatorState.CLOSED
        logger.info("All workers finished - result channel closed by coordinator")

    def is_closed(self) -> bool:
        return self.state == CoordinatorState.CLOSED

    def __repr__(self) -> str:
        return f"ShutdownCoordinator(state={self.state.value}, remaining={self._barrier.remaining})"


class GracefulShutdown:
    """
    Обработчики сигналов, запрашивающие отмену прогона.

    Обработчики ставятся и снимаются только из главного потока. Когда
    прогон закончился, а снять их еще некому (wait() не вызван или
    вызван из другого потока), release() переводит их в режим
    пересылки: следующий сигнал возвращает прежний обработчик и
    передается ему.
    """

    def __init__(
        self,
        cancel_event: threading.Event,
        signals: Iterable[int] = (signal.SIGINT, signal.SIGTERM)
    ):
        self.cancel_event = cancel_event
        self._signals = tuple(signals)
        self._previous: Dict[int, object] = {}
        self._released = threading.Event()

    def install(self) -> bool:
        """
        Регистрация обработчиков.

        Returns:
            True если обработчики установлены (только из главного потока)
        """
        if threading.current_thread() is not threading.main_thread():
            logger.warning("Signal handlers can only be installed from the main thread")
            return False

        for signum in self._signals:
            try:
                self._previous[signum] = signal.signal(signum, self._handle)
            except (OSError, ValueError) as e:
                logger.warning(f"Could not register handler for signal {signum}: {e}")

        return bool(self._previous)

    def release(self) -> None:
        """Прогон завершен: снять обработчики или перевести их в пересылку."""
        self._released.set()
        if threading.current_thread() is threading.main_thread():
            self.restore()

    def restore(self) -> None:
        """Восстановление предыдущих обработчиков (из главного потока)."""
        if threading.current_thread() is not threading.main_thread():
            self._released.set()
            return

        for signum, handler in self._previous.items():
            try:
                signal.signal(signum, handler)
            except (OSError, ValueError) as e:
                logger.warning(f"Could not restore handler for signal {signum}: {e}")
        self._previous.clear()

    def _handle(self, signum, frame):
        if self._released.is_set():
            self._forward(signum, frame)
            return

        if self.cancel_event.is_set():
            logger.warning("Shutdown already in progress")
            return

        logger.info(f"Received signal {signum}, initiating graceful shutdown")
        self.cancel_event.set()

    def _forward(self, signum, frame):
        previous = self._previous.get(signum, signal.SIG_DFL)
        self.restore()

        if callable(previous):
            previous(signum, frame)
        elif previous == signal.SIG_DFL:
            signal.raise_signal(signum)

    def is_shutdown_initiated(self) -> bool:
        return self.cancel_event.is_set()

    def __enter__(self) -> 'GracefulShutdown':
        self.install()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.restore()
