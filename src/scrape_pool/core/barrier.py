"""
Барьер завершения воркеров и одноразовый сигнал готовности.
"""

import threading
import time
from typing import Any, Hashable, Iterable, Optional, Set

from ..utils.logger import get_logger
from ..exceptions import BarrierError, CompletionError, ConfigurationError


logger = get_logger(__name__)


class CompletionBarrier:
    """
    Счетный барьер: ждет ровно N сигналов, по одному от каждого участника.

    Участники заранее известны; повторный или чужой сигнал считается ошибкой.
    """

    def __init__(self, parties: Iterable[Hashable]):
        self._expected: Set[Hashable] = set(parties)
        if not self._expected:
            raise ConfigurationError("Completion barrier needs at least one party")

        self.parties = len(self._expected)
        self._arrived: Set[Hashable] = set()
        self._condition = threading.Condition()

    def done(self, party: Hashable) -> int:
        """
        Сигнал завершения участника.

        Returns:
            Сколько участников еще не завершилось

        Raises:
            BarrierError: Неизвестный участник или повторный сигнал
        """
        with self._condition:
            if party not in self._expected:
                raise BarrierError(f"Unknown barrier party: {party!r}")
            if party in self._arrived:
                raise BarrierError(f"Party {party!r} already signalled completion")

            self._arrived.add(party)
            remaining = self.parties - len(self._arrived)
            logger.debug(f"{party} finished, {remaining} still running")

            if remaining == 0:
                self._condition.notify_all()
            return remaining

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Ожидание всех участников.

        Returns:
            True если все завершились, False если таймаут
        """
        with self._condition:
            return self._condition.wait_for(
                lambda: len(self._arrived) == self.parties,
                timeout=timeout
            )

    @property
    def remaining(self) -> int:
        with self._condition:
            return self.parties - len(self._arrived)

    def __repr__(self) -> str:
        return f"CompletionBarrier(parties={self.parties}, remaining={self.remaining})"


class Completion:
    """Одноразовый сигнал, передающий значение ровно один раз."""

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._value: Any = None
        self.delivered_at: Optional[float] = None

    def deliver(self, value: Any) -> None:
        """
        Доставка значения.

        Raises:
            CompletionError: Значение уже было доставлено
        """
        with self._lock:
            if self._event.is_set():
                raise CompletionError("Completion already delivered")
            self._value = value
            self.delivered_at = time.perf_counter()
            self._event.set()

    def wait(self, timeout: Optional[float] = None) -> Any:
        """
        Ожидание значения.

        Raises:
            CompletionError: Таймаут ожидания
        """
        if not self._event.wait(timeout):
            raise CompletionError(f"Completion not delivered within {timeout}s")
        return self._value

    def is_delivered(self) -> bool:
        return self._event.is_set()
