"""
Закрываемый канал между компонентами пула.

Канал с нулевой емкостью работает как рандеву: отправитель блокируется,
пока получатель не заберет элемент. Это дает обратное давление
от сборщика результатов к воркерам.
"""

import threading
import time
from collections import deque
from typing import Any, Iterator, Optional

from ..utils.logger import get_logger
from ..exceptions import ChannelClosedError, ChannelTimeoutError, ConfigurationError


logger = get_logger(__name__)


class Channel:
    """Канал с одним классом отправителей и конкурирующими получателями."""

    def __init__(self, capacity: int = 0, name: str = "channel"):
        if capacity < 0:
            raise ConfigurationError(f"Channel capacity must be >= 0, got {capacity}")

        self.capacity = capacity
        self.name = name
        self._items: deque = deque()
        self._closed = False

        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)
        self._taken = threading.Condition(self._lock)

        # Порядковые номера отправленных и полученных элементов
        self._sent = 0
        self._received = 0

        logger.debug(f"Channel {name} created with capacity {capacity}")

    def send(self, item: Any) -> None:
        """
        Отправка элемента в канал.

        Для небуферизованного канала возвращается только после того,
        как элемент забрал получатель.

        Raises:
            ChannelClosedError: Если канал закрыт
        """
        with self._lock:
            limit = max(self.capacity, 1)
            while not self._closed and len(self._items) >= limit:
                self._not_full.wait()

            if self._closed:
                raise ChannelClosedError(f"Send on closed channel {self.name}")

            self._items.append(item)
            self._sent += 1
            ticket = self._sent
            self._not_empty.notify()

            if self.capacity == 0:
                # Получатели дочитывают канал и после закрытия,
                # поэтому ожидание всегда завершится
                while self._received < ticket:
                    self._taken.wait()

    def receive(self, timeout: Optional[float] = None) -> Any:
        """
        Получение следующего элемента.

        Args:
            timeout: Таймаут ожидания (None - ждать бесконечно)

        Returns:
            Элемент канала

        Raises:
            ChannelClosedError: Канал закрыт и все элементы получены
            ChannelTimeoutError: Истек таймаут
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        with self._lock:
            while not self._items:
                if self._closed:
                    raise ChannelClosedError(f"Channel {self.name} is closed and drained")
                if not self._wait(self._not_empty, deadline):
                    raise ChannelTimeoutError(
                        f"No item received from {self.name} within {timeout}s"
                    )

            item = self._items.popleft()
            self._received += 1
            self._not_full.notify()
            if self.capacity == 0:
                self._taken.notify_all()
            return item

    @staticmethod
    def _wait(condition: threading.Condition, deadline: Optional[float]) -> bool:
        """Ожидание условия; False если дедлайн уже прошел."""
        if deadline is None:
            condition.wait()
            return True

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return False
        condition.wait(remaining)
        return True

    def close(self) -> None:
        """
        Закрытие канала.

        Уже отправленные элементы остаются доступны получателям.

        Raises:
            ChannelClosedError: При повторном закрытии
        """
        with self._lock:
            if self._closed:
                raise ChannelClosedError(f"Channel {self.name} is already closed")

            self._closed = True
            self._not_empty.notify_all()
            self._not_full.notify_all()

        logger.debug(f"Channel {self.name} closed after {self._sent} items")

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def sent_count(self) -> int:
        with self._lock:
            return self._sent

    @property
    def received_count(self) -> int:
        with self._lock:
            return self._received

    def __iter__(self) -> Iterator[Any]:
        """Итерация до закрытия и опустошения канала."""
        while True:
            try:
                yield self.receive()
            except ChannelClosedError:
                return

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"Channel(name={self.name}, capacity={self.capacity}, pending={len(self)}, {state})"
