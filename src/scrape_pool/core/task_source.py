"""
Источник задач: превращает произвольную последовательность в поток Task.
"""

import threading
from typing import Any, Iterable, Optional

from .channel import Channel
from ..models.task import Task
from ..utils.logger import get_logger


logger = get_logger(__name__)


class TaskSource:
    """
    Источник задач для одного прогона.

    Принимает список, кортеж или генератор; элементы выдаются строго
    в порядке итерации.
    """

    def __init__(self, items: Iterable[Any]):
        if items is None:
            raise TypeError("Task source items must be iterable, got None")
        self._items = items
        self._total: Optional[int] = len(items) if hasattr(items, '__len__') else None
        self.emitted = 0
        self.error: Optional[BaseException] = None

    def feed(self, channel: Channel, cancel_event: Optional[threading.Event] = None) -> None:
        """
        Отправка задач в канал и его закрытие.

        Канал закрывается всегда: после последней задачи, при отмене
        или при ошибке итерации исходной последовательности.
        """
        total = self._total if self._total is not None else "?"
        logger.info("Task feeder started")

        try:
            iterator = iter(self._items)
            while True:
                # Отмена проверяется до next(): элемент генератора не теряется
                if cancel_event is not None and cancel_event.is_set():
                    logger.warning(f"Cancellation requested, stopping after {self.emitted} tasks")
                    break

                try:
                    item = next(iterator)
                except StopIteration:
                    break

                index = self.emitted
                logger.debug(f"Feeding task {index + 1}/{total}: {item}")
                channel.send(Task(index=index, payload=item))
                self.emitted += 1
        except Exception as e:
            self.error = e
            logger.error(f"Task source failed after {self.emitted} tasks: {e}")
        finally:
            channel.close()
            logger.info(f"Task feeder finished - {self.emitted} tasks sent, channel closed")

    def __repr__(self) -> str:
        return f"TaskSource(total={self._total}, emitted={self.emitted})"
