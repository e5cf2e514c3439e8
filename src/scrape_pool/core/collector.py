"""
Сборщик результатов: единственный получатель канала результатов.
"""

from typing import Callable, List, Optional

from .barrier import Completion
from .channel import Channel
from ..models.task import TaskResult
from ..utils.logger import get_logger


logger = get_logger(__name__)


class ResultCollector:
    """
    Читает результаты до закрытия канала и один раз отдает всю коллекцию.

    Порядок коллекции - порядок поступления результатов.
    """

    def __init__(
        self,
        channel: Channel,
        completion: Completion,
        on_result: Optional[Callable[[TaskResult], None]] = None,
        on_drained: Optional[Callable[[], None]] = None
    ):
        self._channel = channel
        self._completion = completion
        self._on_result = on_result
        self._on_drained = on_drained
        self._results: List[TaskResult] = []

    def run(self) -> None:
        """Основной цикл сборщика."""
        logger.info("Result collector started")

        for result in self._channel:
            self._results.append(result)
            count = len(self._results)

            if result.is_success():
                logger.info(f"[{count}] SUCCESS {result.payload} in {result.duration:.3f}s")
            else:
                logger.info(f"[{count}] ERROR {result.payload}: {result.error}")

            if self._on_result:
                self._notify(result)

        logger.info(f"Result collector finished - collected {len(self._results)} results")
        if self._on_drained:
            try:
                self._on_drained()
            except Exception as e:
                logger.error(f"Error in on_drained hook: {e}")

        self._completion.deliver(tuple(self._results))

    def _notify(self, result: TaskResult) -> None:
        """Вызов пользовательского callback'а; его ошибка не теряет результат."""
        try:
            self._on_result(result)
        except Exception as e:
            logger.error(f"Error in on_result callback for task {result.task_index}: {e}")

    @property
    def collected(self) -> int:
        return len(self._results)
