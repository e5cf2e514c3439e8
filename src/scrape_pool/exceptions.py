"""
Исключения для пула скрапинга.
"""


class ScrapePoolError(Exception):
    """Базовое исключение для пула."""
    pass


class ConfigurationError(ScrapePoolError):
    """Ошибка конфигурации (до запуска воркеров)."""
    pass


class ChannelError(ScrapePoolError):
    """Ошибка канала."""
    pass


class ChannelClosedError(ChannelError):
    """Канал закрыт: отправка невозможна или все элементы уже получены."""
    pass


class ChannelTimeoutError(ChannelError):
    """Таймаут ожидания элемента в канале."""
    pass


class BarrierError(ScrapePoolError):
    """Нарушение протокола барьера завершения."""
    pass


class CompletionError(ScrapePoolError):
    """Повторная доставка или таймаут ожидания одноразового сигнала."""
    pass


class ShutdownError(ScrapePoolError):
    """Ошибка координатора завершения."""
    pass


class TaskSourceError(ScrapePoolError):
    """Источник задач завершился с ошибкой."""
    pass


class TaskTimeoutError(ScrapePoolError):
    """Задача не уложилась в таймаут."""
    pass


class PoolTimeoutError(ScrapePoolError):
    """Истек таймаут ожидания результатов прогона."""
    pass


class WorkerCrashError(ScrapePoolError):
    """Воркер завершился из-за ошибки вне функции обработки."""
    pass
