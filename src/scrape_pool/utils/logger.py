"""
Система логирования для пула.

Все модули пишут в свой логгер (get_logger(__name__)); setup_logging
вызывается один раз приложением, например CLI.
"""

import logging
import sys
from typing import List, Optional, Union
from pathlib import Path


LOG_FORMAT = '%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-20s | %(threadName)-15s | %(message)s'
DATE_FORMAT = '%H:%M:%S'

HTTP_LOGGERS = ('urllib3', 'requests')

# Обработчики, установленные предыдущим вызовом setup_logging
_installed_handlers: List[logging.Handler] = []


class PoolFormatter(logging.Formatter):
    """
    Форматтер логов пула.

    Имя потока (worker-N, task-feeder, result-collector) показывает, кто
    пишет строку; миллисекунды нужны, чтобы видеть перекрытие задач.
    """

    def __init__(self, fmt: Optional[str] = None):
        super().__init__(fmt=fmt or LOG_FORMAT, datefmt=DATE_FORMAT)


def quiet_http_loggers(level: int = logging.WARNING):
    """Понижение детальности логов HTTP-библиотек."""
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(level)


def setup_logging(
    level: Union[str, int] = "INFO",
    log_file: Optional[str] = None,
    enable_console: bool = True,
    log_format: Optional[str] = None
) -> List[logging.Handler]:
    """
    Настройка системы логирования.

    Повторный вызов заменяет только свои обработчики; чужие обработчики
    корневого логгера остаются на месте.

    Args:
        level: Уровень логирования (имя или число)
        log_file: Путь к файлу логов
        enable_console: Включить вывод в консоль (stderr, stdout занят отчетом)
        log_format: Кастомный формат логов

    Returns:
        Установленные обработчики
    """
    if isinstance(level, str):
        numeric_level = getattr(logging, level.upper(), logging.INFO)
    else:
        numeric_level = level

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    formatter = PoolFormatter(log_format)

    if enable_console:
        _installed_handlers.append(logging.StreamHandler(sys.stderr))

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        _installed_handlers.append(logging.FileHandler(log_path, encoding='utf-8'))

    for handler in _installed_handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    quiet_http_loggers()
    return list(_installed_handlers)


def get_logger(name: str) -> logging.Logger:
    """Логгер модуля."""
    return logging.getLogger(name)
