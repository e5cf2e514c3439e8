"""
Система конфигурации для пула.
"""

import dataclasses
import json
import os
from typing import Any, Dict, Optional, Union
from dataclasses import dataclass, asdict, fields
from pathlib import Path

import yaml

from ..core.task_executor import ExecutionConfig
from ..core.worker_pool import WorkerPoolConfig
from ..exceptions import ConfigurationError


ENV_PREFIX = "SCRAPE_POOL_"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class Config:
    """Основная конфигурация пула и CLI."""

    # Параметры пула
    workers: int = 4
    task_buffer: int = 0
    result_buffer: int = 0
    task_timeout: Optional[float] = None
    handle_signals: bool = False

    # HTTP
    request_timeout: float = 10.0

    # Логирование
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Преобразование в словарь."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Config':
        """Создание из словаря; неизвестные ключи - ошибка."""
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(str(key) for key in set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)

    def validate(self) -> bool:
        """Валидация конфигурации."""
        errors = []

        if not _is_int(self.workers) or self.workers < 1:
            errors.append("workers must be a positive integer")

        for name in ('task_buffer', 'result_buffer'):
            value = getattr(self, name)
            if not _is_int(value) or value < 0:
                errors.append(f"{name} must be an integer >= 0")

        if self.task_timeout is not None and (not _is_number(self.task_timeout) or self.task_timeout <= 0):
            errors.append("task_timeout must be a number > 0")

        if not _is_number(self.request_timeout) or self.request_timeout <= 0:
            errors.append("request_timeout must be a number > 0")

        if not isinstance(self.handle_signals, bool):
            errors.append("handle_signals must be true or false")

        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            errors.append(f"unknown log_level {self.log_level!r}")

        if self.log_file is not None and not isinstance(self.log_file, str):
            errors.append("log_file must be a path string")

        if errors:
            raise ConfigurationError(f"Configuration validation failed: {'; '.join(errors)}")

        return True

    def update(self, **kwargs) -> 'Config':
        """Копия конфигурации с новыми значениями (None игнорируется)."""
        changes = {k: v for k, v in kwargs.items() if v is not None}
        return Config.from_dict({**self.to_dict(), **changes})

    def to_pool_config(self) -> WorkerPoolConfig:
        """Конфигурация для WorkerPool."""
        return WorkerPoolConfig(
            workers=self.workers,
            task_buffer=self.task_buffer,
            result_buffer=self.result_buffer,
            handle_signals=self.handle_signals,
            execution_config=ExecutionConfig(timeout=self.task_timeout)
        )


def load_config(file_path: Union[str, Path]) -> Config:
    """
    Загрузка конфигурации из файла.

    Args:
        file_path: Путь к файлу конфигурации (.yaml, .yml или .json)

    Returns:
        Проверенный объект конфигурации
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    suffix = file_path.suffix.lower()
    if suffix not in ('.yaml', '.yml', '.json'):
        raise ConfigurationError(f"Unsupported configuration file format: {file_path.suffix}")

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            if suffix == '.json':
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (yaml.YAMLError, ValueError) as e:
        # json.JSONDecodeError и UnicodeDecodeError - подклассы ValueError
        raise ConfigurationError(f"Cannot parse configuration file {file_path}: {e}") from e

    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file must contain a mapping: {file_path}")

    config = Config.from_dict(data)
    config.validate()

    return config


def save_config(config: Config, file_path: Union[str, Path], format: Optional[str] = None):
    """
    Сохранение конфигурации в файл.

    Args:
        config: Объект конфигурации
        file_path: Путь к файлу
        format: 'yaml' или 'json'; по умолчанию определяется по расширению
    """
    file_path = Path(file_path)
    if format is None:
        format = 'json' if file_path.suffix.lower() == '.json' else 'yaml'

    format = format.lower()
    if format not in ('yaml', 'json'):
        raise ConfigurationError(f"Unsupported format: {format}")

    file_path.parent.mkdir(parents=True, exist_ok=True)

    with open(file_path, 'w', encoding='utf-8') as f:
        if format == 'yaml':
            yaml.safe_dump(config.to_dict(), f, default_flow_style=False, indent=2)
        else:
            json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def load_config_from_env(base: Optional[Config] = None) -> Config:
    """
    Загрузка конфигурации из переменных окружения SCRAPE_POOL_*.

    Например SCRAPE_POOL_WORKERS=8, SCRAPE_POOL_TASK_TIMEOUT=5.
    """
    config = base or Config()
    converters = {
        'workers': int,
        'task_buffer': int,
        'result_buffer': int,
        'task_timeout': float,
        'request_timeout': float,
        'handle_signals': _parse_bool,
        'log_level': str,
        'log_file': str,
    }

    changes = {}
    for name, convert in converters.items():
        raw = os.getenv(ENV_PREFIX + name.upper())
        if raw is None or raw == "":
            continue
        try:
            changes[name] = convert(raw)
        except ValueError as e:
            raise ConfigurationError(f"Invalid value for {ENV_PREFIX}{name.upper()}: {raw!r}") from e

    return dataclasses.replace(config, **changes)


def merge_configs(base_config: Config, override_config: Config) -> Config:
    """
    Объединение двух конфигураций.

    Значения override, отличные от значений по умолчанию, перекрывают base.
    """
    defaults = Config().to_dict()
    overrides = {
        key: value
        for key, value in override_config.to_dict().items()
        if value != defaults[key]
    }
    return dataclasses.replace(base_config, **overrides)
