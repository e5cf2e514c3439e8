"""
HTTP-обработчик: единица работы для скрапинга списка URL.
"""

import functools
from typing import Callable
from dataclasses import dataclass

import requests

from .utils.logger import get_logger


logger = get_logger(__name__)

DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class FetchOutcome:
    """Результат HTTP-запроса к одному URL."""
    url: str
    status_code: int
    content_length: int  # -1 если сервер не сообщил размер


def fetch_url(url: str, timeout: float = DEFAULT_TIMEOUT) -> FetchOutcome:
    """
    GET-запрос к URL без загрузки тела ответа.

    HTTP-статусы ошибок (404, 500) - это обычный результат; исключение
    возникает только если ответа нет вовсе.

    Raises:
        requests.RequestException: Сетевая ошибка или таймаут
    """
    response = requests.get(url, timeout=timeout, stream=True)
    try:
        header = response.headers.get('Content-Length')
        try:
            content_length = int(header) if header is not None else -1
        except ValueError:
            content_length = -1

        logger.debug(f"GET {url} -> {response.status_code} ({content_length} bytes)")
        return FetchOutcome(
            url=url,
            status_code=response.status_code,
            content_length=content_length
        )
    finally:
        response.close()


def make_fetcher(timeout: float = DEFAULT_TIMEOUT) -> Callable[[str], FetchOutcome]:
    """Единица работы для пула с фиксированным таймаутом запроса."""
    return functools.partial(fetch_url, timeout=timeout)
