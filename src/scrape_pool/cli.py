"""
Консольный скрапер: проверка списка URL пулом воркеров.
"""

import argparse
import itertools
import json
import sys
from pathlib import Path
from typing import List, Optional

from .core.worker_pool import WorkerPool
from .fetch import make_fetcher
from .models.summary import RunSummary
from .models.task import TaskResult
from .utils.config import Config, load_config, load_config_from_env
from .utils.logger import get_logger, setup_logging
from .exceptions import ConfigurationError


logger = get_logger(__name__)


def format_result(result: TaskResult) -> str:
    """Строка о результате одного URL."""
    if result.is_failure():
        return (f"ERROR - URL: {result.payload} | Error: {result.error} | "
                f"Time: {result.duration:.3f}s")

    outcome = result.outcome
    return (f"SUCCESS - URL: {outcome.url} | Status: {outcome.status_code} | "
            f"Length: {outcome.content_length} bytes | Time: {result.duration:.3f}s")


def format_summary(summary: RunSummary) -> str:
    """Итоговая сводка прогона."""
    lines = [
        "=== Worker Pool Summary ===",
        f"Number of workers: {summary.workers}",
        f"Total URLs processed: {summary.total_tasks}",
        f"Total time: {summary.wall_time:.3f}s",
        f"Successful requests: {summary.succeeded}",
        f"Failed requests: {summary.failed}",
        "",
        "=== Processing Time Analysis ===",
        f"Total processing time (sum of all requests): {summary.total_task_time:.3f}s",
        f"Wall clock time (concurrent execution): {summary.wall_time:.3f}s",
        f"Approximate speedup: {summary.speedup:.2f}x",
        f"Parallelism efficiency: {summary.parallelism_efficiency:.2f}% "
        f"(how well we utilized {summary.workers} workers)",
    ]
    return "\n".join(lines)


def read_urls(urls: List[str], file_path: Optional[str]) -> List[str]:
    """URL из аргументов и файла (по одному в строке, # - комментарий)."""
    collected = list(urls)
    if file_path:
        for line in Path(file_path).read_text(encoding='utf-8').splitlines():
            line = line.strip()
            if line and not line.startswith('#'):
                collected.append(line)
    return collected


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scrape-pool",
        description="Проверка списка URL пулом конкурентных воркеров"
    )
    parser.add_argument("urls", nargs="*", help="URL для обработки")
    parser.add_argument("--file", "-f", help="Файл со списком URL")
    parser.add_argument("--workers", "-w", type=int, help="Количество воркеров")
    parser.add_argument("--config", "-c", help="Файл конфигурации (.yaml или .json)")
    parser.add_argument("--timeout", type=float, dest="request_timeout",
                        help="Таймаут HTTP-запроса в секундах")
    parser.add_argument("--task-timeout", type=float,
                        help="Таймаут обработки одного URL в секундах")
    parser.add_argument("--log-level", help="Уровень логирования")
    parser.add_argument("--json", action="store_true", help="Сводка в формате JSON")
    return parser


def resolve_config(args: argparse.Namespace) -> Config:
    """Файл < переменные окружения < аргументы командной строки."""
    config = load_config(args.config) if args.config else Config()
    config = load_config_from_env(config)
    config = config.update(
        workers=args.workers,
        request_timeout=args.request_timeout,
        task_timeout=args.task_timeout,
        log_level=args.log_level,
        handle_signals=True
    )
    config.validate()
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Точка входа CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = resolve_config(args)
    except (ConfigurationError, OSError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    try:
        urls = read_urls(args.urls, args.file)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Cannot read URL file: {e}", file=sys.stderr)
        return 2

    try:
        setup_logging(config.log_level, config.log_file)
    except OSError as e:
        print(f"Cannot open log file: {e}", file=sys.stderr)
        return 2

    if not urls:
        parser.error("no URLs given (pass them as arguments or with --file)")

    counter = itertools.count(1)

    def print_result(result: TaskResult):
        print(f"[{next(counter)}] {format_result(result)}", flush=True)

    pool = WorkerPool(make_fetcher(config.request_timeout), config.to_pool_config())
    report = pool.run(urls, on_result=print_result)

    if args.json:
        print(json.dumps(report.summary.to_dict(), indent=2))
    else:
        print()
        print(format_summary(report.summary))

    return 0


if __name__ == "__main__":
    sys.exit(main())
