"""
Базовый пример использования пула скрапинга.
"""

import random
import time

from scrape_pool import WorkerPool, WorkerPoolConfig, ExecutionConfig, run_pool, setup_logging


def simulated_request(url: str) -> int:
    """Имитация HTTP-запроса: случайная задержка и иногда ошибка."""
    time.sleep(random.uniform(0.05, 0.3))
    if "fail" in url:
        raise ConnectionError(f"Cannot reach {url}")
    return len(url)


def main():
    setup_logging("WARNING")

    urls = [f"https://site-{i}.example.com" for i in range(10)]
    urls.insert(3, "https://fail.example.com")

    print("=== Пример 1: run_pool ===")
    report = run_pool(urls, simulated_request, workers=4)
    for result in report:
        status = "ok" if result.is_success() else f"error: {result.error}"
        print(f"  {result.payload} -> {status} ({result.duration:.3f}s, {result.worker_id})")

    summary = report.summary
    print(f"  Всего: {summary.total_tasks}, ошибок: {summary.failed}, "
          f"ускорение {summary.speedup:.2f}x")

    print("\n=== Пример 2: потоковый источник и отмена ===")
    config = WorkerPoolConfig(workers=3, execution_config=ExecutionConfig(timeout=1.0))
    pool = WorkerPool(simulated_request, config)

    def endless_urls():
        i = 0
        while True:
            yield f"https://stream-{i}.example.com"
            i += 1

    run = pool.submit(endless_urls(), on_result=lambda r: print(f"  [{r.task_index}] {r.outcome}"))
    time.sleep(0.5)
    run.cancel()

    report = run.wait(timeout=5.0)
    print(f"  Отменено после {len(report)} задач")


if __name__ == "__main__":
    main()
