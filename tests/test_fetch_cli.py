"""
Тесты HTTP-обработчика и консольного скрапера.
"""

import json
import logging
from unittest.mock import Mock, patch

import pytest
import requests

from scrape_pool import run_pool
from scrape_pool.cli import main, format_result, read_urls
from scrape_pool.fetch import FetchOutcome, fetch_url, make_fetcher
from scrape_pool.models.task import Task, TaskResult, TaskStatus


@pytest.fixture(autouse=True)
def restore_root_logging():
    """CLI перенастраивает корневой логгер; возвращаем как было."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def make_response(status_code=200, headers=None):
    response = Mock()
    response.status_code = status_code
    response.headers = headers if headers is not None else {}
    return response


def fake_fetcher(timeout=10.0):
    def fetch(url):
        if "broken" in url:
            raise requests.ConnectionError(f"cannot connect to {url}")
        return FetchOutcome(url=url, status_code=200, content_length=128)
    return fetch


class TestFetchUrl:
    """Тесты HTTP-запроса."""

    @patch('scrape_pool.fetch.requests.get')
    def test_status_and_length(self, mock_get):
        """Тест статуса и Content-Length."""
        response = make_response(200, {'Content-Length': '1256'})
        mock_get.return_value = response

        outcome = fetch_url("https://example.com", timeout=3.0)

        assert outcome == FetchOutcome("https://example.com", 200, 1256)
        mock_get.assert_called_once_with("https://example.com", timeout=3.0, stream=True)
        response.close.assert_called_once()

    @patch('scrape_pool.fetch.requests.get')
    def test_missing_content_length(self, mock_get):
        """Тест ответа без Content-Length."""
        mock_get.return_value = make_response(404)

        outcome = fetch_url("https://example.com/missing")

        assert outcome.status_code == 404
        assert outcome.content_length == -1

    @patch('scrape_pool.fetch.requests.get')
    def test_invalid_content_length(self, mock_get):
        """Тест нечислового Content-Length."""
        mock_get.return_value = make_response(200, {'Content-Length': 'lots'})
        assert fetch_url("https://example.com").content_length == -1

    @patch('scrape_pool.fetch.requests.get')
    def test_network_error_propagates(self, mock_get):
        """Тест сетевой ошибки."""
        mock_get.side_effect = requests.Timeout("read timed out")

        with pytest.raises(requests.Timeout):
            fetch_url("https://slow.example.com")

    @patch('scrape_pool.fetch.requests.get')
    def test_make_fetcher_timeout(self, mock_get):
        """Тест фиксированного таймаута запроса."""
        mock_get.return_value = make_response(200)

        make_fetcher(timeout=1.5)("https://example.com")

        assert mock_get.call_args.kwargs['timeout'] == 1.5

    @patch('scrape_pool.fetch.requests.get')
    def test_fetch_in_pool(self, mock_get):
        """Тест: сетевые ошибки становятся неудачными результатами."""
        def fake_get(url, timeout, stream):
            if "down" in url:
                raise requests.ConnectionError("connection refused")
            return make_response(200, {'Content-Length': '10'})

        mock_get.side_effect = fake_get
        urls = ["https://a.example.com", "https://down.example.com", "https://b.example.com"]

        report = run_pool(urls, fetch_url, workers=2)

        assert len(report) == 3
        assert [r.payload for r in report.failures] == ["https://down.example.com"]
        assert isinstance(report.failures[0].error, requests.ConnectionError)
        assert {r.outcome.url for r in report.successes} == {urls[0], urls[2]}


class TestCli:
    """Тесты консольного интерфейса."""

    def test_format_result(self):
        """Тест форматирования строк результата."""
        ok = TaskResult(
            task=Task(index=0, payload="https://example.com"),
            status=TaskStatus.COMPLETED,
            outcome=FetchOutcome("https://example.com", 200, 1256),
            duration=0.25
        )
        failed = TaskResult(
            task=Task(index=1, payload="https://broken.example.com"),
            status=TaskStatus.FAILED,
            error=requests.ConnectionError("refused"),
            duration=0.1
        )

        assert format_result(ok) == (
            "SUCCESS - URL: https://example.com | Status: 200 | "
            "Length: 1256 bytes | Time: 0.250s"
        )
        assert format_result(failed).startswith("ERROR - URL: https://broken.example.com | Error: refused")

    def test_read_urls(self, tmp_path):
        """Тест чтения URL из аргументов и файла."""
        path = tmp_path / "urls.txt"
        path.write_text("# список\nhttps://b.example.com\n\n  https://c.example.com  \n", encoding="utf-8")

        urls = read_urls(["https://a.example.com"], str(path))

        assert urls == ["https://a.example.com", "https://b.example.com", "https://c.example.com"]

    @patch('scrape_pool.cli.make_fetcher', side_effect=fake_fetcher)
    def test_main_text_output(self, mock_fetcher, capsys):
        """Тест прогона с текстовой сводкой."""
        code = main(["https://a.example.com", "https://broken.example.com", "--workers", "2"])

        assert code == 0
        out = capsys.readouterr().out
        assert out.count("SUCCESS - URL:") == 1
        assert out.count("ERROR - URL:") == 1
        assert "=== Worker Pool Summary ===" in out
        assert "Number of workers: 2" in out
        assert "Failed requests: 1" in out
        assert "Parallelism efficiency:" in out

    @patch('scrape_pool.cli.make_fetcher', side_effect=fake_fetcher)
    def test_main_json_output(self, mock_fetcher, capsys, tmp_path):
        """Тест JSON-сводки и файла со списком URL."""
        path = tmp_path / "urls.txt"
        path.write_text("https://a.example.com\nhttps://b.example.com\n", encoding="utf-8")

        code = main(["--file", str(path), "--json", "--timeout", "2"])

        assert code == 0
        mock_fetcher.assert_called_once_with(2.0)
        out = capsys.readouterr().out
        summary = json.loads(out[out.index("{"):])
        assert summary['total_tasks'] == 2
        assert summary['succeeded'] == 2

    def test_main_invalid_config(self, capsys):
        """Тест: ошибка конфигурации дает код 2."""
        code = main(["https://a.example.com", "--workers", "0"])

        assert code == 2
        assert "Configuration error" in capsys.readouterr().err

    def test_main_missing_config_file(self, tmp_path, capsys):
        """Тест отсутствующего файла конфигурации."""
        code = main(["https://a.example.com", "--config", str(tmp_path / "none.yaml")])
        assert code == 2

    def test_main_without_urls(self):
        """Тест запуска без URL."""
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2

    def test_main_missing_url_file(self, tmp_path, capsys):
        """Тест отсутствующего файла со списком URL."""
        code = main(["--file", str(tmp_path / "missing.txt")])

        assert code == 2
        assert "Cannot read URL file" in capsys.readouterr().err

    @pytest.mark.parametrize("name, content", [
        ("pool.yaml", "workers: [1\n"),
        ("pool.json", '{"workers": '),
        ("pool.yaml", "task_buffer: '2'\n"),
        ("pool.yaml", "- workers\n"),
    ])
    def test_main_bad_config_file(self, tmp_path, capsys, name, content):
        """Тест: битый файл конфигурации дает код 2 без трассировки."""
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")

        code = main(["https://a.example.com", "--config", str(path)])

        assert code == 2
        assert "Configuration error" in capsys.readouterr().err


if __name__ == "__main__":
    pytest.main([__file__])
