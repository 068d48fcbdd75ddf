"""Tests for the league API check script."""

from __future__ import annotations

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import httpx
import pytest

from scripts import check_api

BASE_ARGS = ["--base-url", "http://league.test/api/v1", "--retry-delay", "0"]


def test_main_reports_success(capsys: pytest.CaptureFixture[str]) -> None:
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json=[{"id": 1}, {"id": 2}])
    )

    exit_code = check_api.main([*BASE_ARGS, "/players"], transport=transport)

    assert exit_code == check_api.EXIT_OK
    output = capsys.readouterr().out
    assert "/players" in output
    assert "OK (2 items) after 1 attempt(s)" in output


def test_main_reports_failed_endpoint(capsys: pytest.CaptureFixture[str]) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/teams"):
            return httpx.Response(429)
        return httpx.Response(200, json={"status": "ok"})

    exit_code = check_api.main(
        [*BASE_ARGS, "--max-retries", "2", "/health", "/teams"],
        transport=httpx.MockTransport(handler),
    )

    assert exit_code == check_api.EXIT_FETCH_ERROR
    output = capsys.readouterr().out
    assert "OK (1 keys) after 1 attempt(s)" in output
    assert (
        "FAILED [rate_limited] Too many requests. Please try again later. "
        "after 3 attempt(s)"
    ) in output


def test_main_does_not_retry_not_found(capsys: pytest.CaptureFixture[str]) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(404))

    exit_code = check_api.main([*BASE_ARGS, "/players/999"], transport=transport)

    assert exit_code == check_api.EXIT_FETCH_ERROR
    assert "FAILED [not_found] Not found after 1 attempt(s)" in capsys.readouterr().out


def test_main_rejects_invalid_settings(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = check_api.main(["--base-url", "not a url", "/players"])

    assert exit_code == check_api.EXIT_RUNTIME_ERROR
    assert "Invalid check settings" in capsys.readouterr().err
