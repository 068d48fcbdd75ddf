"""HTTP utilities providing retry/backoff semantics and failure classification."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from http import HTTPStatus
from typing import Any, Awaitable, Callable, TypeVar

import httpx

T = TypeVar("T")

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class FetchErrorCategory(str, Enum):
    """Failure categories surfaced to views as short human-readable strings."""

    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    GENERIC_FAILURE = "generic_failure"

    @property
    def message(self) -> str:
        return _CATEGORY_MESSAGES[self]

    @property
    def retryable(self) -> bool:
        return self is not FetchErrorCategory.NOT_FOUND


_CATEGORY_MESSAGES = {
    FetchErrorCategory.NOT_FOUND: "Not found",
    FetchErrorCategory.RATE_LIMITED: "Too many requests. Please try again later.",
    FetchErrorCategory.TIMEOUT: "Request timeout. Please check your connection.",
    FetchErrorCategory.NETWORK_ERROR: "Network error. Please check your connection.",
    FetchErrorCategory.GENERIC_FAILURE: "Failed to load data. Please try again.",
}


class FetchError(Exception):
    """Raised when a request fails in a way the caller should surface."""

    def __init__(
        self,
        category: FetchErrorCategory,
        *,
        status_code: int | None = None,
        url: str | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(detail or category.message)
        self.category = category
        self.status_code = status_code
        self.url = url
        self.detail = detail

    @property
    def message(self) -> str:
        return self.category.message

    @property
    def retryable(self) -> bool:
        return self.category.retryable


@dataclass(frozen=True)
class RetryConfig:
    """Retry policy for one logical request.

    ``max_retries`` bounds the attempts made after the first one, and the delay
    before retry ``n`` is ``retry_base_delay * n`` seconds.
    """

    max_retries: int = 3
    retry_base_delay: float = 1.0
    enabled: bool = True
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if self.retry_base_delay < 0:
            raise ValueError("retry_base_delay must be non-negative")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

    def delay_for(self, attempt: int) -> float:
        """Return the delay preceding retry ``attempt`` (1-based)."""
        if attempt < 1:
            raise ValueError("attempt must be >= 1")
        return self.retry_base_delay * attempt

    def retry_key(self) -> tuple[int, float, float]:
        """Fields whose change restarts an in-flight attempt chain."""
        return (self.max_retries, self.retry_base_delay, self.timeout_seconds)


def _request_url(source: httpx.Response | httpx.RequestError) -> str | None:
    try:
        return str(source.request.url)
    except RuntimeError:
        return None


def classify_response(response: httpx.Response) -> FetchError | None:
    """Map a non-2xx response onto a failure category."""
    if response.is_success:
        return None
    status = response.status_code
    if status == HTTPStatus.NOT_FOUND:
        category = FetchErrorCategory.NOT_FOUND
    elif status == HTTPStatus.TOO_MANY_REQUESTS:
        category = FetchErrorCategory.RATE_LIMITED
    else:
        category = FetchErrorCategory.GENERIC_FAILURE
    return FetchError(
        category,
        status_code=status,
        url=_request_url(response),
        detail=f"HTTP {status}",
    )


def classify_exception(exc: Exception) -> FetchError:
    """Map a transport or decode exception onto a failure category."""
    if isinstance(exc, FetchError):
        return exc
    if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError)):
        category = FetchErrorCategory.TIMEOUT
    elif isinstance(exc, httpx.TransportError):
        category = FetchErrorCategory.NETWORK_ERROR
    else:
        category = FetchErrorCategory.GENERIC_FAILURE
    return FetchError(
        category,
        url=_request_url(exc) if isinstance(exc, httpx.RequestError) else None,
        detail=str(exc) or type(exc).__name__,
    )


async def request_with_retry(
    func: Callable[..., Awaitable[httpx.Response]],
    *args: Any,
    retry_config: RetryConfig | None = None,
    decode: Callable[[httpx.Response], T] | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    **kwargs: Any,
) -> Any:
    """Run ``func`` until it yields a decodable 2xx response or retries run out.

    Each attempt must finish within ``retry_config.timeout_seconds`` overall.
    Not-found responses are raised immediately. Every other failure is retried
    up to ``retry_config.max_retries`` times with linearly increasing delay.
    ``asyncio.CancelledError`` is never intercepted.
    """
    config = retry_config or RetryConfig()
    attempt = 0

    while True:
        try:
            # One deadline covers connect, headers and body of the attempt.
            response = await asyncio.wait_for(
                func(*args, **kwargs), config.timeout_seconds
            )
            failure = classify_response(response)
            if failure is None:
                return decode(response) if decode is not None else response
        except (httpx.HTTPError, ValueError, asyncio.TimeoutError) as exc:
            failure = classify_exception(exc)

        if not failure.retryable or attempt >= config.max_retries:
            raise failure

        attempt += 1
        delay = config.delay_for(attempt)
        logger.info(
            "Retrying request after %s (%d/%d) in %.2fs",
            failure.category.value,
            attempt,
            config.max_retries,
            delay,
        )
        await sleep(delay)


__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "FetchError",
    "FetchErrorCategory",
    "RetryConfig",
    "classify_exception",
    "classify_response",
    "request_with_retry",
]
