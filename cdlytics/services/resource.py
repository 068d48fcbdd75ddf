"""
Fetch-with-retry resource shared by every page.

An ``ApiResource`` performs one logical GET against the league API and exposes
the outcome as a small state machine (idle, loading, succeeded, failed). Each
activation (first start, dependency change, explicit refetch) opens a new
generation backed by its own ``asyncio.Task``. Superseding a generation cancels
its task, and every commit re-checks the generation so a stale chain can never
overwrite newer state.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, TypeVar

import httpx
from pydantic import TypeAdapter

from cdlytics.utils.http import (
    FetchError,
    FetchErrorCategory,
    RetryConfig,
    request_with_retry,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ResourceStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ResourceState(Generic[T]):
    """Immutable snapshot of a resource handed to views and listeners."""

    status: ResourceStatus = ResourceStatus.IDLE
    data: T | None = None
    error: str | None = None
    category: FetchErrorCategory | None = None
    generation: int = 0

    @property
    def loading(self) -> bool:
        return self.status is ResourceStatus.LOADING


Listener = Callable[[ResourceState[Any]], None]


class ApiResource(Generic[T]):
    """Reactive view of one league API request with timeout, retry and cancellation."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        resource: str,
        model: Any = None,
        config: RetryConfig | None = None,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._resource = resource
        self._config = config or RetryConfig()
        self._adapter = TypeAdapter(model) if model is not None else None
        self._sleep = sleep
        self._state: ResourceState[T] = ResourceState()
        self._generation = 0
        self._task: asyncio.Task[None] | None = None
        self._listeners: list[Listener] = []
        self._started = False
        self._closed = False
        self.attempts = 0

    # -- public state -------------------------------------------------------

    @property
    def resource(self) -> str:
        return self._resource

    @property
    def config(self) -> RetryConfig:
        return self._config

    @property
    def state(self) -> ResourceState[T]:
        return self._state

    @property
    def data(self) -> T | None:
        return self._state.data

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def category(self) -> FetchErrorCategory | None:
        return self._state.category

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def retry_count(self) -> int:
        return max(self.attempts - 1, 0)

    # -- lifecycle ----------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for every state change; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start(self) -> None:
        """Activate the resource. Disabled resources stay idle and never touch the network."""
        self._ensure_open()
        if self._started:
            return
        self._started = True
        if self._config.enabled:
            self._activate()

    def refetch(self) -> None:
        """Drop any in-flight attempt chain and begin a fresh one immediately."""
        self._ensure_open()
        if not self._started:
            self.start()
            return
        if not self._config.enabled:
            logger.debug("Ignoring refetch of disabled resource %s", self._resource)
            return
        self._activate()

    def update(
        self,
        *,
        resource: str | None = None,
        config: RetryConfig | None = None,
    ) -> None:
        """Apply a dependency change, restarting the chain when it matters."""
        self._ensure_open()
        new_resource = resource if resource is not None else self._resource
        new_config = config or self._config
        was_enabled = self._config.enabled
        changed = (
            new_resource != self._resource
            or new_config.retry_key() != self._config.retry_key()
        )
        self._resource = new_resource
        self._config = new_config

        if not self._started:
            return
        if not new_config.enabled:
            if was_enabled:
                self._deactivate()
            return
        if changed or not was_enabled:
            self._activate()

    def close(self) -> None:
        """Tear down: cancel in-flight work and stop publishing state."""
        if self._closed:
            return
        self._closed = True
        self._generation += 1
        self._cancel_task()
        self._listeners.clear()

    async def wait(self) -> ResourceState[T]:
        """Wait until no attempt chain is running and return the settled state."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})
        return self._state

    async def __aenter__(self) -> "ApiResource[T]":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    # -- internals ----------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError(f"Resource {self._resource} has been closed")

    def _activate(self) -> None:
        self._cancel_task()
        self._generation += 1
        generation = self._generation
        self.attempts = 0
        # The task exists before listeners run, so a refetch from a listener
        # cancels it before it sends anything.
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(
            self._run(generation), name=f"resource:{self._resource}#{generation}"
        )
        # Stale data stays visible while the new generation loads.
        self._commit(
            generation,
            replace(
                self._state,
                status=ResourceStatus.LOADING,
                error=None,
                category=None,
                generation=generation,
            ),
        )

    def _deactivate(self) -> None:
        self._cancel_task()
        self._generation += 1
        self.attempts = 0
        self._commit(self._generation, ResourceState(generation=self._generation))

    def _cancel_task(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    async def _run(self, generation: int) -> None:
        try:
            payload = await request_with_retry(
                self._attempt,
                generation,
                retry_config=self._config,
                decode=self._decode,
                sleep=self._sleep,
            )
        except FetchError as exc:
            if self._is_current(generation):
                logger.warning(
                    "Request for %s failed after %d attempt(s): %s",
                    self._resource,
                    self.attempts,
                    exc,
                )
            self._commit(
                generation,
                replace(
                    self._state,
                    status=ResourceStatus.FAILED,
                    error=exc.message,
                    category=exc.category,
                    generation=generation,
                ),
            )
            return
        except Exception:  # pylint: disable=broad-except
            if self._is_current(generation):
                logger.exception("Request for %s failed unexpectedly", self._resource)
            self._commit(
                generation,
                replace(
                    self._state,
                    status=ResourceStatus.FAILED,
                    error=FetchErrorCategory.GENERIC_FAILURE.message,
                    category=FetchErrorCategory.GENERIC_FAILURE,
                    generation=generation,
                ),
            )
            return

        self._commit(
            generation,
            ResourceState(
                status=ResourceStatus.SUCCEEDED,
                data=payload,
                generation=generation,
            ),
        )

    async def _attempt(self, generation: int) -> httpx.Response:
        if self._is_current(generation):
            self.attempts += 1
        return await self._client.get(
            self._resource, timeout=self._config.timeout_seconds
        )

    def _decode(self, response: httpx.Response) -> T:
        payload = response.json()
        if self._adapter is None:
            return payload
        return self._adapter.validate_python(payload)

    def _commit(self, generation: int, state: ResourceState[T]) -> None:
        if not self._is_current(generation):
            logger.debug(
                "Discarding state from superseded generation %d of %s",
                generation,
                self._resource,
            )
            return
        self._state = state
        for listener in list(self._listeners):
            if not self._is_current(generation):
                break
            try:
                listener(state)
            except Exception:  # pylint: disable=broad-except
                logger.exception("Resource listener failed for %s", self._resource)


__all__ = ["ApiResource", "Listener", "ResourceState", "ResourceStatus"]
