"""Decide what a page shows for a given resource state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from cdlytics.services.resource import ResourceState, ResourceStatus
from cdlytics.utils.http import FetchErrorCategory

LOADING = "loading"
ERROR = "error"
EMPTY = "empty"
READY = "ready"


def is_empty_payload(data: Any) -> bool:
    if data is None:
        return True
    try:
        return len(data) == 0
    except TypeError:
        return False


def view_mode(
    state: ResourceState[Any],
    *,
    is_empty: Callable[[Any], bool] = is_empty_payload,
) -> str:
    """Pick one of ``loading``, ``error``, ``empty`` or ``ready``.

    Stale data from an earlier generation keeps the page in ``ready`` while a
    refetch is loading.
    """
    if state.error is not None:
        return ERROR
    if state.loading and state.data is None:
        return LOADING
    if state.status is ResourceStatus.IDLE and state.data is None:
        return EMPTY
    if is_empty(state.data):
        return EMPTY
    return READY


@dataclass(frozen=True)
class ErrorView:
    """Message plus the affordance that goes with it."""

    message: str
    retry_href: Optional[str]
    back_href: Optional[str]
    back_label: Optional[str]
    not_found: bool


def error_view(
    state: ResourceState[Any],
    *,
    retry_href: str,
    back_href: str,
    back_label: str,
) -> Optional[ErrorView]:
    """Build the error block for ``state``; not-found offers a way back, not a retry."""
    if state.error is None:
        return None
    if state.category is FetchErrorCategory.NOT_FOUND:
        return ErrorView(
            message=state.error,
            retry_href=None,
            back_href=back_href,
            back_label=back_label,
            not_found=True,
        )
    return ErrorView(
        message=state.error,
        retry_href=retry_href,
        back_href=None,
        back_label=None,
        not_found=False,
    )


def not_found_state() -> ResourceState[Any]:
    """State used when a request is invalid before any network call."""
    return ResourceState(
        status=ResourceStatus.FAILED,
        error=FetchErrorCategory.NOT_FOUND.message,
        category=FetchErrorCategory.NOT_FOUND,
    )


__all__ = [
    "EMPTY",
    "ERROR",
    "LOADING",
    "READY",
    "ErrorView",
    "error_view",
    "is_empty_payload",
    "not_found_state",
    "view_mode",
]
