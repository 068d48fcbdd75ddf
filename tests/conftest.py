"""Pytest configuration shared across the suite."""

import pytest

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from cdlytics.core.config import get_settings


@pytest.fixture
def anyio_backend() -> str:
    """Run AnyIO-marked tests on the asyncio backend only."""
    return "asyncio"


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so environment tweaks in one test never leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
