"""
JSON routes for monitoring the site and its upstream league API.
"""

from __future__ import annotations

import logging
from http import HTTPStatus

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from cdlytics.dependencies import LeagueApiClientDep
from cdlytics.utils.http import RetryConfig

router = APIRouter()
logger = logging.getLogger(__name__)

# Health checks should answer quickly rather than wait out a retry chain.
_HEALTH_RETRY = RetryConfig(max_retries=0, timeout_seconds=5.0)


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.get("/health/upstream")
async def upstream_healthcheck(
    api: LeagueApiClientDep,
) -> JSONResponse:
    """Report whether the league API answers its own health endpoint."""
    async with api.session() as session:
        state = await session.resource("/health", config=_HEALTH_RETRY).wait()

    if state.error is not None:
        logger.warning(
            "League API health check against %s failed: %s",
            api.settings.base_url_str,
            state.error,
        )
        return JSONResponse(
            status_code=HTTPStatus.SERVICE_UNAVAILABLE,
            content={
                "status": "unavailable",
                "upstream_url": api.settings.base_url_str,
                "error": state.error,
                "category": state.category.value if state.category else None,
            },
        )
    return JSONResponse(content={"status": "ok", "upstream": state.data})
