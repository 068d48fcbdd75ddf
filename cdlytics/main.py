"""
FastAPI application entrypoint for the league statistics site.
"""

from __future__ import annotations

from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from cdlytics import __version__
from cdlytics.api.pages import router as pages_router
from cdlytics.api.routes import router as api_router
from cdlytics.core.config import get_settings
from cdlytics.core.logging import configure_logging

STATIC_DIR = Path(__file__).resolve().parent / "static"


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="cdlytics",
        version=__version__,
        description="Player, team, tournament and KD statistics for the CDL.",
    )
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    app.include_router(api_router, prefix="/api")
    app.include_router(pages_router)
    return app


app = create_app()


def run() -> None:
    """Serve the site with uvicorn using the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "cdlytics.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":  # pragma: no cover - manual entry point
    run()

__all__ = ["app", "create_app", "run"]
