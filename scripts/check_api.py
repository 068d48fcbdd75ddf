"""Utility for probing the league API the site depends on.

Each endpoint is fetched through the same ``ApiResource`` the pages use, so
the report reflects exactly what a visitor would see: retries, timeouts and
the resulting error category.

Example usages::

    # Check the default endpoints against the configured base URL.
    python -m scripts.check_api

    # Check a local backend with a tighter retry budget.
    python -m scripts.check_api --base-url http://localhost:8080/api/v1 \
        --max-retries 1 --retry-delay 0.5 /players /teams/1
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Sequence

import httpx
from pydantic import ValidationError

from cdlytics.clients import LeagueApiClient
from cdlytics.core.config import LeagueApiSettings
from cdlytics.core.logging import configure_logging
from cdlytics.services.resource import ResourceState

EXIT_OK = 0
EXIT_FETCH_ERROR = 4
EXIT_RUNTIME_ERROR = 5

DEFAULT_ENDPOINTS = (
    "/players",
    "/teams",
    "/tournaments",
    "/stats/all-kd-by-tournament",
    "/transfers",
)

logger = logging.getLogger(__name__)


def _build_settings(args: argparse.Namespace) -> LeagueApiSettings:
    overrides = {}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.max_retries is not None:
        overrides["max_retries"] = args.max_retries
    if args.retry_delay is not None:
        overrides["retry_delay_seconds"] = args.retry_delay
    if args.timeout is not None:
        overrides["timeout_seconds"] = args.timeout
    return LeagueApiSettings(**overrides)


async def check_endpoints(
    client: LeagueApiClient, endpoints: Sequence[str]
) -> list[tuple[str, ResourceState, int]]:
    """Fetch every endpoint concurrently and return (endpoint, state, attempts)."""
    async with client.session() as session:
        resources = [session.resource(endpoint) for endpoint in endpoints]
        states = await session.settle(*resources)
        return [
            (endpoint, state, resource.attempts)
            for endpoint, state, resource in zip(endpoints, states, resources)
        ]


def _describe(state: ResourceState) -> str:
    if state.error is not None:
        category = state.category.value if state.category else "unknown"
        return f"FAILED [{category}] {state.error}"
    data = state.data
    if isinstance(data, list):
        return f"OK ({len(data)} items)"
    if isinstance(data, dict):
        return f"OK ({len(data)} keys)"
    return "OK"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Check league API endpoints with the site's retry policy."
    )
    parser.add_argument(
        "endpoints",
        nargs="*",
        default=list(DEFAULT_ENDPOINTS),
        help="Endpoints relative to the base URL (default: the main list pages).",
    )
    parser.add_argument("--base-url", help="Override LEAGUE_API_BASE_URL.")
    parser.add_argument("--max-retries", type=int, help="Retries after the first attempt.")
    parser.add_argument("--retry-delay", type=float, help="Base retry delay in seconds.")
    parser.add_argument("--timeout", type=float, help="Per-attempt timeout in seconds.")
    parser.add_argument("--log-level", default="WARNING", help="Logging level.")
    return parser


def main(
    argv: list[str] | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        settings = _build_settings(args)
    except ValidationError as exc:
        print(f"Invalid check settings:\n{exc.json(indent=2)}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    client = LeagueApiClient(settings, transport=transport)
    logger.info(
        "Probing %d endpoint(s) under %s", len(args.endpoints), settings.base_url_str
    )
    try:
        results = asyncio.run(check_endpoints(client, args.endpoints))
    except Exception as exc:  # pylint: disable=broad-except
        print(f"Unexpected error during endpoint check: {exc}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    failed = False
    for endpoint, state, attempts in results:
        failed = failed or state.error is not None
        print(f"{endpoint:<40} {_describe(state)} after {attempts} attempt(s)")

    return EXIT_FETCH_ERROR if failed else EXIT_OK


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
