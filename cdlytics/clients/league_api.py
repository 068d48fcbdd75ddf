"""Client for the upstream league REST API."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional

import httpx

from cdlytics.core.config import LeagueApiSettings
from cdlytics.schemas import (
    BracketResponse,
    Player,
    PlayerKDResponse,
    PlayerMatchesResponse,
    StatsResponse,
    Team,
    Tournament,
    TransfersResponse,
)
from cdlytics.services.resource import ApiResource, ResourceState
from cdlytics.utils.http import RetryConfig

logger = logging.getLogger(__name__)

_DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Cache-Control": "no-cache, no-store, must-revalidate, max-age=0",
    "Pragma": "no-cache",
    "User-Agent": "cdlytics/0.1",
}


def get_api_url(base_url: str, endpoint: str) -> str:
    """Join ``base_url`` and ``endpoint`` with exactly one slash between them."""
    return f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}"


def build_query(params: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Drop unset filters so they never reach the query string."""
    if not params:
        return {}
    return {
        key: str(value)
        for key, value in params.items()
        if value is not None and value != ""
    }


class LeagueApiSession:
    """Per-page scope owning one HTTP client and the resources built on it."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: LeagueApiSettings,
        *,
        retry_config: RetryConfig | None = None,
    ) -> None:
        self._http = http_client
        self._settings = settings
        self._retry_config = retry_config or settings.retry_config()
        self._resources: List[ApiResource[Any]] = []

    def resource(
        self,
        endpoint: str,
        model: Any = None,
        *,
        params: Optional[Mapping[str, Any]] = None,
        config: RetryConfig | None = None,
    ) -> ApiResource[Any]:
        """Build, track and start a resource for ``endpoint``."""
        url = get_api_url(self._settings.base_url_str, endpoint)
        query = build_query(params)
        if query:
            url = str(httpx.URL(url, params=query))
        resource: ApiResource[Any] = ApiResource(
            self._http, url, model, config or self._retry_config
        )
        logger.debug("Starting resource %s", url)
        self._resources.append(resource)
        resource.start()
        return resource

    async def settle(self, *resources: ApiResource[Any]) -> List[ResourceState[Any]]:
        """Wait for every given resource (all tracked ones by default) to settle."""
        targets = resources or tuple(self._resources)
        return list(await asyncio.gather(*(resource.wait() for resource in targets)))

    def close(self) -> None:
        for resource in self._resources:
            resource.close()
        self._resources.clear()

    # Endpoint helpers.

    def players(self) -> ApiResource[List[Player]]:
        return self.resource("/players", List[Player])

    def player(self, player_id: int) -> ApiResource[Player]:
        return self.resource(f"/players/{player_id}", Player)

    def player_kd(self, player_id: int) -> ApiResource[PlayerKDResponse]:
        return self.resource(f"/players/{player_id}/kd", PlayerKDResponse)

    def player_matches(
        self, player_id: int, *, limit: int = 10
    ) -> ApiResource[PlayerMatchesResponse]:
        return self.resource(
            f"/players/{player_id}/matches",
            PlayerMatchesResponse,
            params={"limit": limit},
        )

    def teams(self) -> ApiResource[List[Team]]:
        return self.resource("/teams", List[Team])

    def team(self, team_id: int) -> ApiResource[Team]:
        return self.resource(f"/teams/{team_id}", Team)

    def team_players(self, team_id: int) -> ApiResource[List[Player]]:
        return self.resource(f"/teams/{team_id}/players", List[Player])

    def tournaments(self) -> ApiResource[List[Tournament]]:
        return self.resource("/tournaments", List[Tournament])

    def tournament(self, tournament_id: int) -> ApiResource[Tournament]:
        return self.resource(f"/tournaments/{tournament_id}", Tournament)

    def tournament_bracket(self, tournament_id: int) -> ApiResource[BracketResponse]:
        return self.resource(f"/tournaments/{tournament_id}/bracket", BracketResponse)

    def kd_stats(self) -> ApiResource[StatsResponse]:
        return self.resource("/stats/all-kd-by-tournament", StatsResponse)

    def transfers(
        self,
        *,
        season: str | None = None,
        team_id: int | None = None,
        transfer_type: str | None = None,
        player_id: int | None = None,
    ) -> ApiResource[TransfersResponse]:
        return self.resource(
            "/transfers",
            TransfersResponse,
            params={
                "season": season,
                "team_id": team_id,
                "type": transfer_type,
                "player_id": player_id,
            },
        )


class LeagueApiClient:
    """Factory for league API sessions sharing one configuration."""

    def __init__(
        self,
        settings: LeagueApiSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_config: RetryConfig | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._retry_config = retry_config

    @property
    def settings(self) -> LeagueApiSettings:
        return self._settings

    @asynccontextmanager
    async def session(self) -> AsyncIterator[LeagueApiSession]:
        """Open a session; its resources are torn down before the client closes."""
        async with httpx.AsyncClient(
            headers=_DEFAULT_HEADERS,
            timeout=self._settings.timeout_seconds,
            transport=self._transport,
        ) as http_client:
            session = LeagueApiSession(
                http_client, self._settings, retry_config=self._retry_config
            )
            try:
                yield session
            finally:
                session.close()


__all__ = [
    "LeagueApiClient",
    "LeagueApiSession",
    "build_query",
    "get_api_url",
]
