try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import httpx
import pytest

from cdlytics.clients import LeagueApiClient, build_query, get_api_url
from cdlytics.core.config import LeagueApiSettings
from cdlytics.schemas import Player, TransfersResponse
from cdlytics.utils.http import FetchErrorCategory

BASE_URL = "http://league.test/api/v1"


def _settings(**overrides) -> LeagueApiSettings:
    values = {"base_url": BASE_URL, "retry_delay_seconds": 0, "max_retries": 1}
    values.update(overrides)
    return LeagueApiSettings(**values)


@pytest.mark.parametrize(
    "base_url, endpoint, expected",
    [
        ("http://league.test/api/v1", "/players", "http://league.test/api/v1/players"),
        ("http://league.test/api/v1/", "/players", "http://league.test/api/v1/players"),
        ("http://league.test/api/v1", "teams/3", "http://league.test/api/v1/teams/3"),
    ],
)
def test_get_api_url_joins_with_single_slash(base_url, endpoint, expected) -> None:
    assert get_api_url(base_url, endpoint) == expected


def test_build_query_drops_unset_filters() -> None:
    query = build_query({"season": "Black Ops 6", "team_id": None, "type": "", "limit": 10})
    assert query == {"season": "Black Ops 6", "limit": "10"}
    assert build_query(None) == {}


def test_settings_expose_retry_policy() -> None:
    settings = _settings(max_retries=2, retry_delay_seconds=0.5, timeout_seconds=4)
    config = settings.retry_config()

    assert settings.base_url_str == BASE_URL
    assert (config.max_retries, config.retry_base_delay, config.timeout_seconds) == (
        2,
        0.5,
        4,
    )
    assert config.enabled is True
    assert settings.retry_config(enabled=False).enabled is False


@pytest.mark.anyio
async def test_session_resources_decode_into_models() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={"id": 7, "gamertag": "Simp", "first_name": "Chris", "last_name": "Lehr"},
        )

    client = LeagueApiClient(_settings(), transport=httpx.MockTransport(handler))
    async with client.session() as session:
        state = await session.player(7).wait()

    assert isinstance(state.data, Player)
    assert state.data.full_name == "Chris Lehr"
    assert str(requests[0].url) == f"{BASE_URL}/players/7"
    assert requests[0].headers["Cache-Control"].startswith("no-cache")


@pytest.mark.anyio
async def test_transfer_filters_reach_query_string() -> None:
    seen: list[httpx.URL] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        return httpx.Response(200, json={"transfers": [], "count": 0})

    client = LeagueApiClient(_settings(), transport=httpx.MockTransport(handler))
    async with client.session() as session:
        state = await session.transfers(
            season="Black Ops 6", team_id=4, transfer_type="signing"
        ).wait()

    assert isinstance(state.data, TransfersResponse)
    params = seen[0].params
    assert params["season"] == "Black Ops 6"
    assert params["team_id"] == "4"
    assert params["type"] == "signing"
    assert "player_id" not in params


@pytest.mark.anyio
async def test_player_matches_requests_limit() -> None:
    seen: list[httpx.URL] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        return httpx.Response(200, json={"player_id": 3, "events": [{"id": 1}]})

    client = LeagueApiClient(_settings(), transport=httpx.MockTransport(handler))
    async with client.session() as session:
        state = await session.player_matches(3, limit=10).wait()

    assert seen[0].path == "/api/v1/players/3/matches"
    assert seen[0].params["limit"] == "10"
    assert state.data.entries == [{"id": 1}]


@pytest.mark.anyio
async def test_settle_waits_for_every_resource() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/teams"):
            return httpx.Response(503)
        return httpx.Response(200, json=[])

    client = LeagueApiClient(_settings(), transport=httpx.MockTransport(handler))
    async with client.session() as session:
        players = session.players()
        teams = session.teams()
        players_state, teams_state = await session.settle()

    assert players_state.data == []
    assert teams_state.category is FetchErrorCategory.GENERIC_FAILURE
    assert players.attempts == 1
    assert teams.attempts == 2


@pytest.mark.anyio
async def test_session_exit_closes_resources() -> None:
    client = LeagueApiClient(
        _settings(), transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[]))
    )
    async with client.session() as session:
        players = session.players()
        await players.wait()

    with pytest.raises(RuntimeError):
        players.refetch()
