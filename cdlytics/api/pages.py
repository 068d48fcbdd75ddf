"""
Page routes: server-rendered HTML via Jinja2 templates.

Every page opens a league API session, declares the resources it needs, waits
for them to settle and renders purely from their state. Pages never retry or
time out on their own; that is the resource's job.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from pathlib import Path
from typing import Any, Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from cdlytics.dependencies import AppSettingsDep, LeagueApiClientDep
from cdlytics.services.resource import ResourceState
from cdlytics.utils.http import FetchErrorCategory
from cdlytics.views import formatting
from cdlytics.views.state import error_view, not_found_state, view_mode

router = APIRouter(tags=["pages"])
logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

templates.env.filters["kd_color"] = formatting.kd_color
templates.env.filters["plus_minus_color"] = formatting.plus_minus_color
templates.env.filters["kd_progress"] = formatting.kd_progress
templates.env.filters["ratio"] = formatting.format_ratio
templates.env.filters["count"] = formatting.format_count
templates.env.filters["date"] = formatting.format_date
templates.env.globals.update(
    MAJOR_LABELS=formatting.MAJOR_LABELS,
    avatar_chain=formatting.avatar_chain,
    gamertag_avatar_url=formatting.gamertag_avatar_url,
    major_kd=formatting.major_kd,
    medal_class=formatting.medal_class,
    player_avatar=formatting.player_avatar,
    player_subtitle=formatting.player_subtitle,
    team_badge=formatting.team_badge,
    transfer_description=formatting.transfer_description,
)

NAV_LINKS = (
    ("/players", "Players"),
    ("/teams", "Teams"),
    ("/stats", "K/D Leaderboard"),
    ("/tournaments", "Tournaments"),
    ("/transfers", "Transfers"),
)

TRANSFER_TYPES = ("transfer", "signing", "release")


def _parse_id(raw: str) -> Optional[int]:
    """Positive integer ids only; anything else is treated as not found."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def _status_for(state: ResourceState[Any]) -> int:
    if state.error is None:
        return HTTPStatus.OK
    if state.category is FetchErrorCategory.NOT_FOUND:
        return HTTPStatus.NOT_FOUND
    return HTTPStatus.BAD_GATEWAY


def _render(
    request: Request,
    template: str,
    state: ResourceState[Any],
    *,
    back_href: str,
    back_label: str,
    is_empty: Any = None,
    **context: Any,
) -> HTMLResponse:
    mode_kwargs = {"is_empty": is_empty} if is_empty is not None else {}
    if state.error is not None:
        logger.info(
            "Rendering %s for %s with %s error",
            template,
            request.url.path,
            state.category.value if state.category else "unknown",
        )
    payload = {
        "nav_links": NAV_LINKS,
        "state": state,
        "mode": view_mode(state, **mode_kwargs),
        "error": error_view(
            state,
            retry_href=str(request.url),
            back_href=back_href,
            back_label=back_label,
        ),
        **context,
    }
    return templates.TemplateResponse(
        request, template, payload, status_code=_status_for(state)
    )


@router.get("/", response_class=HTMLResponse)
async def home(request: Request, api: LeagueApiClientDep) -> HTMLResponse:
    """Landing page with the current top of the KD leaderboard."""
    async with api.session() as session:
        stats = await session.kd_stats().wait()
    leaders = formatting.sort_leaderboard(stats.data.players)[:3] if stats.data else []
    return _render(
        request,
        "home.html",
        stats,
        back_href="/",
        back_label="Home",
        is_empty=lambda data: not data.players,
        leaders=leaders,
    )


@router.get("/players", response_class=HTMLResponse)
async def players_page(request: Request, api: LeagueApiClientDep) -> HTMLResponse:
    async with api.session() as session:
        players = await session.players().wait()
    return _render(
        request,
        "players.html",
        players,
        back_href="/",
        back_label="Back to Home",
        players=players.data or [],
    )


@router.get("/players/{player_id}", response_class=HTMLResponse)
async def player_detail_page(
    request: Request,
    player_id: str,
    api: LeagueApiClientDep,
    tab: str = Query("last5", pattern="^(last5|all)$"),
) -> HTMLResponse:
    """Player profile with KD totals, per-tournament splits and recent matches."""
    parsed_id = _parse_id(player_id)
    if parsed_id is None:
        return _render(
            request,
            "player_detail.html",
            not_found_state(),
            back_href="/players",
            back_label="Back to Players",
        )

    async with api.session() as session:
        player = session.player(parsed_id)
        kd = session.player_kd(parsed_id)
        matches = session.player_matches(parsed_id, limit=10)
        player_state, kd_state, matches_state = await session.settle(
            player, kd, matches
        )

    entries = matches_state.data.entries if matches_state.data else []
    return _render(
        request,
        "player_detail.html",
        player_state,
        back_href="/players",
        back_label="Back to Players",
        player=player_state.data,
        kd=kd_state.data,
        kd_error=kd_state.error,
        matches=entries if tab == "all" else entries[:5],
        matches_error=matches_state.error,
        tab=tab,
    )


@router.get("/teams", response_class=HTMLResponse)
async def teams_page(request: Request, api: LeagueApiClientDep) -> HTMLResponse:
    async with api.session() as session:
        teams = await session.teams().wait()
    ordered = sorted(teams.data or [], key=lambda team: (not team.is_active, team.name))
    return _render(
        request,
        "teams.html",
        teams,
        back_href="/",
        back_label="Back to Home",
        teams=ordered,
    )


@router.get("/teams/{team_id}", response_class=HTMLResponse)
async def team_detail_page(
    request: Request, team_id: str, api: LeagueApiClientDep
) -> HTMLResponse:
    parsed_id = _parse_id(team_id)
    if parsed_id is None:
        return _render(
            request,
            "team_detail.html",
            not_found_state(),
            back_href="/teams",
            back_label="Back to Teams",
        )

    async with api.session() as session:
        team_state, roster_state = await session.settle(
            session.team(parsed_id), session.team_players(parsed_id)
        )

    return _render(
        request,
        "team_detail.html",
        team_state,
        back_href="/teams",
        back_label="Back to Teams",
        team=team_state.data,
        roster=roster_state.data or [],
        roster_error=roster_state.error,
    )


@router.get("/stats", response_class=HTMLResponse)
async def kd_leaderboard_page(
    request: Request, api: LeagueApiClientDep
) -> HTMLResponse:
    """Season KD leaderboard with per-major splits."""
    async with api.session() as session:
        stats = await session.kd_stats().wait()
    rows = formatting.sort_leaderboard(stats.data.players) if stats.data else []
    return _render(
        request,
        "stats.html",
        stats,
        back_href="/",
        back_label="Back to Home",
        is_empty=lambda data: not data.players,
        rows=rows,
    )


@router.get("/tournaments", response_class=HTMLResponse)
async def tournaments_page(request: Request, api: LeagueApiClientDep) -> HTMLResponse:
    async with api.session() as session:
        tournaments = await session.tournaments().wait()
    ordered = sorted(
        tournaments.data or [],
        key=lambda tournament: tournament.start_date or "",
        reverse=True,
    )
    return _render(
        request,
        "tournaments.html",
        tournaments,
        back_href="/",
        back_label="Back to Home",
        tournaments=ordered,
    )


@router.get("/tournaments/{tournament_id}", response_class=HTMLResponse)
async def tournament_detail_page(
    request: Request, tournament_id: str, api: LeagueApiClientDep
) -> HTMLResponse:
    parsed_id = _parse_id(tournament_id)
    if parsed_id is None:
        return _render(
            request,
            "tournament_detail.html",
            not_found_state(),
            back_href="/tournaments",
            back_label="Back to Tournaments",
        )

    async with api.session() as session:
        tournament_state, bracket_state = await session.settle(
            session.tournament(parsed_id), session.tournament_bracket(parsed_id)
        )

    rounds = (
        formatting.bracket_rounds(bracket_state.data.bracket)
        if bracket_state.data
        else []
    )
    return _render(
        request,
        "tournament_detail.html",
        tournament_state,
        back_href="/tournaments",
        back_label="Back to Tournaments",
        tournament=tournament_state.data,
        rounds=rounds,
        bracket_error=bracket_state.error,
    )


@router.get("/transfers", response_class=HTMLResponse)
async def transfers_page(
    request: Request,
    api: LeagueApiClientDep,
    settings: AppSettingsDep,
    season: Optional[str] = Query(None),
    team_id: Optional[str] = Query(None),
    transfer_type: Optional[str] = Query(None, alias="type"),
) -> HTMLResponse:
    """Transfer feed filtered by season, team and transfer type."""
    selected_season = settings.default_transfer_season if season is None else season
    selected_team = _parse_id(team_id) if team_id else None
    selected_type = transfer_type if transfer_type in TRANSFER_TYPES else None

    async with api.session() as session:
        transfers_state, teams_state = await session.settle(
            session.transfers(
                season=selected_season or None,
                team_id=selected_team,
                transfer_type=selected_type,
            ),
            session.teams(),
        )

    return _render(
        request,
        "transfers.html",
        transfers_state,
        back_href="/",
        back_label="Back to Home",
        is_empty=lambda data: not data.transfers,
        transfers=transfers_state.data.transfers if transfers_state.data else [],
        teams=teams_state.data or [],
        transfer_types=TRANSFER_TYPES,
        filters={
            "season": selected_season,
            "team_id": selected_team,
            "type": selected_type,
        },
    )


__all__ = ["router", "templates"]
