"""Expose dependency helpers for FastAPI routers."""

from .clients import LeagueApiClientDep, get_league_api_client
from .config import AppSettingsDep, get_app_settings

__all__ = [
    "AppSettingsDep",
    "LeagueApiClientDep",
    "get_app_settings",
    "get_league_api_client",
]
