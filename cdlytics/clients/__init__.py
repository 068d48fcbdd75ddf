"""Expose constructed client wrappers."""

from .league_api import LeagueApiClient, LeagueApiSession, build_query, get_api_url

__all__ = [
    "LeagueApiClient",
    "LeagueApiSession",
    "build_query",
    "get_api_url",
]
