"""
Factory functions to provide shared clients as FastAPI dependencies.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from cdlytics.clients import LeagueApiClient
from cdlytics.core.config import get_settings


@lru_cache()
def get_league_api_client() -> LeagueApiClient:
    """Provide the league API client configured from settings."""
    settings = get_settings()
    return LeagueApiClient(settings.league_api)


LeagueApiClientDep = Annotated[LeagueApiClient, Depends(get_league_api_client)]

__all__ = ["LeagueApiClientDep", "get_league_api_client"]
