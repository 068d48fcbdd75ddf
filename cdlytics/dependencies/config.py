"""
Settings dependency for the page routers.
"""

from typing import Annotated

from fastapi import Depends

from cdlytics.core.config import AppSettings, get_settings


def get_app_settings() -> AppSettings:
    """FastAPI dependency returning the cached application settings."""
    return get_settings()


AppSettingsDep = Annotated[AppSettings, Depends(get_app_settings)]

__all__ = ["AppSettingsDep", "get_app_settings"]
