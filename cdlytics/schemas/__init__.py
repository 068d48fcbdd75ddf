"""Public schema exports."""

from .league import (
    BracketData,
    BracketMatch,
    BracketResponse,
    Player,
    PlayerKDResponse,
    PlayerMatchesResponse,
    PlayerStats,
    PlayerTransfer,
    StatsResponse,
    Team,
    Tournament,
    TournamentKDStats,
    TransfersResponse,
)

__all__ = [
    "BracketData",
    "BracketMatch",
    "BracketResponse",
    "Player",
    "PlayerKDResponse",
    "PlayerMatchesResponse",
    "PlayerStats",
    "PlayerTransfer",
    "StatsResponse",
    "Team",
    "Tournament",
    "TournamentKDStats",
    "TransfersResponse",
]
