"""
Pydantic models mirroring the league API payloads.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class LeagueModel(BaseModel):
    """Base model that tolerates fields the API adds over time."""

    model_config = ConfigDict(extra="ignore")


class Player(LeagueModel):
    id: int
    gamertag: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    country: Optional[str] = None
    birthdate: Optional[str] = None
    role: Optional[str] = None
    is_active: bool = True
    liquipedia_url: Optional[str] = None
    twitter_handle: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class Team(LeagueModel):
    id: int
    name: str
    abbreviation: str
    city: Optional[str] = None
    logo_url: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    founded_date: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Tournament(LeagueModel):
    id: int
    name: str
    season_id: Optional[int] = None
    tournament_type: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    prize_pool: Optional[float] = None
    location: Optional[str] = None
    tournament_format: Optional[str] = None
    liquipedia_url: Optional[str] = None


class PlayerTransfer(LeagueModel):
    id: int
    player_id: int
    from_team_id: Optional[int] = None
    to_team_id: Optional[int] = None
    transfer_date: Optional[str] = None
    transfer_type: Optional[str] = None
    role: Optional[str] = None
    season: Optional[str] = None
    description: Optional[str] = None
    player: Optional[Player] = None
    from_team: Optional[Team] = None
    to_team: Optional[Team] = None


class TransfersResponse(LeagueModel):
    transfers: List[PlayerTransfer] = Field(default_factory=list)
    count: int = 0
    timestamp: Optional[int] = None


class PlayerStats(LeagueModel):
    """One leaderboard row of season KD numbers."""

    player_id: int
    gamertag: str
    team_abbr: Optional[str] = None
    season_kd: Optional[float] = None
    season_kd_plus_minus: Optional[float] = None
    season_kills: Optional[int] = None
    season_deaths: Optional[int] = None
    season_assists: Optional[int] = None
    majors: Dict[str, Optional[float]] = Field(
        default_factory=dict,
        description="KD per major keyed by major number (5 is Champs).",
    )


class StatsResponse(LeagueModel):
    players: List[PlayerStats] = Field(default_factory=list)
    count: int = 0
    timestamp: Optional[int] = None


class TournamentKDStats(LeagueModel):
    tournament_id: int
    tournament_name: str
    kills: int = 0
    deaths: int = 0
    assists: int = 0
    maps_played: int = 0
    matches: int = 0
    kd_ratio: float = 0.0
    kda_ratio: float = 0.0


class PlayerKDResponse(LeagueModel):
    player_id: int
    gamertag: Optional[str] = None
    avatar_url: Optional[str] = None
    total_kills: int = 0
    total_deaths: int = 0
    total_assists: int = 0
    avg_kd: float = 0.0
    avg_kda: float = 0.0
    hp_kd_ratio: float = 0.0
    snd_kd_ratio: float = 0.0
    control_kd_ratio: float = 0.0
    tournament_stats: List[TournamentKDStats] = Field(default_factory=list)


class PlayerMatchesResponse(LeagueModel):
    player_id: int
    matches: List[Dict[str, Any]] = Field(default_factory=list)
    events: List[Dict[str, Any]] = Field(default_factory=list)
    total: int = 0

    @property
    def entries(self) -> List[Dict[str, Any]]:
        """Match rows regardless of which key this API revision uses."""
        return self.matches or self.events


class BracketMatch(LeagueModel):
    id: int
    team1_id: Optional[int] = None
    team2_id: Optional[int] = None
    team1_name: Optional[str] = None
    team1_abbr: Optional[str] = None
    team1_logo: Optional[str] = None
    team2_name: Optional[str] = None
    team2_abbr: Optional[str] = None
    team2_logo: Optional[str] = None
    team1_score: int = 0
    team2_score: int = 0
    winner_id: Optional[int] = None
    bracket_position: int = 0
    match_date: Optional[str] = None


class BracketData(LeagueModel):
    winners_r1: List[BracketMatch] = Field(default_factory=list)
    winners_r2: List[BracketMatch] = Field(default_factory=list)
    winners_finals: List[BracketMatch] = Field(default_factory=list)
    elim_r1: List[BracketMatch] = Field(default_factory=list)
    elim_r2: List[BracketMatch] = Field(default_factory=list)
    elim_r3: List[BracketMatch] = Field(default_factory=list)
    elim_finals: List[BracketMatch] = Field(default_factory=list)
    grand_finals: List[BracketMatch] = Field(default_factory=list)


class BracketResponse(LeagueModel):
    tournament_id: int
    tournament_name: Optional[str] = None
    bracket: BracketData = Field(default_factory=BracketData)
    total_matches: int = 0
