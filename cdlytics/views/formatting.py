"""
Static presentation rules shared by the page templates.

Everything here is a pure function of API data: color buckets for KD ratios,
medal classes for the top of a leaderboard, avatar and logo fallbacks, and
human-readable dates and transfer sentences.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence

from cdlytics.schemas import (
    BracketData,
    BracketMatch,
    Player,
    PlayerStats,
    PlayerTransfer,
    Team,
)

FALLBACK_AVATAR = "/assets/avatars/Unknown.webp"
MISSING = "—"

MAJOR_LABELS = {
    "1": "Major 1",
    "2": "Major 2",
    "3": "Major 3",
    "4": "Major 4",
    "5": "Champs",
}

_MEDALS = {1: "gold", 2: "silver", 3: "bronze"}

# KD at which the progress bar is full.
_KD_PROGRESS_CAP = 2.0


def kd_color(kd: Optional[float]) -> str:
    """Bucket a KD (or KDA) ratio into the site's color scale."""
    value = kd or 0.0
    if value >= 1.2:
        return "green"
    if value >= 1.0:
        return "blue"
    if value >= 0.9:
        return "yellow"
    return "red"


def plus_minus_color(value: Optional[float]) -> str:
    if value is None or value == 0:
        return "gray"
    return "green" if value > 0 else "red"


def kd_progress(kd: Optional[float]) -> float:
    """Percentage width for a KD bar, full at a 2.0 KD."""
    if not kd or kd <= 0:
        return 0.0
    return min(kd / _KD_PROGRESS_CAP * 100.0, 100.0)


def medal_class(rank: int) -> Optional[str]:
    return _MEDALS.get(rank)


@dataclass(frozen=True)
class Avatar:
    """Image sources tried in order, ending in the gamertag initial."""

    sources: tuple[str, ...]
    initial: str
    alt: str

    @property
    def src(self) -> str:
        return self.sources[0]

    @property
    def fallback(self) -> str:
        return self.sources[-1]


def gamertag_avatar_url(gamertag: str) -> str:
    return f"/assets/avatars/{gamertag}.webp"


def avatar_chain(gamertag: str, avatar_url: Optional[str] = None) -> Avatar:
    sources: List[str] = []
    if avatar_url:
        sources.append(avatar_url)
    if FALLBACK_AVATAR not in sources:
        sources.append(FALLBACK_AVATAR)
    initial = gamertag[:1].upper() if gamertag else "?"
    return Avatar(sources=tuple(sources), initial=initial, alt=f"{gamertag} avatar")


def player_avatar(player: Player) -> Avatar:
    return avatar_chain(player.gamertag, player.avatar_url)


@dataclass(frozen=True)
class TeamBadge:
    logo_url: Optional[str]
    abbreviation: str
    alt: str


def team_badge(team: Team) -> TeamBadge:
    return TeamBadge(
        logo_url=team.logo_url or None,
        abbreviation=team.abbreviation,
        alt=f"{team.name} logo",
    )


def player_subtitle(player: Player) -> str:
    """Secondary line under a gamertag: real name, country and role."""
    parts = [player.full_name or "cdl player"]
    if player.country:
        parts.append(player.country)
    if player.role:
        parts.append(player.role)
    return " • ".join(parts)


def transfer_description(transfer: PlayerTransfer) -> str:
    player_name = transfer.player.gamertag if transfer.player else "Unknown Player"
    from_team = transfer.from_team.name if transfer.from_team else "Free Agent"
    to_team = transfer.to_team.name if transfer.to_team else "Unknown Team"
    role = transfer.role or "Player"

    if from_team == "Free Agent":
        return f"{player_name} joins {to_team} as {role}"
    if to_team == "Free Agent":
        return f"{from_team} parts ways with {player_name}"
    return (
        f"{player_name} moves from {from_team} to {to_team}, "
        f"taking on the {role} position"
    )


def _parse_date(value: str) -> Optional[date]:
    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def format_date(value: Optional[str | date | datetime], style: str = "long") -> str:
    """Render ``value`` as "January 5, 2025" (long) or "Jan 5, 2025" (short)."""
    if value is None or value == "":
        return MISSING
    if isinstance(value, datetime):
        parsed: Optional[date] = value.date()
    elif isinstance(value, date):
        parsed = value
    else:
        parsed = _parse_date(value)
        if parsed is None:
            return value
    month = "%B" if style == "long" else "%b"
    return f"{parsed.strftime(month)} {parsed.day}, {parsed.year}"


def format_ratio(value: Optional[float], digits: int = 2, missing: str = "0.00") -> str:
    if value is None:
        return missing
    return f"{value:.{digits}f}"


def format_count(value: Optional[int]) -> str:
    if value is None:
        return "0"
    return f"{value:,}"


def sort_leaderboard(players: Iterable[PlayerStats]) -> List[PlayerStats]:
    """Order leaderboard rows by season KD, best first."""
    return sorted(players, key=lambda row: row.season_kd or 0.0, reverse=True)


def major_kd(row: PlayerStats, major_id: str) -> Optional[float]:
    return row.majors.get(major_id) if row.majors else None


def bracket_rounds(bracket: BracketData) -> Sequence[tuple[str, List[BracketMatch]]]:
    """Bracket sections in display order, skipping empty rounds."""
    labels = (
        ("winners_r1", "Winners Round 1"),
        ("winners_r2", "Winners Round 2"),
        ("winners_finals", "Winners Finals"),
        ("elim_r1", "Elimination Round 1"),
        ("elim_r2", "Elimination Round 2"),
        ("elim_r3", "Elimination Round 3"),
        ("elim_finals", "Elimination Finals"),
        ("grand_finals", "Grand Finals"),
    )
    rounds = []
    for key, label in labels:
        matches: List[BracketMatch] = getattr(bracket, key)
        if matches:
            rounds.append((label, sorted(matches, key=lambda m: m.bracket_position)))
    return rounds
