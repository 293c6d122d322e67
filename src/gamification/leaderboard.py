"""
Leaderboard Composer

Ranks remote profile rows and merges the viewing player into the top-N list
so that they always appear exactly once.

A player outside the fetched window is appended with a sentinel rank rather
than a computed global rank; an exact rank needs a count query against the
profile table, which the composer has no access to.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from src.config import (
    DEFAULT_AVATAR,
    DEFAULT_LOCATION,
    DEFAULT_PLAYER_NAME,
    DEFAULT_RANKED_NAME,
    LEADERBOARD_LIMIT,
    LEADERBOARD_UNRANKED_POSITION,
)
from src.models.game_state import GameStateSnapshot
from src.models.leaderboard import CurrentUserRecord, LeaderboardEntry

logger = logging.getLogger(__name__)


def _display_name(first_name: Optional[str], last_name: Optional[str]) -> str:
    initial = last_name[0] if last_name else ""
    return f"{first_name or DEFAULT_RANKED_NAME} {initial}."


def rank_profiles(rows: Iterable[Dict[str, Any]], limit: int = LEADERBOARD_LIMIT) -> List[LeaderboardEntry]:
    """
    Convert profile rows into ranked leaderboard entries

    Args:
        rows: Profile rows with id, first_name, last_name, location,
            total_xp, current_streak, level, avatar_url
        limit: Size of the ranked window

    Returns:
        Entries sorted by points descending, rank = 1-based position
    """
    ordered = sorted(rows, key=lambda row: row.get("total_xp") or 0, reverse=True)[:limit]

    return [
        LeaderboardEntry(
            user_id=str(row["id"]),
            name=_display_name(row.get("first_name"), row.get("last_name")),
            location=row.get("location") or DEFAULT_LOCATION,
            points=row.get("total_xp") or 0,
            rank=position,
            streak=row.get("current_streak") or 0,
            level=row.get("level") or 1,
            avatar=row.get("avatar_url") or DEFAULT_AVATAR,
        )
        for position, row in enumerate(ordered, start=1)
    ]


def current_user_from_snapshot(
    user_id: Optional[str],
    snapshot: GameStateSnapshot,
    name: Optional[str] = None,
    location: Optional[str] = None,
    avatar: Optional[str] = None
) -> CurrentUserRecord:
    """Build the viewing player's partial record from their game state"""
    return CurrentUserRecord(
        user_id=user_id,
        name=name,
        location=location,
        points=snapshot.total_xp,
        streak=snapshot.current_streak,
        level=snapshot.level,
        avatar=avatar,
    )


def compose_leaderboard(
    top_entries: Sequence[LeaderboardEntry],
    current_user: Optional[CurrentUserRecord] = None,
    unranked_position: int = LEADERBOARD_UNRANKED_POSITION
) -> List[LeaderboardEntry]:
    """
    Merge the current player into a ranked top-N list

    - Player found in the list: only their entry is flagged, order kept
    - Player not found: a synthesized entry with `unranked_position` is appended
    - No player id: the list is returned with no entry flagged

    The input entries are never modified.
    """
    user_id = current_user.user_id if current_user else None

    composed: List[LeaderboardEntry] = []
    found = False
    for entry in top_entries:
        is_match = not found and user_id is not None and entry.user_id == user_id
        found = found or is_match
        composed.append(entry.model_copy(update={"is_current_user": is_match}))

    if user_id is None or found:
        return composed

    logger.debug(f"User {user_id} outside top {len(composed)}, appending with rank {unranked_position}")
    composed.append(LeaderboardEntry(
        user_id=user_id,
        name=current_user.name or DEFAULT_PLAYER_NAME,
        location=current_user.location or DEFAULT_LOCATION,
        points=current_user.points or 0,
        rank=unranked_position,
        streak=current_user.streak or 0,
        level=current_user.level or 1,
        avatar=current_user.avatar or DEFAULT_AVATAR,
        is_current_user=True,
    ))
    return composed


def filter_by_location(entries: Iterable[LeaderboardEntry], location: str) -> List[LeaderboardEntry]:
    """Entries for one location (DIFC, Marina, JBR, ...)"""
    return [entry for entry in entries if entry.location == location]
