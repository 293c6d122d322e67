"""
Progress Dashboards

Plain-text snapshot of a player's progression: level and XP, streak and
energy, roadmap progress, challenges and leaderboard standing.
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from src.config import LEADERBOARD_UNRANKED_POSITION, MILESTONE_UNLOCK_LEVELS_BEFORE
from src.gamification.activity import get_energy_status, is_streak_at_risk
from src.gamification.challenges import format_challenge_progress
from src.gamification.level_curve import get_level_progress
from src.gamification.milestones import unlock_level
from src.models.challenge import ChallengeState, ChallengeView
from src.models.game_state import GameStateSnapshot
from src.models.leaderboard import LeaderboardEntry
from src.models.milestone import RoadmapSummary

logger = logging.getLogger(__name__)


def _progress_bar(percentage: float, width: int = 20) -> str:
    filled = int(percentage / 100 * width)
    return "▓" * filled + "░" * (width - filled)


def build_progress_dashboard(
    snapshot: GameStateSnapshot,
    summary: RoadmapSummary,
    views: Sequence[ChallengeView],
    leaderboard: Optional[Sequence[LeaderboardEntry]] = None,
    lookahead: int = MILESTONE_UNLOCK_LEVELS_BEFORE,
    unranked_position: int = LEADERBOARD_UNRANKED_POSITION,
    now: Optional[datetime] = None
) -> str:
    """
    Generate the progress dashboard

    Args:
        snapshot: Current game state
        summary: Roadmap summary from summarize_roadmap
        views: Challenge views from build_challenge_views
        leaderboard: Composed leaderboard (optional)
        lookahead: Unlock lookahead used for the next milestone hint
        unranked_position: Sentinel rank marking a player outside the top-N
        now: Current time, enables the streak-at-risk warning

    Returns:
        Formatted dashboard string for display
    """
    level_progress = get_level_progress(snapshot.total_xp, snapshot.level)

    lines: List[str] = [
        "📊 **PROGRESS SNAPSHOT**",
        "",
        f"**Level {snapshot.level}** ⭐ {snapshot.total_xp} XP",
        f"{_progress_bar(level_progress.percentage)} {round(level_progress.percentage)}% "
        f"(+{level_progress.xp_to_next_level} XP to level {snapshot.level + 1})",
        f"🔥 {snapshot.current_streak}-day streak (best {snapshot.best_streak})",
        f"⚡ Energy {snapshot.current_energy:g}/{snapshot.max_energy:g} ({get_energy_status(snapshot).value})",
    ]
    if now is not None and is_streak_at_risk(snapshot, now):
        lines.append("⚠️ Streak at risk: check in before it resets")
    lines.append("")

    # Roadmap
    lines.append("🗺️ **ROADMAP**")
    if summary.total_count:
        lines.append(
            f"{summary.completed_count} / {summary.total_count} milestones "
            f"({round(summary.overall_progress)}% complete)"
        )
    else:
        lines.append("No milestones configured")

    if summary.current_milestone:
        current = summary.current_milestone
        lines.append(f"🎯 Current: {current.title} ({round(current.progress_percentage)}%)")
        for req in current.requirements:
            mark = "✅" if req.is_completed else "⬜"
            lines.append(f"  {mark} {req.description} ({req.current:g}/{req.target:g})")

    if summary.next_milestone:
        nxt = summary.next_milestone
        lines.append(f"🔜 Next: {nxt.title} (unlocks at level {unlock_level(nxt, lookahead)})")

    lines.append("")

    # Challenges
    open_views = [v for v in views if v.state != ChallengeState.COMPLETED]
    done_views = [v for v in views if v.state == ChallengeState.COMPLETED]

    lines.append("🏆 **CHALLENGES**")
    if views:
        for view in open_views:
            lines.append(f"  {format_challenge_progress(view)}")
        if done_views:
            lines.append(f"  {len(done_views)} completed")
    else:
        lines.append("No challenges available right now")

    # Leaderboard
    if leaderboard:
        me = next((e for e in leaderboard if e.is_current_user), None)
        lines.append("")
        lines.append("🥇 **LEADERBOARD**")
        if me is None:
            lines.append(f"Top {len(leaderboard)} players")
        elif me.rank != unranked_position:
            lines.append(f"You are #{me.rank} with {me.points} points")
        else:
            lines.append(f"You are outside the top {len(leaderboard) - 1} with {me.points} points")

    return "\n".join(lines)
