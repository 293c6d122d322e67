"""
Progression & Ranking Engine

Pure rules turning raw counters into derived gamification state:
- Level curve (XP <-> level)
- Milestone evaluation for the progress roadmap
- Challenge lifecycle (accept, progress, complete, expire)
- Leaderboard composition
- Activity rules (workouts, check-in streaks, energy status)

Every function takes its inputs explicitly (including "now" for expiry)
and returns new records; nothing here mutates its arguments.
"""

from src.gamification.level_curve import xp_for_level, level_from_xp, get_level_progress
from src.gamification.milestones import (
    requirement_progress,
    requirement_percentage,
    is_milestone_unlocked,
    is_milestone_completed,
    evaluate_milestone,
    evaluate_roadmap,
    summarize_roadmap,
    load_milestone_catalog,
)
from src.gamification.challenges import (
    accept_challenge,
    apply_challenge_progress,
    build_challenge_views,
    get_challenge_state,
    is_challenge_expired,
)
from src.gamification.leaderboard import compose_leaderboard, rank_profiles
from src.gamification.activity import (
    award_xp,
    log_workout,
    log_check_in,
    update_streak,
    is_streak_at_risk,
    get_energy_status,
)

__all__ = [
    "xp_for_level",
    "level_from_xp",
    "get_level_progress",
    "requirement_progress",
    "requirement_percentage",
    "is_milestone_unlocked",
    "is_milestone_completed",
    "evaluate_milestone",
    "evaluate_roadmap",
    "summarize_roadmap",
    "load_milestone_catalog",
    "accept_challenge",
    "apply_challenge_progress",
    "build_challenge_views",
    "get_challenge_state",
    "is_challenge_expired",
    "compose_leaderboard",
    "rank_profiles",
    "award_xp",
    "log_workout",
    "log_check_in",
    "update_streak",
    "is_streak_at_risk",
    "get_energy_status",
]
