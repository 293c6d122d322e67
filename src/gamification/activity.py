"""
Player Activity Rules

Counter-producing actions and the states derived from them:
- XP awards with level sync
- Workouts (+WORKOUT_XP_REWARD XP, workouts_completed + 1)
- Daily check-ins (streak update, +CHECK_IN_XP_REWARD XP)
- Streak-at-risk warning
- Energy status band

Streak rules, measured from last_streak_activity:
- No previous check-in: the streak starts at 1
- 48h or more since the last check-in: the streak resets to 1
- 24h or more: the streak extends by 1 and best_streak follows it up
- Under 24h: only last_streak_activity moves forward

All functions are pure and return a new snapshot.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from src.config import CHECK_IN_XP_REWARD, WORKOUT_XP_REWARD
from src.exceptions import ValidationError
from src.gamification.level_curve import level_from_xp
from src.models.game_state import EnergyStatus, GameStateSnapshot
from src.utils.datetime_helpers import to_utc

logger = logging.getLogger(__name__)

STREAK_CONTINUE_AFTER = timedelta(hours=24)
STREAK_RESET_AFTER = timedelta(hours=48)
# Strictly inside this window the streak is flagged as at risk
STREAK_RISK_WINDOW = (timedelta(hours=20), timedelta(hours=24))

HIGH_ENERGY_PERCENTAGE = 70
MEDIUM_ENERGY_PERCENTAGE = 40


# ============================================
# XP
# ============================================

def award_xp(snapshot: GameStateSnapshot, amount: int) -> GameStateSnapshot:
    """
    Add XP to the total, daily and weekly counters

    The level follows the XP curve upward and never drops.

    Raises:
        ValidationError: if amount is negative
    """
    if amount < 0:
        raise ValidationError(
            message="XP amount must not be negative",
            field="amount",
            value=amount,
            operation="award_xp",
        )

    new_total = snapshot.total_xp + amount
    new_level = max(snapshot.level, level_from_xp(new_total))
    if new_level > snapshot.level:
        logger.info(f"Level up: {snapshot.level} -> {new_level} ({new_total} XP)")

    return snapshot.model_copy(update={
        "total_xp": new_total,
        "level": new_level,
        "daily_xp": snapshot.daily_xp + amount,
        "weekly_xp": snapshot.weekly_xp + amount,
    })


def log_workout(snapshot: GameStateSnapshot, xp_reward: int = WORKOUT_XP_REWARD) -> GameStateSnapshot:
    """Count a completed workout and award its XP"""
    updated = snapshot.model_copy(update={"workouts_completed": snapshot.workouts_completed + 1})
    return award_xp(updated, xp_reward)


# ============================================
# Streaks
# ============================================

def time_since_check_in(snapshot: GameStateSnapshot, now: datetime) -> Optional[timedelta]:
    """Elapsed time since the last check-in, None if there never was one"""
    if snapshot.last_streak_activity is None:
        return None
    return to_utc(now) - snapshot.last_streak_activity


def update_streak(snapshot: GameStateSnapshot, now: datetime) -> GameStateSnapshot:
    """
    Apply a check-in at `now` to the streak counters

    Args:
        snapshot: Current game state
        now: Check-in time (naive values are treated as UTC)

    Returns:
        Snapshot with current/best streak and last_streak_activity updated
    """
    now = to_utc(now)
    elapsed = time_since_check_in(snapshot, now)
    current = snapshot.current_streak
    last_activity = now

    if elapsed is None:
        current = 1
    elif elapsed >= STREAK_RESET_AFTER:
        current = 1
    elif elapsed >= STREAK_CONTINUE_AFTER:
        current += 1
    elif elapsed < timedelta(0):
        # Check-in older than the stored one: keep the later timestamp
        last_activity = snapshot.last_streak_activity

    if current != snapshot.current_streak:
        logger.info(f"Updated streak: {snapshot.current_streak} → {current} days")

    return snapshot.model_copy(update={
        "current_streak": current,
        "best_streak": max(snapshot.best_streak, current),
        "last_streak_activity": last_activity,
    })


def log_check_in(
    snapshot: GameStateSnapshot,
    now: datetime,
    xp_reward: int = CHECK_IN_XP_REWARD
) -> GameStateSnapshot:
    """Record a daily check-in: update the streak and award its XP"""
    return award_xp(update_streak(snapshot, now), xp_reward)


def is_streak_at_risk(snapshot: GameStateSnapshot, now: datetime) -> bool:
    """True when the last check-in was more than 20h but less than 24h ago"""
    elapsed = time_since_check_in(snapshot, now)
    if elapsed is None:
        return False
    lower, upper = STREAK_RISK_WINDOW
    return lower < elapsed < upper


# ============================================
# Energy
# ============================================

def get_energy_status(snapshot: GameStateSnapshot) -> EnergyStatus:
    """Band the current energy as a percentage of the cap"""
    if snapshot.max_energy <= 0:
        return EnergyStatus.LOW

    percentage = snapshot.current_energy * 100 / snapshot.max_energy
    if percentage >= HIGH_ENERGY_PERCENTAGE:
        return EnergyStatus.HIGH
    if percentage >= MEDIUM_ENERGY_PERCENTAGE:
        return EnergyStatus.MEDIUM
    return EnergyStatus.LOW
