"""
XP Level Curve

Maps total XP to a player level and to progress within that level.

Leveling Curve (quadratic):
- XP needed to reach level L from zero: (L - 1)^2 * 100
- Level 1: 0 XP, Level 2: 100 XP, Level 3: 400 XP, Level 4: 900 XP, ...
- Level L spans [(L - 1)^2 * 100, L^2 * 100)

The curve is a derivation helper only. A snapshot's level is expected to be
kept in sync with its XP by whoever credits XP; the engine never rewrites it.
"""

import logging
import math

from src.models.game_state import LevelProgress

logger = logging.getLogger(__name__)

LEVEL_XP_FACTOR = 100


def _normalize_level(level: int) -> int:
    if level < 1:
        logger.debug(f"Level {level} is below 1, treating as level 1")
        return 1
    return level


def xp_for_level(level: int) -> int:
    """Total XP required to reach `level` from zero"""
    level = _normalize_level(level)
    return (level - 1) ** 2 * LEVEL_XP_FACTOR


def level_from_xp(total_xp: int) -> int:
    """
    Level implied by a total XP amount

    Uses the integer square root so the result is exact at level floors
    (e.g. 400 XP is level 3, 399 XP is level 2). Negative XP is level 1.
    """
    if total_xp <= 0:
        return 1
    return math.isqrt(int(total_xp) // LEVEL_XP_FACTOR) + 1


def get_level_progress(total_xp: int, level: int) -> LevelProgress:
    """
    Calculate progress within the given level

    Args:
        total_xp: Player's total XP
        level: Player's current level (values below 1 are treated as 1)

    Returns:
        LevelProgress with the level's XP floor, the next level's floor,
        XP earned inside the level and a percentage clamped to [0, 100]
    """
    level = _normalize_level(level)
    current_level_xp = xp_for_level(level)
    next_level_xp = level ** 2 * LEVEL_XP_FACTOR
    span = next_level_xp - current_level_xp

    xp_in_level = total_xp - current_level_xp
    percentage = min(100.0, max(0.0, xp_in_level / span * 100))

    return LevelProgress(
        level=level,
        current_level_xp=current_level_xp,
        next_level_xp=next_level_xp,
        xp_in_level=max(0, xp_in_level),
        xp_to_next_level=max(0, next_level_xp - total_xp),
        percentage=percentage,
    )
