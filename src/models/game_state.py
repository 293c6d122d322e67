"""Game state models for the progression engine"""
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.utils.datetime_helpers import optional_to_utc


class GameStateSnapshot(BaseModel):
    """
    Read-only point-in-time view of a player's core counters

    Produced and owned by the caller; the engine never mutates it and
    returns updated copies instead.
    best_streak >= current_streak is expected historically but not enforced.
    """
    model_config = ConfigDict(frozen=True)

    level: int = Field(default=1, ge=1)
    total_xp: int = Field(default=0, ge=0)
    current_streak: int = Field(default=0, ge=0)
    best_streak: int = Field(default=0, ge=0)
    workouts_completed: int = Field(default=0, ge=0)
    challenges_completed: int = Field(default=0, ge=0)
    current_energy: float = Field(default=0, ge=0)
    max_energy: float = Field(default=10, ge=0)
    daily_xp: int = Field(default=0, ge=0)
    weekly_xp: int = Field(default=0, ge=0)
    friends_count: int = Field(default=0, ge=0)
    last_streak_activity: Optional[datetime] = None  # last daily check-in

    @field_validator('last_streak_activity')
    @classmethod
    def ensure_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Naive timestamps are interpreted as UTC"""
        return optional_to_utc(v)

    @model_validator(mode='after')
    def check_energy_bounds(self) -> 'GameStateSnapshot':
        """Current energy cannot exceed the energy cap"""
        if self.current_energy > self.max_energy:
            raise ValueError(
                f"current_energy ({self.current_energy}) exceeds max_energy ({self.max_energy})"
            )
        return self


class EnergyStatus(str, Enum):
    """Energy band relative to the cap"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class LevelProgress(BaseModel):
    """Progress through the current level on the quadratic XP curve"""
    level: int
    current_level_xp: int  # XP floor of the level
    next_level_xp: int  # XP floor of the next level
    xp_in_level: int
    xp_to_next_level: int
    percentage: float  # 0-100
