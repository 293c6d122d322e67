"""Challenge models for the progression engine"""
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from src.utils.datetime_helpers import optional_to_utc


class ChallengeType(str, Enum):
    """Challenge cadence"""
    DAILY = "daily"
    WEEKLY = "weekly"
    SPECIAL = "special"


class ChallengeState(str, Enum):
    """Derived lifecycle state, never stored"""
    AVAILABLE = "available"
    ACTIVE = "active"
    COMPLETED = "completed"
    EXPIRED = "expired"


class Challenge(BaseModel):
    """Time-boxed objective with its own reward and expiry"""
    id: str
    title: str
    description: str = ""
    type: ChallengeType
    category: str  # free-form tag: energy, workout, streak, social
    target_value: float = Field(..., gt=0)
    current_progress: float = Field(default=0, ge=0)
    xp_reward: int = Field(default=0, ge=0)
    is_premium: bool = False
    expires_at: datetime
    completed_at: Optional[datetime] = None

    @field_validator('expires_at', 'completed_at')
    @classmethod
    def ensure_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Naive timestamps are interpreted as UTC"""
        return optional_to_utc(v)


class ChallengeView(BaseModel):
    """Challenge annotated with its lifecycle state for one read pass"""
    challenge: Challenge
    is_accepted: bool
    state: ChallengeState
    progress_percentage: float
    newly_completed: bool = False
    time_remaining: timedelta = timedelta(0)
    days_left: int = 0


class ChallengeProgressUpdate(BaseModel):
    """Outcome of applying progress to a single challenge"""
    challenge: Challenge
    state: ChallengeState
    newly_completed: bool = False
    applied: bool = False
