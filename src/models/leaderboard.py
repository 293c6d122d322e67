"""Leaderboard models"""
from typing import Optional
from pydantic import BaseModel, Field


class LeaderboardEntry(BaseModel):
    """Single leaderboard row, recomputed on every fetch"""
    user_id: str
    name: str
    location: str
    points: int = Field(default=0, ge=0)
    rank: int
    streak: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    avatar: Optional[str] = None
    is_current_user: bool = False


class CurrentUserRecord(BaseModel):
    """Partial record describing the viewing player"""
    user_id: Optional[str] = None
    name: Optional[str] = None
    location: Optional[str] = None
    points: Optional[int] = Field(default=None, ge=0)
    streak: Optional[int] = Field(default=None, ge=0)
    level: Optional[int] = Field(default=None, ge=1)
    avatar: Optional[str] = None
