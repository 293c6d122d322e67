"""Global test fixtures and utilities for progression engine tests"""
import pytest
from unittest.mock import AsyncMock
from datetime import datetime, timedelta, timezone

from src.models.challenge import Challenge, ChallengeType
from src.models.game_state import GameStateSnapshot
from src.models.leaderboard import LeaderboardEntry
from src.storage.local_store import LocalStore


# ============================================================================
# Time Fixtures
# ============================================================================

@pytest.fixture
def now():
    """Fixed reference instant for expiry calculations"""
    return datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


# ============================================================================
# Game State Fixtures
# ============================================================================

@pytest.fixture
def mid_game_snapshot():
    """Player a few weeks in: level 8, broken streak with a longer best"""
    return GameStateSnapshot(
        level=8,
        total_xp=4950,
        current_streak=12,
        best_streak=24,
        workouts_completed=47,
        challenges_completed=23,
        current_energy=7,
        max_energy=10,
        daily_xp=350,
        weekly_xp=1850,
        friends_count=8,
    )


@pytest.fixture
def new_player_snapshot():
    """Brand-new player with no progress"""
    return GameStateSnapshot(level=1, total_xp=0, current_energy=10, max_energy=10)


# ============================================================================
# Challenge Fixtures
# ============================================================================

@pytest.fixture
def make_challenge(now):
    """Factory for challenges expiring relative to the reference instant"""
    def _make(
        challenge_id="c1",
        category="workout",
        target_value=5,
        current_progress=0,
        xp_reward=200,
        expires_in=timedelta(days=3),
        completed_at=None,
    ):
        return Challenge(
            id=challenge_id,
            title=f"Challenge {challenge_id}",
            type=ChallengeType.DAILY,
            category=category,
            target_value=target_value,
            current_progress=current_progress,
            xp_reward=xp_reward,
            expires_at=now + expires_in,
            completed_at=completed_at,
        )
    return _make


# ============================================================================
# Leaderboard Fixtures
# ============================================================================

@pytest.fixture
def profile_rows():
    """Raw profile rows as returned by the remote profile table"""
    return [
        {"id": "u2", "first_name": "Layla", "last_name": "Hassan", "location": "Marina",
         "total_xp": 3200, "current_streak": 9, "level": 6, "avatar_url": None},
        {"id": "u1", "first_name": "Omar", "last_name": "Khalid", "location": "DIFC",
         "total_xp": 5400, "current_streak": 30, "level": 8, "avatar_url": "🦁"},
        {"id": "u3", "first_name": None, "last_name": None, "location": None,
         "total_xp": None, "current_streak": None, "level": None, "avatar_url": None},
    ]


@pytest.fixture
def top_entries():
    """Factory for ranked entries u1..uN with descending points"""
    def _make(count):
        return [
            LeaderboardEntry(
                user_id=f"u{i}",
                name=f"Player {i}.",
                location="Dubai",
                points=(count - i + 1) * 100,
                rank=i,
            )
            for i in range(1, count + 1)
        ]
    return _make


# ============================================================================
# Storage Fixtures
# ============================================================================

@pytest.fixture
def local_store(tmp_path):
    """LocalStore writing to a per-test temporary directory"""
    return LocalStore(data_path=tmp_path / "data")


@pytest.fixture
def mock_leaderboard_source(profile_rows):
    """Async leaderboard source returning the sample profile rows"""
    return AsyncMock(return_value=profile_rows)
