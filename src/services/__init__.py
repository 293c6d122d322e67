"""
Service Layer Package

Business logic services sitting between the pure progression engine and
its collaborators (local storage, the remote leaderboard source, metrics).

Core Services:
- ProgressionService: roadmap, challenges, reward crediting, leaderboards
"""

from src.services.progression_service import ProgressionService, LeaderboardSource

__all__ = [
    "ProgressionService",
    "LeaderboardSource",
]
