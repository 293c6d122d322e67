"""
ProgressionService - Progression Orchestration

Wires the pure engine functions to storage, the leaderboard source and
metrics. This is the only place where challenge rewards turn into XP.
"""

import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from src.config import LEADERBOARD_LIMIT, MILESTONE_UNLOCK_LEVELS_BEFORE
from src.exceptions import ExternalSourceError, ValidationError
from src.gamification.activity import award_xp, is_streak_at_risk, log_check_in, log_workout
from src.gamification.challenges import (
    accept_challenge,
    build_challenge_views,
    get_challenge_by_id,
    increment_category_progress,
    prune_accepted_ids,
)
from src.gamification.leaderboard import compose_leaderboard, current_user_from_snapshot, rank_profiles
from src.gamification.milestones import evaluate_roadmap, summarize_roadmap
from src.gamification.roadmap_data import get_progress_milestones
from src.models.challenge import Challenge, ChallengeView
from src.models.game_state import GameStateSnapshot
from src.models.leaderboard import LeaderboardEntry
from src.models.milestone import ProgressMilestone, RoadmapSummary
from src.observability.metrics import (
    track_activity_logged,
    track_challenge_completed,
    track_leaderboard_failure,
    track_milestones_evaluated,
)
from src.storage.local_store import LocalStore
from src.utils.datetime_helpers import now_utc, to_utc

logger = logging.getLogger(__name__)

# Async callable returning raw profile rows for the top `limit` players
LeaderboardSource = Callable[[int], Awaitable[List[Dict[str, Any]]]]


def _resolve_now(now: Optional[datetime]) -> datetime:
    """Caller-supplied time as aware UTC, defaulting to the current time"""
    return now_utc() if now is None else to_utc(now)


class ProgressionService:
    """
    Service for progression features.

    Responsibilities:
    - Roadmap evaluation against the stored game state
    - Challenge acceptance, progress and completion
    - Crediting challenge rewards exactly once
    - Workouts and daily check-ins
    - Leaderboard composition with a degraded fallback
    """

    def __init__(
        self,
        store: LocalStore,
        leaderboard_source: Optional[LeaderboardSource] = None,
        milestones: Optional[List[ProgressMilestone]] = None,
        lookahead: int = MILESTONE_UNLOCK_LEVELS_BEFORE
    ):
        """
        Initialize ProgressionService.

        Args:
            store: Persistence for game state and challenges
            leaderboard_source: Remote profile fetcher (optional)
            milestones: Milestone catalog, defaults to the built-in roadmap
            lookahead: Levels before its nominal level that a milestone unlocks
        """
        self.store = store
        self.leaderboard_source = leaderboard_source
        self.milestones = milestones if milestones is not None else get_progress_milestones()
        self.lookahead = lookahead
        logger.debug(f"ProgressionService initialized with {len(self.milestones)} milestones")

    # ==========================================
    # Roadmap
    # ==========================================

    async def get_roadmap(self) -> Tuple[List[ProgressMilestone], RoadmapSummary]:
        """Evaluate every milestone against the stored snapshot"""
        snapshot = await self.store.load_game_state()
        evaluated = evaluate_roadmap(self.milestones, snapshot, self.lookahead)
        track_milestones_evaluated(len(evaluated))
        return evaluated, summarize_roadmap(evaluated)

    # ==========================================
    # Challenges
    # ==========================================

    async def get_challenges(self, now: Optional[datetime] = None) -> List[ChallengeView]:
        """
        Build challenge views, crediting any challenge completed since the last call.

        A challenge that reached its target without a completion stamp is
        stamped here; the stamp is persisted before the reward is credited,
        so a later call never credits it again.

        Args:
            now: Current time (defaults to UTC now)

        Returns:
            Views for every unexpired challenge
        """
        now = _resolve_now(now)
        catalog = await self.store.load_challenges(now)
        accepted_ids = prune_accepted_ids(await self.store.load_accepted_ids(), catalog)

        views = build_challenge_views(catalog, accepted_ids, now)
        newly_completed = [view.challenge for view in views if view.newly_completed]

        if newly_completed:
            stamped = {challenge.id: challenge for challenge in newly_completed}
            catalog = [stamped.get(challenge.id, challenge) for challenge in catalog]
            await self.store.save_challenges(catalog)
            await self._credit_rewards(newly_completed)

        return views

    async def accept_challenge(self, challenge_id: str, now: Optional[datetime] = None) -> Tuple[str, ...]:
        """
        Accept a challenge from the catalog.

        Returns:
            Accepted ids after the call (unchanged if already accepted)

        Raises:
            ValidationError: if the id is not in the catalog
        """
        now = _resolve_now(now)
        catalog = await self.store.load_challenges(now)

        if get_challenge_by_id(catalog, challenge_id) is None:
            raise ValidationError(
                message=f"Unknown challenge: {challenge_id}",
                field="challenge_id",
                value=challenge_id,
                operation="accept_challenge",
            )

        accepted_ids = await self.store.load_accepted_ids()
        updated_ids = accept_challenge(accepted_ids, challenge_id)

        if updated_ids != tuple(accepted_ids):
            await self.store.save_accepted_ids(updated_ids)
            logger.info(f"Accepted challenge {challenge_id}")

        return updated_ids

    async def record_activity(
        self,
        category: str,
        amount: float,
        now: Optional[datetime] = None
    ) -> List[Challenge]:
        """
        Add progress to every accepted challenge in a category.

        Args:
            category: Challenge category (energy, workout, streak, ...)
            amount: Progress to add, must not be negative
            now: Current time (defaults to UTC now)

        Returns:
            Challenges completed by this activity
        """
        now = _resolve_now(now)
        catalog = await self.store.load_challenges(now)
        accepted_ids = prune_accepted_ids(await self.store.load_accepted_ids(), catalog)

        updated, newly_completed = increment_category_progress(catalog, accepted_ids, category, amount, now)

        if updated != catalog:
            await self.store.save_challenges(updated)
        if newly_completed:
            await self._credit_rewards(newly_completed)

        return newly_completed

    async def _credit_rewards(self, completed: Sequence[Challenge]) -> GameStateSnapshot:
        """Add XP and completion counts for freshly completed challenges"""
        snapshot = await self.store.load_game_state()
        reward = sum(challenge.xp_reward for challenge in completed)

        updated = award_xp(snapshot, reward).model_copy(update={
            "challenges_completed": snapshot.challenges_completed + len(completed),
        })
        await self.store.save_game_state(updated)

        for challenge in completed:
            track_challenge_completed(challenge.category, challenge.xp_reward)

        logger.info(f"Credited {reward} XP for {len(completed)} completed challenge(s)")

        return updated

    # ==========================================
    # Activity
    # ==========================================

    async def log_workout(self) -> GameStateSnapshot:
        """
        Log a completed workout.

        Adds the workout XP and bumps workouts_completed. Workout challenges
        move only through record_activity.

        Returns:
            Game state after the workout
        """
        snapshot = log_workout(await self.store.load_game_state())
        await self.store.save_game_state(snapshot)
        track_activity_logged("workout")
        logger.info(f"Logged workout #{snapshot.workouts_completed} ({snapshot.total_xp} XP)")

        return snapshot

    async def log_check_in(self, now: Optional[datetime] = None) -> GameStateSnapshot:
        """
        Log a daily check-in.

        Updates the streak from the time since the previous check-in and adds
        the check-in XP.

        Returns:
            Game state after the check-in
        """
        now = _resolve_now(now)
        snapshot = log_check_in(await self.store.load_game_state(), now)
        await self.store.save_game_state(snapshot)
        track_activity_logged("check_in")
        logger.info(
            f"Logged check-in at {now.isoformat()}: streak {snapshot.current_streak} "
            f"(best {snapshot.best_streak})"
        )
        return snapshot

    async def is_streak_at_risk(self, now: Optional[datetime] = None) -> bool:
        """Whether the stored streak is about to lapse"""
        snapshot = await self.store.load_game_state()
        return is_streak_at_risk(snapshot, _resolve_now(now))

    # ==========================================
    # Leaderboard
    # ==========================================

    async def fetch_ranked_profiles(self, limit: int = LEADERBOARD_LIMIT) -> List[LeaderboardEntry]:
        """
        Fetch and rank the top `limit` profiles.

        Raises:
            ExternalSourceError: if the leaderboard source fails
        """
        if self.leaderboard_source is None:
            return []

        try:
            rows = await self.leaderboard_source(limit)
        except Exception as e:
            raise ExternalSourceError(
                message=f"Leaderboard fetch failed: {e}",
                source="leaderboard",
                operation="fetch_ranked_profiles",
                cause=e,
            ) from e

        return rank_profiles(rows, limit)

    async def get_leaderboard(
        self,
        user_id: Optional[str],
        name: Optional[str] = None,
        location: Optional[str] = None,
        avatar: Optional[str] = None
    ) -> List[LeaderboardEntry]:
        """
        Compose the leaderboard for a viewing player.

        A failing source degrades to an empty ranking, so the player still
        sees their own entry.
        """
        try:
            top_entries = await self.fetch_ranked_profiles()
        except ExternalSourceError:
            track_leaderboard_failure()
            top_entries = []

        snapshot = await self.store.load_game_state()
        current_user = current_user_from_snapshot(user_id, snapshot, name, location, avatar)
        return compose_leaderboard(top_entries, current_user)
