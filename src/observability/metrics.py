"""
Prometheus metrics definitions for the progression engine.

Metrics are recorded by the orchestration service, never by the pure engine
functions, so evaluation stays free of side effects.

- Roadmap metrics: milestone evaluation volume
- Challenge metrics: completions and XP credited
- Activity metrics: workouts and check-ins logged
- Collaborator metrics: leaderboard source failures, storage fallbacks
"""

import logging
from prometheus_client import Counter

from src.config import ENABLE_PROMETHEUS

logger = logging.getLogger(__name__)

# =============================================================================
# Roadmap Metrics
# =============================================================================

milestones_evaluated_total = Counter(
    "milestones_evaluated_total",
    "Total milestone evaluations performed",
)

# =============================================================================
# Challenge Metrics
# =============================================================================

challenges_completed_total = Counter(
    "challenges_completed_total",
    "Total challenges completed",
    ["category"],
)

challenge_xp_credited_total = Counter(
    "challenge_xp_credited_total",
    "Total XP credited from challenge rewards",
)

# =============================================================================
# Activity Metrics
# =============================================================================

activities_logged_total = Counter(
    "activities_logged_total",
    "Total player activities logged",
    ["kind"],  # kind: workout/check_in
)

# =============================================================================
# Collaborator Metrics
# =============================================================================

leaderboard_fetch_failures_total = Counter(
    "leaderboard_fetch_failures_total",
    "Total failed leaderboard source fetches",
)

storage_fallbacks_total = Counter(
    "storage_fallbacks_total",
    "Total loads that fell back to default records",
    ["key"],  # key: game_state/challenges/accepted_challenges
)


# =============================================================================
# Helper Functions
# =============================================================================

def track_milestones_evaluated(count: int) -> None:
    """Record a roadmap evaluation pass"""
    if ENABLE_PROMETHEUS:
        milestones_evaluated_total.inc(count)


def track_challenge_completed(category: str, xp_reward: int) -> None:
    """Record a challenge completion and the XP it credited"""
    if ENABLE_PROMETHEUS:
        challenges_completed_total.labels(category=category).inc()
        challenge_xp_credited_total.inc(xp_reward)


def track_activity_logged(kind: str) -> None:
    """Record a logged workout or check-in"""
    if ENABLE_PROMETHEUS:
        activities_logged_total.labels(kind=kind).inc()


def track_leaderboard_failure() -> None:
    """Record a failed leaderboard fetch"""
    if ENABLE_PROMETHEUS:
        leaderboard_fetch_failures_total.inc()


def track_storage_fallback(key: str) -> None:
    """Record a load that fell back to defaults"""
    if ENABLE_PROMETHEUS:
        storage_fallbacks_total.labels(key=key).inc()
