"""
Challenge System

Time-boxed objectives the player can accept, progress and complete.

Lifecycle (derived on every read, never stored as a field):
- available: not accepted yet
- active: accepted, below target, not expired
- completed: target reached; completed_at is stamped once and never cleared
- expired: expiry passed before completion; no further progress accrues

A challenge completed before its expiry stays completed forever. The XP
reward is signalled exactly once, on the pass that stamps completed_at
(`newly_completed`); crediting it to the game state is the caller's job.

Every function taking `now` treats a naive value as UTC.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple
from uuid import uuid4

from src.exceptions import ValidationError
from src.models.challenge import (
    Challenge,
    ChallengeProgressUpdate,
    ChallengeState,
    ChallengeType,
    ChallengeView,
)
from src.utils.datetime_helpers import to_utc

logger = logging.getLogger(__name__)


# ============================================
# Seed Challenge Library
# ============================================

# (definition, days until expiry)
CHALLENGE_LIBRARY: List[Tuple[Dict, int]] = [
    (
        {
            "id": "1",
            "title": "Energy Warrior",
            "description": "Maintain 8+ energy for 3 days",
            "type": ChallengeType.DAILY,
            "category": "energy",
            "target_value": 3,
            "xp_reward": 500,
            "is_premium": False,
        },
        2,
    ),
    (
        {
            "id": "2",
            "title": "Dubai Heat Beater",
            "description": "Complete 5 workouts before 7 AM",
            "type": ChallengeType.WEEKLY,
            "category": "workout",
            "target_value": 5,
            "xp_reward": 1000,
            "is_premium": True,
        },
        5,
    ),
    (
        {
            "id": "3",
            "title": "Streak Master",
            "description": "Reach a 14-day streak",
            "type": ChallengeType.SPECIAL,
            "category": "streak",
            "target_value": 14,
            "xp_reward": 2000,
            "is_premium": False,
        },
        10,
    ),
]


def build_default_challenges(now: datetime) -> List[Challenge]:
    """
    Build the seed catalog with expiries relative to `now`

    Args:
        now: Current instant

    Returns:
        Fresh list of challenges with zero progress
    """
    now = to_utc(now)
    return [
        Challenge(**definition, expires_at=now + timedelta(days=days_valid))
        for definition, days_valid in CHALLENGE_LIBRARY
    ]


def create_challenge(
    title: str,
    category: str,
    target_value: float,
    xp_reward: int,
    now: datetime,
    duration: timedelta,
    challenge_type: ChallengeType = ChallengeType.SPECIAL,
    description: str = "",
    is_premium: bool = False,
    id_factory: Optional[Callable[[], str]] = None,
) -> Challenge:
    """
    Create a custom challenge

    Args:
        id_factory: Unique id generator supplied by the caller (defaults to uuid4)
    """
    now = to_utc(now)
    make_id = id_factory or (lambda: str(uuid4()))
    challenge = Challenge(
        id=make_id(),
        title=title,
        description=description,
        type=challenge_type,
        category=category,
        target_value=target_value,
        xp_reward=xp_reward,
        is_premium=is_premium,
        expires_at=now + duration,
    )
    logger.info(f"Created custom challenge '{challenge.id}' ({title}), expires {challenge.expires_at.isoformat()}")
    return challenge


def get_challenge_by_id(challenges: Iterable[Challenge], challenge_id: str) -> Optional[Challenge]:
    """Get a specific challenge by ID"""
    for challenge in challenges:
        if challenge.id == challenge_id:
            return challenge
    return None


# ============================================
# Accepted Set
# ============================================

def accept_challenge(accepted_ids: Sequence[str], challenge_id: str) -> Tuple[str, ...]:
    """
    Add a challenge to the accepted set

    Idempotent: re-accepting an id returns the set unchanged.
    """
    if challenge_id in accepted_ids:
        logger.debug(f"Challenge '{challenge_id}' already accepted")
        return tuple(accepted_ids)

    logger.info(f"Accepted challenge '{challenge_id}'")
    return tuple(accepted_ids) + (challenge_id,)


def prune_accepted_ids(accepted_ids: Sequence[str], catalog: Iterable[Challenge]) -> Tuple[str, ...]:
    """Drop accepted ids that no longer refer to a catalog challenge"""
    known = {c.id for c in catalog}
    kept = tuple(cid for cid in accepted_ids if cid in known)
    if len(kept) != len(accepted_ids):
        dropped = [cid for cid in accepted_ids if cid not in known]
        logger.debug(f"Dropped accepted ids missing from catalog: {dropped}")
    return kept


# ============================================
# State Derivation
# ============================================

def is_challenge_expired(now: datetime, expires_at: datetime, completed_at: Optional[datetime]) -> bool:
    """Expired when the deadline passed without a completion stamp"""
    return completed_at is None and to_utc(now) >= to_utc(expires_at)


def clamp_progress(challenge: Challenge) -> float:
    """Progress as exposed to readers, never above the target"""
    return min(challenge.current_progress, challenge.target_value)


def get_challenge_state(challenge: Challenge, is_accepted: bool, now: datetime) -> ChallengeState:
    """Derive the lifecycle state of a challenge at `now`"""
    now = to_utc(now)
    if challenge.completed_at is not None:
        return ChallengeState.COMPLETED
    if is_challenge_expired(now, challenge.expires_at, challenge.completed_at):
        return ChallengeState.EXPIRED
    if not is_accepted:
        return ChallengeState.AVAILABLE
    if clamp_progress(challenge) >= challenge.target_value:
        return ChallengeState.COMPLETED
    return ChallengeState.ACTIVE


def _stamp_completion(challenge: Challenge, now: datetime) -> Challenge:
    logger.info(
        f"Challenge '{challenge.id}' ({challenge.title}) completed, "
        f"+{challenge.xp_reward} XP pending"
    )
    return challenge.model_copy(update={
        "current_progress": clamp_progress(challenge),
        "completed_at": now,
    })


# ============================================
# Progress Updates
# ============================================

def apply_challenge_progress(
    challenge: Challenge,
    amount: float,
    now: datetime,
    is_accepted: bool = True
) -> ChallengeProgressUpdate:
    """
    Add progress to a challenge

    Progress only accrues on accepted, uncompleted, unexpired challenges;
    anything else is a no-op (`applied=False`). Reaching the target stamps
    completed_at with `now` and flags the update as newly completed.

    Raises:
        ValidationError: if amount is negative
    """
    now = to_utc(now)
    if amount < 0:
        raise ValidationError(
            message="Progress amount must not be negative",
            field="amount",
            value=amount,
            operation="apply_challenge_progress",
        )

    if (
        not is_accepted
        or challenge.completed_at is not None
        or is_challenge_expired(now, challenge.expires_at, challenge.completed_at)
    ):
        return ChallengeProgressUpdate(
            challenge=challenge,
            state=get_challenge_state(challenge, is_accepted, now),
            applied=False,
        )

    new_progress = min(challenge.target_value, challenge.current_progress + amount)
    updated = challenge.model_copy(update={"current_progress": new_progress})
    newly_completed = False

    if new_progress >= challenge.target_value:
        updated = _stamp_completion(updated, now)
        newly_completed = True

    return ChallengeProgressUpdate(
        challenge=updated,
        state=get_challenge_state(updated, is_accepted, now),
        newly_completed=newly_completed,
        applied=True,
    )


def increment_category_progress(
    challenges: Sequence[Challenge],
    accepted_ids: Iterable[str],
    category: str,
    amount: float,
    now: datetime
) -> Tuple[List[Challenge], List[Challenge]]:
    """
    Apply progress to every accepted challenge in a category

    Returns:
        (updated catalog in the same order, challenges completed by this call)
    """
    accepted = set(accepted_ids)
    updated: List[Challenge] = []
    newly_completed: List[Challenge] = []

    for challenge in challenges:
        if challenge.category != category or challenge.id not in accepted:
            updated.append(challenge)
            continue

        result = apply_challenge_progress(challenge, amount, now, is_accepted=True)
        updated.append(result.challenge)
        if result.newly_completed:
            newly_completed.append(result.challenge)

    return updated, newly_completed


# ============================================
# Catalog Views
# ============================================

def build_challenge_views(
    catalog: Iterable[Challenge],
    accepted_ids: Iterable[str],
    now: datetime
) -> List[ChallengeView]:
    """
    Merge the catalog with the accepted set for display

    Expired, uncompleted challenges are left out. Accepted ids missing from
    the catalog are ignored. An accepted challenge whose stored progress
    already reached its target without a completion stamp is stamped on this
    pass and flagged `newly_completed`.
    """
    now = to_utc(now)
    accepted = set(accepted_ids)
    views: List[ChallengeView] = []

    for challenge in catalog:
        if is_challenge_expired(now, challenge.expires_at, challenge.completed_at):
            continue

        is_accepted = challenge.id in accepted
        newly_completed = False

        if (
            is_accepted
            and challenge.completed_at is None
            and clamp_progress(challenge) >= challenge.target_value
        ):
            challenge = _stamp_completion(challenge, now)
            newly_completed = True
        elif challenge.current_progress > challenge.target_value:
            challenge = challenge.model_copy(update={"current_progress": clamp_progress(challenge)})

        time_remaining = max(timedelta(0), challenge.expires_at - now)

        views.append(ChallengeView(
            challenge=challenge,
            is_accepted=is_accepted,
            state=get_challenge_state(challenge, is_accepted, now),
            progress_percentage=challenge.current_progress / challenge.target_value * 100,
            newly_completed=newly_completed,
            time_remaining=time_remaining,
            days_left=math.ceil(time_remaining.total_seconds() / 86400),
        ))

    return views


def select_featured_challenge(
    challenges: Sequence[Challenge],
    accepted_ids: Iterable[str]
) -> Optional[Challenge]:
    """First accepted challenge, otherwise the first one in the catalog"""
    accepted = set(accepted_ids)
    for challenge in challenges:
        if challenge.id in accepted:
            return challenge
    return challenges[0] if challenges else None


def format_challenge_progress(view: ChallengeView) -> str:
    """
    Format challenge progress for display

    Args:
        view: Challenge view from build_challenge_views

    Returns:
        Single-line progress display
    """
    challenge = view.challenge
    bar_length = int(view.progress_percentage / 5)  # 20 chars total
    bar = "▓" * bar_length + "░" * (20 - bar_length)

    status_emoji = {
        ChallengeState.AVAILABLE: "🆕",
        ChallengeState.ACTIVE: "⏳",
        ChallengeState.COMPLETED: "✅",
        ChallengeState.EXPIRED: "❌",
    }
    status_icon = status_emoji.get(view.state, "❓")
    premium = " 💎" if challenge.is_premium else ""

    if view.state == ChallengeState.ACTIVE:
        time_text = f" ({view.days_left}d left)"
    else:
        time_text = ""

    return (
        f"{status_icon} {challenge.title}{premium} {bar} "
        f"{challenge.current_progress:g}/{challenge.target_value:g}{time_text}"
    )
