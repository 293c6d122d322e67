"""
Milestone Evaluator

Turns the static progress roadmap into a live view against a game state
snapshot: per-requirement progress, unlock gating and completion.

Requirement sources:
- xp: total XP
- streak: max(current streak, best streak), so a broken streak never
  regresses an already earned requirement
- workouts / challenges: completed counts
- energy / social: tracked outside the engine, the requirement's own
  `current` value is passed through unchanged

Every evaluation recomputes from the snapshot; nothing is cached between calls.
"""

import logging
from typing import Any, Iterable, List, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from src.config import MILESTONE_UNLOCK_LEVELS_BEFORE
from src.exceptions import ConfigurationError
from src.models.game_state import GameStateSnapshot
from src.models.milestone import (
    CategoryStats,
    LearningPath,
    MilestoneRequirement,
    ProgressMilestone,
    RequirementTracking,
    RequirementType,
    RoadmapSummary,
)

logger = logging.getLogger(__name__)


# ============================================
# Requirement Progress
# ============================================

def requirement_progress(requirement: MilestoneRequirement, snapshot: GameStateSnapshot) -> float:
    """
    Calculate the current progress value for a requirement

    Args:
        requirement: Requirement definition (with last-known `current`)
        snapshot: Current game state

    Returns:
        Progress value comparable to `requirement.target`
    """
    req_type = requirement.type

    if req_type == RequirementType.XP:
        return snapshot.total_xp
    elif req_type == RequirementType.STREAK:
        return max(snapshot.current_streak, snapshot.best_streak)
    elif req_type == RequirementType.WORKOUTS:
        return snapshot.workouts_completed
    elif req_type == RequirementType.CHALLENGES:
        return snapshot.challenges_completed
    elif isinstance(req_type, RequirementType) and req_type.tracking == RequirementTracking.EXTERNALLY_TRACKED:
        return requirement.current

    raise ConfigurationError(
        message=f"Unknown requirement type '{req_type}' for requirement '{requirement.id}'",
        config_key=f"requirements.{requirement.id}.type",
    )


def requirement_percentage(current: float, target: float) -> float:
    """Progress percentage for a requirement (0-100)"""
    if target <= 0:
        raise ConfigurationError(
            message=f"Requirement target must be positive, got {target}",
            config_key="target",
        )
    return min(100.0, current / target * 100)


# ============================================
# Unlock & Completion
# ============================================

def is_milestone_unlocked(
    milestone_level: int,
    current_level: int,
    lookahead: int = MILESTONE_UNLOCK_LEVELS_BEFORE
) -> bool:
    """A milestone opens `lookahead` levels before its nominal level"""
    return current_level >= milestone_level - lookahead


def unlock_level(milestone: ProgressMilestone, lookahead: int = MILESTONE_UNLOCK_LEVELS_BEFORE) -> int:
    """Player level at which the milestone becomes unlocked"""
    return max(1, milestone.level - lookahead)


def is_milestone_completed(milestone: ProgressMilestone, snapshot: GameStateSnapshot) -> bool:
    """All requirements satisfied (logical AND, no partial credit)"""
    return all(
        requirement_progress(req, snapshot) >= req.target
        for req in milestone.requirements
    )


def evaluate_milestone(
    milestone: ProgressMilestone,
    snapshot: GameStateSnapshot,
    lookahead: int = MILESTONE_UNLOCK_LEVELS_BEFORE
) -> ProgressMilestone:
    """
    Refresh a milestone against the snapshot

    Returns a new record with every requirement's `current`/`is_completed`
    recomputed, plus unlock, completion and the coarse progress percentage
    (completed requirements / total requirements * 100). The input record is
    left untouched.
    """
    updated_requirements = []
    for req in milestone.requirements:
        current = requirement_progress(req, snapshot)
        updated_requirements.append(
            req.model_copy(update={
                "current": current,
                "is_completed": current >= req.target,
            })
        )

    completed_count = sum(1 for r in updated_requirements if r.is_completed)
    progress_percentage = completed_count / len(updated_requirements) * 100

    return milestone.model_copy(update={
        "requirements": updated_requirements,
        "is_unlocked": is_milestone_unlocked(milestone.level, snapshot.level, lookahead),
        "is_completed": completed_count == len(updated_requirements),
        "progress_percentage": progress_percentage,
    })


def evaluate_roadmap(
    milestones: Iterable[ProgressMilestone],
    snapshot: GameStateSnapshot,
    lookahead: int = MILESTONE_UNLOCK_LEVELS_BEFORE
) -> List[ProgressMilestone]:
    """Evaluate an ordered milestone catalog; an empty catalog yields []"""
    evaluated = [evaluate_milestone(m, snapshot, lookahead) for m in milestones]
    logger.debug(
        f"Evaluated {len(evaluated)} milestones at level {snapshot.level}: "
        f"{sum(1 for m in evaluated if m.is_completed)} completed"
    )
    return evaluated


# ============================================
# Roadmap Views
# ============================================

def summarize_roadmap(evaluated: Sequence[ProgressMilestone]) -> RoadmapSummary:
    """
    Aggregate an evaluated roadmap

    The current milestone is the first unlocked, uncompleted one in catalog
    order; the next milestone is the one that follows it.
    """
    total = len(evaluated)
    completed = sum(1 for m in evaluated if m.is_completed)

    current_index: Optional[int] = None
    for index, milestone in enumerate(evaluated):
        if milestone.is_unlocked and not milestone.is_completed:
            current_index = index
            break

    current_milestone = evaluated[current_index] if current_index is not None else None
    next_milestone = None
    if current_index is not None and current_index < total - 1:
        next_milestone = evaluated[current_index + 1]

    category_stats: dict[str, CategoryStats] = {}
    for milestone in evaluated:
        stats = category_stats.setdefault(milestone.category.value, CategoryStats())
        stats.total += 1
        if milestone.is_completed:
            stats.completed += 1

    return RoadmapSummary(
        completed_count=completed,
        total_count=total,
        overall_progress=(completed / total * 100) if total else 0.0,
        current_milestone=current_milestone,
        next_milestone=next_milestone,
        category_stats=category_stats,
    )


def filter_by_learning_path(
    evaluated: Sequence[ProgressMilestone],
    path_id: str,
    paths: Sequence[LearningPath]
) -> List[ProgressMilestone]:
    """
    Milestones belonging to a learning path, in roadmap order

    "all" or an unknown path id returns the full roadmap.
    """
    if path_id == "all":
        return list(evaluated)

    path = next((p for p in paths if p.id == path_id), None)
    if path is None:
        logger.debug(f"Unknown learning path '{path_id}', showing full roadmap")
        return list(evaluated)

    wanted = set(path.milestone_ids)
    return [m for m in evaluated if m.id in wanted]


# ============================================
# Catalog Loading
# ============================================

def load_milestone_catalog(raw_items: Iterable[dict[str, Any]]) -> List[ProgressMilestone]:
    """
    Build milestone records from plain definitions

    Fails fast on unknown requirement types, non-positive targets, empty
    requirement lists and duplicate milestone ids.

    Raises:
        ConfigurationError: naming the offending catalog entry
    """
    milestones: List[ProgressMilestone] = []
    seen_ids: set[str] = set()

    for index, raw in enumerate(raw_items):
        entry_key = f"milestones[{index}]"
        try:
            milestone = ProgressMilestone.model_validate(raw)
        except PydanticValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            raise ConfigurationError(
                message=f"Invalid milestone definition at {entry_key}.{location}: {first['msg']}",
                config_key=f"{entry_key}.{location}",
                cause=e,
            )

        if milestone.id in seen_ids:
            raise ConfigurationError(
                message=f"Duplicate milestone id '{milestone.id}'",
                config_key=f"{entry_key}.id",
            )
        seen_ids.add(milestone.id)
        milestones.append(milestone)

    logger.info(f"Loaded milestone catalog with {len(milestones)} milestones")
    return milestones
