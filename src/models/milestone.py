"""Progress roadmap models"""
from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, Field


class RequirementTracking(str, Enum):
    """Whether the engine can compute a requirement from the snapshot"""
    DERIVABLE = "derivable"
    EXTERNALLY_TRACKED = "externally_tracked"


class RequirementType(str, Enum):
    """Measurable condition kinds"""
    XP = "xp"
    STREAK = "streak"
    WORKOUTS = "workouts"
    CHALLENGES = "challenges"
    ENERGY = "energy"
    SOCIAL = "social"

    @property
    def tracking(self) -> RequirementTracking:
        if self in (RequirementType.ENERGY, RequirementType.SOCIAL):
            return RequirementTracking.EXTERNALLY_TRACKED
        return RequirementTracking.DERIVABLE


class MilestoneCategory(str, Enum):
    """Roadmap stages"""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    PROFESSIONAL = "professional"
    ELITE = "elite"


class RewardType(str, Enum):
    """Milestone reward kinds"""
    XP = "xp"
    ENERGY = "energy"
    FEATURE = "feature"
    BADGE = "badge"
    MULTIPLIER = "multiplier"


class MilestoneRequirement(BaseModel):
    """Single measurable condition contributing to a milestone"""
    id: str
    type: RequirementType
    description: str = ""
    target: float = Field(..., gt=0)
    current: float = Field(default=0, ge=0)  # last-computed progress
    is_completed: bool = False


class MilestoneReward(BaseModel):
    """Reward granted for completing a milestone (descriptive only)"""
    type: RewardType
    value: Union[int, float, str]
    description: str = ""


class ProgressMilestone(BaseModel):
    """Themed bundle of requirements placed at a player level"""
    id: str
    level: int = Field(..., ge=1)
    title: str
    description: str = ""
    category: MilestoneCategory
    requirements: list[MilestoneRequirement] = Field(..., min_length=1)
    rewards: list[MilestoneReward] = Field(default_factory=list)
    is_unlocked: bool = False
    is_completed: bool = False
    progress_percentage: float = 0


class LearningPath(BaseModel):
    """Curated subset of the roadmap"""
    id: str
    title: str
    description: str = ""
    duration: str = ""
    difficulty: str = "beginner"  # beginner, intermediate, advanced
    milestone_ids: list[str]
    skills_improved: list[str] = Field(default_factory=list)
    estimated_days: int = Field(default=0, ge=0)


class CategoryStats(BaseModel):
    """Completion count for one roadmap category"""
    total: int = 0
    completed: int = 0


class RoadmapSummary(BaseModel):
    """Aggregate view over an evaluated roadmap"""
    completed_count: int
    total_count: int
    overall_progress: float  # completed milestones / total * 100
    current_milestone: Optional[ProgressMilestone] = None
    next_milestone: Optional[ProgressMilestone] = None
    category_stats: dict[str, CategoryStats] = Field(default_factory=dict)
