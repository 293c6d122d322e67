"""
Progress Roadmap Catalog

Static milestone definitions from first steps to elite level, plus the
learning paths that group them. Only the static fields are authoritative;
requirement progress, unlock and completion are recomputed on every
evaluation pass.
"""

import logging
from typing import Any, Dict, List, Optional

from src.gamification.milestones import load_milestone_catalog
from src.models.milestone import LearningPath, ProgressMilestone

logger = logging.getLogger(__name__)


def _req(req_id: str, req_type: str, description: str, target: float) -> Dict[str, Any]:
    return {"id": req_id, "type": req_type, "description": description, "target": target}


def _reward(reward_type: str, value: Any, description: str) -> Dict[str, Any]:
    return {"type": reward_type, "value": value, "description": description}


# ============================================
# Milestone Definitions
# ============================================

ROADMAP_DEFINITIONS: List[Dict[str, Any]] = [
    # ========== BEGINNER (Levels 1-5) ==========
    {
        "id": "beginner-start",
        "level": 1,
        "title": "Energy Awakening",
        "description": "Begin your transformation journey",
        "category": "beginner",
        "requirements": [
            _req("req-1", "xp", "Earn 100 XP", 100),
            _req("req-2", "workouts", "Complete 3 workouts", 3),
            _req("req-3", "energy", "Maintain 5+ energy for 1 day", 1),
        ],
        "rewards": [
            _reward("xp", 200, "+200 Bonus XP"),
            _reward("feature", "AI Coach Basic", "Unlock AI Coach"),
            _reward("badge", "First Steps", "First Steps Badge"),
        ],
    },
    {
        "id": "beginner-foundation",
        "level": 3,
        "title": "Building Momentum",
        "description": "Establish consistent energy habits",
        "category": "beginner",
        "requirements": [
            _req("req-4", "xp", "Earn 900 XP", 900),
            _req("req-5", "streak", "Build a 5-day streak", 5),
            _req("req-6", "challenges", "Complete 5 challenges", 5),
        ],
        "rewards": [
            _reward("xp", 500, "+500 Bonus XP"),
            _reward("multiplier", 1.2, "1.2x XP Multiplier"),
            _reward("badge", "Momentum Builder", "Momentum Builder Badge"),
        ],
    },

    # ========== INTERMEDIATE (Levels 6-12) ==========
    {
        "id": "intermediate-discipline",
        "level": 6,
        "title": "Energy Discipline",
        "description": "Master consistent energy management",
        "category": "intermediate",
        "requirements": [
            _req("req-7", "xp", "Earn 3600 XP", 3600),
            _req("req-8", "streak", "Maintain 10-day streak", 10),
            _req("req-9", "workouts", "Complete 20 workouts", 20),
            _req("req-10", "energy", "Maintain 7+ energy for 5 days", 5),
        ],
        "rewards": [
            _reward("xp", 1000, "+1000 Bonus XP"),
            _reward("feature", "Advanced Analytics", "Unlock Advanced Analytics"),
            _reward("badge", "Energy Master", "Energy Master Badge"),
        ],
    },
    {
        "id": "intermediate-consistency",
        "level": 10,
        "title": "Consistency Champion",
        "description": "Prove your commitment to excellence",
        "category": "intermediate",
        "requirements": [
            _req("req-11", "xp", "Earn 10000 XP", 10000),
            _req("req-12", "streak", "Achieve 21-day streak", 21),
            _req("req-13", "challenges", "Complete 20 challenges", 20),
            _req("req-14", "social", "Connect with 5 friends", 5),
        ],
        "rewards": [
            _reward("xp", 2000, "+2000 Bonus XP"),
            _reward("multiplier", 1.5, "1.5x XP Multiplier"),
            _reward("badge", "Consistency King", "Consistency King Badge"),
        ],
    },

    # ========== ADVANCED (Levels 13-20) ==========
    {
        "id": "advanced-warrior",
        "level": 15,
        "title": "Energy Warrior",
        "description": "Join the elite ranks of high performers",
        "category": "advanced",
        "requirements": [
            _req("req-15", "xp", "Earn 22500 XP", 22500),
            _req("req-16", "streak", "Achieve 30-day streak", 30),
            _req("req-17", "workouts", "Complete 50 workouts", 50),
            _req("req-18", "challenges", "Complete 30 challenges", 30),
            _req("req-19", "energy", "Maintain 8+ energy for 14 days", 14),
        ],
        "rewards": [
            _reward("xp", 5000, "+5000 Bonus XP"),
            _reward("feature", "Premium AI Coach", "Unlock Premium AI Features"),
            _reward("badge", "Energy Warrior", "Energy Warrior Badge"),
        ],
    },

    # ========== PROFESSIONAL (Levels 21-30) ==========
    {
        "id": "professional-master",
        "level": 20,
        "title": "Professional Mastery",
        "description": "Become a true professional in energy management",
        "category": "professional",
        "requirements": [
            _req("req-20", "xp", "Earn 40000 XP", 40000),
            _req("req-21", "streak", "Achieve 60-day streak", 60),
            _req("req-22", "workouts", "Complete 100 workouts", 100),
            _req("req-23", "challenges", "Complete 50 challenges", 50),
            _req("req-24", "social", "Reach Top 10 on leaderboard", 10),
        ],
        "rewards": [
            _reward("xp", 10000, "+10000 Bonus XP"),
            _reward("multiplier", 2.0, "2x XP Multiplier"),
            _reward("badge", "Pro Graduate", "Pro Graduate Badge"),
            _reward("feature", "Mentor Access", "Unlock Mentorship Features"),
        ],
    },

    # ========== ELITE (Level 25+) ==========
    {
        "id": "elite-legend",
        "level": 25,
        "title": "Elite Legend",
        "description": "Join the legendary elite circle",
        "category": "elite",
        "requirements": [
            _req("req-25", "xp", "Earn 62500 XP", 62500),
            _req("req-26", "streak", "Achieve 100-day streak", 100),
            _req("req-27", "workouts", "Complete 150 workouts", 150),
            _req("req-28", "challenges", "Complete 75 challenges", 75),
            _req("req-29", "social", "Reach #1 on leaderboard", 1),
        ],
        "rewards": [
            _reward("xp", 20000, "+20000 Bonus XP"),
            _reward("multiplier", 3.0, "3x XP Multiplier"),
            _reward("badge", "Elite Legend", "Elite Legend Badge"),
            _reward("feature", "All Premium Features", "Lifetime Premium Access"),
        ],
    },
]


# ============================================
# Learning Paths
# ============================================

_ALL_MILESTONE_IDS = [d["id"] for d in ROADMAP_DEFINITIONS]

LEARNING_PATHS: List[LearningPath] = [
    LearningPath(
        id="beginner-to-pro",
        title="Beginner to Professional",
        description="Complete progression path from day one to professional level",
        duration="90 days",
        difficulty="beginner",
        milestone_ids=[
            d["id"] for d in ROADMAP_DEFINITIONS
            if d["category"] in ("beginner", "intermediate", "professional")
        ],
        skills_improved=["Energy Management", "Consistency", "Discipline", "Fitness", "Mental Resilience"],
        estimated_days=90,
    ),
    LearningPath(
        id="fast-track-elite",
        title="Fast Track to Elite",
        description="Accelerated path for ambitious high-achievers",
        duration="60 days",
        difficulty="advanced",
        milestone_ids=list(_ALL_MILESTONE_IDS),
        skills_improved=["Peak Performance", "Leadership", "Excellence", "Mastery", "Elite Mindset"],
        estimated_days=60,
    ),
    LearningPath(
        id="executive-excellence",
        title="Executive Excellence",
        description="Tailored path for busy executives in Dubai",
        duration="120 days",
        difficulty="intermediate",
        milestone_ids=list(_ALL_MILESTONE_IDS),
        skills_improved=["Energy Optimization", "Work-Life Balance", "Stress Management", "Peak Performance"],
        estimated_days=120,
    ),
]


def get_progress_milestones() -> List[ProgressMilestone]:
    """Load a fresh copy of the roadmap catalog"""
    return load_milestone_catalog(ROADMAP_DEFINITIONS)


def get_learning_path(path_id: str) -> Optional[LearningPath]:
    """Get a learning path by ID"""
    for path in LEARNING_PATHS:
        if path.id == path_id:
            return path
    return None
