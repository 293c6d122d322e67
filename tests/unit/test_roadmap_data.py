"""Unit tests for the built-in roadmap catalog (src/gamification/roadmap_data.py)"""
from src.gamification.level_curve import xp_for_level
from src.gamification.roadmap_data import (
    LEARNING_PATHS,
    get_learning_path,
    get_progress_milestones,
)
from src.models.milestone import RequirementType


def test_catalog_loads():
    milestones = get_progress_milestones()

    assert len(milestones) == 7
    assert [m.level for m in milestones] == [1, 3, 6, 10, 15, 20, 25]


def test_catalog_returns_fresh_copies():
    first = get_progress_milestones()
    second = get_progress_milestones()

    assert first == second
    assert first[0] is not second[0]


def test_every_milestone_has_xp_requirement():
    for milestone in get_progress_milestones():
        assert any(r.type == RequirementType.XP for r in milestone.requirements)


def test_xp_targets_reachable_at_nominal_level():
    """XP target never exceeds what the next level needs"""
    for milestone in get_progress_milestones():
        xp_target = next(r.target for r in milestone.requirements if r.type == RequirementType.XP)
        assert xp_target <= xp_for_level(milestone.level + 1)


def test_requirement_ids_unique():
    ids = [r.id for m in get_progress_milestones() for r in m.requirements]
    assert len(ids) == len(set(ids))


def test_learning_paths_reference_known_milestones():
    known = {m.id for m in get_progress_milestones()}

    for path in LEARNING_PATHS:
        assert set(path.milestone_ids) <= known


def test_get_learning_path():
    assert get_learning_path("fast-track-elite").estimated_days == 60
    assert get_learning_path("missing") is None
