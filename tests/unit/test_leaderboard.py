"""Unit tests for leaderboard composition (src/gamification/leaderboard.py)"""
from src.gamification.leaderboard import (
    compose_leaderboard,
    current_user_from_snapshot,
    filter_by_location,
    rank_profiles,
)
from src.models.leaderboard import CurrentUserRecord


# ============================================================================
# Ranking Tests
# ============================================================================

def test_rank_profiles_orders_by_points(profile_rows):
    entries = rank_profiles(profile_rows)

    assert [e.user_id for e in entries] == ["u1", "u2", "u3"]
    assert [e.rank for e in entries] == [1, 2, 3]
    assert entries[0].name == "Omar K."
    assert entries[0].avatar == "🦁"


def test_rank_profiles_defaults(profile_rows):
    """Missing profile fields get placeholders"""
    entry = rank_profiles(profile_rows)[2]

    assert entry.name == "Gladiator ."
    assert entry.location == "Dubai"
    assert entry.points == 0
    assert entry.level == 1
    assert entry.avatar == "👤"


def test_rank_profiles_limit(profile_rows):
    assert [e.user_id for e in rank_profiles(profile_rows, limit=2)] == ["u1", "u2"]


# ============================================================================
# Composition Tests
# ============================================================================

def test_user_in_top_is_flagged(top_entries):
    entries = top_entries(5)

    composed = compose_leaderboard(entries, CurrentUserRecord(user_id="u3"))

    assert len(composed) == 5
    assert [e.is_current_user for e in composed] == [False, False, True, False, False]
    assert [e.user_id for e in composed] == [e.user_id for e in entries]


def test_user_outside_top_is_appended(top_entries):
    """50 entries, viewing user not among them: appended with rank 999"""
    entries = [e.model_copy(update={"user_id": f"p{e.rank}"}) for e in top_entries(50)]
    user = CurrentUserRecord(user_id="u1", name="Sara M.", points=1200, streak=3, level=2)

    composed = compose_leaderboard(entries, user)

    assert len(composed) == 51
    last = composed[-1]
    assert last.user_id == "u1"
    assert last.rank == 999
    assert not 1 <= last.rank <= 50
    assert last.is_current_user is True
    assert last.points == 1200
    assert sum(1 for e in composed if e.is_current_user) == 1


def test_user_at_rank_one(top_entries):
    """50 entries including u1 at rank 1: 50 entries, only u1 flagged"""
    composed = compose_leaderboard(top_entries(50), CurrentUserRecord(user_id="u1"))

    assert len(composed) == 50
    assert composed[0].is_current_user is True
    assert sum(1 for e in composed if e.is_current_user) == 1


def test_synthesized_entry_defaults(top_entries):
    composed = compose_leaderboard(top_entries(2), CurrentUserRecord(user_id="me"))

    last = composed[-1]
    assert last.name == "You"
    assert last.location == "Dubai"
    assert last.points == 0
    assert last.streak == 0
    assert last.level == 1
    assert last.avatar == "👤"


def test_no_user_id_flags_nothing(top_entries):
    entries = top_entries(3)

    for user in (None, CurrentUserRecord()):
        composed = compose_leaderboard(entries, user)
        assert len(composed) == 3
        assert not any(e.is_current_user for e in composed)


def test_empty_top_appends_user():
    composed = compose_leaderboard([], CurrentUserRecord(user_id="me"))

    assert len(composed) == 1
    assert composed[0].rank == 999


def test_stale_flags_cleared(top_entries):
    """Flags on input entries do not leak into the result"""
    entries = top_entries(3)
    entries[0] = entries[0].model_copy(update={"is_current_user": True})

    composed = compose_leaderboard(entries, CurrentUserRecord(user_id="u2"))

    assert [e.is_current_user for e in composed] == [False, True, False]
    assert entries[1].is_current_user is False


def test_duplicate_user_flagged_once(top_entries):
    entries = top_entries(2)
    entries.append(entries[0].model_copy(update={"rank": 3}))

    composed = compose_leaderboard(entries, CurrentUserRecord(user_id="u1"))

    assert [e.is_current_user for e in composed] == [True, False, False]


def test_custom_unranked_position(top_entries):
    composed = compose_leaderboard(top_entries(2), CurrentUserRecord(user_id="me"), unranked_position=-1)
    assert composed[-1].rank == -1


# ============================================================================
# Helpers
# ============================================================================

def test_current_user_from_snapshot(mid_game_snapshot):
    user = current_user_from_snapshot("me", mid_game_snapshot, name="Sara M.")

    assert user.points == 4950
    assert user.streak == 12
    assert user.level == 8
    assert user.name == "Sara M."
    assert user.location is None


def test_filter_by_location(profile_rows):
    entries = rank_profiles(profile_rows)

    assert [e.user_id for e in filter_by_location(entries, "Marina")] == ["u2"]
