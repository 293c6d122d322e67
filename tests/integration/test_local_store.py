"""Integration tests for LocalStore against a temporary directory"""
import json
import pytest
from datetime import timedelta
from unittest.mock import patch

from src.exceptions import StorageError
from src.gamification.challenges import apply_challenge_progress
from src.models.game_state import GameStateSnapshot
from src.storage.local_store import INITIAL_GAME_STATE, LocalStore


# ============================================================================
# Game State
# ============================================================================

@pytest.mark.asyncio
async def test_missing_game_state_uses_initial(local_store):
    snapshot = await local_store.load_game_state()

    assert snapshot == INITIAL_GAME_STATE
    assert snapshot.level == 1


@pytest.mark.asyncio
async def test_game_state_round_trip(local_store, mid_game_snapshot):
    await local_store.save_game_state(mid_game_snapshot)

    assert await local_store.load_game_state() == mid_game_snapshot


@pytest.mark.asyncio
@patch('src.storage.local_store.track_storage_fallback')
async def test_corrupt_game_state_falls_back(mock_track, local_store):
    path = local_store.get_path("game_state")
    path.parent.mkdir(parents=True)
    path.write_text("{not json", encoding="utf-8")

    snapshot = await local_store.load_game_state()

    assert snapshot == INITIAL_GAME_STATE
    mock_track.assert_called_once_with("game_state")


@pytest.mark.asyncio
@patch('src.storage.local_store.track_storage_fallback')
async def test_invalid_game_state_falls_back(mock_track, local_store):
    path = local_store.get_path("game_state")
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps({"level": 0, "total_xp": -5}), encoding="utf-8")

    assert await local_store.load_game_state() == INITIAL_GAME_STATE
    mock_track.assert_called_once_with("game_state")


@pytest.mark.asyncio
async def test_write_failure_raises_storage_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")
    store = LocalStore(data_path=blocker / "data")

    with pytest.raises(StorageError) as exc_info:
        await store.save_game_state(GameStateSnapshot())

    assert exc_info.value.key == "game_state"
    assert exc_info.value.operation == "save_game_state"


# ============================================================================
# Challenges
# ============================================================================

@pytest.mark.asyncio
async def test_missing_challenges_seeded_and_saved(local_store, now):
    """The seed catalog is persisted so its expiries stay fixed"""
    first = await local_store.load_challenges(now)
    second = await local_store.load_challenges(now + timedelta(days=1))

    assert [c.id for c in first] == ["1", "2", "3"]
    assert local_store.get_path("challenges").exists()
    assert [c.expires_at for c in second] == [c.expires_at for c in first]


@pytest.mark.asyncio
async def test_challenge_timestamps_round_trip(local_store, now):
    """Completion stamps and expiries survive serialization exactly"""
    challenges = await local_store.load_challenges(now)
    stamped_at = now + timedelta(microseconds=123456)
    challenges[0] = apply_challenge_progress(challenges[0], 3, stamped_at).challenge

    await local_store.save_challenges(challenges)
    loaded = await local_store.load_challenges(now)

    assert loaded == challenges
    assert loaded[0].completed_at == stamped_at
    assert loaded[0].completed_at.tzinfo is not None


@pytest.mark.asyncio
@patch('src.storage.local_store.track_storage_fallback')
async def test_invalid_challenges_reseeded(mock_track, local_store, now):
    path = local_store.get_path("challenges")
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps([{"id": "x"}]), encoding="utf-8")

    challenges = await local_store.load_challenges(now)

    assert [c.id for c in challenges] == ["1", "2", "3"]
    mock_track.assert_called_once_with("challenges")


# ============================================================================
# Accepted Ids
# ============================================================================

@pytest.mark.asyncio
async def test_accepted_ids_default(local_store):
    assert await local_store.load_accepted_ids() == ("1",)


@pytest.mark.asyncio
async def test_accepted_ids_round_trip(local_store):
    await local_store.save_accepted_ids(("1", "3"))

    assert await local_store.load_accepted_ids() == ("1", "3")


@pytest.mark.asyncio
@patch('src.storage.local_store.track_storage_fallback')
async def test_invalid_accepted_ids_fall_back(mock_track, local_store):
    path = local_store.get_path("accepted_challenges")
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps({"ids": [1, 2]}), encoding="utf-8")

    assert await local_store.load_accepted_ids() == ("1",)
    mock_track.assert_called_once_with("accepted_challenges")


# ============================================================================
# Undecodable Files
# ============================================================================

@pytest.mark.asyncio
@pytest.mark.parametrize("key,payload", [
    ("game_state", b"\xc3\x28"),
    ("challenges", b"\xff\xfe\x00garbage"),
    ("accepted_challenges", b"\x80\x81"),
])
@patch('src.storage.local_store.track_storage_fallback')
async def test_non_utf8_file_falls_back(mock_track, key, payload, local_store, now):
    """Bytes that are not UTF-8 degrade to defaults like any corrupt file"""
    path = local_store.get_path(key)
    path.parent.mkdir(parents=True)
    path.write_bytes(payload)

    assert await local_store.read(key) is None
    mock_track.assert_called_once_with(key)

    if key == "game_state":
        assert await local_store.load_game_state() == INITIAL_GAME_STATE
    elif key == "challenges":
        assert [c.id for c in await local_store.load_challenges(now)] == ["1", "2", "3"]
    else:
        assert await local_store.load_accepted_ids() == ("1",)
