"""Local key-value storage for progression records

One JSON file per key under DATA_PATH:
- game_state.json: GameStateSnapshot
- challenges.json: challenge catalog with progress and completion stamps
- accepted_challenges.json: ids the player has accepted

Timestamps are written as ISO-8601 with microseconds and UTC offset so that
expiry comparisons survive a round trip. Missing or unreadable data falls back
to defaults; failed writes raise StorageError.
"""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from pydantic import ValidationError as PydanticValidationError

from src.config import DATA_PATH, DEFAULT_ACCEPTED_CHALLENGE_IDS
from src.exceptions import wrap_external_exception
from src.gamification.challenges import build_default_challenges
from src.models.challenge import Challenge
from src.models.game_state import GameStateSnapshot
from src.observability.metrics import track_storage_fallback

logger = logging.getLogger(__name__)

GAME_STATE_KEY = "game_state"
CHALLENGES_KEY = "challenges"
ACCEPTED_CHALLENGES_KEY = "accepted_challenges"

INITIAL_GAME_STATE = GameStateSnapshot(
    level=1,
    total_xp=0,
    current_energy=10,
    max_energy=10,
)


class LocalStore:
    """Persist progression records as JSON files"""

    def __init__(self, data_path: Path = DATA_PATH):
        self.data_path = Path(data_path)

    def get_path(self, key: str) -> Path:
        """Get the file backing a storage key"""
        return self.data_path / f"{key}.json"

    async def read(self, key: str) -> Optional[Any]:
        """Read a decoded payload, None when missing or unreadable"""
        filepath = self.get_path(key)
        if not filepath.exists():
            logger.debug(f"No stored {key}, using defaults")
            return None

        try:
            return json.loads(filepath.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read {filepath}: {e}. Falling back to defaults")
            track_storage_fallback(key)
            return None

    async def write(self, key: str, payload: Any) -> None:
        """Write a payload, raising StorageError on failure"""
        filepath = self.get_path(key)
        try:
            filepath.parent.mkdir(parents=True, exist_ok=True)
            filepath.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            raise wrap_external_exception(e, operation=f"save_{key}", key=key)
        logger.debug(f"Saved {key} to {filepath}")

    # ==========================================
    # Game State
    # ==========================================

    async def load_game_state(self) -> GameStateSnapshot:
        """Load the stored snapshot or the initial game state"""
        raw = await self.read(GAME_STATE_KEY)
        if raw is None:
            return INITIAL_GAME_STATE

        try:
            return GameStateSnapshot.model_validate(raw)
        except PydanticValidationError as e:
            logger.warning(f"Stored game state is invalid: {e.error_count()} errors. Using initial state")
            track_storage_fallback(GAME_STATE_KEY)
            return INITIAL_GAME_STATE

    async def save_game_state(self, snapshot: GameStateSnapshot) -> None:
        await self.write(GAME_STATE_KEY, snapshot.model_dump(mode="json"))

    # ==========================================
    # Challenges
    # ==========================================

    async def load_challenges(self, now: datetime) -> List[Challenge]:
        """
        Load the stored catalog

        A missing or invalid catalog is replaced by the seed catalog, dated
        relative to `now` and saved so that its expiry times stay fixed.
        """
        raw = await self.read(CHALLENGES_KEY)
        if raw is not None:
            try:
                return [Challenge.model_validate(item) for item in raw]
            except (PydanticValidationError, TypeError) as e:
                logger.warning(f"Stored challenges are invalid ({e}). Using seed catalog")
                track_storage_fallback(CHALLENGES_KEY)

        challenges = build_default_challenges(now)
        await self.save_challenges(challenges)
        return challenges

    async def save_challenges(self, challenges: Sequence[Challenge]) -> None:
        await self.write(CHALLENGES_KEY, [c.model_dump(mode="json") for c in challenges])

    async def load_accepted_ids(self) -> Tuple[str, ...]:
        """Load accepted challenge ids or the configured defaults"""
        raw = await self.read(ACCEPTED_CHALLENGES_KEY)
        if raw is None:
            return tuple(DEFAULT_ACCEPTED_CHALLENGE_IDS)

        if not isinstance(raw, list) or not all(isinstance(cid, str) for cid in raw):
            logger.warning("Stored accepted challenge ids are invalid. Using defaults")
            track_storage_fallback(ACCEPTED_CHALLENGES_KEY)
            return tuple(DEFAULT_ACCEPTED_CHALLENGE_IDS)

        return tuple(raw)

    async def save_accepted_ids(self, accepted_ids: Sequence[str]) -> None:
        await self.write(ACCEPTED_CHALLENGES_KEY, list(accepted_ids))
