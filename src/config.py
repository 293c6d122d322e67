"""Configuration management"""
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Storage
DATA_PATH: Path = Path(os.getenv("DATA_PATH", "./data"))

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Progress roadmap
# Milestones unlock this many levels before their nominal level
MILESTONE_UNLOCK_LEVELS_BEFORE: int = int(os.getenv("MILESTONE_UNLOCK_LEVELS_BEFORE", "2"))

# Leaderboard
LEADERBOARD_LIMIT: int = int(os.getenv("LEADERBOARD_LIMIT", "50"))
# Rank shown for a player outside the fetched top-N window
LEADERBOARD_UNRANKED_POSITION: int = int(os.getenv("LEADERBOARD_UNRANKED_POSITION", "999"))

# Placeholders for partial player records
DEFAULT_LOCATION: str = os.getenv("DEFAULT_LOCATION", "Dubai")
DEFAULT_AVATAR: str = os.getenv("DEFAULT_AVATAR", "👤")
DEFAULT_PLAYER_NAME: str = os.getenv("DEFAULT_PLAYER_NAME", "You")
DEFAULT_RANKED_NAME: str = os.getenv("DEFAULT_RANKED_NAME", "Gladiator")

# Challenges accepted for a brand-new player
DEFAULT_ACCEPTED_CHALLENGE_IDS: list[str] = [
    cid.strip() for cid in os.getenv("DEFAULT_ACCEPTED_CHALLENGE_IDS", "1").split(",") if cid.strip()
]

# Activity rewards
WORKOUT_XP_REWARD: int = int(os.getenv("WORKOUT_XP_REWARD", "150"))
CHECK_IN_XP_REWARD: int = int(os.getenv("CHECK_IN_XP_REWARD", "50"))

# Metrics
ENABLE_PROMETHEUS: bool = os.getenv("ENABLE_PROMETHEUS", "true").lower() == "true"


# Validation
def validate_config() -> None:
    """Validate configuration values"""
    if MILESTONE_UNLOCK_LEVELS_BEFORE < 0:
        raise ValueError("MILESTONE_UNLOCK_LEVELS_BEFORE must not be negative")
    if WORKOUT_XP_REWARD < 0 or CHECK_IN_XP_REWARD < 0:
        raise ValueError("Activity XP rewards must not be negative")
    if LEADERBOARD_LIMIT <= 0:
        raise ValueError("LEADERBOARD_LIMIT must be positive")
    if 1 <= LEADERBOARD_UNRANKED_POSITION <= LEADERBOARD_LIMIT:
        raise ValueError(
            "LEADERBOARD_UNRANKED_POSITION must lie outside the ranked window "
            f"1..{LEADERBOARD_LIMIT}"
        )
