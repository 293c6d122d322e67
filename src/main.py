"""Main entry point: print the progress dashboard for the local player"""
import logging
import asyncio
import json
import sys

from src.config import validate_config, LOG_LEVEL, DATA_PATH
from src.exceptions import ProgressionError
from src.gamification.dashboards import build_progress_dashboard
from src.services.progression_service import ProgressionService
from src.storage.local_store import LocalStore
from src.utils.datetime_helpers import now_utc

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL)
)

logger = logging.getLogger(__name__)


async def main() -> None:
    """Main application entry point"""
    try:
        # Validate configuration
        logger.info("Validating configuration...")
        validate_config()

        logger.info(f"Loading progression data from {DATA_PATH}...")
        store = LocalStore(DATA_PATH)
        service = ProgressionService(store)

        now = now_utc()
        views = await service.get_challenges(now)
        _, summary = await service.get_roadmap()
        snapshot = await store.load_game_state()

        print(build_progress_dashboard(snapshot, summary, views, now=now))

    except ProgressionError as e:
        # Already logged with full context when raised
        print(json.dumps(e.to_dict(), ensure_ascii=False, default=str), file=sys.stderr)
        raise SystemExit(1) from e

    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        raise


def run() -> None:
    """Console script entry point"""
    asyncio.run(main())


if __name__ == "__main__":
    run()
