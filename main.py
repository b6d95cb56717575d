"""
Main entry point for the anime schedule tracker.
Runs one acquire-and-diff cycle and forecasts the trending shows it found.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from scraper.database import ScheduleStore
from scraper.exceptions import ScheduleError
from scheduler.pipeline import SchedulePipeline
from utilities.config import config
from utilities.logger import setup_logging, get_logger


async def main():
    """Run one schedule cycle."""
    # Set up logging
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.get_log_file_path(),
        debug=config.debug
    )

    logger = get_logger(__name__)
    logger.info("Starting anime schedule cycle")

    store = ScheduleStore(
        connection_url=config.mongodb_url,
        database_name=config.mongodb_database,
        snapshot_collection=config.snapshot_collection,
        forecast_collection=config.forecast_collection
    )

    try:
        await store.connect()

        pipeline = SchedulePipeline(store)
        result = await pipeline.acquire_and_diff()

        if result.degraded:
            logger.warning("Schedule built from fallback data", attempts=result.attempts)

        for change in result.changes:
            logger.info("Schedule change", kind=change.kind.value, title=change.title, details=change.details)

        forecasts = await pipeline.forecast_all(result.snapshot.entries)
        logger.info(
            "Cycle finished",
            entries=len(result.snapshot.entries),
            changes=len(result.changes),
            forecasted_shows=len(forecasts)
        )

    except ScheduleError as e:
        logger.error("Fatal error occurred", error=str(e))
        sys.exit(1)

    finally:
        await store.disconnect()


if __name__ == "__main__":
    # Run the async main function
    asyncio.run(main())
