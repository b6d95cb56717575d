"""
Daily schedule pipeline.

Ties acquisition, enrichment, snapshot storage, change detection and episode
forecasting together. One call to ``acquire_and_diff`` is one cycle; callers
decide when cycles run.
"""

from datetime import date, datetime
from typing import Callable, Dict, Iterable, List, Optional

import structlog

from scheduler.change_detector import ChangeDetector
from scheduler.forecaster import EpisodeForecaster
from scheduler.models import CycleResult, ProjectedEpisode
from scheduler.title_keys import make_show_id
from scraper.database import ScheduleStore
from scraper.date_math import format_iso, previous_day, today
from scraper.enrichment import MyAnimeListClient
from scraper.models import ScheduleEntry
from scraper.schedule_scraper import ScheduleScraper
from utilities.config import config

logger = structlog.get_logger(__name__)


class SchedulePipeline:
    """
    Runs one acquire-and-diff cycle against the store.

    Store failures are not caught here: a cycle that cannot read or write
    snapshots is aborted with StoreFailure.
    """

    def __init__(
        self,
        store: ScheduleStore,
        scraper: Optional[ScheduleScraper] = None,
        detector: Optional[ChangeDetector] = None,
        forecaster: Optional[EpisodeForecaster] = None,
        enrichment_client: Optional[MyAnimeListClient] = None,
        today_provider: Optional[Callable[[], date]] = None
    ):
        """
        Initialize the pipeline.

        Args:
            store: Connected schedule store
            scraper: Schedule scraper (built from config if omitted)
            detector: Change detector
            forecaster: Episode forecaster sharing the same store
            enrichment_client: MyAnimeList client; built from config when enrichment is enabled
            today_provider: Returns the current broadcast-calendar date
        """
        self.store = store
        self.today_provider = today_provider or (lambda: today(config.broadcast_timezone))
        self.scraper = scraper or ScheduleScraper()
        self.detector = detector or ChangeDetector()
        self.forecaster = forecaster or EpisodeForecaster(store, today_provider=self.today_provider)

        if enrichment_client is None and config.enrichment_enabled():
            enrichment_client = MyAnimeListClient()
        self.enrichment_client = enrichment_client

        self.logger = logger.bind(component="schedule_pipeline")

    async def acquire_and_diff(self) -> CycleResult:
        """
        Scrape today's schedule, store it and compare it with yesterday's.

        Returns:
            CycleResult; ``detection`` is None when no usable prior snapshot exists

        Raises:
            StoreFailure: if the store cannot be read or written
        """
        start_time = datetime.utcnow()
        current_date = self.today_provider()
        today_key = format_iso(current_date)
        yesterday_key = format_iso(previous_day(current_date))

        self.logger.info("Starting schedule cycle", snapshot_date=today_key)

        acquisition = await self.scraper.scrape_schedule(current_date)
        entries = acquisition.entries

        if acquisition.degraded:
            self.logger.warning(
                "All transports failed, using fallback schedule",
                attempts=acquisition.attempts,
                entries=len(entries)
            )

        if self.enrichment_client and self.enrichment_client.enabled:
            entries = await self.enrichment_client.enrich_entries(entries)

        snapshot = await self.store.put_snapshot(today_key, entries, degraded=acquisition.degraded)
        previous = await self.store.get_snapshot(yesterday_key)

        detection = None
        if previous and previous.entries:
            changes = self.detector.detect_changes(snapshot.entries, previous.entries)
            detection = self.detector.summarize(
                changes,
                current_count=len(snapshot.entries),
                previous_count=len(previous.entries)
            )

        self.logger.info(
            "Schedule cycle completed",
            snapshot_date=today_key,
            entries=len(snapshot.entries),
            degraded=acquisition.degraded,
            previous_snapshot_found=previous is not None,
            changes_detected=detection.changes_detected if detection else 0,
            duration_seconds=(datetime.utcnow() - start_time).total_seconds()
        )

        return CycleResult(
            snapshot=snapshot,
            previous_snapshot_found=previous is not None,
            detection=detection,
            degraded=acquisition.degraded,
            transport=acquisition.transport,
            attempts=acquisition.attempts
        )

    async def forecast_all(self, entries: Iterable[ScheduleEntry]) -> Dict[str, List[ProjectedEpisode]]:
        """
        Auto-schedule every trending entry.

        Args:
            entries: Schedule entries; those not flagged trending are skipped

        Returns:
            Mapping of show id to its projected episodes
        """
        forecasts: Dict[str, List[ProjectedEpisode]] = {}
        for entry in entries:
            if not entry.is_trending:
                continue
            forecasts[make_show_id(entry.title)] = await self.forecaster.auto_schedule_episodes(entry)

        self.logger.info("Forecasted trending shows", shows=len(forecasts))
        return forecasts
