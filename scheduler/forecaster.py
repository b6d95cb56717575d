"""
Episode forecasting for trending shows.

Projects the remaining episodes of a show onto the weekly broadcast calendar
and keeps one forecast record per show in the store.
"""

import re
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional

import structlog

from scheduler.models import ForecastRecord, ProjectedEpisode
from scheduler.title_keys import make_show_id
from scraper.curated import CuratedLists, DEFAULT_CURATED_LISTS
from scraper.database import ScheduleStore
from scraper.date_math import format_iso, is_known_day, next_airing_after, today
from scraper.models import ScheduleEntry
from utilities.config import config

logger = structlog.get_logger(__name__)

_LEADING_NUMBER = re.compile(r"^\s*(\d+)")

LONG_RUNNING_LOOKAHEAD = 52
TWO_COUR_EPISODES = 24
SINGLE_COUR_EPISODES = 12


def parse_current_episode(label: str) -> int:
    """Leading episode number of a label; markers such as "New" count as episode 1."""
    match = _LEADING_NUMBER.match(label or "")
    if not match:
        return 1
    return max(int(match.group(1)), 1)


class EpisodeForecaster:
    """
    Builds and maintains forecast records.

    Episode counts are a best-effort heuristic: the enrichment total when
    known, otherwise a bucket chosen from the curated title lists. Unseen
    long-running or split-cour titles fall into the default bucket.
    """

    def __init__(
        self,
        store: ScheduleStore,
        curated: CuratedLists = DEFAULT_CURATED_LISTS,
        today_provider: Optional[Callable[[], date]] = None,
        timezone_label: Optional[str] = None
    ):
        """
        Initialize the forecaster.

        Args:
            store: Document store holding forecast records
            curated: Title tables for the episode-count buckets
            today_provider: Returns the current broadcast-calendar date
            timezone_label: Label stored on each record
        """
        self.store = store
        self.curated = curated
        self.today_provider = today_provider or (lambda: today(config.broadcast_timezone))
        self.timezone_label = timezone_label or config.timezone_label
        self.logger = logger.bind(component="episode_forecaster")

    def estimate_total_episodes(self, entry: ScheduleEntry, current: int) -> int:
        if entry.total_episode_count:
            return entry.total_episode_count

        if self.curated.is_long_running(entry.title):
            return current + LONG_RUNNING_LOOKAHEAD

        if self.curated.is_two_cour(entry.title):
            return max(TWO_COUR_EPISODES, current)

        return max(SINGLE_COUR_EPISODES, current)

    def project_episodes(
        self,
        entry: ScheduleEntry,
        current: int,
        total: int,
        reference: date
    ) -> List[ProjectedEpisode]:
        """
        Dates for episodes ``current + 1 .. total``, one week apart.

        The first projected episode airs on the first ``day_of_week``
        strictly after ``reference``.
        """
        anchor = next_airing_after(entry.day_of_week, reference)
        return [
            ProjectedEpisode(
                episode_number=number,
                date=format_iso(anchor + timedelta(weeks=number - current - 1)),
                air_time=entry.air_time
            )
            for number in range(current + 1, total + 1)
        ]

    async def auto_schedule_episodes(
        self,
        entry: ScheduleEntry,
        reference: Optional[date] = None
    ) -> List[ProjectedEpisode]:
        """
        Project the remaining episodes of a show and store its forecast record.

        Args:
            entry: Schedule entry for the show
            reference: Calendar date to project from (defaults to today)

        Returns:
            Projected episodes; empty when the broadcast day is unknown
        """
        if not is_known_day(entry.day_of_week):
            self.logger.warning(
                "Cannot forecast show without a broadcast day",
                title=entry.title,
                day_of_week=entry.day_of_week
            )
            return []

        reference = reference or self.today_provider()
        current = parse_current_episode(entry.episode_label)
        total = self.estimate_total_episodes(entry, current)
        projected = self.project_episodes(entry, current, total, reference)

        record = ForecastRecord(
            show_id=make_show_id(entry.title),
            title=entry.title,
            total_episode_count=total,
            current_episode=current,
            day_of_week=entry.day_of_week,
            air_time=entry.air_time,
            timezone_label=self.timezone_label,
            auto_scheduled=True,
            projected_episodes=projected
        )
        await self.store.put_forecast(record)

        self.logger.info(
            "Auto-scheduled episodes",
            show_id=record.show_id,
            current_episode=current,
            total_episodes=total,
            projected=len(projected)
        )
        return projected

    async def advance_episode(self, show_id: str) -> Optional[ForecastRecord]:
        """
        Mark the next episode as aired.

        Returns:
            The updated record, or None if the show has no forecast
        """
        record = await self.store.get_forecast(show_id)
        if not record:
            self.logger.warning("No forecast to advance", show_id=show_id)
            return None

        current = record.current_episode + 1
        updated = record.model_copy(update={
            "current_episode": current,
            "projected_episodes": [
                episode for episode in record.projected_episodes
                if episode.episode_number > current
            ],
            "updated_at": datetime.utcnow()
        })
        await self.store.put_forecast(updated)

        self.logger.info("Advanced episode", show_id=show_id, current_episode=current)
        return updated

    async def confirm_episode(self, show_id: str, episode_number: int) -> Optional[ForecastRecord]:
        """
        Flag one projected episode's date as confirmed.

        Returns:
            The updated record, or None if the show has no forecast
        """
        record = await self.store.get_forecast(show_id)
        if not record:
            self.logger.warning("No forecast to confirm", show_id=show_id)
            return None

        if not any(ep.episode_number == episode_number for ep in record.projected_episodes):
            self.logger.warning(
                "Episode is not projected",
                show_id=show_id,
                episode_number=episode_number
            )
            return record

        updated = record.model_copy(update={
            "projected_episodes": [
                episode.model_copy(update={"confirmed": True})
                if episode.episode_number == episode_number else episode
                for episode in record.projected_episodes
            ],
            "updated_at": datetime.utcnow()
        })
        await self.store.put_forecast(updated)

        self.logger.info("Confirmed episode date", show_id=show_id, episode_number=episode_number)
        return updated

    async def get_future_schedule(self) -> List[ForecastRecord]:
        """All stored forecast records, most recently updated first."""
        return await self.store.get_forecasts()
