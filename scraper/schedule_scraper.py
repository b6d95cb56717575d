"""
Schedule acquisition for the weekly broadcast page.
Combines the transport fallback fetcher, the extraction pipeline and the
static fallback schedule into one call that always yields entries.
"""

from datetime import date, datetime
from typing import Optional

import httpx

from .exceptions import FetchFailure
from .extractor import ScheduleExtractor
from .fallback import get_fallback_schedule
from .fetcher import TransportFallbackFetcher
from .models import AcquisitionResult
from utilities.config import config
from utilities.logger import ScrapeLogger


class ScheduleScraper:
    """
    Scrapes the schedule page, degrading to the fallback dataset when every transport fails.
    """

    def __init__(
        self,
        fetcher: Optional[TransportFallbackFetcher] = None,
        extractor: Optional[ScheduleExtractor] = None,
        source_url: Optional[str] = None
    ):
        """
        Initialize the scraper.

        Args:
            fetcher: Transport fallback fetcher (built from config if omitted)
            extractor: Schedule extractor (default candidate pipeline if omitted)
            source_url: Schedule page URL
        """
        self.fetcher = fetcher or TransportFallbackFetcher()
        self.extractor = extractor or ScheduleExtractor()
        self.source_url = source_url or config.source_url
        self.scrape_logger = ScrapeLogger("schedule_scraper")

    async def scrape_schedule(
        self,
        reference: date,
        client: Optional[httpx.AsyncClient] = None
    ) -> AcquisitionResult:
        """
        Acquire the current schedule.

        Args:
            reference: Date air dates are computed from
            client: HTTP client to reuse

        Returns:
            AcquisitionResult; ``degraded`` is set when the fallback dataset was used
        """
        start_time = datetime.utcnow()
        self.scrape_logger.bind_context(operation="scrape_schedule", source_url=self.source_url)

        try:
            result = await self.fetcher.fetch_via_fallback(
                self.source_url,
                parse=lambda document: self.extractor.extract(document, reference),
                client=client
            )
        except FetchFailure as failure:
            entries = get_fallback_schedule(reference)
            self.scrape_logger.log_fallback_used(failure.attempts, len(failure.failures))
            return AcquisitionResult(
                entries=entries,
                degraded=True,
                transport=None,
                attempts=failure.attempts,
                failures=[f.reason.value for f in failure.failures],
                duration_seconds=(datetime.utcnow() - start_time).total_seconds(),
                acquired_at=start_time
            )

        self.scrape_logger.log_extraction("pipeline", len(result.entries))
        return AcquisitionResult(
            entries=result.entries,
            degraded=False,
            transport=result.transport,
            attempts=result.attempts,
            failures=result.failures,
            duration_seconds=(datetime.utcnow() - start_time).total_seconds(),
            acquired_at=start_time
        )
