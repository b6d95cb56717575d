"""
MyAnimeList catalog enrichment for schedule entries.

Lookups are read-only and independent, so a batch runs concurrently under a
shared throttle. A failed lookup never fails the batch: the entry is returned
unenriched.
"""

import asyncio
from typing import Any, List, Optional

import httpx
from asyncio_throttle import Throttler
import structlog

from .exceptions import EnrichmentFailure
from .models import EnrichmentData, ScheduleEntry
from utilities.config import config

logger = structlog.get_logger(__name__)

MAL_FIELDS = "num_episodes,genres,studios,mean"


class MyAnimeListClient:
    """Title lookups against the MyAnimeList v2 API."""

    def __init__(
        self,
        client_id: Optional[str] = None,
        api_url: Optional[str] = None,
        rate_limit: Optional[float] = None,
        timeout: Optional[float] = None
    ):
        self.client_id = client_id if client_id is not None else config.mal_client_id
        self.api_url = api_url or config.mal_api_url
        self.timeout = timeout or config.request_timeout
        self.throttler = Throttler(rate_limit=rate_limit or config.enrichment_rate_limit)
        self.logger = logger.bind(component="mal_client")

    @property
    def enabled(self) -> bool:
        return bool(self.client_id)

    async def lookup_by_title(
        self,
        title: str,
        client: Optional[httpx.AsyncClient] = None
    ) -> Optional[EnrichmentData]:
        """
        Look up one title.

        Args:
            title: Show title as scraped
            client: HTTP client to reuse (one is created if omitted)

        Returns:
            EnrichmentData, or None when not configured or nothing matched

        Raises:
            EnrichmentFailure: on HTTP or payload errors
        """
        if not self.enabled:
            self.logger.debug("MAL client id not configured, skipping lookup", title=title)
            return None

        if client is None:
            async with httpx.AsyncClient(timeout=self.timeout) as owned_client:
                return await self._lookup(owned_client, title)
        return await self._lookup(client, title)

    async def _lookup(self, client: httpx.AsyncClient, title: str) -> Optional[EnrichmentData]:
        params = {"q": title, "limit": 1, "fields": MAL_FIELDS}
        headers = {"X-MAL-CLIENT-ID": self.client_id}

        async with self.throttler:
            try:
                response = await client.get(self.api_url, params=params, headers=headers)
                response.raise_for_status()
                payload = response.json()
            except httpx.HTTPError as e:
                raise EnrichmentFailure(title, f"MAL API error: {e}") from e
            except ValueError as e:
                raise EnrichmentFailure(title, f"Invalid MAL response: {e}") from e

        return self._parse_payload(title, payload)

    def _parse_payload(self, title: str, payload: Any) -> Optional[EnrichmentData]:
        if not isinstance(payload, dict):
            raise EnrichmentFailure(title, f"Unexpected MAL payload type: {type(payload).__name__}")

        results = payload.get("data") or []
        if not results:
            return None

        try:
            node = results[0].get("node") or {}
            return EnrichmentData(
                external_id=node.get("id"),
                total_episode_count=node.get("num_episodes"),
                genre=", ".join(g["name"] for g in node.get("genres", []) if g.get("name")) or None,
                studio=(node.get("studios") or [{}])[0].get("name"),
                rating_score=node.get("mean"),
            )
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
            raise EnrichmentFailure(title, f"Unexpected MAL payload: {e}") from e

    async def enrich_entries(self, entries: List[ScheduleEntry]) -> List[ScheduleEntry]:
        """
        Enrich a batch of entries concurrently, preserving order.

        Args:
            entries: Entries to enrich

        Returns:
            New list; entries whose lookup failed or matched nothing are unchanged
        """
        if not self.enabled or not entries:
            return list(entries)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            enriched = await asyncio.gather(
                *(self._enrich_one(client, entry) for entry in entries)
            )

        self.logger.info(
            "Enrichment completed",
            total=len(entries),
            enriched=sum(1 for before, after in zip(entries, enriched) if before is not after)
        )
        return list(enriched)

    async def _enrich_one(self, client: httpx.AsyncClient, entry: ScheduleEntry) -> ScheduleEntry:
        try:
            data = await self.lookup_by_title(entry.title, client)
        except EnrichmentFailure as e:
            self.logger.warning("Enrichment failed, keeping entry unenriched", title=entry.title, error=e.detail)
            return entry

        if data is None:
            return entry
        return apply_enrichment(entry, data)


def apply_enrichment(entry: ScheduleEntry, data: EnrichmentData) -> ScheduleEntry:
    """Copy of ``entry`` with every non-empty catalog field merged in."""
    updates = {key: value for key, value in data.model_dump().items() if value is not None}
    if not updates:
        return entry
    return entry.model_copy(update=updates)
