"""
HTTP fetching through an ordered list of proxy transports.
Implements per-transport retry budgets with exponential backoff and a hard
per-attempt timeout.
"""

import asyncio
from typing import Callable, List, Optional
from urllib.parse import quote

import httpx

from .exceptions import ExtractionEmpty, FailureReason, FetchFailure, TransportFailure
from .models import FetchResult, ScheduleEntry
from utilities.config import config
from utilities.logger import ScrapeLogger

Parser = Callable[[str], List[ScheduleEntry]]


def backoff_delay(attempt: int, base_delay: float) -> float:
    """Delay before retrying after the given 0-based attempt."""
    return base_delay * (2 ** attempt)


def build_proxied_url(transport: str, target_url: str) -> str:
    return transport + quote(target_url, safe="")


class TransportFallbackFetcher:
    """
    Fetches one URL through proxy transports tried strictly in order.
    """

    def __init__(
        self,
        transports: Optional[List[str]] = None,
        max_retries: Optional[int] = None,
        base_delay: Optional[float] = None,
        timeout: Optional[float] = None,
        min_body_length: Optional[int] = None
    ):
        """
        Initialize the fetcher. Unset arguments fall back to the global config.

        Args:
            transports: Proxy URL prefixes in priority order
            max_retries: Attempts per transport
            base_delay: Backoff base in seconds
            timeout: Hard cap per attempt in seconds
            min_body_length: Shortest body accepted as a real page
        """
        self.transports = list(transports if transports is not None else config.proxy_transports)
        self.max_retries = max_retries if max_retries is not None else config.max_retries
        self.base_delay = base_delay if base_delay is not None else config.retry_base_delay
        self.timeout = timeout if timeout is not None else config.request_timeout
        self.min_body_length = min_body_length if min_body_length is not None else config.min_body_length
        self.scrape_logger = ScrapeLogger("transport_fetcher")

        self.client_config = {
            "timeout": self.timeout,
            "headers": config.get_headers(),
            "follow_redirects": True,
        }

    @property
    def max_attempts(self) -> int:
        return len(self.transports) * self.max_retries

    async def fetch_via_fallback(
        self,
        target_url: str,
        parse: Optional[Parser] = None,
        client: Optional[httpx.AsyncClient] = None
    ) -> FetchResult:
        """
        Fetch ``target_url`` through the first transport that yields a usable page.

        Args:
            target_url: Page to fetch
            parse: Optional parser; an empty parse result fails the attempt
            client: HTTP client to reuse (one is created if omitted)

        Returns:
            FetchResult for the first accepted response

        Raises:
            FetchFailure: every transport exhausted its retries
        """
        if client is None:
            async with httpx.AsyncClient(**self.client_config) as owned_client:
                return await self._fetch_with_client(owned_client, target_url, parse)
        return await self._fetch_with_client(client, target_url, parse)

    async def _fetch_with_client(
        self,
        client: httpx.AsyncClient,
        target_url: str,
        parse: Optional[Parser]
    ) -> FetchResult:
        failures: List[TransportFailure] = []
        attempts = 0
        self.scrape_logger.log_fetch_start(target_url, len(self.transports), self.max_retries)

        for transport in self.transports:
            for attempt in range(self.max_retries):
                attempts += 1
                try:
                    document = await self._attempt(client, transport, target_url)
                    entries = parse(document) if parse else []
                    if parse and not entries:
                        raise ExtractionEmpty()

                    self.scrape_logger.log_fetch_success(transport, attempts, len(document))
                    return FetchResult(
                        document=document,
                        entries=entries,
                        transport=transport,
                        attempts=attempts,
                        failures=[failure.reason.value for failure in failures]
                    )

                except TransportFailure as failure:
                    failure.transport = transport
                    failure.attempt = attempt + 1
                    failures.append(failure)
                    self.scrape_logger.log_attempt_failed(
                        transport, attempt + 1, failure.reason.value, failure.detail
                    )

                if attempt < self.max_retries - 1:
                    delay = backoff_delay(attempt, self.base_delay)
                    self.scrape_logger.log_retry(transport, attempt + 1, self.max_retries, delay)
                    await asyncio.sleep(delay)

            self.scrape_logger.log_transport_exhausted(transport, self.max_retries)

        raise FetchFailure(target_url, failures)

    async def _attempt(self, client: httpx.AsyncClient, transport: str, target_url: str) -> str:
        """
        Make a single GET through one transport.

        Returns:
            Response body text

        Raises:
            TransportFailure: on timeout, non-2xx status, short body or network error
        """
        url = build_proxied_url(transport, target_url)

        try:
            response = await asyncio.wait_for(
                client.get(url, headers=config.get_headers(), timeout=self.timeout),
                timeout=self.timeout
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise TransportFailure(FailureReason.TIMEOUT, f"No response within {self.timeout}s: {e}")
        except httpx.HTTPError as e:
            raise TransportFailure(FailureReason.NETWORK_ERROR, str(e))

        if not 200 <= response.status_code < 300:
            raise TransportFailure(
                FailureReason.HTTP_STATUS,
                f"HTTP {response.status_code}: {response.reason_phrase}"
            )

        document = response.text or ""
        if len(document) < self.min_body_length:
            raise TransportFailure(
                FailureReason.BODY_TOO_SHORT,
                f"Response too short ({len(document)} chars), likely blocked"
            )

        return document
