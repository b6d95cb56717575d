"""
Exception hierarchy for schedule acquisition and persistence.
"""

from enum import Enum
from typing import List, Optional


class FailureReason(str, Enum):
    """Why a single fetch attempt was rejected."""
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    BODY_TOO_SHORT = "body_too_short"
    NETWORK_ERROR = "network_error"
    EXTRACTION_EMPTY = "extraction_empty"


class ScheduleError(Exception):
    """Base class for schedule pipeline errors."""
    pass


class TransportFailure(ScheduleError):
    """One attempt against one transport failed; always retried."""

    def __init__(
        self,
        reason: FailureReason,
        detail: str = "",
        transport: Optional[str] = None,
        attempt: Optional[int] = None
    ):
        self.reason = reason
        self.detail = detail
        self.transport = transport
        self.attempt = attempt
        super().__init__(f"{reason.value}: {detail}" if detail else reason.value)


class ExtractionEmpty(TransportFailure):
    """The response looked fine but yielded no schedule entries."""

    def __init__(self, detail: str = "No schedule entries found in response", **kwargs):
        super().__init__(FailureReason.EXTRACTION_EMPTY, detail, **kwargs)


class FetchFailure(ScheduleError):
    """Every transport exhausted its retry budget."""

    def __init__(self, target_url: str, failures: List[TransportFailure]):
        self.target_url = target_url
        self.failures = failures
        super().__init__(
            f"All transports failed for {target_url} after {len(failures)} attempts"
        )

    @property
    def attempts(self) -> int:
        return len(self.failures)


class StoreFailure(ScheduleError):
    """The document store rejected a read or write. Never retried."""

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Store operation '{operation}' failed: {detail}")


class EnrichmentFailure(ScheduleError):
    """A catalog lookup failed; the entry proceeds unenriched."""

    def __init__(self, title: str, detail: str):
        self.title = title
        self.detail = detail
        super().__init__(f"Enrichment failed for '{title}': {detail}")
