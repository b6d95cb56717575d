"""
Structured logging system using structlog.
Provides structured logging with different output formats and levels.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union
import structlog
from structlog.stdlib import LoggerFactory


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[Union[str, Path]] = None,
    debug: bool = False
) -> None:
    """
    Set up structured logging with configurable output formats.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        log_file: Optional log file path
        debug: Add call-site parameters to every event
    """

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        processors.append(structlog.processors.CallsiteParameterAdder())

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(getattr(logging, log_level.upper()))
        file_handler.setFormatter(logging.Formatter('%(message)s'))

        logging.getLogger().addHandler(file_handler)

    logger = structlog.get_logger(__name__)
    logger.info(
        "Logging system initialized",
        level=log_level,
        format=log_format,
        file=str(log_file) if log_file else None,
        debug=debug
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class ScrapeLogger:
    """
    Specialized logger for schedule acquisition with context management.
    """

    def __init__(self, name: str = "scraper"):
        self.logger = structlog.get_logger(name)
        self.context = {}

    def bind_context(self, **kwargs) -> 'ScrapeLogger':
        """
        Bind context variables to the logger.

        Args:
            **kwargs: Context variables to bind

        Returns:
            Self for method chaining
        """
        self.context.update(kwargs)
        return self

    def clear_context(self) -> 'ScrapeLogger':
        """Clear all context variables."""
        self.context.clear()
        return self

    def log_fetch_start(self, target_url: str, transports: int, max_retries: int) -> None:
        self.logger.info(
            "Schedule fetch started",
            target_url=target_url,
            transports=transports,
            max_retries=max_retries,
            **self.context
        )

    def log_attempt_failed(
        self,
        transport: str,
        attempt: int,
        reason: str,
        detail: Optional[str] = None
    ) -> None:
        """Log a single failed attempt against one transport."""
        self.logger.warning(
            "Fetch attempt failed",
            transport=transport,
            attempt=attempt,
            reason=reason,
            detail=detail,
            **self.context
        )

    def log_retry(self, transport: str, attempt: int, max_attempts: int, delay: float) -> None:
        """Log retry attempt."""
        self.logger.info(
            "Retrying request",
            transport=transport,
            attempt=attempt,
            max_attempts=max_attempts,
            delay_seconds=delay,
            **self.context
        )

    def log_transport_exhausted(self, transport: str, attempts: int) -> None:
        self.logger.warning(
            "Transport exhausted, moving to next",
            transport=transport,
            attempts=attempts,
            **self.context
        )

    def log_fetch_success(self, transport: str, attempts: int, body_length: int) -> None:
        self.logger.info(
            "Schedule fetch succeeded",
            transport=transport,
            attempts=attempts,
            body_length=body_length,
            **self.context
        )

    def log_fallback_used(self, attempts: int, failures: int) -> None:
        """Log the degraded path where the static dataset replaces live data."""
        self.logger.warning(
            "All transports failed, using fallback schedule",
            attempts=attempts,
            failures=failures,
            degraded=True,
            **self.context
        )

    def log_extraction(self, extractor: str, entries: int) -> None:
        self.logger.debug(
            "Schedule extracted",
            extractor=extractor,
            entries=entries,
            **self.context
        )

