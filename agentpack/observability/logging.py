"""Structured logging configuration using structlog.

JSON output for deployments, console output for local work. Pack payloads
carry webhook URLs, prompts and store credentials, so a redaction processor
scrubs sensitive keys and obvious contact data before rendering.
"""

import re
import sys
from collections.abc import Mapping
from typing import Any, cast

import structlog
from structlog.types import EventDict, WrappedLogger

# Keys whose values are never rendered
SENSITIVE_KEYS: frozenset[str] = frozenset({
    "token",
    "api_key",
    "apikey",
    "authorization",
    "bearer",
    "password",
    "secret",
    "credentials",
    "access_token",
    "refresh_token",
    "webhook_url",
    "operator_webhook_url",
    "email",
    "phone",
})

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_PATTERN = re.compile(r"\+?\d[\d\s\-\(\)]{9,}\d")

LEVELS: dict[str, int] = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}


class PIIRedactor:
    """Processor that redacts sensitive values from log events.

    Key names are checked first; string values are then scanned for
    email addresses and phone numbers.
    """

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        return cast(EventDict, self._redact(event_dict))

    def _redact(self, value: Any) -> Any:
        if isinstance(value, Mapping):
            return {key: self._redact_entry(str(key).lower(), item) for key, item in value.items()}
        if isinstance(value, list | tuple):
            return [self._redact(item) for item in value]
        if isinstance(value, str):
            value = EMAIL_PATTERN.sub("[EMAIL]", value)
            return PHONE_PATTERN.sub("[PHONE]", value)
        return value

    def _redact_entry(self, key: str, item: Any) -> Any:
        if key in SENSITIVE_KEYS:
            return "[REDACTED]"
        # UUID digit groups look like phone numbers
        if isinstance(item, str) and _is_identifier_key(key):
            return item
        return self._redact(item)


def _is_identifier_key(key: str) -> bool:
    """Whether a key names a record or tenant identifier."""
    return key == "id" or key.endswith("_id")


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    redact_pii: bool = True,
) -> None:
    """Configure structured logging.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR)
        format: "json" for machine-readable output, "console" for humans
        redact_pii: Whether to scrub sensitive values
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if redact_pii:
        processors.append(PIIRedactor())

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(LEVELS.get(level.upper(), 20)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound to the given module name."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
