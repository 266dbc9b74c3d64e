"""
Structured logging for the decider kernel

structlog renders, stdlib logging routes. Log lines emitted while one
correlation ID is bound share it, and payload keys that tend to carry
personal data are masked by a processor before anything is rendered.

Fun fact: The "event" key structlog uses for the message is older than
event sourcing's use of the word - a log line is just an event nobody
folds into state!
"""

import logging
import os
import secrets
import sys
import time
from typing import Any, TextIO

import structlog

REDACTED = "***REDACTED***"

# Payload keys that must never reach the logs verbatim
REDACTED_FIELDS = frozenset(
    {
        "client_id",
        "customer_id",
        "email",
        "password",
        "token",
        "secret",
        "api_key",
        "private_key",
    }
)


def bind_correlation_id(correlation_id: str | None = None) -> str:
    """
    Bind a correlation ID to every log line of the current context

    Args:
        correlation_id: ID to bind; a random URL-safe one when omitted

    Returns:
        The bound ID
    """
    correlation_id = correlation_id or secrets.token_urlsafe(16)
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)
    return correlation_id


def redact_sensitive_fields(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor masking REDACTED_FIELDS keys"""
    for key in REDACTED_FIELDS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def is_production() -> bool:
    """True when ENVIRONMENT is 'production'"""
    return os.getenv("ENVIRONMENT", "development").lower() == "production"


def configure_logging(
    *,
    json_output: bool = False,
    log_level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """
    Configure structlog over stdlib logging

    Args:
        json_output: One JSON object per line (production) instead of
            console key=value lines (development)
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        stream: Destination; stderr by default so stdout stays free for
            command output. Reconfiguring replaces the previous handler.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stderr,
        level=getattr(logging, log_level.upper()),
        force=True,
    )

    renderer: list[structlog.types.Processor]
    if json_output:
        renderer = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        renderer = [
            structlog.processors.ExceptionRenderer(),
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_sensitive_fields,
            *renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


class LogOperation:
    """
    Log the start and end of an operation with its duration

    Success lines use ``level``; a failure is always logged at error, with
    a stack trace outside production, and the exception is re-raised.
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        operation: str,
        *,
        level: str = "info",
        **context: Any,
    ) -> None:
        self.log = getattr(logger, level)
        self.error = logger.error
        self.operation = operation
        self.context = context
        self.started = 0.0

    def _elapsed_ms(self) -> float:
        return round((time.perf_counter() - self.started) * 1000, 2)

    def __enter__(self) -> "LogOperation":
        self.started = time.perf_counter()
        self.log(f"{self.operation} started", operation=self.operation, **self.context)
        return self

    def __exit__(self, exc_type: Any, exc_val: BaseException | None, exc_tb: Any) -> None:
        if exc_val is None:
            self.log(
                f"{self.operation} completed",
                operation=self.operation,
                duration_ms=self._elapsed_ms(),
                **self.context,
            )
            return
        self.error(
            f"{self.operation} failed",
            operation=self.operation,
            duration_ms=self._elapsed_ms(),
            error=str(exc_val),
            exc_info=not is_production(),
            **self.context,
        )
