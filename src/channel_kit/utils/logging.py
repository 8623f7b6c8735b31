"""Logging infrastructure with correlation ID tracking and secret redaction.

Connectors bind the id of the message being dispatched as the correlation
id, so every record emitted while a message is validated and handed to the
provider can be traced back to it. All handlers installed by
``configure_logging`` redact credentials before records are formatted.
"""

from __future__ import annotations

import contextvars
import logging
import sys
from collections.abc import Generator, Mapping
from contextlib import contextmanager
from typing import Final, override

from channel_kit.utils.sanitization import sanitize_args, sanitize_url, sanitize_value

# Correlation ID context variable; inherited by asyncio tasks created in the same context
correlation_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id",
    default=None,
)

DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] - %(message)s"

_STANDARD_RECORD_ATTRS: Final[frozenset[str]] = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
        "correlation_id",
    }
)


class CorrelationIDFilter(logging.Filter):
    """Expose the current correlation id as ``%(correlation_id)s``."""

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        """Stamp the record with the message id bound to the current context.

        Args:
            record: Record about to be emitted

        Returns:
            Always True; records without an id get ``N/A``
        """
        current = correlation_id_var.get()
        record.correlation_id = "N/A" if current is None else current
        return True


class SecretRedactingFilter(logging.Filter):
    """Mask connector credentials before records reach a formatter.

    The message text, the ``%`` formatting arguments and any fields passed
    through ``extra=`` are sanitized.

    Examples:
        >>> logger.info("Calling %s", "https://api.example.com/send?api_key=abc")
        # Logged as: "Calling https://api.example.com/send?api_key=<REDACTED>"

        >>> logger.warning("Rejected", extra={"auth_token": "abc"})
        # record.auth_token == "<REDACTED>"
    """

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        """Mask credentials in the text, arguments and extra fields.

        Args:
            record: Record about to be emitted

        Returns:
            Always True; redaction never drops a record
        """
        if isinstance(record.msg, str):
            record.msg = sanitize_url(record.msg)

        if record.args and isinstance(record.args, tuple):
            record.args = sanitize_args(record.args)

        extra_fields = {
            name: value
            for name, value in vars(record).items()
            if name not in _STANDARD_RECORD_ATTRS and not name.startswith("_")
        }
        for name, value in extra_fields.items():
            setattr(record, name, sanitize_value(value, field_name=name))

        return True


def configure_logging(
    *,
    log_level: str = "INFO",
    log_format: str = DEFAULT_LOG_FORMAT,
    enable_console: bool = True,
    logger_name: str | None = None,
) -> logging.Logger:
    """Configure logging with correlation IDs and secret redaction.

    Existing handlers of the configured logger are replaced.

    Args:
        log_level: Level name, case-insensitive; unknown names fall back to INFO
        log_format: Format string; may reference ``%(correlation_id)s``
        enable_console: Install a stdout handler
        logger_name: Logger to configure; the root logger when None

    Returns:
        The configured logger

    Example:
        >>> configure_logging(log_level="DEBUG")
        >>> set_correlation_id("msg-1")
        >>> logging.getLogger("channel_kit").info("Dispatching")
    """
    target = logging.getLogger(logger_name)
    target.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    target.handlers.clear()

    if enable_console:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(log_format))
        for log_filter in (CorrelationIDFilter(), SecretRedactingFilter()):
            handler.addFilter(log_filter)
        target.addHandler(handler)

    return target


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context."""
    _ = correlation_id_var.set(correlation_id)


def get_correlation_id() -> str | None:
    """Get the current correlation ID, or None if not set."""
    return correlation_id_var.get()


def clear_correlation_id() -> None:
    _ = correlation_id_var.set(None)


@contextmanager
def correlation_id_context(correlation_id: str | None) -> Generator[None]:
    """Bind a correlation ID for the duration of a block.

    The previous value is restored on exit, including when the block raises.

    Args:
        correlation_id: ID to bind; None leaves the current value untouched
    """
    if correlation_id is None:
        yield
        return
    token = correlation_id_var.set(correlation_id)
    try:
        yield
    finally:
        correlation_id_var.reset(token)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    *,
    extra: Mapping[str, object] | None = None,
) -> None:
    """Log a message with extra context fields and the current correlation ID."""
    fields: dict[str, object] = {**(extra or {})}
    if (current := get_correlation_id()) is not None:
        fields["correlation_id"] = current
    logger.log(level, message, extra=fields)
