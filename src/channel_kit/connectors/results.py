"""Structured results returned by connector operations.

Connector operations never raise for operational failures; they return a
``ConnectorResult`` that is either successful (with a value) or failed (with
a ``ConnectorError``).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, override

from channel_kit.connectors.error_codes import ConnectorErrorCode
from channel_kit.types.enums import ConnectorState, MessageStatus

if TYPE_CHECKING:
    from channel_kit.messages.models import Message
    from channel_kit.validation.failures import ValidationFailure


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True, frozen=True)
class ConnectorError:
    """Error details of a failed connector operation.

    Attributes:
        code: Stable error code
        message: Human readable description
        operation: Name of the connector operation that failed
        cause: Exception raised by the provider hook, if any
        validation_failures: Failures that rejected the input, if any
    """

    code: ConnectorErrorCode
    message: str
    operation: str | None = None
    cause: BaseException | None = field(default=None, compare=False)
    validation_failures: tuple[ValidationFailure, ...] = ()

    @override
    def __str__(self) -> str:
        prefix = f"[{self.code}]" if self.operation is None else f"[{self.code}] {self.operation}:"
        return f"{prefix} {self.message}"


@dataclass(frozen=True)
class ConnectorResult[T]:
    """Outcome of a connector operation.

    Use the ``success``/``fail``/``validation_failed`` constructors rather
    than building instances directly.
    """

    successful: bool
    value: T | None = None
    error: ConnectorError | None = None
    provider_data: Mapping[str, object] | None = None

    @classmethod
    def success(cls, value: T, provider_data: Mapping[str, object] | None = None) -> ConnectorResult[T]:
        return cls(True, value, None, provider_data)

    @classmethod
    def fail(
        cls,
        code: ConnectorErrorCode,
        message: str,
        *,
        operation: str | None = None,
        cause: BaseException | None = None,
        provider_data: Mapping[str, object] | None = None,
    ) -> ConnectorResult[T]:
        """Create a failed result.

        Args:
            code: Error code
            message: Error description
            operation: Operation name
            cause: Originating exception
            provider_data: Optional provider specific details
        """
        return cls(False, None, ConnectorError(code, message, operation, cause), provider_data)

    @classmethod
    def from_error(cls, error: ConnectorError) -> ConnectorResult[T]:
        return cls(False, None, error)

    @classmethod
    def validation_failed(
        cls,
        failures: Sequence[ValidationFailure],
        *,
        operation: str | None = None,
        message: str | None = None,
    ) -> ConnectorResult[T]:
        """Create a failed result carrying validation failures."""
        text = message or f"Validation failed with {len(failures)} failure(s)"
        error = ConnectorError(
            ConnectorErrorCode.VALIDATION_FAILED,
            text,
            operation,
            validation_failures=tuple(failures),
        )
        return cls(False, None, error)

    @property
    def error_code(self) -> ConnectorErrorCode | None:
        return self.error.code if self.error is not None else None

    def unwrap(self) -> T:
        """Return the value of a successful result.

        Raises:
            ValueError: If the result is a failure
        """
        if not self.successful:
            msg = f"Cannot unwrap a failed result: {self.error}"
            raise ValueError(msg)
        return self.value  # pyright: ignore[reportReturnType]


@dataclass(slots=True)
class SendResult:
    """Provider acknowledgement of a sent message."""

    message_id: str
    remote_message_id: str
    status: MessageStatus | None = None
    timestamp: datetime = field(default_factory=_utcnow)
    additional_data: dict[str, object] = field(default_factory=dict)


@dataclass(slots=True)
class BatchSendResult:
    """Per-message outcomes of a batch send.

    Outcomes are keyed by message id. Empty or repeated ids are suffixed with
    ``#<position>`` so every message keeps its own entry.
    """

    batch_id: str
    remote_batch_id: str | None = None
    message_results: dict[str, ConnectorResult[SendResult]] = field(default_factory=dict)

    def record(self, message_id: str, result: ConnectorResult[SendResult], position: int | None = None) -> str:
        """Store the outcome of one message and return the key it was stored under.

        Args:
            message_id: Id of the message
            result: Outcome of sending it
            position: Position of the message in the batch; defaults to the
                number of outcomes recorded so far
        """
        suffix = len(self.message_results) if position is None else position
        key = message_id
        while not key or key in self.message_results:
            key = f"{message_id}#{suffix}"
            suffix += 1
        self.message_results[key] = result
        return key

    @property
    def succeeded(self) -> dict[str, SendResult]:
        return {
            message_id: result.value
            for message_id, result in self.message_results.items()
            if result.successful and result.value is not None
        }

    @property
    def failed(self) -> dict[str, ConnectorError]:
        return {
            message_id: result.error
            for message_id, result in self.message_results.items()
            if result.error is not None
        }

    @property
    def all_succeeded(self) -> bool:
        return not self.failed


@dataclass(slots=True)
class StatusInfo:
    """Connector-reported status snapshot."""

    status: str
    description: str | None = None
    timestamp: datetime = field(default_factory=_utcnow)
    additional_data: dict[str, object] = field(default_factory=dict)


@dataclass(slots=True)
class StatusUpdateResult:
    """Single delivery status observation for a message."""

    status: MessageStatus
    timestamp: datetime = field(default_factory=_utcnow)
    description: str | None = None
    additional_data: dict[str, object] = field(default_factory=dict)


@dataclass(slots=True)
class StatusUpdatesResult:
    """Delivery status history of one message."""

    message_id: str
    updates: list[StatusUpdateResult] = field(default_factory=list)

    @property
    def latest(self) -> StatusUpdateResult | None:
        return max(self.updates, key=lambda update: update.timestamp, default=None)


@dataclass(slots=True)
class ReceiveResult:
    """Messages extracted from a raw inbound payload."""

    batch_id: str
    messages: list[Message] = field(default_factory=list)


@dataclass(slots=True)
class ConnectorHealth:
    """Health report of a connector."""

    state: ConnectorState
    is_healthy: bool
    last_health_check: datetime = field(default_factory=_utcnow)
    uptime: timedelta = field(default_factory=timedelta)
    metrics: dict[str, object] = field(default_factory=dict)
    issues: list[str] = field(default_factory=list)
