"""Abstract base class for channel connectors.

The base class owns the lifecycle state machine and wraps every provider
hook in the same dispatch pipeline: state gate, capability gate, message
validation, then the hook itself under an optional timeout. Hook exceptions
are converted to failed ``ConnectorResult`` values in one place.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Iterator, Sequence
from datetime import UTC, datetime
from types import TracebackType
from typing import TYPE_CHECKING, Final, Self

from channel_kit.config.models import ConnectorOptions
from channel_kit.connectors.error_codes import ConnectorErrorCode
from channel_kit.connectors.results import (
    BatchSendResult,
    ConnectorError,
    ConnectorHealth,
    ConnectorResult,
    ReceiveResult,
    SendResult,
    StatusInfo,
    StatusUpdateResult,
    StatusUpdatesResult,
)
from channel_kit.connectors.state_machine import ConnectorStateMachine
from channel_kit.schema.settings import ConnectionSettings
from channel_kit.types.enums import ChannelCapability, ConnectorState
from channel_kit.utils.logging import correlation_id_context
from channel_kit.utils.sanitization import redact_message_properties, sanitize_exception

if TYPE_CHECKING:
    from channel_kit.messages.models import Message
    from channel_kit.messages.source import MessageSource
    from channel_kit.schema.channel_schema import ChannelSchema
    from channel_kit.types.aliases import SettingsMapping
    from channel_kit.validation.failures import ValidationFailure

logger = logging.getLogger(__name__)

type HookOutcome[T] = T | ConnectorResult[T]

_INITIALIZABLE: Final[frozenset[ConnectorState]] = frozenset(
    {ConnectorState.UNINITIALIZED, ConnectorState.DISCONNECTED, ConnectorState.ERROR}
)


class ConnectorDisposedError(RuntimeError):
    """Raised when an operation is attempted on a disposed connector."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"Cannot run '{operation}': the connector has been disposed")
        self.operation: str = operation


class ChannelConnector(ABC):
    """Base class for connectors that deliver messages through a provider.

    Subclasses implement ``_initialize_core``, ``_test_connection_core`` and
    ``_send_message_core`` and may override the optional hooks. Hooks either
    return a plain value (wrapped as a successful result) or a
    ``ConnectorResult``; any exception they raise becomes a failed result.

    Example:
        >>> async with EmailConnector(schema, settings) as connector:
        ...     _ = await connector.initialize()
        ...     result = await connector.send_message(message)
    """

    def __init__(
        self,
        schema: ChannelSchema,
        settings: SettingsMapping | None = None,
        *,
        options: ConnectorOptions | None = None,
    ) -> None:
        """Initialize the connector.

        Args:
            schema: Schema describing what this connector supports
            settings: Connection settings; copied and bound to ``schema``
            options: Runtime options (timeouts, redaction)
        """
        self._schema: ChannelSchema = schema
        self._settings: ConnectionSettings = ConnectionSettings(settings, schema=schema)
        self._options: ConnectorOptions = options or ConnectorOptions()
        self._state_machine: ConnectorStateMachine = ConnectorStateMachine()
        self._connected_at: datetime | None = None
        self._state_machine.add_listener(self._on_state_change)

    @property
    def schema(self) -> ChannelSchema:
        return self._schema

    @property
    def settings(self) -> ConnectionSettings:
        return self._settings

    @property
    def options(self) -> ConnectorOptions:
        return self._options

    @property
    def state(self) -> ConnectorState:
        return self._state_machine.current_state

    @property
    def state_machine(self) -> ConnectorStateMachine:
        return self._state_machine

    # Lifecycle

    async def initialize(self) -> ConnectorResult[bool]:
        """Initialize the connector.

        Allowed from ``UNINITIALIZED``, ``DISCONNECTED`` and ``ERROR``. The
        connector ends ``CONNECTED`` on success and ``ERROR`` otherwise.

        Raises:
            ConnectorDisposedError: If the connector has been disposed
        """
        operation = "initialize"
        self._ensure_not_disposed(operation)
        current = self.state
        if not self._state_machine.try_transition(_INITIALIZABLE, ConnectorState.INITIALIZING):
            logger.warning("Rejected initialize of %s connector in state %s", self._schema.logical_identity, current)
            return ConnectorResult.fail(
                ConnectorErrorCode.ALREADY_INITIALIZED,
                f"The connector has already been initialized (state: {current})",
                operation=operation,
            )

        result: ConnectorResult[bool] = await self._invoke_provider(
            operation,
            self._run_initialize,
            failure_code=ConnectorErrorCode.INITIALIZATION_ERROR,
        )
        target = ConnectorState.CONNECTED if result.successful else ConnectorState.ERROR
        if not self._state_machine.try_transition(ConnectorState.INITIALIZING, target):
            logger.debug("Connector left INITIALIZING before initialize completed (state: %s)", self.state)
        if result.successful:
            logger.info("Connector %s initialized", self._schema.logical_identity)
        return result

    async def test_connection(self) -> ConnectorResult[bool]:
        """Ask the provider whether the connection is usable."""
        return await self._run_operation("test_connection", None, self._test_connection_core)

    async def disconnect(self) -> ConnectorResult[bool]:
        """Close the provider connection; the connector may be initialized again."""
        operation = "disconnect"
        result: ConnectorResult[bool] = await self._run_operation(operation, None, self._run_disconnect)
        if result.error is not None and result.error.code is ConnectorErrorCode.NOT_INITIALIZED:
            return result
        target = ConnectorState.DISCONNECTED if result.successful else ConnectorState.ERROR
        _ = self._state_machine.try_transition(ConnectorState.CONNECTED, target)
        return result

    async def dispose(self) -> None:
        """Release the connector. Calling it more than once has no effect."""
        previous = self._state_machine.force_dispose()
        if previous is ConnectorState.DISPOSED:
            return
        try:
            await self._dispose_core()
        except Exception as exc:
            logger.error(
                "Error while disposing %s connector: %s",
                self._schema.logical_identity,
                sanitize_exception(exc),
            )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.dispose()

    # Messaging operations

    def validate_message(self, message: Message) -> Iterator[ValidationFailure]:
        """Validate a message before dispatch; override to add checks."""
        return self._schema.validate_message(message)

    async def send_message(self, message: Message) -> ConnectorResult[SendResult]:
        """Validate and send a single message.

        Raises:
            ConnectorDisposedError: If the connector has been disposed
        """
        operation = "send_message"
        self._ensure_not_disposed(operation)
        with correlation_id_context(message.id or None):
            gate_error = self._check_gates(operation, ChannelCapability.SEND_MESSAGES)
            if gate_error is not None:
                return ConnectorResult.from_error(gate_error)
            return await self._send_validated(message, operation)

    async def send_batch(
        self,
        messages: Sequence[Message],
        *,
        batch_id: str | None = None,
    ) -> ConnectorResult[BatchSendResult]:
        """Send several messages, reporting an outcome per message.

        Without a provider batch hook the messages go one by one through the
        single-send path; once a send is cancelled the remaining messages are
        reported as cancelled without reaching the provider. With a hook,
        invalid messages are reported individually and only the valid ones
        are handed to it.

        Args:
            messages: Messages to send
            batch_id: Batch identifier; generated when None
        """
        operation = "send_batch"
        self._ensure_not_disposed(operation)
        gate_error = self._check_gates(operation, ChannelCapability.BULK_MESSAGING)
        if gate_error is not None:
            return ConnectorResult.from_error(gate_error)

        batch = BatchSendResult(batch_id or uuid.uuid4().hex)
        if not self._has_batch_hook():
            cancelled: ConnectorError | None = None
            for index, message in enumerate(messages):
                if cancelled is not None:
                    _ = batch.record(message.id, ConnectorResult.from_error(cancelled), index)
                    continue
                with correlation_id_context(message.id or None):
                    result = await self._send_validated(message, "send_message")
                _ = batch.record(message.id, result, index)
                if result.error_code is ConnectorErrorCode.CANCELLED:
                    cancelled = ConnectorError(
                        ConnectorErrorCode.CANCELLED,
                        "The batch was cancelled before this message was sent",
                        operation,
                    )
            return ConnectorResult.success(batch)

        valid: list[Message] = []
        for index, message in enumerate(messages):
            failures = list(self.validate_message(message))
            if failures:
                _ = batch.record(message.id, self._validation_failed(message, failures, operation), index)
            else:
                valid.append(message)

        if not valid:
            return ConnectorResult.success(batch)

        provider_result: ConnectorResult[BatchSendResult] = await self._invoke_provider(
            operation,
            lambda: self._send_batch_core(valid, batch.batch_id),
        )
        if not provider_result.successful or provider_result.value is None:
            return provider_result

        batch.remote_batch_id = provider_result.value.remote_batch_id
        for message_id, message_result in provider_result.value.message_results.items():
            _ = batch.record(message_id, message_result)
        return ConnectorResult.success(batch, provider_result.provider_data)

    async def get_message_status(self, message_id: str) -> ConnectorResult[StatusUpdatesResult]:
        """Query the provider for the delivery status of a sent message."""
        return await self._run_operation(
            "get_message_status",
            ChannelCapability.MESSAGE_STATUS_QUERY,
            lambda: self._get_message_status_core(message_id),
        )

    async def receive_messages(self, source: MessageSource) -> ConnectorResult[ReceiveResult]:
        """Extract inbound messages from a raw provider payload."""
        return await self._run_operation(
            "receive_messages",
            ChannelCapability.RECEIVE_MESSAGES,
            lambda: self._receive_messages_core(source),
        )

    async def receive_message_status(self, source: MessageSource) -> ConnectorResult[StatusUpdateResult]:
        """Extract a delivery status callback from a raw provider payload."""
        return await self._run_operation(
            "receive_message_status",
            ChannelCapability.HANDLER_MESSAGE_STATE,
            lambda: self._receive_message_status_core(source),
        )

    async def get_health(self) -> ConnectorResult[ConnectorHealth]:
        return await self._run_operation("get_health", ChannelCapability.HEALTH_CHECK, self._get_health_core)

    async def get_status(self) -> ConnectorResult[StatusInfo]:
        """Report the connector status; allowed in every state but ``DISPOSED``."""
        operation = "get_status"
        self._ensure_not_disposed(operation)
        return await self._invoke_provider(operation, self._get_status_core)

    # Provider hooks

    @abstractmethod
    async def _initialize_core(self) -> HookOutcome[bool] | None:
        """Connect to the provider and prepare for operations."""
        ...

    @abstractmethod
    async def _test_connection_core(self) -> HookOutcome[bool]:
        ...

    @abstractmethod
    async def _send_message_core(self, message: Message) -> HookOutcome[SendResult]:
        """Hand a validated message to the provider."""
        ...

    async def _send_batch_core(self, messages: Sequence[Message], batch_id: str) -> HookOutcome[BatchSendResult]:
        """Send validated messages in one provider call (optional)."""
        raise NotImplementedError

    async def _get_message_status_core(self, message_id: str) -> HookOutcome[StatusUpdatesResult]:
        raise NotImplementedError

    async def _receive_messages_core(self, source: MessageSource) -> HookOutcome[ReceiveResult]:
        raise NotImplementedError

    async def _receive_message_status_core(self, source: MessageSource) -> HookOutcome[StatusUpdateResult]:
        raise NotImplementedError

    async def _get_health_core(self) -> HookOutcome[ConnectorHealth]:
        uptime = datetime.now(UTC) - self._connected_at if self._connected_at is not None else None
        health = ConnectorHealth(self.state, is_healthy=self.state is ConnectorState.CONNECTED)
        if uptime is not None:
            health.uptime = uptime
        return health

    async def _get_status_core(self) -> HookOutcome[StatusInfo]:
        return StatusInfo(str(self.state), description=self._schema.display_name or self._schema.logical_identity)

    async def _disconnect_core(self) -> None:
        return None

    async def _dispose_core(self) -> None:
        return None

    # Dispatch pipeline

    async def _run_initialize(self) -> HookOutcome[bool]:
        outcome = await self._initialize_core()
        return True if outcome is None else outcome

    async def _run_disconnect(self) -> bool:
        await self._disconnect_core()
        return True

    async def _run_operation[T](
        self,
        operation: str,
        capability: ChannelCapability | None,
        call: Callable[[], Awaitable[HookOutcome[T]]],
    ) -> ConnectorResult[T]:
        self._ensure_not_disposed(operation)
        gate_error = self._check_gates(operation, capability)
        if gate_error is not None:
            return ConnectorResult.from_error(gate_error)
        return await self._invoke_provider(operation, call)

    def _check_gates(self, operation: str, capability: ChannelCapability | None) -> ConnectorError | None:
        state = self.state
        if state is ConnectorState.DISPOSED:
            raise ConnectorDisposedError(operation)
        if state is not ConnectorState.CONNECTED:
            logger.warning("Rejected %s: connector is not connected (state: %s)", operation, state)
            return ConnectorError(
                ConnectorErrorCode.NOT_INITIALIZED,
                f"The connector is not connected (state: {state})",
                operation,
            )
        if capability is not None and not self._schema.supports_capability(capability):
            logger.warning("Rejected %s: capability %s is not supported", operation, capability.describe())
            return ConnectorError(
                ConnectorErrorCode.NOT_SUPPORTED,
                f"The connector does not support the '{capability.describe()}' capability",
                operation,
            )
        return None

    async def _send_validated(self, message: Message, operation: str) -> ConnectorResult[SendResult]:
        failures = list(self.validate_message(message))
        if failures:
            return self._validation_failed(message, failures, operation)
        if logger.isEnabledFor(logging.DEBUG):
            properties = (
                redact_message_properties(message)
                if self._options.redact_sensitive
                else message.property_values()
            )
            logger.debug("Sending message %s with properties %s", message.id, properties)
        return await self._invoke_provider(operation, lambda: self._send_message_core(message))

    def _validation_failed(
        self,
        message: Message,
        failures: list[ValidationFailure],
        operation: str,
    ) -> ConnectorResult[SendResult]:
        logger.info("Message %s failed validation with %d failure(s)", message.id, len(failures))
        return ConnectorResult.validation_failed(
            failures,
            operation=operation,
            message=f"Message '{message.id}' is not valid for {self._schema.logical_identity}",
        )

    async def _invoke_provider[T](
        self,
        operation: str,
        call: Callable[[], Awaitable[HookOutcome[T]]],
        *,
        failure_code: ConnectorErrorCode = ConnectorErrorCode.PROVIDER_ERROR,
    ) -> ConnectorResult[T]:
        """Run a provider hook and convert its outcome into a result.

        Args:
            operation: Operation name recorded on errors
            call: Zero-argument coroutine factory invoking the hook
            failure_code: Code used for unexpected exceptions

        Returns:
            The hook's result, or a failed result describing its exception
        """
        timeout = self._options.operation_timeout
        try:
            async with asyncio.timeout(timeout):
                outcome = await call()
        except TimeoutError as exc:
            logger.warning("%s timed out after %ss", operation, timeout)
            return ConnectorResult.fail(
                ConnectorErrorCode.TIMEOUT,
                f"The operation timed out after {timeout}s" if timeout is not None else "The operation timed out",
                operation=operation,
                cause=exc,
            )
        except asyncio.CancelledError as exc:
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                _ = task.uncancel()
                logger.warning("%s was cancelled by the caller", operation)
            else:
                logger.warning("%s was cancelled by the provider", operation)
            return ConnectorResult.fail(
                ConnectorErrorCode.CANCELLED,
                "The operation was cancelled",
                operation=operation,
                cause=exc,
            )
        except NotImplementedError as exc:
            return ConnectorResult.fail(
                ConnectorErrorCode.NOT_SUPPORTED,
                f"The connector does not implement '{operation}'",
                operation=operation,
                cause=exc,
            )
        except Exception as exc:
            logger.error("%s failed: %s", operation, sanitize_exception(exc))
            return ConnectorResult.fail(failure_code, str(exc) or type(exc).__name__, operation=operation, cause=exc)

        if isinstance(outcome, ConnectorResult):
            return outcome  # pyright: ignore[reportUnknownVariableType]
        return ConnectorResult.success(outcome)

    def _has_batch_hook(self) -> bool:
        return type(self)._send_batch_core is not ChannelConnector._send_batch_core

    def _ensure_not_disposed(self, operation: str) -> None:
        if self._state_machine.is_disposed:
            raise ConnectorDisposedError(operation)

    def _on_state_change(self, from_state: ConnectorState, to_state: ConnectorState) -> None:
        if to_state is ConnectorState.CONNECTED:
            self._connected_at = datetime.now(UTC)
        elif from_state is ConnectorState.CONNECTED:
            self._connected_at = None
        logger.info("Connector %s: %s -> %s", self._schema.logical_identity, from_state, to_state)
