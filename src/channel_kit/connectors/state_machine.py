"""Thread-safe lifecycle state machine for channel connectors."""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Final

from channel_kit.types.enums import ConnectorState

logger = logging.getLogger(__name__)

type TransitionListener = Callable[[ConnectorState, ConnectorState], None]

# Oldest transitions are discarded once the history is full
STATE_HISTORY_LIMIT: Final[int] = 100

# DISPOSED is reachable from every state and is handled separately
CONNECTOR_TRANSITIONS: Final[Mapping[ConnectorState, frozenset[ConnectorState]]] = {
    ConnectorState.UNINITIALIZED: frozenset({ConnectorState.INITIALIZING}),
    ConnectorState.INITIALIZING: frozenset({ConnectorState.CONNECTED, ConnectorState.ERROR}),
    ConnectorState.CONNECTED: frozenset({ConnectorState.DISCONNECTED, ConnectorState.ERROR}),
    ConnectorState.DISCONNECTED: frozenset({ConnectorState.INITIALIZING}),
    ConnectorState.ERROR: frozenset({ConnectorState.INITIALIZING}),
    ConnectorState.DISPOSED: frozenset(),
}


class StateTransitionError(Exception):
    """Exception raised when a state transition is not allowed."""

    def __init__(
        self,
        message: str,
        from_state: ConnectorState | None = None,
        to_state: ConnectorState | None = None,
    ) -> None:
        """Initialize state transition error.

        Args:
            message: Error message
            from_state: Source state of failed transition
            to_state: Target state of failed transition
        """
        super().__init__(message)
        self.from_state: ConnectorState | None = from_state
        self.to_state: ConnectorState | None = to_state


@dataclass(slots=True, frozen=True)
class StateChange:
    """Recorded transition."""

    from_state: ConnectorState
    to_state: ConnectorState
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


class ConnectorStateMachine:
    """Lifecycle state machine guarded by a re-entrant lock.

    Transitions follow ``CONNECTOR_TRANSITIONS``; any state may move to
    ``DISPOSED``, which is terminal.
    """

    def __init__(
        self,
        initial_state: ConnectorState = ConnectorState.UNINITIALIZED,
        history_limit: int = STATE_HISTORY_LIMIT,
    ) -> None:
        self._state: ConnectorState = initial_state
        self._state_lock: threading.RLock = threading.RLock()
        self._history: deque[StateChange] = deque(maxlen=history_limit)
        self._listeners: list[TransitionListener] = []

    @property
    def current_state(self) -> ConnectorState:
        with self._state_lock:
            return self._state

    @property
    def is_disposed(self) -> bool:
        return self.current_state is ConnectorState.DISPOSED

    def add_listener(self, listener: TransitionListener) -> None:
        """Register a callback invoked after every transition."""
        with self._state_lock:
            self._listeners.append(listener)

    def can_transition(self, to_state: ConnectorState) -> bool:
        """Check whether the current state may move to ``to_state``."""
        with self._state_lock:
            return self._is_allowed(self._state, to_state)

    def transition_to(self, to_state: ConnectorState) -> ConnectorState:
        """Move to ``to_state``.

        Args:
            to_state: Target state

        Returns:
            The state the machine left

        Raises:
            StateTransitionError: If the transition is not allowed
        """
        with self._state_lock:
            current = self._state
            if not self._is_allowed(current, to_state):
                msg = f"Cannot transition from {current.name} to {to_state.name}"
                raise StateTransitionError(msg, from_state=current, to_state=to_state)
            self._apply(current, to_state)
            return current

    def try_transition(self, expected: ConnectorState | frozenset[ConnectorState], to_state: ConnectorState) -> bool:
        """Compare-and-set transition.

        Args:
            expected: State (or states) the machine must currently be in
            to_state: Target state

        Returns:
            True if the machine was in an expected state and moved to ``to_state``
        """
        accepted = expected if isinstance(expected, frozenset) else frozenset({expected})
        with self._state_lock:
            current = self._state
            if current not in accepted or not self._is_allowed(current, to_state):
                return False
            self._apply(current, to_state)
            return True

    def force_dispose(self) -> ConnectorState:
        """Move to ``DISPOSED`` from any state and return the previous state."""
        with self._state_lock:
            current = self._state
            if current is not ConnectorState.DISPOSED:
                self._apply(current, ConnectorState.DISPOSED)
            return current

    def get_state_history(self) -> list[StateChange]:
        """Get the recorded transitions in chronological order."""
        with self._state_lock:
            return list(self._history)

    @staticmethod
    def _is_allowed(from_state: ConnectorState, to_state: ConnectorState) -> bool:
        if from_state is ConnectorState.DISPOSED:
            return False
        if to_state is ConnectorState.DISPOSED:
            return True
        return to_state in CONNECTOR_TRANSITIONS[from_state]

    def _apply(self, from_state: ConnectorState, to_state: ConnectorState) -> None:
        self._state = to_state
        self._history.append(StateChange(from_state, to_state))
        logger.debug("Connector state %s -> %s", from_state, to_state)
        for listener in self._listeners:
            listener(from_state, to_state)
