"""Tests for the connector lifecycle state machine."""

from __future__ import annotations

import threading

import pytest

from channel_kit.connectors.state_machine import (
    CONNECTOR_TRANSITIONS,
    STATE_HISTORY_LIMIT,
    ConnectorStateMachine,
    StateTransitionError,
)
from channel_kit.types.enums import ConnectorState


class TestTransitions:
    """Test cases for allowed and rejected transitions."""

    def test_initial_state(self) -> None:
        """Test the default initial state."""
        machine = ConnectorStateMachine()
        assert machine.current_state is ConnectorState.UNINITIALIZED
        assert not machine.is_disposed

    def test_happy_path(self) -> None:
        """Test initialize, disconnect and re-initialize."""
        machine = ConnectorStateMachine()
        assert machine.transition_to(ConnectorState.INITIALIZING) is ConnectorState.UNINITIALIZED
        _ = machine.transition_to(ConnectorState.CONNECTED)
        _ = machine.transition_to(ConnectorState.DISCONNECTED)
        _ = machine.transition_to(ConnectorState.INITIALIZING)
        assert machine.current_state is ConnectorState.INITIALIZING

    def test_invalid_transition(self) -> None:
        """Test that disallowed transitions raise."""
        machine = ConnectorStateMachine()
        with pytest.raises(StateTransitionError) as exc_info:
            _ = machine.transition_to(ConnectorState.CONNECTED)
        assert exc_info.value.from_state is ConnectorState.UNINITIALIZED
        assert exc_info.value.to_state is ConnectorState.CONNECTED
        assert machine.current_state is ConnectorState.UNINITIALIZED

    @pytest.mark.parametrize("state", list(ConnectorState))
    def test_every_state_can_be_disposed(self, state: ConnectorState) -> None:
        """Test that DISPOSED is reachable from every live state."""
        machine = ConnectorStateMachine(state)
        assert machine.can_transition(ConnectorState.DISPOSED) is (state is not ConnectorState.DISPOSED)

    def test_disposed_is_terminal(self) -> None:
        """Test that nothing leaves DISPOSED."""
        machine = ConnectorStateMachine(ConnectorState.DISPOSED)
        assert not any(machine.can_transition(state) for state in ConnectorState)
        assert CONNECTOR_TRANSITIONS[ConnectorState.DISPOSED] == frozenset()

    def test_try_transition_compare_and_set(self) -> None:
        """Test that try_transition only moves from expected states."""
        machine = ConnectorStateMachine()
        assert not machine.try_transition(ConnectorState.ERROR, ConnectorState.INITIALIZING)
        assert machine.try_transition(
            frozenset({ConnectorState.UNINITIALIZED, ConnectorState.ERROR}),
            ConnectorState.INITIALIZING,
        )
        assert not machine.try_transition(ConnectorState.INITIALIZING, ConnectorState.DISCONNECTED)
        assert machine.current_state is ConnectorState.INITIALIZING

    def test_force_dispose_is_idempotent(self) -> None:
        """Test that force_dispose reports the previous state."""
        machine = ConnectorStateMachine(ConnectorState.CONNECTED)
        assert machine.force_dispose() is ConnectorState.CONNECTED
        assert machine.force_dispose() is ConnectorState.DISPOSED
        assert machine.is_disposed


class TestHistoryAndListeners:
    """Test cases for recorded history and listeners."""

    def test_history(self) -> None:
        """Test that transitions are recorded in order."""
        machine = ConnectorStateMachine()
        _ = machine.transition_to(ConnectorState.INITIALIZING)
        _ = machine.transition_to(ConnectorState.ERROR)
        history = machine.get_state_history()
        assert [(change.from_state, change.to_state) for change in history] == [
            (ConnectorState.UNINITIALIZED, ConnectorState.INITIALIZING),
            (ConnectorState.INITIALIZING, ConnectorState.ERROR),
        ]
        history.clear()
        assert len(machine.get_state_history()) == 2

    def test_history_is_bounded(self) -> None:
        """Test that a reconnect loop keeps only the newest transitions."""
        machine = ConnectorStateMachine(history_limit=4)
        for _ in range(50):
            _ = machine.transition_to(ConnectorState.INITIALIZING)
            _ = machine.transition_to(ConnectorState.ERROR)
        _ = machine.transition_to(ConnectorState.INITIALIZING)

        history = machine.get_state_history()
        assert len(history) == 4
        assert history[-1].to_state is ConnectorState.INITIALIZING
        assert history[-2].to_state is ConnectorState.ERROR

    def test_default_history_limit(self) -> None:
        """Test that the default limit applies when none is given."""
        machine = ConnectorStateMachine()
        for _ in range(STATE_HISTORY_LIMIT):
            _ = machine.transition_to(ConnectorState.INITIALIZING)
            _ = machine.transition_to(ConnectorState.ERROR)

        assert len(machine.get_state_history()) == STATE_HISTORY_LIMIT

    def test_listener_called(self) -> None:
        """Test that listeners observe each transition."""
        seen: list[tuple[ConnectorState, ConnectorState]] = []
        machine = ConnectorStateMachine()
        machine.add_listener(lambda old, new: seen.append((old, new)))
        _ = machine.transition_to(ConnectorState.INITIALIZING)
        _ = machine.force_dispose()
        assert seen == [
            (ConnectorState.UNINITIALIZED, ConnectorState.INITIALIZING),
            (ConnectorState.INITIALIZING, ConnectorState.DISPOSED),
        ]

    def test_concurrent_compare_and_set_has_one_winner(self) -> None:
        """Test that racing threads cannot both leave the same state."""
        machine = ConnectorStateMachine()
        results: list[bool] = []
        barrier = threading.Barrier(8)

        def attempt() -> None:
            _ = barrier.wait()
            results.append(machine.try_transition(ConnectorState.UNINITIALIZED, ConnectorState.INITIALIZING))

        threads = [threading.Thread(target=attempt) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count(True) == 1
