"""Tests for the session state machine."""

import pytest

from wdwire.protocol.state import (
    InvalidStateTransition,
    SessionState,
    SessionStateMachine,
)


class TestSessionStateMachine:
    """Tests for lifecycle transitions."""

    def test_starts_idle(self):
        assert SessionStateMachine().state == SessionState.IDLE

    def test_success_path(self):
        machine = SessionStateMachine()
        machine.transition(SessionState.REQUESTING)
        machine.transition(SessionState.ESTABLISHED)
        assert machine.is_established
        machine.transition(SessionState.CLOSED)
        assert machine.is_terminal

    def test_failed_is_terminal(self):
        machine = SessionStateMachine()
        machine.transition(SessionState.REQUESTING)
        machine.transition(SessionState.FAILED)
        assert machine.is_terminal
        with pytest.raises(InvalidStateTransition, match="FAILED -> REQUESTING"):
            machine.transition(SessionState.REQUESTING)

    def test_cannot_skip_requesting(self):
        with pytest.raises(InvalidStateTransition):
            SessionStateMachine().transition(SessionState.ESTABLISHED)

    def test_listeners_notified(self):
        seen = []
        machine = SessionStateMachine()
        machine.on_transition(lambda old, new: seen.append((old, new)))
        machine.transition(SessionState.REQUESTING)
        assert seen == [(SessionState.IDLE, SessionState.REQUESTING)]

    def test_listener_errors_do_not_break_transition(self):
        def broken(old, new):
            raise RuntimeError("listener bug")

        machine = SessionStateMachine()
        machine.on_transition(broken)
        machine.transition(SessionState.REQUESTING)
        assert machine.state == SessionState.REQUESTING

    def test_remove_listener(self):
        seen = []
        callback = lambda old, new: seen.append(new)  # noqa: E731
        machine = SessionStateMachine()
        machine.on_transition(callback)
        machine.remove_listener(callback)
        machine.remove_listener(callback)
        machine.transition(SessionState.REQUESTING)
        assert seen == []

    def test_reset(self):
        machine = SessionStateMachine()
        machine.transition(SessionState.REQUESTING)
        machine.transition(SessionState.FAILED)
        machine.reset()
        assert machine.state == SessionState.IDLE
        machine.transition(SessionState.REQUESTING)
