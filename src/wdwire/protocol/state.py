"""Session lifecycle state machine."""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """
    Session lifecycle states.

    State transitions:
        IDLE -> REQUESTING -> ESTABLISHED -> CLOSED
                          \\
                           -> FAILED

    FAILED and CLOSED are terminal; a new attempt starts over with reset().
    """

    IDLE = auto()
    REQUESTING = auto()
    ESTABLISHED = auto()
    FAILED = auto()
    CLOSED = auto()

    def __str__(self) -> str:
        return self.name


class InvalidStateTransition(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_state: SessionState, to_state: SessionState):
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid state transition: {from_state.name} -> {to_state.name}"
        )


StateTransitionCallback = Callable[[SessionState, SessionState], None]


class SessionStateMachine:
    """
    Tracks the lifecycle of one session.

    Enforces valid state transitions and notifies listeners
    when transitions occur.
    """

    VALID_TRANSITIONS: dict[SessionState, list[SessionState]] = {
        SessionState.IDLE: [SessionState.REQUESTING],
        SessionState.REQUESTING: [
            SessionState.ESTABLISHED,
            SessionState.FAILED,
        ],
        SessionState.ESTABLISHED: [SessionState.CLOSED],
        SessionState.FAILED: [],
        SessionState.CLOSED: [],
    }

    def __init__(self, initial_state: SessionState = SessionState.IDLE):
        self._state = initial_state
        self._listeners: list[StateTransitionCallback] = []

    @property
    def state(self) -> SessionState:
        """Current session state."""
        return self._state

    @property
    def is_established(self) -> bool:
        return self._state == SessionState.ESTABLISHED

    @property
    def is_terminal(self) -> bool:
        """Check if no further transitions are possible."""
        return not self.VALID_TRANSITIONS[self._state]

    def can_transition_to(self, new_state: SessionState) -> bool:
        """Check if transition to new_state is valid."""
        return new_state in self.VALID_TRANSITIONS.get(self._state, [])

    def transition(self, new_state: SessionState) -> None:
        """
        Transition to a new state.

        Raises:
            InvalidStateTransition: If the transition is not valid.
        """
        if not self.can_transition_to(new_state):
            raise InvalidStateTransition(self._state, new_state)

        old_state = self._state
        self._state = new_state
        logger.debug(f"Session state {old_state} -> {new_state}")

        for listener in self._listeners:
            try:
                listener(old_state, new_state)
            except Exception:
                logger.exception("Session state listener failed")

    def on_transition(self, callback: StateTransitionCallback) -> None:
        """
        Register a callback for state transitions.

        Args:
            callback: Function called with (old_state, new_state) on transitions.
        """
        self._listeners.append(callback)

    def remove_listener(self, callback: StateTransitionCallback) -> None:
        """Remove a previously registered callback, if present."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def reset(self) -> None:
        """Start a new lifecycle from IDLE, keeping listeners."""
        old_state = self._state
        self._state = SessionState.IDLE

        for listener in self._listeners:
            try:
                listener(old_state, SessionState.IDLE)
            except Exception:
                logger.exception("Session state listener failed")

    def __str__(self) -> str:
        return f"SessionStateMachine({self._state.name})"

    def __repr__(self) -> str:
        return f"SessionStateMachine(state={self._state!r})"
