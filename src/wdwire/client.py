"""WebDriver client: session lifecycle plus dynamic command dispatch."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from wdwire.capabilities.flags import FeatureFlags
from wdwire.commands.surface import CommandSurface, build_command_surface
from wdwire.config import SessionParams
from wdwire.protocol.errors import WebDriverError
from wdwire.protocol.request import make_request
from wdwire.protocol.session import SessionDescriptor, create_session
from wdwire.protocol.state import SessionState, SessionStateMachine
from wdwire.transport.base import Transport
from wdwire.transport.http import HTTPTransport

logger = logging.getLogger(__name__)


class WebDriverClient:
    """
    Client for one WebDriver session at a time.

    After start_session() the commands available for the negotiated
    session can be called as coroutine methods, e.g.
    ``await client.navigateTo("https://example.com")``.
    """

    def __init__(
        self,
        params: SessionParams,
        transport: Transport | None = None,
    ):
        """
        Initialize the client.

        Args:
            params: Session parameters (updated in place on session start).
            transport: Transport to use (HTTP by default).
        """
        self.params = params
        self.transport = transport or HTTPTransport(params)

        self._state = SessionStateMachine()
        self._session: SessionDescriptor | None = None
        self._flags: FeatureFlags | None = None
        self._commands: CommandSurface | None = None

    @property
    def state(self) -> SessionState:
        """Current session state."""
        return self._state.state

    @property
    def session(self) -> SessionDescriptor | None:
        """Descriptor of the current session, if established."""
        return self._session

    @property
    def session_id(self) -> str | None:
        return self._session.session_id if self._session else None

    @property
    def flags(self) -> FeatureFlags:
        """Feature flags of the current session (all off before a session)."""
        return self._flags or FeatureFlags()

    @property
    def commands(self) -> CommandSurface:
        """
        Commands callable on the current session.

        Raises:
            WebDriverError: If no session has been established.
        """
        if self._commands is None:
            raise WebDriverError("No active session, call start_session() first")
        return self._commands

    def on_state_change(
        self,
        callback: Callable[[SessionState, SessionState], None],
    ) -> None:
        """Register callback for session state changes."""
        self._state.on_transition(callback)

    async def start_session(self) -> str:
        """
        Create a new session and build its command surface.

        A client whose previous attempt failed or whose session was closed
        starts over with a fresh lifecycle.

        Returns:
            The new session id.

        Raises:
            SessionCreationError: If the session cannot be created.
        """
        if self._state.is_established:
            raise WebDriverError(
                f"Session {self.session_id} is still active, delete it first"
            )
        if self._state.is_terminal:
            self._state.reset()

        await self.transport.connect()
        descriptor = await create_session(self.params, self.transport, self._state)

        flags = FeatureFlags.from_capabilities(
            descriptor.capabilities,
            hostname=self.params.hostname,
            requested=descriptor.requested.jsonwp if descriptor.requested else None,
        )
        commands = build_command_surface(flags)

        self._session, self._flags, self._commands = descriptor, flags, commands
        logger.info(f"Session {descriptor.session_id} ready with {flags}")
        return descriptor.session_id

    async def delete_session(self) -> None:
        """End the current session on the remote end."""
        if not self._state.is_established or self._session is None:
            raise WebDriverError("No active session to delete")

        await make_request(
            self.transport, "DELETE", f"/session/{self._session.session_id}"
        )
        self._state.transition(SessionState.CLOSED)
        logger.info(f"Deleted session {self._session.session_id}")
        self._commands = None

    async def reload_session(self) -> str:
        """
        Replace the current session with an equivalent new one.

        The structured form of the originally requested capabilities is
        sent again.
        """
        requested = self.params.requested_capabilities
        if requested is None:
            raise WebDriverError("No session was started yet, nothing to reload")

        if self._state.is_established:
            await self.delete_session()

        self.params.capabilities = requested.w3c
        return await self.start_session()

    async def call(self, name: str, *args: Any) -> Any:
        """
        Invoke a command by name.

        Raises:
            WebDriverError: If the session does not offer the command.
        """
        commands = self.commands
        if name not in commands:
            raise WebDriverError(f"Command '{name}' is not available for this session")
        return await commands[name].execute(self, *args)

    def __getattr__(self, name: str) -> Callable[..., Awaitable[Any]]:
        # Only reached for names not defined on the class
        commands = self.__dict__.get("_commands")
        if name.startswith("_") or commands is None or name not in commands:
            raise AttributeError(
                f"{type(self).__name__!r} object has no attribute {name!r}"
            )
        binding = commands[name]

        async def command(*args: Any) -> Any:
            return await binding.execute(self, *args)

        command.__name__ = name
        command.__doc__ = binding.descriptor.description
        return command

    async def close(self) -> None:
        """Release the transport."""
        await self.transport.disconnect()

    async def __aenter__(self) -> "WebDriverClient":
        await self.transport.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"WebDriverClient(state={self.state}, session={self.session_id})"
