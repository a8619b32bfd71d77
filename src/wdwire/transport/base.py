"""Abstract base transport and error types."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable

from wdwire.transport.types import TransportConfig, TransportEvent

logger = logging.getLogger(__name__)

# Decoded reply: HTTP status code and JSON body (or raw text, or None if empty)
Reply = tuple[int, Any]


class TransportError(Exception):
    """Base exception for transport errors."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class ConnectionError(TransportError):
    """Failed to reach the server."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        code: str | None = None,
    ):
        super().__init__(message, cause=cause)
        self.code = code
        """Socket error code, ``"ECONNREFUSED"`` when the connection was refused."""


class TimeoutError(TransportError):
    """Request or connection timed out."""

    pass


class SessionError(TransportError):
    """Transport used while not connected."""

    pass


class Transport(ABC):
    """
    Abstract base class for WebDriver transports.

    A transport performs single request/response exchanges against the
    remote end. It reports HTTP error statuses as ordinary replies and
    raises only for connection-level failures.
    """

    def __init__(self, config: TransportConfig):
        self.config = config
        self._event_handlers: list[Callable[[TransportEvent], None]] = []

    def on_event(self, handler: Callable[[TransportEvent], None]) -> None:
        """
        Register an event handler for transport events.

        Args:
            handler: Callback invoked when transport events occur.
        """
        self._event_handlers.append(handler)

    def _emit_event(self, event: TransportEvent) -> None:
        """Emit an event to all registered handlers."""
        for handler in self._event_handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(f"Transport event handler failed on {event.type.name}")

    @abstractmethod
    async def connect(self) -> None:
        """
        Prepare the transport for requests.

        Raises:
            ConnectionError: If the transport cannot be initialized.
        """

    @abstractmethod
    async def disconnect(self) -> None:
        """
        Release all resources.

        This method should be safe to call multiple times.
        """

    @abstractmethod
    async def send(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        *,
        use_base_path: bool = True,
    ) -> Reply:
        """
        Perform one request against the remote end.

        Args:
            method: HTTP method.
            path: Endpoint path with all variables substituted.
            body: JSON payload, or None to send no body.
            use_base_path: Whether ``path`` is relative to the configured
                base path or to the server root.

        Returns:
            Tuple of (status code, decoded body).

        Raises:
            TransportError: If the exchange fails at connection level.
            SessionError: If the transport is not connected.
        """

    @abstractmethod
    def is_connected(self) -> bool:
        """Check if transport is ready for requests."""

    async def __aenter__(self) -> "Transport":
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.disconnect()
