"""New session creation and direct-connect handling."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from wdwire.capabilities.negotiation import (
    CapabilityRequest,
    negotiate_capabilities,
    parse_session_response,
)
from wdwire.config import RequestedCapabilities, SessionParams
from wdwire.protocol.diagnostics import get_session_error
from wdwire.protocol.errors import SessionCreationError
from wdwire.protocol.request import make_request
from wdwire.protocol.state import SessionState, SessionStateMachine
from wdwire.transport.base import Transport

logger = logging.getLogger(__name__)

NEW_SESSION_ENDPOINT = "/session"

DIRECT_CONNECT_PROTOCOL = "directConnectProtocol"
DIRECT_CONNECT_HOST = "directConnectHost"
DIRECT_CONNECT_PORT = "directConnectPort"
DIRECT_CONNECT_PATH = "directConnectPath"


@dataclass(frozen=True)
class ConnectionInfo:
    """Address of the remote end."""

    protocol: str
    hostname: str
    port: int
    path: str

    @classmethod
    def from_params(cls, params: SessionParams) -> "ConnectionInfo":
        return cls(
            protocol=params.protocol,
            hostname=params.hostname,
            port=params.port,
            path=params.path,
        )

    @property
    def url(self) -> str:
        return f"{self.protocol}://{self.hostname}:{self.port}{self.path}"


@dataclass(frozen=True)
class SessionDescriptor:
    """
    Resolved state of an established session.

    Built completely before it is published; never modified afterwards.
    """

    session_id: str
    capabilities: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    requested: CapabilityRequest | None = None
    """Original request, kept to ask for an equivalent session again."""

    connection: ConnectionInfo | None = None
    redirected: bool = False
    """Whether the connection came from a direct-connect response."""

    def __str__(self) -> str:
        target = self.connection.url if self.connection else "?"
        return f"SessionDescriptor({self.session_id} @ {target})"


def direct_connect_target(capabilities: Mapping[str, Any]) -> ConnectionInfo | None:
    """
    Alternate address announced by the server, if complete.

    Protocol, host and port must be set; the path must be present but
    may be an empty string.
    """
    protocol = capabilities.get(DIRECT_CONNECT_PROTOCOL)
    host = capabilities.get(DIRECT_CONNECT_HOST)
    port = capabilities.get(DIRECT_CONNECT_PORT)
    path = capabilities.get(DIRECT_CONNECT_PATH)
    if protocol and host and port and path is not None:
        return ConnectionInfo(protocol=protocol, hostname=host, port=port, path=path)
    return None


def setup_direct_connect(params: SessionParams) -> bool:
    """
    Point params at the direct-connect address from the resolved capabilities.

    Mutates params. Returns True if the connection fields were rewritten.
    """
    target = direct_connect_target(params.capabilities)
    if target is None:
        return False

    logger.info(
        "Found direct connect information in new session response. "
        f"Will connect to server at {target.url}"
    )
    params.protocol = target.protocol
    params.hostname = target.hostname
    params.port = target.port
    params.path = target.path
    return True


async def create_session(
    params: SessionParams,
    transport: Transport,
    state: SessionStateMachine | None = None,
) -> SessionDescriptor:
    """
    Request a new session with both capability dialects.

    On success the caller's params receive the requested capabilities
    (both forms), the resolved capabilities and, if the server asked for
    it, a direct-connect address. On failure params are left untouched.

    Args:
        params: Session parameters; ``params.capabilities`` is the request.
        transport: Connected transport.
        state: Lifecycle state machine, must be IDLE.

    Returns:
        SessionDescriptor of the new session.

    Raises:
        SessionCreationError: If the request fails at any level.
        InvalidStateTransition: If the state machine is not IDLE.
    """
    state = state or SessionStateMachine()
    request = negotiate_capabilities(params.capabilities)

    state.transition(SessionState.REQUESTING)
    try:
        response = await make_request(
            transport,
            "POST",
            NEW_SESSION_ENDPOINT,
            request.to_payload(),
            tolerate_missing_element=False,
        )
    except Exception as err:
        logger.error(f"Session request failed: {err!r}")
        state.transition(SessionState.FAILED)
        raise SessionCreationError.with_diagnostic(get_session_error(err, params)) from err
    except BaseException:
        # Cancelled mid-request
        state.transition(SessionState.FAILED)
        raise

    result = parse_session_response(response)
    if not result.session_id:
        state.transition(SessionState.FAILED)
        raise SessionCreationError.with_diagnostic(
            "The new session response did not contain a session id."
        )

    capabilities = dict(result.capabilities)
    target = direct_connect_target(capabilities)
    descriptor = SessionDescriptor(
        session_id=result.session_id,
        capabilities=MappingProxyType(capabilities),
        requested=request,
        connection=target or ConnectionInfo.from_params(params),
        redirected=target is not None,
    )

    # Publish to the caller-visible params in one step
    params.requested_capabilities = RequestedCapabilities(
        w3c=request.w3c, jsonwp=request.jsonwp
    )
    params.capabilities = capabilities
    setup_direct_connect(params)

    state.transition(SessionState.ESTABLISHED)
    logger.info(f"Created session {descriptor.session_id}")
    return descriptor


async def start_webdriver_session(
    params: SessionParams,
    transport: Transport,
    state: SessionStateMachine | None = None,
) -> str:
    """Start a session and return its id. See create_session."""
    descriptor = await create_session(params, transport, state)
    return descriptor.session_id
