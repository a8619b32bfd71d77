"""
WebDriver wire protocol client.

Submodules:
- transport: HTTP request/response exchange with the remote end
- capabilities: Dual-dialect capability negotiation and session feature flags
- protocol: Response classification, error translation, session lifecycle
- commands: Protocol command tables and the per-session command surface
- config: Session parameters and config file loading
"""

# Configuration
from wdwire.config import (
    SessionParams,
    RequestedCapabilities,
    load_session_config,
)

# Transport layer
from wdwire.transport import (
    HTTPTransport,
    Transport,
    TransportConfig,
    TransportError,
    ConnectionError,
    TimeoutError,
    SessionError,
)

# Capabilities
from wdwire.capabilities import (
    CapabilityRequest,
    FeatureFlags,
    negotiate_capabilities,
    parse_session_response,
)

# Protocol layer
from wdwire.protocol import (
    WebDriverError,
    MalformedBodyError,
    ProtocolResponseError,
    SessionCreationError,
    OutcomeKind,
    ResponseOutcome,
    SessionState,
    SessionDescriptor,
    classify_response,
    error_from_response_body,
    get_session_error,
    start_webdriver_session,
    setup_direct_connect,
)

# Commands
from wdwire.commands import (
    CommandBinding,
    CommandDescriptor,
    CommandSurface,
    build_command_surface,
    load_protocol,
)

# Client
from wdwire.client import WebDriverClient

__all__ = [
    # Config
    "SessionParams",
    "RequestedCapabilities",
    "load_session_config",
    # Transport
    "HTTPTransport",
    "Transport",
    "TransportConfig",
    "TransportError",
    "ConnectionError",
    "TimeoutError",
    "SessionError",
    # Capabilities
    "CapabilityRequest",
    "FeatureFlags",
    "negotiate_capabilities",
    "parse_session_response",
    # Protocol
    "WebDriverError",
    "MalformedBodyError",
    "ProtocolResponseError",
    "SessionCreationError",
    "OutcomeKind",
    "ResponseOutcome",
    "SessionState",
    "SessionDescriptor",
    "classify_response",
    "error_from_response_body",
    "get_session_error",
    "start_webdriver_session",
    "setup_direct_connect",
    # Commands
    "CommandBinding",
    "CommandDescriptor",
    "CommandSurface",
    "build_command_surface",
    "load_protocol",
    # Client
    "WebDriverClient",
]
