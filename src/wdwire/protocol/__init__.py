"""
WebDriver Protocol Core.

Response classification, error translation, request execution and the
session lifecycle.
"""

from wdwire.protocol.errors import (
    WebDriverError,
    MalformedBodyError,
    ProtocolResponseError,
    SessionCreationError,
    error_from_response_body,
    NO_SUCH_ELEMENT,
    STALE_ELEMENT_REFERENCE,
    INVALID_ARGUMENT,
    SESSION_NOT_CREATED,
)
from wdwire.protocol.classifier import (
    OutcomeKind,
    ResponseOutcome,
    classify_response,
)
from wdwire.protocol.diagnostics import (
    DiagnosticRule,
    DIAGNOSTIC_RULES,
    get_session_error,
)
from wdwire.protocol.request import make_request
from wdwire.protocol.state import (
    SessionState,
    SessionStateMachine,
    InvalidStateTransition,
)
from wdwire.protocol.session import (
    ConnectionInfo,
    SessionDescriptor,
    create_session,
    start_webdriver_session,
    setup_direct_connect,
    direct_connect_target,
)

__all__ = [
    # Errors
    "WebDriverError",
    "MalformedBodyError",
    "ProtocolResponseError",
    "SessionCreationError",
    "error_from_response_body",
    "NO_SUCH_ELEMENT",
    "STALE_ELEMENT_REFERENCE",
    "INVALID_ARGUMENT",
    "SESSION_NOT_CREATED",
    # Classification
    "OutcomeKind",
    "ResponseOutcome",
    "classify_response",
    # Diagnostics
    "DiagnosticRule",
    "DIAGNOSTIC_RULES",
    "get_session_error",
    # Requests
    "make_request",
    # State
    "SessionState",
    "SessionStateMachine",
    "InvalidStateTransition",
    # Session
    "ConnectionInfo",
    "SessionDescriptor",
    "create_session",
    "start_webdriver_session",
    "setup_direct_connect",
    "direct_connect_target",
]
