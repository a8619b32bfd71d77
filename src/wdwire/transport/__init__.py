"""
WebDriver Transport Layer.

Single request/response exchanges with the remote end over HTTP.
"""

from wdwire.transport.types import TransportConfig, TransportEvent, TransportEventType
from wdwire.transport.base import (
    Transport,
    TransportError,
    ConnectionError,
    TimeoutError,
    SessionError,
    Reply,
)
from wdwire.transport.http import HTTPTransport

__all__ = [
    "Transport",
    "TransportConfig",
    "TransportEvent",
    "TransportEventType",
    "TransportError",
    "ConnectionError",
    "TimeoutError",
    "SessionError",
    "Reply",
    "HTTPTransport",
]
