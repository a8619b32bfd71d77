"""Translation of session creation failures into actionable messages.

The rules match literal phrases emitted by real driver binaries and
servers. They are checked in order and the first match wins; add new
rules at the position that keeps the existing precedence intact.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from wdwire.protocol.errors import EMPTY_BODY_MESSAGE

logger = logging.getLogger(__name__)

CONFIG_HINT = "your .wdwire/webdriver.json"

# Wrong base path reported by local drivers
BROWSER_DRIVER_ERRORS = [
    "unknown command: wd/hub/session",  # chromedriver
    "HTTP method not allowed",  # geckodriver
    "'POST /wd/hub/session' was not found.",  # safaridriver
    "Command not found",  # iedriver
]

SELENIUM_HELP_PAGE = "Whoops! The URL specified routes to this help page."
ILLEGAL_W3C_CAPABILITIES = "Illegal key values seen in w3c capabilities"

W3C_CAPABILITY_HINT = (
    '\nMake sure to add vendor prefix like "goog:", "appium:", "moz:", etc to non W3C capabilities.'
    "\nSee more https://www.w3.org/TR/webdriver/#capabilities"
)


@dataclass(frozen=True)
class DiagnosticRule:
    """One entry of the diagnostic table."""

    name: str
    matches: Callable[[Any, str], bool]
    """Called with (error, message)."""

    render: Callable[[Any, str, Any], str]
    """Called with (error, message, connection params)."""


def _message_of(error: Any) -> str:
    message = getattr(error, "message", None)
    if message is None:
        message = str(error) if error is not None else ""
    return message or ""


def _connection_refused(error: Any, message: str) -> bool:
    return getattr(error, "code", None) == "ECONNREFUSED"


def _render_connection_refused(error: Any, message: str, params: Any) -> str:
    return (
        f'Unable to connect to "{params.protocol}://{params.hostname}:{params.port}{params.path}", '
        "make sure browser driver is running on that address."
        "\nIf the driver is launched by a helper service, check its logs as it "
        "might have failed to start the driver."
    )


def _illegal_w3c(error: Any, message: str) -> bool:
    return ILLEGAL_W3C_CAPABILITIES in message


DIAGNOSTIC_RULES: list[DiagnosticRule] = [
    DiagnosticRule(
        "driver-not-started",
        _connection_refused,
        _render_connection_refused,
    ),
    DiagnosticRule(
        "unhandled-request",
        lambda error, message: message == "unhandled request",
        lambda error, message, params: (
            "The browser driver couldn't start the session. "
            'Make sure you have set the "path" correctly!'
        ),
    ),
    DiagnosticRule(
        "no-message",
        lambda error, message: not message,
        lambda error, message, params: "See the wdwire debug logs for more information.",
    ),
    DiagnosticRule(
        "selenium-standalone-path",
        lambda error, message: SELENIUM_HELP_PAGE in message,
        lambda error, message, params: (
            "It seems you are running a Selenium Standalone server and point to a wrong path. "
            f"Please set `path: '/wd/hub'` in {CONFIG_HINT}!"
        ),
    ),
    DiagnosticRule(
        "browser-driver-path",
        lambda error, message: any(m in message for m in BROWSER_DRIVER_ERRORS),
        lambda error, message, params: f"Make sure to set `path: '/'` in {CONFIG_HINT}!",
    ),
    DiagnosticRule(
        "edge-driver-hostname",
        lambda error, message: (
            "Bad Request - Invalid Hostname" in message and "HTTP Error 400" in message
        ),
        lambda error, message, params: (
            "Run edge driver on 127.0.0.1 instead of localhost, ex: --host=127.0.0.1, "
            f"or set `hostname: 'localhost'` in {CONFIG_HINT}"
        ),
    ),
    DiagnosticRule(
        "illegal-w3c-capabilities",
        _illegal_w3c,
        lambda error, message, params: message + W3C_CAPABILITY_HINT,
    ),
    DiagnosticRule(
        "empty-body",
        lambda error, message: message == EMPTY_BODY_MESSAGE,
        lambda error, message, params: (
            "Make sure to connect to valid hostname:port or the port is not in use."
            "\nIf you use a grid server " + W3C_CAPABILITY_HINT
        ),
    ),
]


def get_session_error(error: Any, params: Any) -> str:
    """
    Get a human readable message for a failed session request.

    Args:
        error: Transport error or error built from the response body.
        params: Connection parameters (protocol, hostname, port, path).

    Returns:
        Guidance for the first matching rule, else the raw error message.
    """
    message = _message_of(error)
    for rule in DIAGNOSTIC_RULES:
        if rule.matches(error, message):
            logger.debug(f"Session error matched diagnostic rule '{rule.name}'")
            return rule.render(error, message, params)
    return message
