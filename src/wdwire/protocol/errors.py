"""WebDriver error types and construction from response bodies."""

from dataclasses import dataclass
from typing import Any

# Kind tags used by this package (W3C error codes)
NO_SUCH_ELEMENT = "no such element"
STALE_ELEMENT_REFERENCE = "stale element reference"
INVALID_ARGUMENT = "invalid argument"
SESSION_NOT_CREATED = "session not created"

EMPTY_BODY_MESSAGE = "Response has empty body"
UNKNOWN_ERROR_MESSAGE = "unknown error"
SESSION_ERROR_PREFIX = "Failed to create session."


@dataclass
class WebDriverError(Exception):
    """
    Error reported by (or derived from) a WebDriver response.

    ``error`` is the protocol kind tag, e.g. "no such element", when the
    remote end supplied one.
    """

    message: str
    error: str | None = None
    data: dict[str, Any] | None = None

    def __post_init__(self):
        super().__init__(self.message)

    @property
    def name(self) -> str:
        """Kind tag, falling back to the class name."""
        return self.error or type(self).__name__

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, error={self.error!r})"


@dataclass
class MalformedBodyError(WebDriverError):
    """The response carried no usable body."""

    message: str = EMPTY_BODY_MESSAGE


@dataclass
class ProtocolResponseError(WebDriverError):
    """Well-formed reply that was classified as a failure."""

    @classmethod
    def from_body(cls, body: dict[str, Any]) -> "ProtocolResponseError":
        """Build from a JSON error body (``body["value"]`` preferred)."""
        error_obj = body["value"] if body.get("value") is not None else body
        if not isinstance(error_obj, dict):
            return cls(message=UNKNOWN_ERROR_MESSAGE, data=body)

        message = error_obj.get("message") or error_obj.get("class") or UNKNOWN_ERROR_MESSAGE
        message = str(message)

        kind = error_obj.get("error")
        if not kind and STALE_ELEMENT_REFERENCE in message:
            kind = STALE_ELEMENT_REFERENCE

        return cls(message=message, error=kind or None, data=error_obj)


@dataclass
class SessionCreationError(WebDriverError):
    """A new session could not be created; message carries a diagnostic."""

    error: str | None = SESSION_NOT_CREATED

    @classmethod
    def with_diagnostic(cls, diagnostic: str) -> "SessionCreationError":
        """Wrap a translated diagnostic under the session failure prefix."""
        return cls(message=f"{SESSION_ERROR_PREFIX}\n{diagnostic}")


def error_from_response_body(body: Any) -> WebDriverError:
    """
    Determine the error carried by a failed response.

    Args:
        body: Decoded response body (dict, text, or None).

    Returns:
        The most specific error the body supports.
    """
    if body is None or body == "" or body == b"":
        return MalformedBodyError()

    if isinstance(body, str):
        return WebDriverError(message=body)

    if not isinstance(body, dict) or (body.get("value") is None and not body.get("error")):
        return WebDriverError(message=UNKNOWN_ERROR_MESSAGE)

    return ProtocolResponseError.from_body(body)
