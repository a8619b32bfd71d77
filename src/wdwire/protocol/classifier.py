"""Classification of WebDriver responses across protocol generations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from wdwire.protocol.errors import NO_SUCH_ELEMENT

logger = logging.getLogger(__name__)

# JSONWire status code for the element-not-found family
LEGACY_NO_SUCH_ELEMENT = 7

APPIUM_ELEMENT_NOT_LOCATED = (
    "An element could not be located on the page using the given search parameters."
)

ERROR_INDICATORS = ("error", "stackTrace", "stacktrace")


class OutcomeKind(Enum):
    """Possible classifications of a response."""

    SUCCESS = auto()
    ELEMENT_MISSING = auto()
    FAILURE = auto()

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ResponseOutcome:
    """
    Result of classifying a response.

    ELEMENT_MISSING is a tolerated failure: a lookup that found nothing yet,
    which callers resolving elements lazily must not treat as an error.
    """

    kind: OutcomeKind
    reason: str | None = None

    @classmethod
    def success(cls) -> "ResponseOutcome":
        return cls(OutcomeKind.SUCCESS)

    @classmethod
    def element_missing(cls) -> "ResponseOutcome":
        return cls(OutcomeKind.ELEMENT_MISSING)

    @classmethod
    def failure(cls, reason: str) -> "ResponseOutcome":
        return cls(OutcomeKind.FAILURE, reason)

    @property
    def is_success(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    @property
    def is_element_missing(self) -> bool:
        return self.kind is OutcomeKind.ELEMENT_MISSING

    @property
    def is_failure(self) -> bool:
        return self.kind is OutcomeKind.FAILURE

    @property
    def is_acceptable(self) -> bool:
        """True unless the response failed."""
        return self.kind is not OutcomeKind.FAILURE

    def __str__(self) -> str:
        if self.reason:
            return f"{self.kind.name}({self.reason})"
        return self.kind.name


def _is_element_not_found_message(message: str) -> bool:
    lowered = message.lower()
    return (
        lowered.startswith("no such element")
        or message == APPIUM_ELEMENT_NOT_LOCATED
        # Internet Explorer
        or lowered.startswith("unable to find element")
    )


def _error_indicator(value: Any) -> Any:
    """Return the first truthy error field of a response value, if any."""
    if not isinstance(value, dict):
        return None
    for key in ERROR_INDICATORS:
        if value.get(key):
            return value[key]
    return None


def classify_response(status_code: int, body: Any) -> ResponseOutcome:
    """
    Decide whether a WebDriver request succeeded.

    Rules are evaluated in order and the first match wins; several of them
    overlap, so the order is significant.

    Args:
        status_code: HTTP status code of the reply.
        body: Decoded response body.

    Returns:
        ResponseOutcome for the reply. Never raises.
    """
    if not isinstance(body, dict) or "value" not in body:
        logger.debug("request failed due to missing body")
        return ResponseOutcome.failure("missing body")

    value = body["value"]
    status = body.get("status")

    # Element lookups that found nothing are tolerated for lazy loading
    message = value.get("message") if isinstance(value, dict) else None
    if (
        status == LEGACY_NO_SUCH_ELEMENT
        and isinstance(message, str)
        and message
        and _is_element_not_found_message(message)
    ):
        return ResponseOutcome.element_missing()

    # JSONWire: a status property, if present, must be 0
    if status and status != 0:
        logger.debug(f"request failed due to status {status}")
        return ResponseOutcome.failure("non-zero legacy status")

    error = _error_indicator(value)

    if status_code == 200 and not error:
        return ResponseOutcome.success()

    if status_code == 404 and isinstance(value, dict) and value.get("error") == NO_SUCH_ELEMENT:
        return ResponseOutcome.element_missing()

    # Appium may answer with 200 and an error property
    if error:
        logger.debug(f"request failed due to response error: {value.get('error')}")
        return ResponseOutcome.failure("response error")

    return ResponseOutcome.success()
