"""Dual-dialect capability negotiation for new session requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

ALWAYS_MATCH = "alwaysMatch"
FIRST_MATCH = "firstMatch"


@dataclass(frozen=True)
class CapabilityRequest:
    """
    Desired capabilities in both protocol dialects.

    The server may implement either dialect, so both forms are sent in the
    same new session payload. They always describe the same capability set.
    """

    w3c: dict[str, Any]
    """Structured form (``alwaysMatch`` + ``firstMatch``)."""

    jsonwp: dict[str, Any]
    """Flat legacy form."""

    def to_payload(self) -> dict[str, Any]:
        """Body of the new session request."""
        return {
            "capabilities": self.w3c,  # W3C compliant
            "desiredCapabilities": self.jsonwp,  # JSONWire compliant
        }


@dataclass(frozen=True)
class NegotiationResult:
    """Session id and capabilities extracted from a new session response."""

    session_id: str | None
    capabilities: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"NegotiationResult(session={self.session_id}, capabilities={sorted(self.capabilities)})"


def negotiate_capabilities(requested: dict[str, Any] | None) -> CapabilityRequest:
    """
    Build both dialect forms from caller supplied capabilities.

    Capabilities carrying ``alwaysMatch`` are taken as W3C style and the
    legacy form is their ``alwaysMatch`` object; anything else is taken as
    flat legacy capabilities and wrapped for the W3C form.

    Args:
        requested: Capabilities as given by the caller.

    Returns:
        CapabilityRequest with both forms.
    """
    requested = requested if requested is not None else {}

    if requested.get(ALWAYS_MATCH) is not None:
        return CapabilityRequest(w3c=requested, jsonwp=requested[ALWAYS_MATCH])

    return CapabilityRequest(
        w3c={ALWAYS_MATCH: requested, FIRST_MATCH: [{}]},
        jsonwp=requested,
    )


def extract_session_id(body: dict[str, Any]) -> str | None:
    """Session id from a W3C (``value.sessionId``) or legacy (``sessionId``) envelope."""
    value = body.get("value")
    if isinstance(value, dict) and value.get("sessionId"):
        return value["sessionId"]
    return body.get("sessionId")


def extract_capabilities(body: dict[str, Any]) -> dict[str, Any]:
    """Resolved capabilities from ``value.capabilities``, else ``value`` itself."""
    value = body.get("value")
    if not isinstance(value, dict):
        return {}
    capabilities = value.get("capabilities")
    if capabilities is not None:
        return capabilities
    return value


def parse_session_response(body: dict[str, Any]) -> NegotiationResult:
    """
    Reconcile a new session response into a NegotiationResult.

    Both envelopes are accepted without knowing up front which dialect the
    server implements.
    """
    result = NegotiationResult(
        session_id=extract_session_id(body),
        capabilities=extract_capabilities(body),
    )
    logger.debug(f"Parsed new session response: {result}")
    return result
