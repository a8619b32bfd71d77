"""
WebDriver Capability Negotiation.

Builds the dual-dialect new session payload, reconciles the server's
reply, and derives the feature flags of the resulting session.
"""

from wdwire.capabilities.negotiation import (
    CapabilityRequest,
    NegotiationResult,
    negotiate_capabilities,
    parse_session_response,
    extract_session_id,
    extract_capabilities,
    ALWAYS_MATCH,
    FIRST_MATCH,
)
from wdwire.capabilities.flags import FeatureFlags

__all__ = [
    "CapabilityRequest",
    "NegotiationResult",
    "negotiate_capabilities",
    "parse_session_response",
    "extract_session_id",
    "extract_capabilities",
    "ALWAYS_MATCH",
    "FIRST_MATCH",
    "FeatureFlags",
]
