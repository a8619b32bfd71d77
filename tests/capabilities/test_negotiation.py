"""Tests for dual-dialect capability negotiation."""

import pytest

from wdwire.capabilities.negotiation import (
    extract_capabilities,
    extract_session_id,
    negotiate_capabilities,
    parse_session_response,
)


class TestNegotiateCapabilities:
    """Tests for building both capability forms."""

    def test_flat_capabilities_are_wrapped(self):
        request = negotiate_capabilities({"browserName": "chrome"})
        assert request.w3c == {"alwaysMatch": {"browserName": "chrome"}, "firstMatch": [{}]}
        assert request.jsonwp == {"browserName": "chrome"}

    def test_w3c_capabilities_are_kept(self):
        caps = {
            "alwaysMatch": {"browserName": "firefox", "moz:firefoxOptions": {}},
            "firstMatch": [{"platformName": "linux"}],
        }
        request = negotiate_capabilities(caps)
        assert request.w3c is caps
        assert request.jsonwp is caps["alwaysMatch"]

    def test_empty_always_match_is_structured(self):
        caps = {"alwaysMatch": {}, "firstMatch": [{"browserName": "chrome"}]}
        request = negotiate_capabilities(caps)
        assert request.w3c is caps
        assert request.jsonwp == {}

    def test_none_capabilities(self):
        request = negotiate_capabilities(None)
        assert request.w3c == {"alwaysMatch": {}, "firstMatch": [{}]}
        assert request.jsonwp == {}

    def test_payload(self):
        payload = negotiate_capabilities({"browserName": "chrome"}).to_payload()
        assert set(payload) == {"capabilities", "desiredCapabilities"}


class TestSessionResponse:
    """Tests for extracting the session from either envelope."""

    @pytest.mark.parametrize(
        "body",
        [
            {"value": {"sessionId": "abc123", "capabilities": {}}},
            {"sessionId": "abc123", "value": {}},
        ],
    )
    def test_session_id_from_either_envelope(self, body):
        assert extract_session_id(body) == "abc123"

    def test_w3c_capabilities(self):
        body = {"value": {"sessionId": "abc123", "capabilities": {"browserName": "chrome"}}}
        assert extract_capabilities(body) == {"browserName": "chrome"}

    def test_legacy_capabilities(self):
        body = {"sessionId": "abc123", "status": 0, "value": {"browserName": "chrome"}}
        assert extract_capabilities(body) == {"browserName": "chrome"}

    def test_non_object_value(self):
        assert extract_capabilities({"value": None}) == {}

    def test_empty_capabilities_are_kept(self):
        body = {"value": {"sessionId": "x", "capabilities": {}}}
        assert extract_capabilities(body) == {}

    def test_parse_session_response(self):
        result = parse_session_response(
            {"value": {"sessionId": "abc123", "capabilities": {"browserName": "chrome"}}}
        )
        assert result.session_id == "abc123"
        assert result.capabilities == {"browserName": "chrome"}
