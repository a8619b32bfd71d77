"""Tests for executing command bindings."""

from unittest.mock import MagicMock

import pytest

from wdwire.commands.binding import CommandBinding
from wdwire.commands.tables import load_protocol
from wdwire.protocol.errors import ProtocolResponseError, WebDriverError


def _binding(table, endpoint, method, standalone=False):
    return CommandBinding(
        method=method,
        endpoint=endpoint,
        descriptor=load_protocol(table)[endpoint][method],
        is_selenium_standalone=standalone,
    )


@pytest.fixture
def client(make_transport):
    def factory(*replies):
        fake = MagicMock()
        fake.session_id = "abc123"
        fake.transport = make_transport(*replies)
        return fake

    return factory


class TestBuildRequest:
    """Tests for path and body resolution."""

    def test_session_and_body(self):
        binding = _binding("webdriver", "/session/:sessionId/url", "POST")
        path, body = binding.build_request("abc123", ("https://example.com",))
        assert path == "/session/abc123/url"
        assert body == {"url": "https://example.com"}

    def test_url_variables_filled_first(self):
        binding = _binding("webdriver", "/session/:sessionId/element/:elementId/click", "POST")
        path, body = binding.build_request("abc123", ("el/1",))
        assert path == "/session/abc123/element/el%2F1/click"
        assert body == {}

    def test_get_has_no_body(self):
        binding = _binding("webdriver", "/session/:sessionId/title", "GET")
        assert binding.build_request("abc123", ()) == ("/session/abc123/title", None)

    def test_optional_parameters(self):
        binding = _binding("webdriver", "/session/:sessionId/execute/sync", "POST")
        _, body = binding.build_request("abc123", ("return 1",))
        assert body == {"script": "return 1"}
        _, body = binding.build_request("abc123", ("return arguments[0]", [1]))
        assert body == {"script": "return arguments[0]", "args": [1]}

    def test_too_few_arguments(self):
        binding = _binding("webdriver", "/session/:sessionId/url", "POST")
        with pytest.raises(WebDriverError, match=r"Usage: navigateTo\(url\)") as exc_info:
            binding.build_request("abc123", ())
        assert exc_info.value.error == "invalid argument"

    def test_too_many_arguments(self):
        binding = _binding("webdriver", "/session/:sessionId/title", "GET")
        with pytest.raises(WebDriverError, match="Wrong parameters"):
            binding.build_request("abc123", ("extra",))


class TestExecute:
    """Tests for running a command against a transport."""

    @pytest.mark.asyncio
    async def test_returns_value(self, client):
        fake = client((200, {"value": "Example Domain"}))
        binding = _binding("webdriver", "/session/:sessionId/title", "GET")

        assert await binding.execute(fake) == "Example Domain"
        fake.transport.send.assert_awaited_once_with(
            "GET", "/session/abc123/title", None, use_base_path=True
        )

    @pytest.mark.asyncio
    async def test_missing_element_is_returned(self, client):
        reply = {"value": {"error": "no such element", "message": "Unable to locate"}}
        fake = client((404, reply))
        binding = _binding("webdriver", "/session/:sessionId/element", "POST")

        value = await binding.execute(fake, "css selector", "#missing")
        assert value["error"] == "no such element"

    @pytest.mark.asyncio
    async def test_failure_raises(self, client):
        fake = client((404, {"value": {"error": "no such window", "message": "closed"}}))
        binding = _binding("webdriver", "/session/:sessionId/title", "GET")

        with pytest.raises(ProtocolResponseError, match="closed"):
            await binding.execute(fake)

    @pytest.mark.asyncio
    async def test_hub_command_skips_base_path(self, client):
        fake = client((200, {"value": {"slotCounts": {}}}))
        binding = _binding("selenium", "/grid/api/hub", "GET", standalone=True)

        await binding.execute(fake)
        fake.transport.send.assert_awaited_once_with(
            "GET", "/grid/api/hub", None, use_base_path=False
        )
