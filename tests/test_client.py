"""Tests for the WebDriver client."""

import asyncio

import pytest

from wdwire.client import WebDriverClient
from wdwire.protocol.errors import SessionCreationError, WebDriverError
from wdwire.protocol.state import SessionState
from wdwire.transport.base import ConnectionError


class TestStartSession:
    """Tests for session start through the client."""

    @pytest.mark.asyncio
    async def test_builds_command_surface(self, params, make_transport, w3c_session_reply):
        client = WebDriverClient(params, make_transport(w3c_session_reply))

        session_id = await client.start_session()

        assert session_id == "abc123"
        assert client.state == SessionState.ESTABLISHED
        assert client.flags.w3c
        assert client.flags.chrome
        assert "navigateTo" in client.commands
        client.transport.connect.assert_awaited()

    @pytest.mark.asyncio
    async def test_commands_require_session(self, params, make_transport):
        client = WebDriverClient(params, make_transport())
        with pytest.raises(WebDriverError, match="No active session"):
            client.commands
        with pytest.raises(AttributeError):
            client.navigateTo

    @pytest.mark.asyncio
    async def test_dynamic_dispatch(self, params, make_transport, w3c_session_reply):
        transport = make_transport(w3c_session_reply, (200, {"value": None}))
        client = WebDriverClient(params, transport)
        await client.start_session()

        result = await client.navigateTo("https://example.com")

        assert result is None
        assert transport.send.await_args.args == (
            "POST",
            "/session/abc123/url",
            {"url": "https://example.com"},
        )

    @pytest.mark.asyncio
    async def test_call_unknown_command(self, params, make_transport, w3c_session_reply):
        client = WebDriverClient(params, make_transport(w3c_session_reply))
        await client.start_session()
        with pytest.raises(WebDriverError, match="not available"):
            await client.call("shake")

    @pytest.mark.asyncio
    async def test_failed_start_can_be_retried(self, params, make_transport, w3c_session_reply):
        transport = make_transport(
            ConnectionError("connect ECONNREFUSED", code="ECONNREFUSED"),
            w3c_session_reply,
        )
        client = WebDriverClient(params, transport)

        with pytest.raises(SessionCreationError):
            await client.start_session()
        assert client.state == SessionState.FAILED

        assert await client.start_session() == "abc123"

    @pytest.mark.asyncio
    async def test_unexpected_transport_error_can_be_retried(
        self, params, make_transport, w3c_session_reply
    ):
        transport = make_transport(OSError("socket closed"), w3c_session_reply)
        client = WebDriverClient(params, transport)

        with pytest.raises(SessionCreationError) as exc_info:
            await client.start_session()
        assert str(exc_info.value) == "Failed to create session.\nsocket closed"
        assert isinstance(exc_info.value.__cause__, OSError)
        assert client.state == SessionState.FAILED

        assert await client.start_session() == "abc123"
        assert client.state == SessionState.ESTABLISHED

    @pytest.mark.asyncio
    async def test_cancelled_start_can_be_retried(
        self, params, make_transport, w3c_session_reply
    ):
        transport = make_transport(asyncio.CancelledError(), w3c_session_reply)
        client = WebDriverClient(params, transport)

        with pytest.raises(asyncio.CancelledError):
            await client.start_session()
        assert client.state == SessionState.FAILED

        assert await client.start_session() == "abc123"

    @pytest.mark.asyncio
    async def test_state_listener_sees_transitions(
        self, params, make_transport, w3c_session_reply
    ):
        seen = []
        client = WebDriverClient(params, make_transport(w3c_session_reply))
        client.on_state_change(lambda old, new: seen.append((old, new)))

        await client.start_session()

        assert seen == [
            (SessionState.IDLE, SessionState.REQUESTING),
            (SessionState.REQUESTING, SessionState.ESTABLISHED),
        ]

    @pytest.mark.asyncio
    async def test_second_start_rejected(self, params, make_transport, w3c_session_reply):
        client = WebDriverClient(params, make_transport(w3c_session_reply))
        await client.start_session()
        with pytest.raises(WebDriverError, match="still active"):
            await client.start_session()


class TestSessionEnd:
    """Tests for deleting and reloading sessions."""

    @pytest.mark.asyncio
    async def test_delete_session(self, params, make_transport, w3c_session_reply):
        transport = make_transport(w3c_session_reply, (200, {"value": None}))
        client = WebDriverClient(params, transport)
        await client.start_session()

        await client.delete_session()

        assert client.state == SessionState.CLOSED
        assert transport.send.await_args.args[:2] == ("DELETE", "/session/abc123")

    @pytest.mark.asyncio
    async def test_reload_session_resends_structured_request(self, params, make_transport):
        transport = make_transport(
            (200, {"value": {"sessionId": "first", "capabilities": {"browserName": "chrome"}}}),
            (200, {"value": None}),
            (200, {"value": {"sessionId": "second", "capabilities": {"browserName": "chrome"}}}),
        )
        client = WebDriverClient(params, transport)
        await client.start_session()

        assert await client.reload_session() == "second"

        _, _, body = transport.send.await_args.args
        assert body["capabilities"] == {
            "alwaysMatch": {"browserName": "chrome"},
            "firstMatch": [{}],
        }
        assert body["desiredCapabilities"] == {"browserName": "chrome"}

    @pytest.mark.asyncio
    async def test_reload_without_session(self, params, make_transport):
        client = WebDriverClient(params, make_transport())
        with pytest.raises(WebDriverError, match="nothing to reload"):
            await client.reload_session()

    @pytest.mark.asyncio
    async def test_context_manager_closes_transport(self, params, make_transport):
        transport = make_transport()
        async with WebDriverClient(params, transport):
            pass
        transport.disconnect.assert_awaited_once()
