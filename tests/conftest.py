"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from wdwire.config import SessionParams
from wdwire.transport.base import Transport

# Enable async tests without marking each one
pytest_plugins = ["pytest_asyncio"]


@pytest.fixture
def params():
    """Session parameters for a local chromedriver."""
    return SessionParams(
        protocol="http",
        hostname="localhost",
        port=9515,
        path="/",
        capabilities={"browserName": "chrome"},
    )


@pytest.fixture
def make_transport():
    """Build a mocked transport answering with the given replies in order."""

    def factory(*replies):
        transport = MagicMock(spec=Transport)
        transport.connect = AsyncMock()
        transport.disconnect = AsyncMock()
        transport.send = AsyncMock(side_effect=list(replies))
        return transport

    return factory


@pytest.fixture
def w3c_session_reply():
    """New session reply in the W3C envelope."""
    return (
        200,
        {
            "value": {
                "sessionId": "abc123",
                "capabilities": {
                    "browserName": "chrome",
                    "browserVersion": "120.0",
                    "platformName": "linux",
                    "setWindowRect": True,
                },
            }
        },
    )
