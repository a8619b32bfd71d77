"""Session parameters and connection config loading."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from wdwire.lib import oj

logger = logging.getLogger(__name__)

# Config file locations
CONFIG_FILENAME = "webdriver.json"
GLOBAL_CONFIG = Path.home() / ".wdwire" / CONFIG_FILENAME
LOCAL_CONFIG_DIR = ".wdwire"

SUPPORTED_PROTOCOLS = ("http", "https")


@dataclass
class RequestedCapabilities:
    """
    Both dialect forms of the capabilities sent with a new session request.

    Kept on the session parameters so an equivalent session can be
    requested again later.
    """

    w3c: dict[str, Any]
    """Structured form: ``{"alwaysMatch": {...}, "firstMatch": [...]}``."""

    jsonwp: dict[str, Any]
    """Flat legacy form sent as ``desiredCapabilities``."""


@dataclass
class SessionParams:
    """
    Caller-visible parameters of a WebDriver session.

    Connection fields may be rewritten by a direct-connect response, and
    ``capabilities`` is replaced by what the server resolved once a
    session has been created.
    """

    protocol: str = "http"
    hostname: str = "localhost"
    port: int = 4444
    path: str = "/"

    capabilities: dict[str, Any] = field(default_factory=dict)
    """Requested capabilities before a session, resolved ones after."""

    requested_capabilities: RequestedCapabilities | None = None
    """Set after a successful session start."""

    headers: dict[str, str] = field(default_factory=dict)
    timeout: float = 30.0
    connect_timeout: float = 10.0
    strict_ssl: bool = True

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.protocol not in SUPPORTED_PROTOCOLS:
            raise ValueError(
                f"protocol must be one of {SUPPORTED_PROTOCOLS}, got {self.protocol!r}"
            )
        if not self.hostname:
            raise ValueError("hostname is required")
        if int(self.port) <= 0:
            raise ValueError("port must be positive")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.connect_timeout <= 0:
            raise ValueError("connect_timeout must be positive")

    @property
    def base_url(self) -> str:
        """Server address including the base path."""
        return f"{self.protocol}://{self.hostname}:{self.port}{self.path}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionParams":
        """Create from config dict (camelCase keys as in the config file)."""
        defaults = cls()
        return cls(
            protocol=data.get("protocol", defaults.protocol),
            hostname=data.get("hostname", defaults.hostname),
            port=data.get("port", defaults.port),
            path=data.get("path", defaults.path),
            capabilities=data.get("capabilities", {}),
            headers=data.get("headers", {}),
            timeout=data.get("timeout", defaults.timeout),
            connect_timeout=data.get("connectTimeout", defaults.connect_timeout),
            strict_ssl=data.get("strictSSL", defaults.strict_ssl),
        )


def _read_config(path: Path) -> dict[str, Any]:
    try:
        data = oj.loads(path.read_bytes())
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring config {path}: top level must be an object")
        return {}
    return data


def load_session_config(working_dir: Path | None = None) -> SessionParams:
    """Load session parameters from global and local config files.

    Global config (~/.wdwire/webdriver.json) is loaded first.
    Local config ({working_dir}/.wdwire/webdriver.json) overrides global
    key by key.

    Returns:
        SessionParams built from the merged config (defaults if none found).
    """
    merged: dict[str, Any] = {}

    if GLOBAL_CONFIG.exists():
        merged.update(_read_config(GLOBAL_CONFIG))

    if working_dir:
        local_config = working_dir / LOCAL_CONFIG_DIR / CONFIG_FILENAME
        if local_config.exists():
            merged.update(_read_config(local_config))

    return SessionParams.from_dict(merged)
