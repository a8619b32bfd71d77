"""Session feature flags derived from resolved capabilities."""

from __future__ import annotations

import re
from dataclasses import dataclass, fields
from typing import Any

APPIUM_MARKERS = ("automationName", "deviceName", "appiumVersion")
MOBILE_BROWSERS = ("ipad", "iphone", "android")

# Flag attribute -> name used in the environment map
ENVIRONMENT_NAMES = {
    "w3c": "isW3C",
    "mobile": "isMobile",
    "ios": "isIOS",
    "android": "isAndroid",
    "chrome": "isChrome",
    "sauce": "isSauce",
    "selenium_standalone": "isSeleniumStandalone",
}


def _cap(capabilities: dict[str, Any], name: str) -> Any:
    """Capability value, also looking under the ``appium:`` vendor prefix."""
    value = capabilities.get(name)
    if value is None:
        value = capabilities.get(f"appium:{name}")
    return value


def _matches(value: Any, pattern: str) -> bool:
    return isinstance(value, str) and re.search(pattern, value, re.IGNORECASE) is not None


@dataclass(frozen=True)
class FeatureFlags:
    """
    Boolean session attributes that select protocol command tables.

    All flags default to False, which selects the legacy JSONWire table
    and no extensions.
    """

    w3c: bool = False
    chrome: bool = False
    mobile: bool = False
    ios: bool = False
    android: bool = False
    sauce: bool = False
    selenium_standalone: bool = False

    @classmethod
    def from_capabilities(
        cls,
        capabilities: dict[str, Any] | None,
        hostname: str | None = None,
        requested: dict[str, Any] | None = None,
    ) -> "FeatureFlags":
        """
        Detect flags from the capabilities a server resolved.

        Args:
            capabilities: Resolved session capabilities.
            hostname: Host the session was created on.
            requested: Capabilities as requested (flat form).

        Returns:
            FeatureFlags for the session.
        """
        caps = capabilities or {}
        requested = requested or {}

        is_appium = any(_cap(caps, marker) for marker in APPIUM_MARKERS)
        has_w3c_caps = bool(
            caps.get("platformName")
            and caps.get("browserVersion")
            and (caps.get("platformVersion") or "setWindowRect" in caps)
        )

        platform_name = _cap(caps, "platformName")
        device_name = _cap(caps, "deviceName")
        browser_name = caps.get("browserName")

        ios = _matches(platform_name, r"^ios$") or _matches(device_name, r"(ipad|iphone)")
        android = _matches(platform_name, r"android") or _matches(browser_name, r"android")
        mobile = (
            ios
            or android
            or isinstance(device_name, str)
            or (isinstance(browser_name, str) and browser_name.lower() in MOBILE_BROWSERS)
        )

        return cls(
            w3c=has_w3c_caps or is_appium,
            chrome=browser_name == "chrome",
            mobile=mobile,
            ios=ios,
            android=android,
            sauce="saucelabs" in (hostname or "") or "sauce:options" in requested,
            selenium_standalone=bool(caps.get("webdriver.remote.sessionid")),
        )

    def environment(self) -> dict[str, bool]:
        """Flags under their protocol environment names (``isW3C`` etc.)."""
        return {ENVIRONMENT_NAMES[f.name]: getattr(self, f.name) for f in fields(self)}

    def __str__(self) -> str:
        enabled = [f.name for f in fields(self) if getattr(self, f.name)]
        return f"FeatureFlags({', '.join(enabled) or 'legacy'})"
