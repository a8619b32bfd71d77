"""Protocol command tables.

Each table maps an endpoint template to the commands it serves per HTTP
method. Tables are static data shipped with the package and are exposed
as read-only mappings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from wdwire.lib import oj

logger = logging.getLogger(__name__)

PROTOCOLS_DIR = Path(__file__).parent / "protocols"

# Table names
WEBDRIVER = "webdriver"
JSONWP = "jsonwp"
MJSONWP = "mjsonwp"
APPIUM = "appium"
CHROMIUM = "chromium"
SAUCELABS = "saucelabs"
SELENIUM = "selenium"

PROTOCOL_NAMES = (WEBDRIVER, JSONWP, MJSONWP, APPIUM, CHROMIUM, SAUCELABS, SELENIUM)


@dataclass(frozen=True)
class ParameterSpec:
    """A body parameter of a command."""

    name: str
    type: str = "*"
    description: str = ""
    required: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ParameterSpec":
        return cls(
            name=data["name"],
            type=data.get("type", "*"),
            description=data.get("description", ""),
            required=data.get("required", True),
        )


@dataclass(frozen=True)
class VariableSpec:
    """A URL variable of an endpoint template, e.g. ``:elementId``."""

    name: str
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VariableSpec":
        return cls(name=data["name"], description=data.get("description", ""))


@dataclass(frozen=True)
class CommandDescriptor:
    """Name and parameter schema of one protocol command."""

    command: str
    description: str = ""
    ref: str = ""
    variables: tuple[VariableSpec, ...] = ()
    parameters: tuple[ParameterSpec, ...] = ()
    returns: Mapping[str, Any] | None = field(default=None, compare=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CommandDescriptor":
        """Create from a protocol table entry."""
        returns = data.get("returns")
        return cls(
            command=data["command"],
            description=data.get("description", ""),
            ref=data.get("ref", ""),
            variables=tuple(VariableSpec.from_dict(v) for v in data.get("variables", [])),
            parameters=tuple(ParameterSpec.from_dict(p) for p in data.get("parameters", [])),
            returns=MappingProxyType(dict(returns)) if returns else None,
        )

    @property
    def required_parameters(self) -> tuple[ParameterSpec, ...]:
        return tuple(p for p in self.parameters if p.required)

    def usage(self) -> str:
        """Call signature, optional parameters in brackets."""
        names = [v.name for v in self.variables]
        names += [p.name if p.required else f"[{p.name}]" for p in self.parameters]
        return f"{self.command}({', '.join(names)})"


# endpoint -> HTTP method -> descriptor
ProtocolCommandTable = Mapping[str, Mapping[str, CommandDescriptor]]


def parse_protocol(data: dict[str, Any]) -> ProtocolCommandTable:
    """
    Convert raw protocol table data into a read-only table.

    Args:
        data: ``{endpoint: {METHOD: {...}}}`` as stored in the JSON files.

    Returns:
        Immutable ProtocolCommandTable preserving endpoint order.
    """
    table: dict[str, Mapping[str, CommandDescriptor]] = {}
    for endpoint, methods in data.items():
        table[endpoint] = MappingProxyType(
            {
                method.upper(): CommandDescriptor.from_dict(entry)
                for method, entry in methods.items()
            }
        )
    return MappingProxyType(table)


@lru_cache(maxsize=None)
def load_protocol(name: str) -> ProtocolCommandTable:
    """
    Load a shipped protocol table by name.

    Raises:
        KeyError: If no table of that name exists.
    """
    if name not in PROTOCOL_NAMES:
        raise KeyError(f"Unknown protocol table: {name}")

    path = PROTOCOLS_DIR / f"{name}.json"
    table = parse_protocol(oj.loads(path.read_bytes()))
    logger.debug(f"Loaded protocol table '{name}' with {len(table)} endpoints")
    return table


def load_all_protocols() -> dict[str, ProtocolCommandTable]:
    """All shipped tables keyed by name."""
    return {name: load_protocol(name) for name in PROTOCOL_NAMES}
