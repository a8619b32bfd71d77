"""Assembly of the command surface from layered protocol tables."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, Mapping

from wdwire.capabilities.flags import FeatureFlags
from wdwire.commands.binding import CommandBinding
from wdwire.commands.tables import (
    APPIUM,
    CHROMIUM,
    JSONWP,
    MJSONWP,
    SAUCELABS,
    SELENIUM,
    WEBDRIVER,
    CommandDescriptor,
    ProtocolCommandTable,
    load_protocol,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProtocolLayer:
    """A protocol table and the condition under which it participates."""

    table: str
    applies: Callable[[FeatureFlags], bool]


# Folded left to right; later layers override earlier ones.
PROTOCOL_LAYERS: tuple[ProtocolLayer, ...] = (
    # Mobile sessions get both base dialects, since Appium still serves
    # some JSONWire commands (e.g. geolocation).
    ProtocolLayer(JSONWP, lambda f: f.mobile or not f.w3c),
    ProtocolLayer(WEBDRIVER, lambda f: f.mobile or f.w3c),
    ProtocolLayer(MJSONWP, lambda f: f.mobile),
    ProtocolLayer(APPIUM, lambda f: f.mobile),
    ProtocolLayer(CHROMIUM, lambda f: f.chrome),
    ProtocolLayer(SAUCELABS, lambda f: f.sauce),
    ProtocolLayer(SELENIUM, lambda f: f.selenium_standalone),
)

TableLoader = Callable[[str], ProtocolCommandTable]


class CommandSurface(Mapping[str, CommandBinding]):
    """
    Read-only mapping of command name to its binding.

    Built once per session; never modified afterwards.
    """

    def __init__(self, bindings: dict[str, CommandBinding], tables: tuple[str, ...] = ()):
        self._bindings = dict(bindings)
        self.tables = tables
        """Names of the protocol tables that were merged, in order."""

    def __getitem__(self, name: str) -> CommandBinding:
        return self._bindings[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        return f"CommandSurface(tables={list(self.tables)}, commands={len(self)})"


def select_tables(flags: FeatureFlags) -> list[str]:
    """Names of the tables taking part for these flags, lowest precedence first."""
    return [layer.table for layer in PROTOCOL_LAYERS if layer.applies(flags)]


def merge_tables(
    tables: list[ProtocolCommandTable],
) -> tuple[dict[str, dict[str, CommandDescriptor]], dict[tuple[str, str], int]]:
    """
    Merge tables per endpoint and method; later tables win.

    Returns:
        The merged table and, for each (endpoint, method), the index of
        the table that supplied the surviving descriptor.
    """
    merged: dict[str, dict[str, CommandDescriptor]] = {}
    origin: dict[tuple[str, str], int] = {}
    for index, table in enumerate(tables):
        for endpoint, methods in table.items():
            target = merged.setdefault(endpoint, {})
            for method, descriptor in methods.items():
                target[method] = descriptor
                origin[(endpoint, method)] = index
    return merged, origin


def build_command_surface(
    flags: FeatureFlags,
    loader: TableLoader = load_protocol,
) -> CommandSurface:
    """
    Build the callable command set for a session.

    Args:
        flags: Feature flags of the session.
        loader: Resolves table names to tables (shipped tables by default).

    Returns:
        CommandSurface keyed by command name. When two endpoints declare
        the same command name, the one from the later layer wins.
    """
    names = select_tables(flags)
    merged, origin = merge_tables([loader(name) for name in names])

    entries = [
        (origin[(endpoint, method)], endpoint, method, descriptor)
        for endpoint, methods in merged.items()
        for method, descriptor in methods.items()
    ]
    # Stable sort keeps table order within a layer
    entries.sort(key=lambda entry: entry[0])

    bindings: dict[str, CommandBinding] = {}
    for _, endpoint, method, descriptor in entries:
        bindings[descriptor.command] = CommandBinding(
            method=method,
            endpoint=endpoint,
            descriptor=descriptor,
            is_selenium_standalone=flags.selenium_standalone,
        )

    logger.debug(
        f"Built command surface from {names}: {len(bindings)} commands for {flags}"
    )
    return CommandSurface(bindings, tables=tuple(names))
