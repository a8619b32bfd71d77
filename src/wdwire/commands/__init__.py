"""
WebDriver Command Surface.

Protocol command tables and their capability-dependent assembly into
the set of commands callable on a session.
"""

from wdwire.commands.tables import (
    CommandDescriptor,
    ParameterSpec,
    VariableSpec,
    ProtocolCommandTable,
    PROTOCOL_NAMES,
    load_protocol,
    load_all_protocols,
    parse_protocol,
)
from wdwire.commands.binding import CommandBinding
from wdwire.commands.surface import (
    CommandSurface,
    ProtocolLayer,
    PROTOCOL_LAYERS,
    build_command_surface,
    merge_tables,
    select_tables,
)

__all__ = [
    # Tables
    "CommandDescriptor",
    "ParameterSpec",
    "VariableSpec",
    "ProtocolCommandTable",
    "PROTOCOL_NAMES",
    "load_protocol",
    "load_all_protocols",
    "parse_protocol",
    # Surface
    "CommandBinding",
    "CommandSurface",
    "ProtocolLayer",
    "PROTOCOL_LAYERS",
    "build_command_surface",
    "merge_tables",
    "select_tables",
]
