"""Tests for protocol command tables."""

import pytest

from wdwire.commands.tables import (
    PROTOCOL_NAMES,
    CommandDescriptor,
    load_all_protocols,
    load_protocol,
    parse_protocol,
)


class TestLoadProtocol:
    """Tests for the shipped tables."""

    @pytest.mark.parametrize("name", PROTOCOL_NAMES)
    def test_every_table_loads(self, name):
        table = load_protocol(name)
        assert len(table) > 0
        for methods in table.values():
            for method, descriptor in methods.items():
                assert method in ("GET", "POST", "DELETE")
                assert descriptor.command

    def test_tables_are_cached(self):
        assert load_protocol("webdriver") is load_protocol("webdriver")

    def test_tables_are_read_only(self):
        table = load_protocol("webdriver")
        with pytest.raises(TypeError):
            table["/new"] = {}
        with pytest.raises(TypeError):
            table["/session"]["GET"] = None

    def test_unknown_table(self):
        with pytest.raises(KeyError):
            load_protocol("marionette")

    def test_load_all(self):
        assert set(load_all_protocols()) == set(PROTOCOL_NAMES)

    def test_url_variables(self):
        descriptor = load_protocol("webdriver")["/session/:sessionId/element/:elementId/click"]["POST"]
        assert [v.name for v in descriptor.variables] == ["elementId"]


class TestParseProtocol:
    """Tests for parsing raw table data."""

    def test_descriptor_fields(self):
        table = parse_protocol(
            {
                "/session/:sessionId/url": {
                    "post": {
                        "command": "navigateTo",
                        "parameters": [
                            {"name": "url", "type": "string", "required": True},
                            {"name": "referrer", "type": "string", "required": False},
                        ],
                    }
                }
            }
        )
        descriptor = table["/session/:sessionId/url"]["POST"]
        assert isinstance(descriptor, CommandDescriptor)
        assert [p.name for p in descriptor.required_parameters] == ["url"]
        assert descriptor.usage() == "navigateTo(url, [referrer])"

    def test_endpoint_order_preserved(self):
        table = parse_protocol({"/b": {}, "/a": {}, "/c": {}})
        assert list(table) == ["/b", "/a", "/c"]
