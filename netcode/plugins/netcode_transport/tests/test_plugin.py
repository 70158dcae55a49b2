"""Tests for NetcodeTransport plugin."""

import asyncio

import pytest

from .. import create_plugin
from ...registry import PluginRegistry
from ...variables.plugin import VariablesPlugin


def start_transport(config=None):
    registry = PluginRegistry()
    variables = registry.register(VariablesPlugin)
    transport = create_plugin()
    transport._registry = registry
    transport.configure(config or {})
    asyncio.run(transport.start())
    return transport, variables


def watch(variables, name):
    values = []
    variables.on_change(name, lambda: values.append(variables.get(name)))
    return values


class TestContract:
    def test_registers_contract_variables(self):
        _, variables = start_transport()
        assert variables.get("netcode_log_level") == "1"
        assert variables.get("netcode_message_in") == ""
        assert variables.get("netcode_message_out") == ""

    def test_log_level_from_config(self):
        _, variables = start_transport({"netcode_transport": {"log_level": 3}})
        assert variables.get("netcode_log_level") == "3"

    def test_custom_variable_names(self):
        _, variables = start_transport(
            {"netcode": {"variables": {"incoming": "rx", "outgoing": "tx"}}}
        )
        assert variables.exists("rx")
        assert variables.exists("tx")

    def test_stop_unregisters(self):
        transport, variables = start_transport()
        asyncio.run(transport.stop())
        assert variables.names() == []

    def test_start_needs_variables(self):
        transport = create_plugin()
        transport._registry = PluginRegistry()
        transport.configure({})
        with pytest.raises(RuntimeError):
            asyncio.run(transport.start())


class TestRole:
    def test_host_by_default(self):
        transport, _ = start_transport()
        assert transport.role == "PH"

    def test_client_role(self):
        transport, _ = start_transport({"netcode_transport": {"role": "client"}})
        assert transport.role == "PC"


class TestLoopback:
    def test_outgoing_delivered_to_incoming(self):
        transport, variables = start_transport()
        incoming = watch(variables, "netcode_message_in")

        variables.set("netcode_message_out", "[chat]hi")

        assert incoming == ["[chat][]hi", ""]
        assert variables.get("netcode_message_out") == ""
        assert transport.delivered == 1

    def test_repeated_frames(self):
        transport, variables = start_transport()
        incoming = watch(variables, "netcode_message_in")

        variables.set("netcode_message_out", "[chat]hi")
        variables.set("netcode_message_out", "[chat]hi")

        assert incoming.count("[chat][]hi") == 2
        assert transport.delivered == 2

    def test_oversized_frame_dropped(self, capsys):
        transport, variables = start_transport()
        incoming = watch(variables, "netcode_message_in")

        variables.set("netcode_message_out", "[chat]" + "x" * 119)

        assert incoming == []
        assert transport.dropped == 1
        assert variables.get("netcode_message_out") == ""
        assert "Dropped 129-character frame (limit 128)" in capsys.readouterr().err

    def test_deliver_with_sender(self):
        transport, variables = start_transport()
        incoming = watch(variables, "netcode_message_in")

        transport.deliver("[PC][score]2-1", sender=42)

        assert incoming == ["[score][42]2-1", ""]

    def test_deliver_after_stop_is_ignored(self):
        transport, _ = start_transport()
        asyncio.run(transport.stop())
        transport.deliver("[PC][score]2-1", sender=42)
        assert transport.delivered == 0
