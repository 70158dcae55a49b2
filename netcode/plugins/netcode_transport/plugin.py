"""NetcodeTransport plugin - loopback replication for netcode messages.

Owns the three contract variables that NetcodeManager checks for:
  netcode_log_level    verbosity of netcode diagnostics (0-3)
  netcode_message_out  plugins write "[tag]body" here
  netcode_message_in   plugins observe "[tag][sender]body" here

An outgoing frame gets the role prefix ("[PH]" when hosting, "[PC]" as a
client), is checked against the 128-character ceiling and is delivered back
to every local plugin. A network layer hands frames from other participants
to deliver() together with the sender address.

Both message variables are cleared after each frame so that sending the
same text twice still counts as a change.

Priority: 40
"""

import sys
from typing import Optional

from ..base import Plugin, PluginMeta
from ..config import NetcodeConfig
from ..registry import get_registry
from ...protocol import ROLE_CLIENT, ROLE_HOST, frame_outgoing, relay_frame


class NetcodeTransportPlugin(Plugin):
    meta = PluginMeta(
        id="NetcodeTransport",
        version="1.0.0",
        capabilities=["transport"],
        dependencies=["variables"],
        priority=40,
    )

    def __init__(self):
        self._registry = None  # Set in start() via get_registry()
        self._variables = None
        self._config = NetcodeConfig()
        self._role: str = ROLE_HOST
        self._log_level: int = 1
        self.delivered: int = 0
        self.dropped: int = 0

    def configure(self, config: dict) -> None:
        self._config = NetcodeConfig.from_dict(config)
        section = self._config.get_plugin_config("netcode_transport")
        self._role = ROLE_CLIENT if section.get("role") == "client" else ROLE_HOST
        self._log_level = int(section.get("log_level", 1))

    async def start(self) -> None:
        if self._registry is None:
            self._registry = get_registry()
        self._variables = self._registry.get_by_capability("variables")
        if self._variables is None:
            raise RuntimeError("NetcodeTransport needs a variables plugin")

        self._variables.register(self._config.log_level_var, str(self._log_level))
        self._variables.register(self._config.incoming_var, "")
        self._variables.register(self._config.outgoing_var, "")
        self._variables.on_change(self._config.outgoing_var, self._on_outgoing)
        print(f"[NetcodeTransport] Ready as {self._role}", file=sys.stderr)

    async def stop(self) -> None:
        if self._variables is None:
            return
        for name in (
            self._config.log_level_var,
            self._config.incoming_var,
            self._config.outgoing_var,
        ):
            self._variables.unregister(name)
        self._variables = None

    @property
    def role(self) -> str:
        return self._role

    def _on_outgoing(self) -> None:
        frame = self._variables.get(self._config.outgoing_var)
        if not frame:
            return

        replicated = frame_outgoing(self._role, frame)
        self._variables.set(self._config.outgoing_var, "")

        if len(replicated) > self._config.max_length:
            self.dropped += 1
            print(
                f"[NetcodeTransport] Dropped {len(replicated)}-character frame "
                f"(limit {self._config.max_length})",
                file=sys.stderr,
            )
            return

        self.deliver(replicated)

    def deliver(self, replicated: str, sender: Optional[int] = None) -> None:
        """Hand a replicated "[role][tag]body" frame to local plugins."""
        if self._variables is None:
            return
        self._variables.set(self._config.incoming_var, relay_frame(replicated, sender))
        self._variables.set(self._config.incoming_var, "")
        self.delivered += 1


def create_plugin() -> NetcodeTransportPlugin:
    return NetcodeTransportPlugin()
