"""Chat plugin - text chat between hosts running the same plugin.

Uses a NetcodeManager tagged "chat". Adds console commands:
  say <text>      send a line to every participant
  chat            show readiness, authority and recent lines

Priority: 60 (after the host plugins it needs)
"""

import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..base import Plugin, PluginMeta
from ..config import NetcodeConfig
from ..interfaces import CommandError
from ..registry import get_registry
from ...host import Host
from ...manager import NetcodeManager


@dataclass
class ChatLine:
    """A received chat line."""

    text: str
    sender: Optional[int] = None  # None when the line came from this host
    received_at: datetime = field(default_factory=datetime.now)


class ChatPlugin(Plugin):
    meta = PluginMeta(
        id="chat",
        version="1.0.0",
        dependencies=["variables", "timers", "console", "logger"],
        implements={"console.commands": "commands"},
        priority=60,
    )

    def __init__(self):
        self._registry = None  # Set in start() via get_registry()
        self._config = NetcodeConfig()
        self._netcode: Optional[NetcodeManager] = None
        self._max_history = 100
        self.history: list[ChatLine] = []

    def configure(self, config: dict) -> None:
        self._config = NetcodeConfig.from_dict(config)
        self._max_history = int(
            self._config.get_plugin_config("chat").get("max_history", 100)
        )

    async def start(self) -> None:
        if self._registry is None:
            self._registry = get_registry()
        host = Host.from_registry(self._registry)
        self._netcode = NetcodeManager(
            host, self.meta.id, self.on_message, config=self._config
        )

    async def stop(self) -> None:
        if self._netcode is not None:
            self._netcode.close()
        self._netcode = None

    @property
    def netcode(self) -> Optional[NetcodeManager]:
        return self._netcode

    def on_message(self, body: str, sender: Optional[int]) -> None:
        self.history.append(ChatLine(text=body, sender=sender))
        del self.history[: -self._max_history]
        who = f"#{sender}" if sender is not None else "host"
        print(f"[Chat] {who}: {body}", file=sys.stderr)

    def say(self, text: str) -> bool:
        """Send a chat line. False if netcode is not ready or it is too long."""
        if self._netcode is None:
            return False
        return self._netcode.send(text)

    # --- Console ---

    def commands(self) -> dict:
        return {"say": self._say_command, "chat": self._status_command}

    def _say_command(self, args: list[str]) -> Optional[str]:
        if not args:
            raise CommandError("usage: say <text>")
        if not self.say(" ".join(args)):
            return "Message not sent"
        return None

    def _status_command(self, args: list[str]) -> str:
        if self._netcode is None:
            return "Chat is not started"
        lines = [
            f"netcode: {self._netcode.state.value} "
            f"(attempt {self._netcode.detector.attempts})",
            f"authority: {self._netcode.authority().name.lower()}",
        ]
        lines.extend(f"> {line.text}" for line in self.history[-5:])
        return "\n".join(lines)


def create_plugin() -> ChatPlugin:
    return ChatPlugin()
