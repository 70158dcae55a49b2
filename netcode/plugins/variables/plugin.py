"""Variables plugin - named string values that plugins share.

Owners register variables; anyone can read, write and subscribe. Change
callbacks run synchronously on the host loop, only when the value differs.

Priority: 10 (before anything that registers or reads variables)
"""

import sys
from typing import Callable

from ..base import Plugin, PluginMeta
from ..interfaces import VariableError, VariableStore


class VariablesPlugin(Plugin, VariableStore):
    """In-process shared variable store."""

    meta = PluginMeta(
        id="variables",
        version="1.0.0",
        capabilities=["variables"],
        dependencies=[],
        priority=10,
    )

    def __init__(self):
        self._values: dict[str, str] = {}
        self._callbacks: dict[str, list[Callable[[], None]]] = {}

    def configure(self, config: dict) -> None:
        pass

    async def start(self) -> None:
        pass

    async def stop(self) -> None:
        self._values.clear()
        self._callbacks.clear()

    def _require(self, name: str) -> None:
        if name not in self._values:
            raise VariableError(f"Unknown variable: {name}")

    def register(self, name: str, default: str = "") -> None:
        if not name:
            raise VariableError("Variable name is required")
        if name in self._values:
            raise VariableError(f"Variable already registered: {name}")
        self._values[name] = str(default)
        self._callbacks[name] = []

    def unregister(self, name: str) -> None:
        self._values.pop(name, None)
        self._callbacks.pop(name, None)

    def names(self) -> list[str]:
        return sorted(self._values)

    def exists(self, name: str) -> bool:
        return name in self._values

    def get(self, name: str) -> str:
        self._require(name)
        return self._values[name]

    def set(self, name: str, value: str) -> None:
        self._require(name)
        value = str(value)
        if self._values[name] == value:
            return
        self._values[name] = value

        # Copy: a callback may subscribe or unregister while we iterate
        for callback in list(self._callbacks.get(name, [])):
            try:
                callback()
            except Exception as e:
                print(
                    f"[Variables] Error in change callback for {name}: {e}",
                    file=sys.stderr,
                )

    def on_change(self, name: str, callback: Callable[[], None]) -> None:
        self._require(name)
        self._callbacks[name].append(callback)

    def off_change(self, name: str, callback: Callable[[], None]) -> None:
        self._require(name)
        if callback in self._callbacks[name]:
            self._callbacks[name].remove(callback)


def create_plugin() -> VariablesPlugin:
    return VariablesPlugin()
