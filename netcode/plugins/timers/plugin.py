"""Timers plugin - one-shot deferred callbacks on the host event loop.

Priority: 10
"""

import asyncio
import sys
from typing import Callable, Optional

from ..base import Plugin, PluginMeta
from ..interfaces import Scheduler


class TimersPlugin(Plugin, Scheduler):
    meta = PluginMeta(
        id="timers",
        version="1.0.0",
        capabilities=["timers"],
        dependencies=[],
        priority=10,
    )

    def __init__(self):
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._handles: set[asyncio.TimerHandle] = set()

    def configure(self, config: dict) -> None:
        pass

    async def start(self) -> None:
        self._loop = asyncio.get_running_loop()

    async def stop(self) -> None:
        for handle in self._handles:
            handle.cancel()
        self._handles.clear()
        self._loop = None

    @property
    def pending(self) -> int:
        return len(self._handles)

    def after(self, delay: float, callback: Callable[[], None]) -> None:
        if self._loop is None:
            raise RuntimeError("Timers plugin is not started")

        def _fire():
            self._handles.discard(handle)
            try:
                callback()
            except Exception as e:
                print(f"[Timers] Error in deferred callback: {e}", file=sys.stderr)

        handle = self._loop.call_later(max(0.0, delay), _fire)
        self._handles.add(handle)


def create_plugin() -> TimersPlugin:
    return TimersPlugin()
