"""Logger plugin - the host log every other component writes to.

Priority: 5 (very early, logs everything)
"""

import json
import sys
from datetime import datetime, timezone

from ..base import Plugin, PluginMeta
from ..interfaces import LogSink


class LoggerPlugin(Plugin, LogSink):
    """Timestamped, level-filtered log lines on stderr."""

    meta = PluginMeta(
        id="logger",
        version="1.0.0",
        capabilities=["logging"],
        dependencies=[],
        priority=5,
    )

    def __init__(self):
        self._level: str = "info"
        self._levels = {"debug": 0, "info": 1, "warn": 2, "error": 3}

    def configure(self, config: dict) -> None:
        logger_config = config.get("logger", {})
        self._level = logger_config.get("level", "info")

    async def start(self) -> None:
        pass

    async def stop(self) -> None:
        pass

    def _should_log(self, level: str) -> bool:
        return self._levels.get(level, 1) >= self._levels.get(self._level, 1)

    def _log(self, level: str, source: str, msg: str, **extra):
        if not self._should_log(level):
            return
        ts = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        parts = [f"[{ts}]", f"[{level[0].upper()}]", f"[{source}]", msg]
        if extra:
            parts.append(json.dumps(extra, default=str))
        print(" ".join(parts), file=sys.stderr, flush=True)

    def log(self, message: str) -> None:
        self._log("info", "netcode", message)

    def debug(self, source: str, message: str, **extra) -> None:
        self._log("debug", source, message, **extra)

    def warn(self, source: str, message: str, **extra) -> None:
        self._log("warn", source, message, **extra)

    def error(self, source: str, message: str, **extra) -> None:
        self._log("error", source, message, **extra)


def create_plugin() -> LoggerPlugin:
    return LoggerPlugin()
