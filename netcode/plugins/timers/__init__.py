"""Timers plugin - deferred callbacks."""

from .plugin import TimersPlugin, create_plugin

__all__ = ["TimersPlugin", "create_plugin"]
