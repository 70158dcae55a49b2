"""Console plugin - host command lines."""

from .plugin import ConsolePlugin, create_plugin

__all__ = ["ConsolePlugin", "create_plugin"]
