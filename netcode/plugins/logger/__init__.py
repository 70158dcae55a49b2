"""Logger plugin - the host log."""

from .plugin import LoggerPlugin, create_plugin

__all__ = ["LoggerPlugin", "create_plugin"]
