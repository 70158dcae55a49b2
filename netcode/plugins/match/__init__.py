"""Match plugin - session state for authority decisions."""

from .plugin import MatchPlugin, LAN, ONLINE, create_plugin

__all__ = ["MatchPlugin", "LAN", "ONLINE", "create_plugin"]
