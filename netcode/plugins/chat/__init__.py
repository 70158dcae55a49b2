"""Chat plugin - reference consumer of NetcodeManager."""

from .plugin import ChatPlugin, ChatLine, create_plugin

__all__ = ["ChatPlugin", "ChatLine", "create_plugin"]
