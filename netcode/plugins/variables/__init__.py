"""Variables plugin - shared string variables."""

from .plugin import VariablesPlugin, create_plugin

__all__ = ["VariablesPlugin", "create_plugin"]
