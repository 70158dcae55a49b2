"""Config plugin exports."""

from .plugin import (
    NetcodeConfig,
    ConfigPlugin,
    create_plugin,
    _expand_env_vars,
)


__all__ = [
    "NetcodeConfig",
    "ConfigPlugin",
    "create_plugin",
]
