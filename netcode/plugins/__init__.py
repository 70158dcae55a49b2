"""Plugin host for netcode.

This module provides:
- Plugin base class and metadata (base.py)
- Collaborator interfaces (interfaces.py)
- Plugin registry (registry.py)

Plugins are discovered from plugin directories. Each plugin directory
must contain a plugin.py with a create_plugin() factory function.
"""

import importlib.util
import sys
from pathlib import Path
from typing import Optional

from .base import Plugin, PluginMeta
from .interfaces import (
    ComponentRegistry,
    FileSystem,
    CommandRunner,
    CommandError,
    Scheduler,
    VariableStore,
    VariableError,
    LogSink,
    SessionProvider,
    Session,
    Playlist,
)
from .registry import (
    PluginRegistry,
    PluginError,
    get_registry,
    reset_registry,
)

# Always loaded, even when plugins.enabled is set
CORE_PLUGINS = ["config", "logger", "variables", "timers", "console"]


def load_plugin_file(plugins_dir: Path, name: str) -> type[Plugin]:
    """Import plugins_dir/<name>/plugin.py and return its plugin class.

    Raises:
        PluginError: If the file is missing or has no create_plugin()
    """
    plugin_file = Path(plugins_dir) / name / "plugin.py"
    if not plugin_file.exists():
        raise PluginError(f"No plugin file at {plugin_file}")

    module_name = f"netcode.plugins.{name}.plugin"
    module = sys.modules.get(module_name)
    loaded_from = getattr(module, "__file__", None)
    if loaded_from is None or Path(loaded_from).resolve() != plugin_file.resolve():
        spec = importlib.util.spec_from_file_location(module_name, plugin_file)
        if spec is None or spec.loader is None:
            raise PluginError(f"Cannot import {plugin_file}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)

    create_plugin = getattr(module, "create_plugin", None)
    if create_plugin is None:
        raise PluginError(f"{name}/plugin.py has no create_plugin()")

    return type(create_plugin())


def discover_plugins(plugins_dir: Path) -> list[type[Plugin]]:
    """Discover plugin classes from a directory.

    Each subdirectory with a plugin.py containing create_plugin() is loaded.

    Args:
        plugins_dir: Directory containing plugin subdirectories

    Returns:
        List of plugin classes
    """
    plugin_classes = []

    if not plugins_dir.exists():
        return plugin_classes

    for path in sorted(plugins_dir.iterdir()):
        if not path.is_dir() or path.name.startswith("_"):
            continue
        if not (path / "plugin.py").exists():
            continue

        try:
            plugin_classes.append(load_plugin_file(plugins_dir, path.name))
        except Exception as e:
            print(f"[Plugins] Failed to load {path.name}: {e}", file=sys.stderr)

    return plugin_classes


async def init_plugins(
    plugins_dir: Path, config: Optional[dict] = None
) -> PluginRegistry:
    """Initialize the plugin host.

    1. Discover plugins from directory
    2. Filter based on config (enabled/disabled)
    3. Register plugins
    4. Configure all plugins
    5. Start all plugins (async)

    Args:
        plugins_dir: Directory containing plugin subdirectories
        config: Full configuration dict (from netcode.yml)

    Returns:
        Configured and started PluginRegistry
    """
    from .config import NetcodeConfig

    config = config or {}

    settings = NetcodeConfig.from_dict(config)
    enabled_list = settings.enabled_plugins
    disabled_list = settings.disabled_plugins

    registry = get_registry()

    for plugin_class in discover_plugins(plugins_dir):
        plugin_id = plugin_class.meta.id

        if plugin_id in disabled_list:
            print(f"[Plugins] Skipping disabled plugin: {plugin_id}", file=sys.stderr)
            continue

        if enabled_list and plugin_id not in enabled_list:
            if plugin_id not in CORE_PLUGINS:
                print(
                    f"[Plugins] Skipping non-enabled plugin: {plugin_id}",
                    file=sys.stderr,
                )
                continue

        try:
            registry.register(plugin_class)
        except PluginError as e:
            print(f"[Plugins] Failed to register: {e}", file=sys.stderr)

    registry.configure_all(config)
    await registry.start_all()

    return registry


__all__ = [
    # Base
    "Plugin",
    "PluginMeta",
    # Interfaces
    "ComponentRegistry",
    "FileSystem",
    "CommandRunner",
    "CommandError",
    "Scheduler",
    "VariableStore",
    "VariableError",
    "LogSink",
    "SessionProvider",
    "Session",
    "Playlist",
    # Registry
    "PluginRegistry",
    "PluginError",
    "get_registry",
    "reset_registry",
    # Functions
    "CORE_PLUGINS",
    "load_plugin_file",
    "discover_plugins",
    "init_plugins",
]
