"""Plugin registry - central management of all host plugins.

The registry handles:
- Plugin registration and validation
- Dependency checks
- Configuration injection
- Lifecycle management (configure, start, stop), at boot and at runtime
- Lookup by ID, capability or extension point

Lifecycle methods (start, stop) are async and run on the host event loop.
"""

import sys
from typing import Optional, Type
from collections import defaultdict

from .base import Plugin, PluginMeta
from .interfaces import ComponentRegistry


class PluginError(Exception):
    """Error during plugin operations."""

    pass


class PluginRegistry(ComponentRegistry):
    """Central registry for plugin management."""

    def __init__(self):
        self._plugins: dict[str, Plugin] = {}  # id -> instance
        self._capabilities: dict[str, list[str]] = defaultdict(
            list
        )  # capability -> [ids]
        self._load_order: list[str] = []  # Ordered list of plugin IDs
        self._running: set[str] = set()  # IDs of started plugins
        self._config: dict = {}
        self._started: bool = False

    def register(self, plugin_class: Type[Plugin]) -> Plugin:
        """Validate and register a plugin class.

        Args:
            plugin_class: Plugin class (not instance)

        Returns:
            Plugin instance

        Raises:
            PluginError: If plugin is invalid or already registered
        """
        if not isinstance(plugin_class, type) or not issubclass(plugin_class, Plugin):
            raise PluginError(
                f"Invalid plugin: {plugin_class} is not a Plugin subclass"
            )

        if not hasattr(plugin_class, "meta") or not isinstance(
            plugin_class.meta, PluginMeta
        ):
            raise PluginError(
                f"Plugin {plugin_class.__name__} missing valid 'meta' attribute"
            )

        meta = plugin_class.meta

        if meta.id in self._plugins:
            raise PluginError(f"Plugin '{meta.id}' already registered")

        try:
            instance = plugin_class()
        except Exception as e:
            raise PluginError(f"Failed to instantiate plugin '{meta.id}': {e}")

        self._plugins[meta.id] = instance

        for cap in meta.capabilities:
            self._capabilities[cap].append(meta.id)

        return instance

    def get(self, plugin_id: str) -> Optional[Plugin]:
        """Get plugin by ID."""
        return self._plugins.get(plugin_id)

    def get_by_capability(self, capability: str) -> Optional[Plugin]:
        """Get the highest-priority plugin providing a capability.

        Args:
            capability: Capability name (e.g., "variables", "timers")

        Returns:
            Plugin instance or None
        """
        plugin_ids = self._capabilities.get(capability, [])
        if not plugin_ids:
            return None

        best = min(plugin_ids, key=lambda pid: self._plugins[pid].meta.priority)
        return self._plugins[best]

    def get_implementations(
        self, extension_point: str
    ) -> list[tuple[str, Plugin, str]]:
        """Find all plugins implementing an extension point.

        Returns:
            List of (plugin_id, plugin_instance, method_name) tuples
        """
        implementations = []
        for plugin_id, plugin in self._plugins.items():
            method_name = plugin.meta.implements.get(extension_point)
            if method_name:
                implementations.append((plugin_id, plugin, method_name))
        return implementations

    def all_plugins(self) -> list[Plugin]:
        """Get all registered plugins in load order."""
        return [self._plugins[pid] for pid in self._load_order]

    def is_running(self, plugin_id: str) -> bool:
        return plugin_id in self._running

    def list_loaded(self) -> list[dict]:
        """Started plugins, as the netcode load detector sees them."""
        return [
            {"name": pid, "version": self._plugins[pid].meta.version}
            for pid in self._load_order
            if pid in self._running
        ]

    def _resolve_load_order(self) -> list[str]:
        """Resolve plugin load order based on priority."""
        return sorted(
            self._plugins.keys(), key=lambda pid: self._plugins[pid].meta.priority
        )

    def _check_dependencies(self) -> None:
        """Check that all plugin dependencies are satisfied."""
        for plugin_id, plugin in self._plugins.items():
            for dep in plugin.meta.dependencies:
                if dep not in self._plugins:
                    raise PluginError(
                        f"Plugin '{plugin_id}' depends on '{dep}' which is not registered"
                    )

    def configure_all(self, config: dict) -> None:
        """Inject configuration to all plugins.

        Each plugin receives the full config dict and extracts its section.
        """
        self._config = config
        self._load_order = self._resolve_load_order()
        self._check_dependencies()

        for plugin_id in self._load_order:
            plugin = self._plugins[plugin_id]
            try:
                plugin.configure(config)
            except Exception as e:
                print(
                    f"[Registry] Failed to configure '{plugin_id}': {e}",
                    file=sys.stderr,
                )
                raise PluginError(f"Configuration failed for '{plugin_id}': {e}")

    async def start_all(self) -> None:
        """Start all plugins in load order."""
        if self._started:
            return

        for plugin_id in self._load_order:
            await self._start(plugin_id)

        self._started = True

    async def _start(self, plugin_id: str) -> None:
        plugin = self._plugins[plugin_id]
        try:
            await plugin.start()
            self._running.add(plugin_id)
            print(f"[Registry] Started '{plugin_id}'", file=sys.stderr)
        except Exception as e:
            print(f"[Registry] Failed to start '{plugin_id}': {e}", file=sys.stderr)
            raise PluginError(f"Start failed for '{plugin_id}': {e}")

    async def stop_all(self) -> None:
        """Stop all plugins in reverse load order."""
        if not self._started:
            return

        for plugin_id in reversed(self._load_order):
            await self._stop(plugin_id)

        self._started = False

    async def _stop(self, plugin_id: str) -> None:
        if plugin_id not in self._running:
            return
        plugin = self._plugins[plugin_id]
        try:
            await plugin.stop()
            print(f"[Registry] Stopped '{plugin_id}'", file=sys.stderr)
        except Exception as e:
            print(f"[Registry] Error stopping '{plugin_id}': {e}", file=sys.stderr)
        finally:
            self._running.discard(plugin_id)

    async def load(self, plugin_class: Type[Plugin]) -> Plugin:
        """Register, configure and start a plugin while the host is running.

        Raises:
            PluginError: If registration, configuration or start fails
        """
        instance = self.register(plugin_class)
        plugin_id = plugin_class.meta.id

        try:
            for dep in plugin_class.meta.dependencies:
                if dep not in self._running:
                    raise PluginError(
                        f"Plugin '{plugin_id}' depends on '{dep}' which is not running"
                    )
            instance.configure(self._config)
            self._load_order.append(plugin_id)
            await self._start(plugin_id)
        except Exception as e:
            self._forget(plugin_id)
            if isinstance(e, PluginError):
                raise
            raise PluginError(f"Load failed for '{plugin_id}': {e}")

        return instance

    async def unload(self, plugin_id: str) -> None:
        """Stop and remove a plugin.

        Raises:
            PluginError: If the plugin is not registered
        """
        if plugin_id not in self._plugins:
            raise PluginError(f"Plugin '{plugin_id}' is not registered")
        await self._stop(plugin_id)
        self._forget(plugin_id)

    def _forget(self, plugin_id: str) -> None:
        self._plugins.pop(plugin_id, None)
        self._running.discard(plugin_id)
        if plugin_id in self._load_order:
            self._load_order.remove(plugin_id)
        for ids in self._capabilities.values():
            if plugin_id in ids:
                ids.remove(plugin_id)

    def list_plugins(self) -> list[dict]:
        """List all registered plugins with metadata."""
        return [
            {
                "id": plugin.meta.id,
                "version": plugin.meta.version,
                "capabilities": plugin.meta.capabilities,
                "dependencies": plugin.meta.dependencies,
                "priority": plugin.meta.priority,
                "running": plugin.meta.id in self._running,
            }
            for plugin in self.all_plugins()
        ]


# Global registry instance
_registry: Optional[PluginRegistry] = None


def get_registry() -> PluginRegistry:
    """Get the global plugin registry."""
    global _registry
    if _registry is None:
        _registry = PluginRegistry()
    return _registry


def reset_registry() -> None:
    """Reset the global registry (for testing).

    If the registry was started, call `await registry.stop_all()` first.
    """
    global _registry
    if _registry:
        _registry._started = False
    _registry = None
