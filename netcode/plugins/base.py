"""Plugin base class and metadata.

All host plugins must inherit from Plugin and define a PluginMeta.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class PluginMeta:
    """Plugin metadata - defines identity and capabilities."""

    id: str  # Unique identifier: "variables", "NetcodeTransport"
    version: str  # Semver: "1.0.0"
    capabilities: list[str] = field(default_factory=list)  # What it provides: ["timers"]
    dependencies: list[str] = field(
        default_factory=list
    )  # Required plugins: ["variables"]
    priority: int = 50  # Load order (lower = earlier)
    extension_points: list[str] = field(
        default_factory=list
    )  # Extension points this plugin defines: ["console.commands"]
    implements: dict[str, str] = field(
        default_factory=dict
    )  # Extension points this plugin implements: {"console.commands": "commands"}

    def __post_init__(self):
        if not self.id:
            raise ValueError("Plugin id is required")
        if not self.version:
            raise ValueError("Plugin version is required")
        if "[" in self.id or "]" in self.id:
            raise ValueError("Plugin id may not contain brackets")


class Plugin(ABC):
    """Base class for all plugins.

    Plugins must:
    1. Define a `meta` class attribute with PluginMeta
    2. Implement configure(), start(), stop()
    3. Optionally implement capability interfaces (VariableStore, Scheduler, ...)

    Example:
        class MyPlugin(Plugin):
            meta = PluginMeta(
                id="myplugin",
                version="1.0.0",
                dependencies=["variables"],
                priority=60,
            )

            def configure(self, config: dict) -> None:
                self._config = config.get("myplugin", {})

            async def start(self) -> None:
                pass

            async def stop(self) -> None:
                pass
    """

    meta: PluginMeta  # Must be defined by subclass

    @abstractmethod
    def configure(self, config: dict) -> None:
        """Receive configuration.

        Called before start() with the full config dict; plugins read their
        own section.
        """
        pass

    @abstractmethod
    async def start(self) -> None:
        """Initialize the plugin.

        Called after configure(), in priority order, on the host event loop.
        """
        pass

    @abstractmethod
    async def stop(self) -> None:
        """Clean up plugin resources. Called in reverse order."""
        pass
