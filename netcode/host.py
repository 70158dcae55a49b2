"""Host - the collaborators a NetcodeManager works against.

In a running process every collaborator is a host plugin looked up by
capability. Tests build a Host directly from fakes.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .plugins.interfaces import (
    CommandRunner,
    ComponentRegistry,
    FileSystem,
    LogSink,
    Scheduler,
    SessionProvider,
    VariableStore,
)


class HostError(Exception):
    """A required host collaborator is missing."""

    pass


class LocalFileSystem(FileSystem):
    def exists(self, path) -> bool:
        return Path(path).exists()


@dataclass
class Host:
    registry: ComponentRegistry
    variables: VariableStore
    scheduler: Scheduler
    commands: CommandRunner
    log: LogSink
    filesystem: FileSystem
    session: Optional[SessionProvider] = None

    @classmethod
    def from_registry(cls, registry) -> "Host":
        """Resolve collaborators from started host plugins.

        Args:
            registry: PluginRegistry with the host plugins registered

        Raises:
            HostError: If a required capability has no plugin
        """

        def require(capability: str):
            plugin = registry.get_by_capability(capability)
            if plugin is None:
                raise HostError(f"No plugin provides '{capability}'")
            return plugin

        return cls(
            registry=registry,
            variables=require("variables"),
            scheduler=require("timers"),
            commands=require("console"),
            log=require("logging"),
            filesystem=LocalFileSystem(),
            session=registry.get_by_capability("session"),
        )
