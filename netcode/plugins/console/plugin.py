"""Console plugin - runs host command lines.

Built-in commands:
  plugin load <package>      import plugins/<package>/plugin.py and start it
  plugin unload <id>         stop and remove a plugin
  plugin install <package>   copy <package> from the plugin repository
  plugin list                show registered plugins
  set <variable> <value>     write a shared variable
  get <variable>             read a shared variable

Other plugins add commands by implementing the "console.commands" extension
point with a method returning {name: callable(args) -> str | None}.

Priority: 15 (after variables and timers)
"""

import asyncio
import shlex
import shutil
import sys
from typing import Callable, Optional

from .. import load_plugin_file
from ..base import Plugin, PluginMeta
from ..config import NetcodeConfig
from ..interfaces import CommandError, CommandRunner, VariableError
from ..registry import get_registry

Command = Callable[[list[str]], Optional[str]]


class ConsolePlugin(Plugin, CommandRunner):
    meta = PluginMeta(
        id="console",
        version="1.0.0",
        capabilities=["console"],
        dependencies=["variables"],
        extension_points=[
            "console.commands",  # () -> dict[str, Command]
        ],
        priority=15,
    )

    def __init__(self):
        self._registry = None  # Set in start() via get_registry()
        self._config = NetcodeConfig()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._tasks: set[asyncio.Task] = set()
        self.output: list[str] = []

    def configure(self, config: dict) -> None:
        self._config = NetcodeConfig.from_dict(config)

    async def start(self) -> None:
        if self._registry is None:
            self._registry = get_registry()
        self._loop = asyncio.get_running_loop()

    async def stop(self) -> None:
        self._loop = None

    # --- CommandRunner ---

    def run_command(self, line: str) -> None:
        """Run one command line. Problems are reported, never raised."""
        try:
            args = shlex.split(line)
        except ValueError as e:
            self._print(f"Error: {e}")
            return
        if not args:
            return

        name, rest = args[0], args[1:]
        command = self.commands().get(name)
        if command is None:
            self._print(f"Unknown command: {name}")
            return

        try:
            result = command(rest)
        except (CommandError, VariableError) as e:
            self._print(f"Error: {e}")
            return
        except Exception as e:
            self._print(f"Error in '{name}': {e}")
            return

        if result:
            self._print(result)

    def commands(self) -> dict[str, Command]:
        """Built-ins plus every command contributed by other plugins."""
        table: dict[str, Command] = {
            "plugin": self._plugin_command,
            "set": self._set_command,
            "get": self._get_command,
        }
        if not self._registry:
            return table

        for plugin_id, plugin, method_name in self._registry.get_implementations(
            "console.commands"
        ):
            try:
                table.update(getattr(plugin, method_name)())
            except Exception as e:
                print(
                    f"[Console] Error getting commands from {plugin_id}: {e}",
                    file=sys.stderr,
                )
        return table

    def _print(self, text: str) -> None:
        self.output.append(text)
        print(f"[Console] {text}", file=sys.stderr)

    # --- Built-in commands ---

    def _plugin_command(self, args: list[str]) -> Optional[str]:
        if not args:
            raise CommandError("usage: plugin load|unload|install|list [name]")
        action, names = args[0], args[1:]

        if action == "list":
            return self._list_plugins()
        if len(names) != 1:
            raise CommandError(f"usage: plugin {action} <name>")
        name = names[0]

        if action == "load":
            return self._load_plugin(name)
        if action == "unload":
            return self._unload_plugin(name)
        if action == "install":
            return self._install_plugin(name)
        raise CommandError(f"Unknown plugin action: {action}")

    def _require_host(self):
        if self._registry is None or self._loop is None:
            raise CommandError("Console is not started")
        return self._registry, self._loop

    def _run_async(self, coro, description: str) -> None:
        _, loop = self._require_host()
        task = loop.create_task(coro)
        self._tasks.add(task)

        def _done(t: asyncio.Task) -> None:
            self._tasks.discard(t)
            if not t.cancelled() and t.exception() is not None:
                self._print(f"{description} failed: {t.exception()}")

        task.add_done_callback(_done)

    def _load_plugin(self, package: str) -> str:
        registry, _ = self._require_host()
        try:
            plugin_class = load_plugin_file(self._config.plugins_path, package)
        except Exception as e:
            raise CommandError(f"Cannot load {package}: {e}")

        if registry.get(plugin_class.meta.id) is not None:
            return f"Plugin {plugin_class.meta.id} is already loaded"

        self._run_async(registry.load(plugin_class), f"Loading {package}")
        return f"Loading {plugin_class.meta.id}"

    def _unload_plugin(self, plugin_id: str) -> str:
        registry, _ = self._require_host()
        if registry.get(plugin_id) is None:
            raise CommandError(f"Plugin {plugin_id} is not loaded")
        self._run_async(registry.unload(plugin_id), f"Unloading {plugin_id}")
        return f"Unloading {plugin_id}"

    def _install_plugin(self, package: str) -> str:
        source = self._config.repository_path / package
        target = self._config.plugins_path / package
        if target.exists():
            return f"{package} is already installed"
        if not (source / "plugin.py").exists():
            raise CommandError(f"{package} not found in {self._config.repository_path}")
        try:
            shutil.copytree(source, target)
        except OSError as e:
            raise CommandError(f"Install of {package} failed: {e}")
        return f"Installed {package} to {target}"

    def _list_plugins(self) -> str:
        if not self._registry:
            return "No registry"
        lines = []
        for info in self._registry.list_plugins():
            state = "running" if info["running"] else "stopped"
            lines.append(f"{info['id']} {info['version']} ({state})")
        return "\n".join(lines) or "No plugins"

    def _variables(self):
        plugin = self._registry.get_by_capability("variables") if self._registry else None
        if plugin is None:
            raise CommandError("No variable store")
        return plugin

    def _set_command(self, args: list[str]) -> None:
        if len(args) < 2:
            raise CommandError("usage: set <variable> <value>")
        self._variables().set(args[0], " ".join(args[1:]))

    def _get_command(self, args: list[str]) -> str:
        if len(args) != 1:
            raise CommandError("usage: get <variable>")
        return f"{args[0]} = {self._variables().get(args[0])!r}"


def create_plugin() -> ConsolePlugin:
    return ConsolePlugin()
