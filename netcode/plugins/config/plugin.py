"""Config plugin - loads and provides configuration.

Priority: 01 (very early, provides config to other plugins)
"""

import os
import re
import sys
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Any

import yaml

from ..base import Plugin, PluginMeta

PLUGINS_DIR = Path(__file__).resolve().parent.parent


def _expand_env_vars(value: Any) -> Any:
    """Recursively expand ${VAR} and ${VAR:-default} in strings."""
    if isinstance(value, str):
        pattern = r"\$\{([^}:]+)(?::-([^}]*))?\}"

        def replacer(match):
            env_value = os.environ.get(match.group(1))
            if env_value is not None:
                return env_value
            return match.group(2) or ""

        return re.sub(pattern, replacer, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(v) for v in value]
    return value


@dataclass
class NetcodeConfig:
    """Parsed configuration object."""

    # Which plugins are enabled
    enabled_plugins: list[str] = field(default_factory=list)
    disabled_plugins: list[str] = field(default_factory=list)

    # Load detection
    max_attempts: int = 20
    retry_delay: float = 2.0
    max_length: int = 128

    # Transport identity and how to get it loaded
    transport_name: str = "NetcodeTransport"
    transport_package: str = "netcode_transport"
    load_command: str = "plugin load {package}"
    install_command: str = "plugin install {package}"

    # Contract variables exposed by the transport
    log_level_var: str = "netcode_log_level"
    incoming_var: str = "netcode_message_in"
    outgoing_var: str = "netcode_message_out"

    # Paths
    plugins_path: Path = field(default_factory=lambda: PLUGINS_DIR)
    repository_path: Path = field(default_factory=lambda: Path("./plugin-repository"))

    # Raw config for plugin access
    _raw: dict = field(default_factory=dict)

    def get_plugin_config(self, plugin_id: str) -> dict:
        """Get config section for a specific plugin."""
        return self._raw.get(plugin_id, {})

    @property
    def transport_artifact(self) -> Path:
        """File whose presence means the transport is installed."""
        return self.plugins_path / self.transport_package / "plugin.py"

    def command(self, template: str) -> str:
        return template.format(
            package=self.transport_package, name=self.transport_name
        )

    def validate(self) -> list[str]:
        """Return a list of problems (empty when valid)."""
        errors = []
        if self.max_attempts < 1:
            errors.append("netcode.max_attempts must be at least 1")
        if self.retry_delay <= 0:
            errors.append("netcode.retry_delay must be positive")
        if self.max_length <= 6:
            errors.append("netcode.max_length leaves no room for a message")
        names = [self.log_level_var, self.incoming_var, self.outgoing_var]
        if not all(names):
            errors.append("netcode.variables entries must not be empty")
        elif len(set(names)) != len(names):
            errors.append("netcode.variables entries must be distinct")
        if not self.transport_name or not self.transport_package:
            errors.append("netcode.transport needs a name and a package")
        return errors

    @classmethod
    def from_dict(cls, data: dict) -> "NetcodeConfig":
        """Create config from dictionary."""
        data = _expand_env_vars(data)

        plugins_section = data.get("plugins", {})
        netcode = data.get("netcode", {})
        transport = netcode.get("transport", {})
        commands = netcode.get("commands", {})
        variables = netcode.get("variables", {})
        paths = data.get("paths", {})

        return cls(
            enabled_plugins=plugins_section.get("enabled", []),
            disabled_plugins=plugins_section.get("disabled", []),
            max_attempts=int(netcode.get("max_attempts", 20)),
            retry_delay=float(netcode.get("retry_delay", 2.0)),
            max_length=int(netcode.get("max_length", 128)),
            transport_name=transport.get("name", "NetcodeTransport"),
            transport_package=transport.get("package", "netcode_transport"),
            load_command=commands.get("load", "plugin load {package}"),
            install_command=commands.get("install", "plugin install {package}"),
            log_level_var=variables.get("log_level", "netcode_log_level"),
            incoming_var=variables.get("incoming", "netcode_message_in"),
            outgoing_var=variables.get("outgoing", "netcode_message_out"),
            plugins_path=Path(paths.get("plugins", PLUGINS_DIR)),
            repository_path=Path(paths.get("repository", "./plugin-repository")),
            _raw=data,
        )

    @classmethod
    def load(cls, path: Path) -> "NetcodeConfig":
        """Load config from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)


class ConfigPlugin(Plugin):
    """Configuration management plugin."""

    meta = PluginMeta(
        id="config",
        version="1.0.0",
        capabilities=["config"],
        dependencies=[],
        priority=1,  # Load first
    )

    def __init__(self):
        self._config: Optional[NetcodeConfig] = None
        self._config_path: Optional[Path] = None

    def configure(self, config: dict) -> None:
        """Use the dict handed to the registry, or find a config file."""
        if config:
            self._config = NetcodeConfig.from_dict(config)
        else:
            self._config = self._load_config_file()

    async def start(self) -> None:
        if self._config_path:
            print(f"[Config] Loaded from {self._config_path}", file=sys.stderr)

    async def stop(self) -> None:
        pass

    def _load_config_file(self) -> NetcodeConfig:
        """Load configuration from file(s)."""
        config = NetcodeConfig()

        # Try home directory config
        home_config = Path.home() / ".netcode" / "netcode.yml"
        if home_config.exists():
            config = NetcodeConfig.load(home_config)
            self._config_path = home_config

        # Try local netcode.yml (overrides home)
        local_config = Path("netcode.yml")
        if local_config.exists():
            config = NetcodeConfig.load(local_config)
            self._config_path = local_config

        return config

    def get_config(self) -> NetcodeConfig:
        """Get the loaded configuration."""
        if self._config is None:
            self._config = self._load_config_file()
        return self._config

    def get_plugin_config(self, plugin_id: str) -> dict:
        """Get config section for a specific plugin."""
        if self._config is None:
            return {}
        return self._config.get_plugin_config(plugin_id)


# Factory function for plugin discovery
def create_plugin() -> ConfigPlugin:
    return ConfigPlugin()
