"""Tests for config plugin."""

import os
from pathlib import Path

import yaml

from netcode.plugins.config.plugin import (
    PLUGINS_DIR,
    ConfigPlugin,
    NetcodeConfig,
    create_plugin,
)


class TestNetcodeConfigDefaults:
    """Test default configuration values."""

    def test_detection_defaults(self):
        config = NetcodeConfig()
        assert config.max_attempts == 20
        assert config.retry_delay == 2.0
        assert config.max_length == 128

    def test_transport_defaults(self):
        config = NetcodeConfig()
        assert config.transport_name == "NetcodeTransport"
        assert config.command(config.load_command) == "plugin load netcode_transport"
        assert config.command(config.install_command) == "plugin install netcode_transport"

    def test_variable_defaults(self):
        config = NetcodeConfig()
        assert config.log_level_var == "netcode_log_level"
        assert config.incoming_var == "netcode_message_in"
        assert config.outgoing_var == "netcode_message_out"

    def test_default_paths(self):
        config = NetcodeConfig()
        assert config.plugins_path == PLUGINS_DIR
        assert config.transport_artifact == PLUGINS_DIR / "netcode_transport" / "plugin.py"
        assert config.transport_artifact.exists()


class TestNetcodeConfigFromDict:
    """Test NetcodeConfig.from_dict() method."""

    def test_from_empty_dict(self):
        config = NetcodeConfig.from_dict({})
        assert config.max_attempts == 20

    def test_from_partial_dict(self):
        data = {
            "netcode": {
                "max_attempts": "5",
                "retry_delay": 0.5,
                "transport": {"package": "relay"},
                "variables": {"incoming": "rx"},
            }
        }
        config = NetcodeConfig.from_dict(data)
        assert config.max_attempts == 5
        assert config.retry_delay == 0.5
        assert config.transport_package == "relay"
        assert config.transport_name == "NetcodeTransport"  # Default
        assert config.incoming_var == "rx"

    def test_plugin_lists(self):
        config = NetcodeConfig.from_dict(
            {"plugins": {"enabled": ["chat"], "disabled": ["match"]}}
        )
        assert config.enabled_plugins == ["chat"]
        assert config.disabled_plugins == ["match"]

    def test_paths(self):
        config = NetcodeConfig.from_dict(
            {"paths": {"plugins": "/opt/plugins", "repository": "/opt/repo"}}
        )
        assert config.plugins_path == Path("/opt/plugins")
        assert config.transport_artifact == Path("/opt/plugins/netcode_transport/plugin.py")
        assert config.repository_path == Path("/opt/repo")

    def test_env_var_expansion(self):
        os.environ["NETCODE_TEST_PACKAGE"] = "relay"
        try:
            data = {"netcode": {"transport": {"package": "${NETCODE_TEST_PACKAGE}"}}}
            config = NetcodeConfig.from_dict(data)
            assert config.transport_package == "relay"
        finally:
            del os.environ["NETCODE_TEST_PACKAGE"]

    def test_env_var_default(self):
        data = {"netcode": {"transport": {"name": "${NONEXISTENT_VAR:-Relay}"}}}
        config = NetcodeConfig.from_dict(data)
        assert config.transport_name == "Relay"

    def test_get_plugin_config(self):
        data = {"chat": {"max_history": 10}, "match": {"players": {"1": "Alice"}}}
        config = NetcodeConfig.from_dict(data)
        assert config.get_plugin_config("chat") == {"max_history": 10}
        assert config.get_plugin_config("logger") == {}

    def test_custom_command_templates(self):
        config = NetcodeConfig.from_dict(
            {"netcode": {"commands": {"load": "load {name} from {package}"}}}
        )
        assert config.command(config.load_command) == (
            "load NetcodeTransport from netcode_transport"
        )


class TestValidate:
    def test_defaults_are_valid(self):
        assert NetcodeConfig().validate() == []

    def test_bad_numbers(self):
        errors = NetcodeConfig(max_attempts=0, retry_delay=0, max_length=6).validate()
        assert len(errors) == 3

    def test_variables_must_be_distinct(self):
        config = NetcodeConfig(incoming_var="shared", outgoing_var="shared")
        assert config.validate() == ["netcode.variables entries must be distinct"]

    def test_variables_must_not_be_empty(self):
        config = NetcodeConfig(log_level_var="")
        assert config.validate() == ["netcode.variables entries must not be empty"]

    def test_transport_identity_required(self):
        assert NetcodeConfig(transport_name="").validate() == [
            "netcode.transport needs a name and a package"
        ]


class TestNetcodeConfigLoad:
    """Test loading config from YAML files."""

    def test_load_from_yaml_file(self, tmp_path):
        path = tmp_path / "netcode.yml"
        path.write_text(yaml.dump({"netcode": {"max_attempts": 3}}))

        config = NetcodeConfig.load(path)
        assert config.max_attempts == 3

    def test_load_empty_file(self, tmp_path):
        path = tmp_path / "netcode.yml"
        path.write_text("")

        assert NetcodeConfig.load(path).max_attempts == 20


class TestConfigPlugin:
    """Test ConfigPlugin class."""

    def test_create_plugin(self):
        assert isinstance(create_plugin(), ConfigPlugin)

    def test_plugin_meta(self):
        plugin = create_plugin()
        assert plugin.meta.id == "config"
        assert plugin.meta.priority == 1
        assert "config" in plugin.meta.capabilities

    def test_configure_from_dict(self):
        plugin = create_plugin()
        plugin.configure({"netcode": {"max_length": 64}, "chat": {"max_history": 5}})

        assert plugin.get_config().max_length == 64
        assert plugin.get_plugin_config("chat") == {"max_history": 5}

    def test_plugin_config_before_configure(self):
        assert create_plugin().get_plugin_config("chat") == {}

    def test_configure_finds_local_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        Path("netcode.yml").write_text(yaml.dump({"netcode": {"retry_delay": 0.25}}))

        plugin = create_plugin()
        plugin.configure({})

        assert plugin.get_config().retry_delay == 0.25

