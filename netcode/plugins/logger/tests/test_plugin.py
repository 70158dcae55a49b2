"""Tests for logger plugin."""

from .. import create_plugin


class TestLoggerPlugin:
    def test_log_writes_netcode_line(self, capsys):
        plugin = create_plugin()
        plugin.configure({})

        plugin.log("(A 0.001s) Ready to go.")

        err = capsys.readouterr().err
        assert "[I] [netcode] (A 0.001s) Ready to go." in err

    def test_level_filter(self, capsys):
        plugin = create_plugin()
        plugin.configure({"logger": {"level": "warn"}})

        plugin.log("hidden")
        plugin.debug("chat", "hidden too")
        plugin.warn("chat", "shown")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "[W] [chat] shown" in err

    def test_extra_fields_as_json(self, capsys):
        plugin = create_plugin()
        plugin.configure({"logger": {"level": "debug"}})

        plugin.error("transport", "dropped", length=130)

        assert '{"length": 130}' in capsys.readouterr().err

    def test_provides_logging_capability(self):
        assert create_plugin().meta.capabilities == ["logging"]
