"""netcode CLI - inspect the wire format and run a local host."""

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import click
import yaml

from .detector import TERMINAL
from .protocol import NetcodeError, decode, encode


# --- Config Utilities ---


def _find_config_path(explicit_path: Optional[str] = None) -> Path:
    """Explicit path, else ./netcode.yml, else ~/.netcode/netcode.yml."""
    if explicit_path:
        return Path(explicit_path)
    local_config = Path("netcode.yml")
    if local_config.exists():
        return local_config
    return Path.home() / ".netcode" / "netcode.yml"


def load_raw_config(explicit_path: Optional[str] = None) -> dict:
    """Load the YAML config as a dict ({} when there is no file)."""
    config_path = _find_config_path(explicit_path)
    if not config_path.exists():
        return {}
    with open(config_path) as f:
        raw_config = yaml.safe_load(f) or {}
    print(f"[Config] Loaded from {config_path}", file=sys.stderr)
    return raw_config


def _plugins_dir(plugins: Optional[str], raw_config: dict) -> Path:
    from .plugins.config import NetcodeConfig

    if plugins:
        return Path(plugins)
    return NetcodeConfig.from_dict(raw_config).plugins_path


# --- CLI Groups ---


@click.group()
@click.version_option(version="0.1.0", prog_name="netcode")
def cli():
    """netcode - plugin messaging over a shared variable."""
    pass


# --- Wire Format ---


@cli.command("encode")
@click.argument("tag")
@click.argument("body")
def encode_command(tag: str, body: str):
    """Frame BODY for plugin TAG as it is written to the outgoing variable."""
    try:
        click.echo(encode(tag, body))
    except NetcodeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command("decode")
@click.argument("raw")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def decode_command(raw: str, as_json: bool):
    """Decode an incoming "[tag][sender]body" value."""
    message = decode(raw)
    if as_json:
        click.echo(
            json.dumps(
                {"tag": message.tag, "sender": message.sender, "body": message.body}
            )
        )
        return
    click.echo(f"tag:    {message.tag}")
    click.echo(f"sender: {message.sender if message.sender is not None else '-'}")
    click.echo(f"body:   {message.body}")


# --- Host ---


@cli.command("plugins")
@click.option("--plugins", "-p", type=click.Path(exists=True), help="Plugins directory")
@click.option("--config", "-c", type=click.Path(exists=True), help="Config file path")
def list_plugins(plugins: Optional[str], config: Optional[str]):
    """List plugins available to the host."""
    from .plugins import discover_plugins

    plugins_dir = _plugins_dir(plugins, load_raw_config(config))
    classes = discover_plugins(plugins_dir)
    if not classes:
        click.echo(f"No plugins in {plugins_dir}")
        return
    for plugin_class in sorted(classes, key=lambda c: c.meta.priority):
        meta = plugin_class.meta
        caps = ", ".join(meta.capabilities) or "-"
        click.echo(f"{meta.priority:>3}  {meta.id} {meta.version}  [{caps}]")


async def _chat_once(
    message: str, raw_config: dict, plugins_dir: Path, timeout: float
) -> list[str]:
    """Boot a host, wait for netcode, say one line, return what came back."""
    from .plugins import init_plugins, reset_registry

    reset_registry()
    registry = await init_plugins(plugins_dir, config=raw_config)
    try:
        chat = registry.get("chat")
        if chat is None or chat.netcode is None:
            raise click.ClickException("The chat plugin is not loaded")

        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not chat.netcode.is_ready:
            state = chat.netcode.state
            if state in TERMINAL or loop.time() > deadline:
                raise click.ClickException(f"netcode is not ready ({state.value})")
            await asyncio.sleep(0.05)

        if not chat.say(message):
            raise click.ClickException("Message not sent")
        return [line.text for line in chat.history]
    finally:
        await registry.stop_all()
        reset_registry()


@cli.command("chat")
@click.argument("message")
@click.option("--config", "-c", type=click.Path(exists=True), help="Config file path")
@click.option("--plugins", "-p", type=click.Path(exists=True), help="Plugins directory")
@click.option("--timeout", "-t", default=10.0, show_default=True, help="Seconds to wait for the transport")
@click.option("--debug", "-d", is_flag=True, help="Enable debug logging")
def chat(message: str, config: Optional[str], plugins: Optional[str], timeout: float, debug: bool):
    """Send MESSAGE through a local host and print what the transport delivered."""
    raw_config = load_raw_config(config)
    if debug:
        raw_config.setdefault("logger", {})["level"] = "debug"
        raw_config.setdefault("netcode_transport", {})["log_level"] = 3

    received = asyncio.run(
        _chat_once(message, raw_config, _plugins_dir(plugins, raw_config), timeout)
    )
    if not received:
        click.echo("Nothing received", err=True)
        sys.exit(1)
    for line in received:
        click.echo(line)


# --- Config Commands ---


@cli.group()
def config():
    """Configuration management."""
    pass


@config.command("show")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Config file path")
def config_show(config_path: Optional[str]):
    """Show effective netcode settings."""
    from .plugins.config import NetcodeConfig

    cfg = NetcodeConfig.from_dict(load_raw_config(config_path))
    settings = {
        "netcode": {
            "max_attempts": cfg.max_attempts,
            "retry_delay": cfg.retry_delay,
            "max_length": cfg.max_length,
            "transport": {"name": cfg.transport_name, "package": cfg.transport_package},
            "commands": {"load": cfg.load_command, "install": cfg.install_command},
            "variables": {
                "log_level": cfg.log_level_var,
                "incoming": cfg.incoming_var,
                "outgoing": cfg.outgoing_var,
            },
        },
        "paths": {
            "plugins": str(cfg.plugins_path),
            "repository": str(cfg.repository_path),
        },
    }
    click.echo(yaml.dump(settings, default_flow_style=False, sort_keys=False))


@config.command("validate")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Config file path")
def config_validate(config_path: Optional[str]):
    """Validate configuration."""
    from .plugins.config import NetcodeConfig

    try:
        cfg = NetcodeConfig.from_dict(load_raw_config(config_path))
    except (ValueError, yaml.YAMLError) as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)

    errors = cfg.validate()
    if errors:
        click.echo("Configuration errors:", err=True)
        for err in errors:
            click.echo(f"  - {err}", err=True)
        sys.exit(1)
    click.echo("Configuration is valid ✓")


def main():
    cli()


if __name__ == "__main__":
    main()
