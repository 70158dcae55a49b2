"""NetcodeTransport plugin - loopback replication of netcode messages."""

from .plugin import NetcodeTransportPlugin, create_plugin

__all__ = ["NetcodeTransportPlugin", "create_plugin"]
