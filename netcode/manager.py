"""NetcodeManager - what a plugin embeds to talk to its peers.

Construct it when the plugin starts. Detection of the transport begins
immediately; messages can be sent once `is_ready` is True.

Example:
    class ChatPlugin(Plugin):
        async def start(self):
            host = Host.from_registry(get_registry())
            self._netcode = NetcodeManager(host, "chat", self.on_message)

        def on_message(self, body: str, sender: Optional[int]) -> None:
            ...

Messages are limited to 128 characters after the transport adds
"[PC][tag]", so a body may use 122 minus len(tag) characters.
"""

from typing import Optional

from .authority import Authority, get_authority
from .detector import LoadDetector, Readiness
from .host import Host
from .netlog import NetLog
from .plugins.config import NetcodeConfig
from .protocol import max_body_length, validate_tag
from .router import Handler, MessageRouter


class NetcodeManager:
    def __init__(
        self,
        host: Host,
        tag: str,
        handler: Handler,
        config: Optional[NetcodeConfig] = None,
        autostart: bool = True,
    ):
        validate_tag(tag)
        self.host = host
        self.config = config or NetcodeConfig()
        self.netlog = NetLog(host.log)

        self.router = MessageRouter(
            tag,
            handler,
            variables=host.variables,
            netlog=self.netlog,
            sink=host.log,
            is_ready=lambda: self.detector.is_ready,
            incoming=self.config.incoming_var,
            outgoing=self.config.outgoing_var,
            max_length=self.config.max_length,
            session=host.session,
        )
        self.detector = LoadDetector(
            host, self.config, self.netlog, self.router.on_incoming_changed
        )

        if autostart:
            self.detector.start(reset_attempts=True)

    @property
    def tag(self) -> str:
        return self.router.tag

    @property
    def state(self) -> Readiness:
        return self.detector.state

    @property
    def is_ready(self) -> bool:
        return self.detector.is_ready

    @property
    def max_body_length(self) -> int:
        return max_body_length(self.tag, self.config.max_length)

    def send(self, body: str) -> bool:
        """Send a message to every peer running this plugin."""
        return self.router.send(body)

    def authority(self) -> Authority:
        """Whether this process should originate authoritative state."""
        return get_authority(self.host.session)

    def retry(self) -> None:
        """Restart detection with a fresh attempt budget."""
        self.detector.start(reset_attempts=True)

    def close(self) -> None:
        """Detach from the shared variables. Call when the owning plugin stops."""
        self.detector.close()
