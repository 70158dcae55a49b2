"""Message router - send path and incoming dispatch for one plugin tag."""

from typing import Callable, Optional

from .netlog import NetLog
from .plugins.interfaces import LogSink, SessionProvider, VariableStore
from .protocol import MAX_MESSAGE_LENGTH, NetcodeError, ParsedMessage, decode, encode

Handler = Callable[[str, Optional[int]], None]


class MessageRouter:
    """Routes messages between one plugin and the shared variables.

    Incoming messages whose tag differs from ours belong to other plugins
    sharing the transport and are dropped without a word.
    """

    def __init__(
        self,
        tag: str,
        handler: Handler,
        variables: VariableStore,
        netlog: NetLog,
        sink: LogSink,
        is_ready: Callable[[], bool],
        incoming: str,
        outgoing: str,
        max_length: int = MAX_MESSAGE_LENGTH,
        session: Optional[SessionProvider] = None,
    ):
        self.tag = tag
        self._handler = handler
        self._variables = variables
        self._netlog = netlog
        self._sink = sink
        self._is_ready = is_ready
        self._incoming = incoming
        self._outgoing = outgoing
        self._max_length = max_length
        self._session = session

    def _check_ready(self, function_name: str) -> bool:
        if not self._is_ready():
            self._sink.log(
                f"NetcodeManager function ({function_name}) failed. "
                "NetcodeTransport is not loaded."
            )
            return False
        return True

    def send(self, body: str) -> bool:
        """Write a message to the outgoing variable.

        Fire-and-forget: True only means the variable was written.
        """
        if not self._check_ready("send"):
            return False

        try:
            frame = encode(self.tag, body, max_length=self._max_length)
        except NetcodeError as e:
            self._sink.log(f"Message not sent: {e}")
            return False

        self._netlog.c(f"Sending message: {frame}")
        self._variables.set(self._outgoing, frame)
        return True

    def on_incoming_changed(self) -> None:
        """Change callback for the incoming variable."""
        if not self._check_ready("on_incoming_changed"):
            return

        raw = self._variables.get(self._incoming)
        if not raw:
            return  # Cleared by the transport
        self._netlog.c(f"Receiving message: {raw}")

        message = decode(raw)
        if message.tag != self.tag:
            return

        self._log_message(message)
        self._handler(message.body, message.sender)

    def _sender_name(self, sender: Optional[int]) -> str:
        if sender is None:
            return "none"
        name = self._session.player_name(sender) if self._session else None
        return name or str(sender)

    def _log_message(self, message: ParsedMessage) -> None:
        if not self._netlog.enabled("C"):
            return
        self._netlog.c(
            "Parsed message:\n"
            f"Tag: {message.tag}\n"
            f"Sender: {self._sender_name(message.sender)}\n"
            f"Body: {message.body}"
        )
