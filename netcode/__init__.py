"""netcode - plugin-to-plugin messaging over one shared variable.

Public API:
- NetcodeManager: what a plugin embeds to send and receive messages
- Host: the collaborators a manager works against
- encode, decode, ParsedMessage: the "[tag][sender]body" wire format
- LoadDetector, Readiness: transport detection state machine
- Authority, get_authority: who may originate authoritative state
"""

from .authority import Authority, get_authority
from .detector import LoadDetector, Readiness
from .host import Host, HostError, LocalFileSystem
from .manager import NetcodeManager
from .netlog import NetLog
from .protocol import (
    MAX_MESSAGE_LENGTH,
    InvalidTag,
    MessageTooLong,
    NetcodeError,
    ParsedMessage,
    decode,
    encode,
    max_body_length,
)
from .router import MessageRouter

__all__ = [
    "Authority",
    "get_authority",
    "LoadDetector",
    "Readiness",
    "Host",
    "HostError",
    "LocalFileSystem",
    "NetcodeManager",
    "NetLog",
    "MessageRouter",
    "MAX_MESSAGE_LENGTH",
    "InvalidTag",
    "MessageTooLong",
    "NetcodeError",
    "ParsedMessage",
    "decode",
    "encode",
    "max_body_length",
]

__version__ = "0.1.0"
