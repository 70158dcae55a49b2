"""Wire format for messages multiplexed over one shared variable.

Outgoing (written by a plugin):   [tag]body
Replicated (added by transport):  [PH][tag]body  or  [PC][tag]body
Incoming (observed by plugins):   [tag][sender]body

Fields are never escaped. Tags must not contain brackets; the body is taken
verbatim after the last framed field, brackets included.
"""

from dataclasses import dataclass
from typing import Optional

MAX_MESSAGE_LENGTH = 128  # Hard ceiling of the shared variable

ROLE_HOST = "PH"
ROLE_CLIENT = "PC"
TRANSPORT_PREFIX_LENGTH = len("[" + ROLE_HOST + "]")


class NetcodeError(Exception):
    """Base error for netcode message handling."""

    pass


class InvalidTag(NetcodeError):
    """Plugin tag is empty or contains framing characters."""

    pass


class MessageTooLong(NetcodeError):
    """Framed message would not fit in the shared variable."""

    pass


@dataclass(frozen=True)
class ParsedMessage:
    """One decoded incoming message."""

    tag: str  # Plugin that owns the message
    sender: Optional[int]  # Sender address, None when unknown/host
    body: str  # Message content, verbatim


def validate_tag(tag: str) -> None:
    if not tag:
        raise InvalidTag("Plugin tag is required")
    if "[" in tag or "]" in tag:
        raise InvalidTag(f"Plugin tag may not contain brackets: {tag!r}")


def max_body_length(
    tag: str,
    max_length: int = MAX_MESSAGE_LENGTH,
    prefix_length: int = TRANSPORT_PREFIX_LENGTH,
) -> int:
    """Longest body that still fits once tag and transport prefix are added."""
    return max_length - prefix_length - len(tag) - 2


def encode(
    tag: str,
    body: str,
    max_length: int = MAX_MESSAGE_LENGTH,
    prefix_length: int = TRANSPORT_PREFIX_LENGTH,
) -> str:
    """Frame a message for the outgoing variable.

    A body that starts with a bracketed field is read back as the sender
    field on the receiving side.

    Args:
        tag: Local plugin tag
        body: Message content
        max_length: Ceiling of the shared variable
        prefix_length: Room reserved for the transport's role prefix

    Returns:
        "[tag]body"

    Raises:
        InvalidTag: If the tag is empty or contains brackets
        MessageTooLong: If the replicated frame would exceed max_length
    """
    validate_tag(tag)
    frame = "[" + tag + "]" + body
    total = prefix_length + len(frame)
    if total > max_length:
        raise MessageTooLong(
            f"Message is {total} characters with transport prefix "
            f"(limit {max_length}, body limit {max_body_length(tag, max_length, prefix_length)})"
        )
    return frame


def read_field(raw: str, start: int) -> tuple[str, int]:
    """Read one bracketed field at `start`.

    Returns (field, next cursor). When there is no "[" at the cursor or no
    closing "]" after it, the field is empty and the cursor stays put.
    """
    if start < len(raw) and raw[start] == "[":
        end = raw.find("]", start)
        if end != -1:
            return raw[start + 1 : end], end + 1
    return "", start


def parse_sender(field: str) -> Optional[int]:
    """Sender address from its decimal field; None for empty, 0 or junk."""
    if not field or field == "0":
        return None
    try:
        address = int(field)
    except ValueError:
        return None
    return address if address > 0 else None


def decode(raw: str) -> ParsedMessage:
    """Decode "[tag][sender]body". Never raises; bad fields come back empty."""
    raw = raw or ""
    tag, cursor = read_field(raw, 0)
    sender, cursor = read_field(raw, cursor)
    return ParsedMessage(tag=tag, sender=parse_sender(sender), body=raw[cursor:])


# --- Transport side ---


def frame_outgoing(role: str, frame: str) -> str:
    """Prefix an outgoing frame with the transport role ("PH" or "PC")."""
    return "[" + role + "]" + frame


def relay_frame(replicated: str, sender: Optional[int] = None) -> str:
    """Turn a replicated "[role][tag]body" into the incoming "[tag][sender]body".

    The leading role field is dropped. A missing tag field is kept empty so
    receivers discard the message.
    """
    _, cursor = read_field(replicated, 0)
    tag, cursor = read_field(replicated, cursor)
    address = str(sender) if sender else ""
    return "[" + tag + "][" + address + "]" + replicated[cursor:]
