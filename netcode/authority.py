"""Match authority - who may originate authoritative state.

The loopback/LAN transport only makes sense in LAN matches, so every other
topology reports no authority.
"""

from enum import Enum
from typing import Optional

from .plugins.interfaces import Session, SessionProvider


class Authority(Enum):
    NONE = 0
    CLIENT = 1
    HOST = 2


def current_session(session: SessionProvider) -> Optional[Session]:
    """Replay view first, then the online session, then the local match."""
    if session.in_replay():
        return session.replay_session()
    if session.in_online_game():
        return session.online_session()
    return session.local_session()


def get_authority(session: Optional[SessionProvider]) -> Authority:
    """Derive authority from the current session state. Never cached."""
    if session is None:
        return Authority.NONE

    match = current_session(session)
    if match is None or match.playlist is None:
        return Authority.NONE

    if match.playlist.lan:
        if session.in_online_game():
            return Authority.CLIENT
        return Authority.HOST

    return Authority.NONE
