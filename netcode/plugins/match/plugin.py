"""Match plugin - the session this process is hosting, joining or watching.

Console command:
  match host [lan|online]   host a match locally
  match join                join someone else's LAN match
  match replay              watch a replay of the current match
  match leave               back to no match
  match status              show authority-relevant state

Priority: 20
"""

from typing import Optional

from ..base import Plugin, PluginMeta
from ..interfaces import CommandError, Playlist, Session, SessionProvider

LAN = Playlist(name="lan", lan=True)
ONLINE = Playlist(name="online", lan=False)


class MatchPlugin(Plugin, SessionProvider):
    meta = PluginMeta(
        id="match",
        version="1.0.0",
        capabilities=["session"],
        implements={"console.commands": "commands"},
        priority=20,
    )

    def __init__(self):
        self._replay: Optional[Session] = None
        self._online: Optional[Session] = None
        self._local: Optional[Session] = None
        self._players: dict[int, str] = {}

    def configure(self, config: dict) -> None:
        players = config.get("match", {}).get("players", {})
        self._players = {int(address): str(name) for address, name in players.items()}

    async def start(self) -> None:
        pass

    async def stop(self) -> None:
        self.leave()

    # --- State changes ---

    def host(self, playlist: Playlist = LAN) -> None:
        self.leave()
        self._local = Session(playlist=playlist)

    def join(self, playlist: Playlist = LAN) -> None:
        self.leave()
        self._online = Session(playlist=playlist)

    def watch_replay(self) -> None:
        current = self._online or self._local
        self._replay = Session(playlist=current.playlist if current else None)

    def leave(self) -> None:
        self._replay = None
        self._online = None
        self._local = None

    def add_player(self, address: int, name: str) -> None:
        self._players[address] = name

    # --- SessionProvider ---

    def in_replay(self) -> bool:
        return self._replay is not None

    def replay_session(self) -> Optional[Session]:
        return self._replay

    def in_online_game(self) -> bool:
        return self._online is not None

    def online_session(self) -> Optional[Session]:
        return self._online

    def local_session(self) -> Optional[Session]:
        return self._local

    def player_name(self, address: int) -> Optional[str]:
        return self._players.get(address)

    # --- Console ---

    def commands(self) -> dict:
        return {"match": self._match_command}

    def _match_command(self, args: list[str]) -> Optional[str]:
        action = args[0] if args else "status"

        if action == "host":
            kind = args[1] if len(args) > 1 else "lan"
            if kind not in ("lan", "online"):
                raise CommandError("usage: match host [lan|online]")
            self.host(LAN if kind == "lan" else ONLINE)
        elif action == "join":
            self.join(LAN)
        elif action == "replay":
            self.watch_replay()
        elif action == "leave":
            self.leave()
        elif action != "status":
            raise CommandError(f"Unknown match action: {action}")

        return self.describe()

    def describe(self) -> str:
        if self._replay:
            where = "watching replay"
        elif self._online:
            where = "joined match"
        elif self._local:
            where = "hosting match"
        else:
            return "No match"
        session = self._replay or self._online or self._local
        playlist = session.playlist.name if session.playlist else "none"
        return f"{where} (playlist: {playlist})"


def create_plugin() -> MatchPlugin:
    return MatchPlugin()
