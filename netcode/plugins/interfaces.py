"""Collaborator interfaces for the netcode core.

Host plugins that provide a capability must implement the matching interface,
so the core can run against the real host or against in-memory fakes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional


# --- Plugin Registry Interface ---


class ComponentRegistry(ABC):
    """Anything that can list the currently loaded components."""

    @abstractmethod
    def list_loaded(self) -> list[dict]:
        """List loaded components.

        Returns:
            List of dicts with at least a "name" key
        """
        pass


# --- Filesystem Interface ---


class FileSystem(ABC):
    @abstractmethod
    def exists(self, path) -> bool:
        pass


# --- Command Interface ---


class CommandError(Exception):
    """Error from a console command."""

    pass


class CommandRunner(ABC):
    """Interface for the host console (capability "console")."""

    @abstractmethod
    def run_command(self, line: str) -> None:
        """Run a command line. Fire-and-forget, nothing is returned."""
        pass


# --- Scheduler Interface ---


class Scheduler(ABC):
    """Interface for deferred callbacks (capability "timers")."""

    @abstractmethod
    def after(self, delay: float, callback: Callable[[], None]) -> None:
        """Run callback once after `delay` seconds. Not cancellable."""
        pass


# --- Shared Variable Interface ---


class VariableError(Exception):
    """Unknown or invalid shared variable."""

    pass


class VariableStore(ABC):
    """Interface for shared variables (capability "variables").

    Values are strings. Change callbacks fire when a value actually changes,
    never when a callback is first attached.
    """

    @abstractmethod
    def exists(self, name: str) -> bool:
        pass

    @abstractmethod
    def get(self, name: str) -> str:
        """Current value. Raises VariableError for unknown names."""
        pass

    @abstractmethod
    def set(self, name: str, value: str) -> None:
        """Set a value. Raises VariableError for unknown names."""
        pass

    @abstractmethod
    def on_change(self, name: str, callback: Callable[[], None]) -> None:
        """Subscribe to value changes. Raises VariableError for unknown names."""
        pass

    @abstractmethod
    def off_change(self, name: str, callback: Callable[[], None]) -> None:
        """Drop a subscription. Raises VariableError for unknown names."""
        pass

    @abstractmethod
    def register(self, name: str, default: str = "") -> None:
        """Create a variable owned by the caller."""
        pass

    @abstractmethod
    def unregister(self, name: str) -> None:
        pass


# --- Logging Interface ---


class LogSink(ABC):
    """Interface for the host log (capability "logging")."""

    @abstractmethod
    def log(self, message: str) -> None:
        pass


# --- Session Interface ---


@dataclass
class Playlist:
    """Playlist of a match."""

    name: str
    lan: bool = False


@dataclass
class Session:
    """A match the local process is taking part in or watching."""

    playlist: Optional[Playlist] = None


class SessionProvider(ABC):
    """Interface for session state (capability "session")."""

    @abstractmethod
    def in_replay(self) -> bool:
        pass

    @abstractmethod
    def replay_session(self) -> Optional[Session]:
        pass

    @abstractmethod
    def in_online_game(self) -> bool:
        """True when connected to a session hosted by someone else."""
        pass

    @abstractmethod
    def online_session(self) -> Optional[Session]:
        pass

    @abstractmethod
    def local_session(self) -> Optional[Session]:
        """Session owned by the local process."""
        pass

    def player_name(self, address: int) -> Optional[str]:
        """Display name of a participant, if known."""
        return None
