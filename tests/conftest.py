"""Shared fakes for netcode tests."""

from typing import Callable, Optional

import pytest

from netcode.host import Host
from netcode.plugins.config import NetcodeConfig
from netcode.plugins.interfaces import (
    CommandRunner,
    ComponentRegistry,
    FileSystem,
    LogSink,
    Scheduler,
    Session,
    SessionProvider,
)
from netcode.plugins.variables.plugin import VariablesPlugin


class FakeRegistry(ComponentRegistry):
    def __init__(self):
        self.loaded: list[str] = []
        self.calls = 0

    def list_loaded(self) -> list[dict]:
        self.calls += 1
        return [{"name": name} for name in self.loaded]


class FakeFileSystem(FileSystem):
    def __init__(self):
        self.paths: set[str] = set()

    def exists(self, path) -> bool:
        return str(path) in self.paths


class FakeCommands(CommandRunner):
    def __init__(self):
        self.lines: list[str] = []
        self.on_command: Optional[Callable[[str], None]] = None

    def run_command(self, line: str) -> None:
        self.lines.append(line)
        if self.on_command:
            self.on_command(line)


class ManualScheduler(Scheduler):
    """Deferred callbacks that only run when the test advances time."""

    def __init__(self):
        self.now = 0.0
        self.queue: list[tuple[float, Callable[[], None]]] = []
        self.scheduled = 0

    def after(self, delay: float, callback: Callable[[], None]) -> None:
        self.scheduled += 1
        self.queue.append((self.now + delay, callback))

    @property
    def pending(self) -> int:
        return len(self.queue)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [item for item in self.queue if item[0] <= target]
            if not due:
                break
            item = min(due, key=lambda i: i[0])
            self.queue.remove(item)
            self.now = item[0]
            item[1]()
        self.now = target

    def run_all(self, limit: int = 1000) -> None:
        """Run callbacks until nothing is pending."""
        for _ in range(limit):
            if not self.queue:
                return
            self.advance(max(when for when, _ in self.queue) - self.now)
        raise AssertionError("Scheduler did not settle")


class ListSink(LogSink):
    def __init__(self):
        self.lines: list[str] = []

    def log(self, message: str) -> None:
        self.lines.append(message)

    def contains(self, text: str) -> bool:
        return any(text in line for line in self.lines)


class FakeSession(SessionProvider):
    def __init__(self):
        self.replay: Optional[Session] = None
        self.online: Optional[Session] = None
        self.local: Optional[Session] = None
        self.names: dict[int, str] = {}

    def in_replay(self) -> bool:
        return self.replay is not None

    def replay_session(self) -> Optional[Session]:
        return self.replay

    def in_online_game(self) -> bool:
        return self.online is not None

    def online_session(self) -> Optional[Session]:
        return self.online

    def local_session(self) -> Optional[Session]:
        return self.local

    def player_name(self, address: int) -> Optional[str]:
        return self.names.get(address)


@pytest.fixture
def config():
    return NetcodeConfig()


@pytest.fixture
def variables():
    return VariablesPlugin()


@pytest.fixture
def contract(variables, config):
    """Register the three variables the transport provides."""
    variables.register(config.log_level_var, "3")
    variables.register(config.incoming_var, "")
    variables.register(config.outgoing_var, "")
    return variables


@pytest.fixture
def host(variables):
    return Host(
        registry=FakeRegistry(),
        variables=variables,
        scheduler=ManualScheduler(),
        commands=FakeCommands(),
        log=ListSink(),
        filesystem=FakeFileSystem(),
        session=FakeSession(),
    )
