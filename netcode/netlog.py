"""Tiered diagnostic logging for netcode.

Three tiers, gated by the transport's log-level variable:
  A  level > 0  - lifecycle (ready, contract problems)
  B  level > 1  - routing decisions
  C  level > 2  - every message
"""

import time
from typing import Optional

from .plugins.interfaces import LogSink, VariableError, VariableStore

TIERS = {"A": 1, "B": 2, "C": 3}


def parse_level(value: str) -> int:
    """Log level from a variable value; junk counts as 0 (silent)."""
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


class NetLog:
    """Writes tier-gated lines to a LogSink.

    Silent until bound to the log-level variable.
    """

    def __init__(self, sink: LogSink):
        self._sink = sink
        self._level: int = 0
        self._variables: Optional[VariableStore] = None
        self._variable: Optional[str] = None
        self._created = time.monotonic()

    @property
    def level(self) -> int:
        return self._level

    @property
    def bound(self) -> bool:
        return self._variable is not None

    def bind(self, variables: VariableStore, name: str) -> None:
        """Follow the value of a log-level variable.

        Raises:
            VariableError: If the variable does not exist
        """
        if not variables.exists(name):
            raise VariableError(f"Unknown variable: {name}")

        self.unbind()
        self._variables = variables
        self._variable = name
        self._update()
        variables.on_change(name, self._update)

    def unbind(self) -> None:
        """Stop following the log-level variable and go silent."""
        if self._variable is not None and self._variables.exists(self._variable):
            self._variables.off_change(self._variable, self._update)
        self._variables = None
        self._variable = None
        self._level = 0

    def _update(self) -> None:
        self._level = parse_level(self._variables.get(self._variable))

    def enabled(self, tier: str) -> bool:
        return self._level >= TIERS[tier]

    def log(self, tier: str, message: str) -> None:
        if not self.enabled(tier):
            return
        elapsed = time.monotonic() - self._created
        self._sink.log(f"({tier} {elapsed:.3f}s) {message}")

    def a(self, message: str) -> None:
        self.log("A", message)

    def b(self, message: str) -> None:
        self.log("B", message)

    def c(self, message: str) -> None:
        self.log("C", message)
