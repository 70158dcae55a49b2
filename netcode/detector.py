"""Load detector - waits for the transport plugin and checks its contract.

The transport loads asynchronously and may have to be installed first, so
detection is a retry loop driven by the host scheduler:

    NOT_CHECKED -> PROBING -> READY
    PROBING -> GAVE_UP       (retry budget spent)
    PROBING -> INCOMPATIBLE  (loaded, contract variables missing)
    any     -> CLOSED        (owner stopped)

Only one retry is ever pending. Terminal states turn the next scheduled
call into a no-op instead of cancelling it.
"""

from enum import Enum
from typing import Callable

from .host import Host
from .netlog import NetLog
from .plugins.config import NetcodeConfig


class Readiness(Enum):
    NOT_CHECKED = "not_checked"
    PROBING = "probing"
    READY = "ready"
    GAVE_UP = "gave_up"
    INCOMPATIBLE = "incompatible"
    CLOSED = "closed"


TERMINAL = {
    Readiness.READY,
    Readiness.GAVE_UP,
    Readiness.INCOMPATIBLE,
    Readiness.CLOSED,
}


class LoadDetector:
    """Detects the transport and wires the incoming-message callback."""

    def __init__(
        self,
        host: Host,
        config: NetcodeConfig,
        netlog: NetLog,
        on_incoming: Callable[[], None],
    ):
        self._host = host
        self._config = config
        self._netlog = netlog
        self._on_incoming = on_incoming
        self.state = Readiness.NOT_CHECKED
        self.attempts = 0
        self._retry_pending = False

    @property
    def is_ready(self) -> bool:
        return self.state is Readiness.READY

    def start(self, reset_attempts: bool = False) -> None:
        """Probe for the transport, scheduling a retry if it is not loaded.

        Args:
            reset_attempts: Start counting attempts from zero. From GAVE_UP or
                INCOMPATIBLE this restarts detection.
        """
        if self.is_ready or self.state is Readiness.CLOSED:
            return

        if reset_attempts:
            self.attempts = 0
        elif self.state in TERMINAL:
            return

        if self._retry_pending:
            return  # The pending retry carries on

        if self.attempts >= self._config.max_attempts:
            self.state = Readiness.GAVE_UP
            return

        self.attempts += 1
        self.state = Readiness.PROBING
        self._probe()

    def _retry(self) -> None:
        self._retry_pending = False
        self.start(reset_attempts=False)

    def _probe(self) -> None:
        if self.transport_loaded():
            self._validate_contract()
            return

        if self.transport_installed():
            command = self._config.command(self._config.load_command)
        else:
            command = self._config.command(self._config.install_command)
        self._host.commands.run_command(command)

        self._retry_pending = True
        self._host.scheduler.after(self._config.retry_delay, self._retry)

    def transport_loaded(self) -> bool:
        for component in self._host.registry.list_loaded():
            if component.get("name") == self._config.transport_name:
                return True
        return False

    def transport_installed(self) -> bool:
        return self._host.filesystem.exists(self._config.transport_artifact)

    def _validate_contract(self) -> None:
        variables = self._host.variables
        config = self._config

        if not variables.exists(config.log_level_var):
            # NetLog cannot be bound, so this goes straight to the host log
            self._host.log.log(
                f"{config.transport_name} is loaded, but could not find "
                f"variable {config.log_level_var}"
            )
            self.state = Readiness.INCOMPATIBLE
            return

        self._netlog.bind(variables, config.log_level_var)

        for name in (config.incoming_var, config.outgoing_var):
            if not variables.exists(name):
                self._netlog.a(
                    f"{config.transport_name} is loaded, but could not find "
                    f"variable {name}"
                )
                self.state = Readiness.INCOMPATIBLE
                return

        variables.on_change(config.incoming_var, self._on_incoming)
        self.state = Readiness.READY
        self._netlog.a(
            f"Detected {config.transport_name} after {self.attempts} attempt(s). "
            "Ready to go."
        )

    def close(self) -> None:
        """Stop detecting and drop the incoming-message subscription.

        A retry that is still pending becomes a no-op.
        """
        variables = self._host.variables
        if self.is_ready and variables.exists(self._config.incoming_var):
            variables.off_change(self._config.incoming_var, self._on_incoming)
        self._netlog.unbind()
        self.state = Readiness.CLOSED
