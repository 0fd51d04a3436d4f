"""Target resolution: attach to a pid or spawn a command."""

import logging
import subprocess
from dataclasses import dataclass

from pidlog.errors import SpawnError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Target:
    """The process being monitored."""

    pid: int
    command: str | None = None
    # Kept so the child is not reaped behind our back; never waited on.
    child: subprocess.Popen | None = None

    @property
    def spawned(self) -> bool:
        """Whether pidlog launched this process itself."""
        return self.child is not None

    def terminate(self, timeout: float = 5.0) -> None:
        """Stop a spawned child that is still running. Attached pids are left alone."""
        if self.child is None or self.child.poll() is not None:
            return
        logger.info("Terminating %s (pid %d)", self.command, self.pid)
        self.child.terminate()
        try:
            self.child.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            self.child.kill()
            self.child.wait(timeout=timeout)


def is_pid(value: str) -> bool:
    """Return True if ``value`` is a non-negative integer pid."""
    return value.isascii() and value.isdigit()


def spawn(command: str) -> subprocess.Popen:
    """
    Launch ``command`` as an executable with no arguments.

    Raises:
        SpawnError: If the command cannot be executed.
    """
    try:
        return subprocess.Popen([command])
    except OSError as exc:
        raise SpawnError(f"Failed to execute command {command!r}: {exc}") from exc


def resolve_target(value: str) -> Target:
    """
    Turn a user-supplied string into a Target.

    A numeric string is taken as a pid as-is; whether it exists is only known
    at the first lookup. Anything else is spawned as a command.
    """
    if is_pid(value):
        return Target(pid=int(value))

    child = spawn(value)
    logger.info("Started %s with pid %d", value, child.pid)
    return Target(pid=child.pid, command=value, child=child)
