"""Exceptions raised by pidlog."""


class PidlogError(Exception):
    """Base class for every fatal pidlog condition."""


class SpawnError(PidlogError):
    """The requested command could not be launched."""


class SinkError(PidlogError):
    """The CSV file could not be created, written or flushed."""


class TargetNotFoundError(PidlogError, LookupError):
    """The target pid does not resolve in the metrics snapshot."""

    def __init__(self, pid: int) -> None:
        super().__init__(f"Unable to find process with pid {pid}")
        self.pid = pid


class ClockError(PidlogError):
    """The system clock reports a time earlier than the recorded start."""


class ConfigError(PidlogError):
    """Invalid run configuration."""
