"""Data models for pidlog."""

from dataclasses import dataclass

BYTES_PER_MB = 1024 * 1024

# psutil.STATUS_ZOMBIE and psutil.STATUS_DEAD
TERMINAL_STATUSES = frozenset({"zombie", "dead"})

BASE_HEADER = (
    "Elapsed time",
    "CPU (%)",
    "Real memory (MB)",
    "Virtual memory (MB)",
    "IO Write (MB)",
    "IO Read (MB)",
)
NETWORK_HEADER = ("Network Upload (MB)", "Network Download (MB)")


def header_for(include_network: bool) -> list[str]:
    """Return the CSV header for a run with or without network columns."""
    if include_network:
        return [*BASE_HEADER, *NETWORK_HEADER]
    return list(BASE_HEADER)


def bytes_to_mb(size: int) -> int:
    """Convert bytes to whole megabytes, truncating."""
    return size // BYTES_PER_MB


@dataclass(slots=True, frozen=True)
class ProcessSnapshot:
    """Immutable snapshot of a process state."""

    pid: int
    name: str
    status: str  # 'running', 'sleeping', 'zombie', 'dead', etc.
    cpu_percent: float  # 0.0 - 100.0 * core_count
    memory_rss: int  # Bytes
    memory_vms: int  # Bytes
    read_bytes: int  # Cumulative
    write_bytes: int  # Cumulative

    @property
    def is_terminal(self) -> bool:
        """Whether the process can no longer produce meaningful metrics."""
        return self.status in TERMINAL_STATUSES


@dataclass(slots=True, frozen=True)
class NetworkCounters:
    """Cumulative network interface counters."""

    bytes_sent: int
    bytes_recv: int


@dataclass(slots=True, frozen=True)
class Sample:
    """One row of resource usage at a point in elapsed time."""

    elapsed: int
    cpu_percent: float
    memory_rss_mb: int
    memory_vms_mb: int
    io_write_mb: int
    io_read_mb: int
    net_upload_mb: int | None = None
    net_download_mb: int | None = None

    @classmethod
    def from_snapshot(
        cls,
        elapsed: int,
        process: ProcessSnapshot,
        network: NetworkCounters | None = None,
    ) -> "Sample":
        """Build a sample from a process snapshot and optional network counters."""
        return cls(
            elapsed=elapsed,
            cpu_percent=process.cpu_percent,
            memory_rss_mb=bytes_to_mb(process.memory_rss),
            memory_vms_mb=bytes_to_mb(process.memory_vms),
            io_write_mb=bytes_to_mb(process.write_bytes),
            io_read_mb=bytes_to_mb(process.read_bytes),
            net_upload_mb=bytes_to_mb(network.bytes_sent) if network else None,
            net_download_mb=bytes_to_mb(network.bytes_recv) if network else None,
        )

    @property
    def has_network(self) -> bool:
        return self.net_upload_mb is not None

    def to_row(self) -> list[str]:
        """Render the sample as CSV fields, in header order."""
        row = [
            str(self.elapsed),
            f"{self.cpu_percent:.2f}",
            str(self.memory_rss_mb),
            str(self.memory_vms_mb),
            str(self.io_write_mb),
            str(self.io_read_mb),
        ]
        if self.has_network:
            row.extend([str(self.net_upload_mb), str(self.net_download_mb)])
        return row
