"""Metrics provider for pidlog, backed by psutil."""

import logging
from typing import Any

import psutil

from pidlog.models import NetworkCounters, ProcessSnapshot

logger = logging.getLogger(__name__)

# Attributes to fetch per process. io_counters is missing on macOS.
ATTRS = ["pid", "name", "status", "cpu_percent", "memory_info"]
if hasattr(psutil.Process, "io_counters"):
    ATTRS.append("io_counters")


class MetricsProvider:
    """
    In-memory view of process metrics, refreshed explicitly by its owner.

    CPU percent is computed by psutil as a delta between two reads of the same
    ``psutil.Process`` handle, so handles are cached across refreshes. The
    first read of any handle reports 0.0.
    """

    def __init__(self, include_network: bool = False) -> None:
        """
        Initialize the MetricsProvider.

        Args:
            include_network: Also track host network interface counters.
        """
        self._include_network = include_network
        self._handles: dict[int, psutil.Process] = {}
        self._snapshots: dict[int, ProcessSnapshot] = {}
        self._network: NetworkCounters | None = None

    @property
    def include_network(self) -> bool:
        """Whether network counters are tracked."""
        return self._include_network

    def refresh_all(self) -> None:
        """
        Take a snapshot of every visible process.

        Uses psutil.process_iter() with oneshot() context manager for efficiency.
        Processes that die mid-iteration are skipped.
        """
        handles: dict[int, psutil.Process] = {}
        snapshots: dict[int, ProcessSnapshot] = {}

        for proc in psutil.process_iter():
            try:
                snapshot = self._read(proc)
            except psutil.NoSuchProcess:
                continue
            handles[proc.pid] = proc
            snapshots[proc.pid] = snapshot

        self._handles = handles
        self._snapshots = snapshots
        self._refresh_network()
        logger.debug("Full refresh collected %d processes", len(snapshots))

    def refresh_process(self, pid: int) -> None:
        """Refresh the snapshot of a single process, dropping it if gone."""
        proc = self._handles.get(pid)
        try:
            if proc is None:
                proc = psutil.Process(pid)
                self._handles[pid] = proc
            self._snapshots[pid] = self._read(proc)
        except psutil.NoSuchProcess:
            logger.debug("Process %d no longer exists", pid)
            self._handles.pop(pid, None)
            self._snapshots.pop(pid, None)
        self._refresh_network()

    def process(self, pid: int) -> ProcessSnapshot | None:
        """Return the latest snapshot of ``pid``, or None if it is not known."""
        return self._snapshots.get(pid)

    def network(self) -> NetworkCounters | None:
        """Return the latest network counters, or None when not tracked."""
        return self._network

    def _read(self, proc: psutil.Process) -> ProcessSnapshot:
        """Read one process. AccessDenied and zombie fields come back as None."""
        with proc.oneshot():
            info: dict[str, Any] = proc.as_dict(attrs=ATTRS)

        mem_info = info.get("memory_info")
        io = info.get("io_counters")

        return ProcessSnapshot(
            pid=proc.pid,
            name=info.get("name") or "",
            status=info.get("status") or "?",
            cpu_percent=info.get("cpu_percent") or 0.0,
            memory_rss=mem_info.rss if mem_info else 0,
            memory_vms=mem_info.vms if mem_info else 0,
            read_bytes=io.read_bytes if io else 0,
            write_bytes=io.write_bytes if io else 0,
        )

    def _refresh_network(self) -> None:
        if not self._include_network:
            return
        counters = psutil.net_io_counters()
        if counters is None:
            # No network interfaces on this host
            self._network = NetworkCounters(bytes_sent=0, bytes_recv=0)
        else:
            self._network = NetworkCounters(
                bytes_sent=counters.bytes_sent,
                bytes_recv=counters.bytes_recv,
            )
