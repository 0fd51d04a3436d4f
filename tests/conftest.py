"""Shared fixtures and fakes for pidlog tests."""

import subprocess

import pytest

from pidlog.models import NetworkCounters, ProcessSnapshot


def make_snapshot(
    pid: int = 4242,
    status: str = "running",
    cpu_percent: float = 12.346,
    memory_rss: int = 50 * 1024 * 1024 + 17,
    memory_vms: int = 300 * 1024 * 1024,
    read_bytes: int = 3 * 1024 * 1024 + 1,
    write_bytes: int = 1024 * 1024 - 1,
) -> ProcessSnapshot:
    """Build a ProcessSnapshot with sensible defaults."""
    return ProcessSnapshot(
        pid=pid,
        name="worker",
        status=status,
        cpu_percent=cpu_percent,
        memory_rss=memory_rss,
        memory_vms=memory_vms,
        read_bytes=read_bytes,
        write_bytes=write_bytes,
    )


class FakeProvider:
    """
    Scripted metrics provider.

    ``refresh_all`` shows the first scripted snapshot and each
    ``refresh_process`` advances to the next one. The last entry repeats.
    A None entry means the process is not in the snapshot.
    """

    def __init__(self, snapshots, network: NetworkCounters | None = None):
        self._snapshots = list(snapshots)
        self._index = -1
        self._network = network
        self.full_refreshes = 0
        self.process_refreshes: list[int] = []

    @property
    def include_network(self) -> bool:
        return self._network is not None

    def refresh_all(self) -> None:
        self.full_refreshes += 1
        self._index = 0

    def refresh_process(self, pid: int) -> None:
        self.process_refreshes.append(pid)
        self._index = min(self._index + 1, len(self._snapshots) - 1)

    def process(self, pid: int) -> ProcessSnapshot | None:
        if self._index < 0:
            return None
        snapshot = self._snapshots[self._index]
        if snapshot is None or snapshot.pid != pid:
            return None
        return snapshot

    def network(self) -> NetworkCounters | None:
        return self._network


class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleeper():
    """A child process that stays alive until the test ends."""
    proc = subprocess.Popen(["sleep", "30"])
    try:
        yield proc
    finally:
        proc.kill()
        proc.wait(timeout=5)
