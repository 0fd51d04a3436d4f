"""Tests for pidlog data models."""

import pytest

from pidlog.models import (
    BYTES_PER_MB,
    NetworkCounters,
    ProcessSnapshot,
    Sample,
    bytes_to_mb,
    header_for,
)

from conftest import make_snapshot


def test_process_snapshot_creation():
    """Test ProcessSnapshot dataclass creation."""
    snapshot = ProcessSnapshot(
        pid=123,
        name="test_process",
        status="sleeping",
        cpu_percent=50.0,
        memory_rss=1024000,
        memory_vms=4096000,
        read_bytes=10,
        write_bytes=20,
    )

    assert snapshot.pid == 123
    assert snapshot.name == "test_process"
    assert snapshot.status == "sleeping"
    assert snapshot.cpu_percent == 50.0
    assert snapshot.memory_rss == 1024000
    assert snapshot.memory_vms == 4096000
    assert snapshot.read_bytes == 10
    assert snapshot.write_bytes == 20


def test_process_snapshot_is_frozen():
    """Test that ProcessSnapshot is immutable (frozen)."""
    snapshot = make_snapshot()

    with pytest.raises(AttributeError):
        snapshot.pid = 999


def test_process_snapshot_uses_slots():
    """Test that ProcessSnapshot uses __slots__ for memory efficiency."""
    snapshot = make_snapshot()

    # Slots-based dataclasses don't have __dict__
    assert not hasattr(snapshot, "__dict__")


@pytest.mark.parametrize(
    ("status", "terminal"),
    [("running", False), ("sleeping", False), ("disk-sleep", False), ("zombie", True), ("dead", True)],
)
def test_process_snapshot_terminal_status(status, terminal):
    """Only zombie and dead processes are terminal."""
    assert make_snapshot(status=status).is_terminal is terminal


def test_bytes_to_mb_truncates():
    """Conversion to MB drops the remainder."""
    assert bytes_to_mb(0) == 0
    assert bytes_to_mb(BYTES_PER_MB - 1) == 0
    assert bytes_to_mb(BYTES_PER_MB) == 1
    assert bytes_to_mb(5 * BYTES_PER_MB + 123) == 5


def test_header_without_network():
    """Header has six columns when network tracking is off."""
    header = header_for(False)
    assert header == [
        "Elapsed time",
        "CPU (%)",
        "Real memory (MB)",
        "Virtual memory (MB)",
        "IO Write (MB)",
        "IO Read (MB)",
    ]


def test_header_with_network():
    """Header gains upload and download columns when network tracking is on."""
    header = header_for(True)
    assert len(header) == 8
    assert header[:6] == header_for(False)
    assert header[6:] == ["Network Upload (MB)", "Network Download (MB)"]


class TestSample:
    """Tests for Sample."""

    def test_from_snapshot_converts_to_mb(self):
        """Memory and I/O values are converted to whole MB."""
        sample = Sample.from_snapshot(7, make_snapshot())

        assert sample.elapsed == 7
        assert sample.cpu_percent == 12.346
        assert sample.memory_rss_mb == 50
        assert sample.memory_vms_mb == 300
        assert sample.io_write_mb == 0
        assert sample.io_read_mb == 3
        assert not sample.has_network

    def test_row_without_network(self):
        """Row matches the six-column header and formats CPU to 2 decimals."""
        row = Sample.from_snapshot(7, make_snapshot()).to_row()

        assert row == ["7", "12.35", "50", "300", "0", "3"]
        assert len(row) == len(header_for(False))

    def test_row_with_network(self):
        """Row gains network MB columns when counters are given."""
        network = NetworkCounters(bytes_sent=2 * BYTES_PER_MB + 5, bytes_recv=9 * BYTES_PER_MB)
        row = Sample.from_snapshot(0, make_snapshot(cpu_percent=0.0), network).to_row()

        assert row == ["0", "0.00", "50", "300", "0", "3", "2", "9"]
        assert len(row) == len(header_for(True))

    def test_sample_is_frozen(self):
        """Samples are never mutated once taken."""
        sample = Sample.from_snapshot(1, make_snapshot())
        with pytest.raises(AttributeError):
            sample.elapsed = 2
