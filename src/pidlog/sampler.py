"""Sampling loop for pidlog."""

import logging
import sys
import threading
import time
from collections.abc import Callable
from enum import Enum
from typing import TextIO

from pidlog.config import RunConfig
from pidlog.errors import ClockError, TargetNotFoundError
from pidlog.models import Sample, header_for
from pidlog.provider import MetricsProvider
from pidlog.sink import CsvSink

logger = logging.getLogger(__name__)


class SamplerState(Enum):
    """Lifecycle of a Sampler."""

    INIT = "init"
    SAMPLING = "sampling"
    TERMINATED = "terminated"


class StopReason(Enum):
    """Why a run ended normally."""

    DURATION = "duration"
    EXITED = "exited"
    VANISHED = "vanished"
    STOPPED = "stopped"


class Sampler:
    """
    Samples one process into a CSV sink until it exits or time runs out.

    Each iteration looks the target up in the provider's snapshot, checks the
    stop conditions, writes and flushes one row, waits for the interval and
    then refreshes the target. Errors propagate to the caller untouched.
    """

    def __init__(
        self,
        pid: int,
        sink: CsvSink,
        config: RunConfig,
        provider: MetricsProvider | None = None,
        clock: Callable[[], float] = time.time,
        out: TextIO | None = None,
    ) -> None:
        """
        Initialize the Sampler.

        Args:
            pid: Process to sample.
            sink: Unopened CSV sink; its header must match ``config.network``.
            config: Interval, duration and output settings.
            provider: Metrics source. A psutil-backed one is built if omitted.
            clock: Wall clock returning seconds.
            out: Stream for the echoed samples. Defaults to stdout.
        """
        if sink.header != header_for(config.network):
            raise ValueError("sink header does not match the network setting")
        self._pid = pid
        self._sink = sink
        self._config = config
        self._provider = provider or MetricsProvider(include_network=config.network)
        if config.network and not self._provider.include_network:
            raise ValueError("provider does not track network counters")
        self._clock = clock
        self._out = out
        self._stop_event = threading.Event()
        self._state = SamplerState.INIT
        self._start_time: float | None = None
        self._seen = False

    @property
    def state(self) -> SamplerState:
        return self._state

    @property
    def rows_written(self) -> int:
        return self._sink.rows_written

    def stop(self) -> None:
        """Ask the loop to end, waking it if it is waiting for the interval."""
        self._stop_event.set()

    def elapsed(self) -> int:
        """Whole seconds since the run started."""
        if self._start_time is None:
            raise RuntimeError("sampler has not started")
        now = self._clock()
        if now < self._start_time:
            raise ClockError("Time went backwards")
        return int(now - self._start_time)

    def run(self) -> StopReason:
        """Run until a stop condition holds and return which one did."""
        try:
            self._init()
            self._state = SamplerState.SAMPLING
            return self._loop()
        finally:
            self._state = SamplerState.TERMINATED
            self._sink.close()

    def _init(self) -> None:
        # Cold baseline so the first targeted refresh yields CPU deltas
        self._provider.refresh_all()
        self._start_time = self._clock()
        self._sink.open()

    def _loop(self) -> StopReason:
        config = self._config
        while True:
            if self._stop_event.is_set():
                return StopReason.STOPPED

            process = self._provider.process(self._pid)
            if process is None:
                if not self._seen:
                    raise TargetNotFoundError(self._pid)
                logger.info("Process %d is gone", self._pid)
                return StopReason.VANISHED
            self._seen = True

            elapsed = self.elapsed()
            if config.duration is not None and elapsed > config.duration:
                return StopReason.DURATION
            if process.is_terminal:
                logger.info("Process %d is %s", self._pid, process.status)
                return StopReason.EXITED

            sample = Sample.from_snapshot(
                elapsed,
                process,
                self._provider.network() if config.network else None,
            )
            row = sample.to_row()
            self._sink.write_row(row)
            if config.echo:
                print(" ".join(row), file=self._out or sys.stdout, flush=True)

            if config.interval is not None:
                self._stop_event.wait(timeout=config.interval)

            self._provider.refresh_process(self._pid)
