"""pidlog - Command-line entry point."""

import argparse
import logging
from pathlib import Path

from pidlog.config import RunConfig, load_config
from pidlog.errors import PidlogError, SinkError
from pidlog.log import setup_logger
from pidlog.models import header_for
from pidlog.sampler import Sampler, StopReason
from pidlog.sink import CsvSink
from pidlog.target import Target, resolve_target

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    """Create the pidlog argument parser."""
    parser = argparse.ArgumentParser(
        prog="pidlog",
        description="Log CPU, memory and I/O usage of a process to a CSV file.",
    )
    parser.add_argument(
        "target",
        help="Pid of a running process, or a command to start and monitor",
    )
    parser.add_argument("logfile", type=Path, help="CSV file to write")
    parser.add_argument(
        "-i",
        "--interval",
        type=int,
        default=None,
        help="Seconds between samples (default: sample without pausing)",
    )
    parser.add_argument(
        "-d",
        "--duration",
        type=int,
        default=None,
        help="Stop after this many seconds (default: until the process exits)",
    )
    parser.add_argument(
        "-n",
        "--network",
        action="store_true",
        default=None,
        help="Add network upload/download columns",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="YAML file with interval, duration, network and echo settings",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Do not print samples to stdout",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug messages",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Append detailed log messages to this file",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the pidlog command."""
    args = build_parser().parse_args(argv)
    logger = setup_logger(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_file=args.log_file,
    )

    target: Target | None = None
    sink: CsvSink | None = None
    try:
        config = load_config(args.config) if args.config else RunConfig()
        config = config.merge(
            interval=args.interval,
            duration=args.duration,
            network=args.network,
            echo=False if args.quiet else None,
        )

        target = resolve_target(args.target)
        sink = CsvSink(args.logfile, header_for(config.network))
        sampler = Sampler(target.pid, sink, config)
        logger.debug("Sampling pid %d into %s with %s", target.pid, args.logfile, config)
        try:
            reason = sampler.run()
        except KeyboardInterrupt:
            # Ctrl-C once sampling has started is a normal stop
            reason = StopReason.STOPPED
        logger.info(
            "Stopped (%s) after %d samples, written to %s",
            reason.value,
            sampler.rows_written,
            args.logfile,
        )
    except PidlogError as exc:
        logger.error("%s", exc)
        # A child we started but never sampled would be left running unmonitored
        if (
            isinstance(exc, SinkError)
            and target is not None
            and sink is not None
            and sink.rows_written == 0
        ):
            target.terminate()
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return EXIT_INTERRUPTED

    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
