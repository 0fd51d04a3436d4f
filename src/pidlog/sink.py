"""CSV sink for samples."""

import csv
import logging
from os import PathLike
from typing import IO

from pidlog.errors import SinkError

logger = logging.getLogger(__name__)


class CsvSink:
    """
    Append-only CSV file with a fixed header.

    The header is written once when the sink is opened. Every row must have
    the same number of columns as the header. Rows are flushed as soon as
    they are written so that a crash loses at most the row in flight.
    """

    def __init__(self, path: str | PathLike[str], header: list[str]) -> None:
        self._path = path
        self._header = list(header)
        self._file: IO[str] | None = None
        self._writer = None
        self._rows = 0

    @property
    def header(self) -> list[str]:
        return list(self._header)

    @property
    def rows_written(self) -> int:
        """Number of data rows written, excluding the header."""
        return self._rows

    @property
    def closed(self) -> bool:
        return self._file is None

    def open(self) -> None:
        """Create (or truncate) the file and write the header."""
        if self._file is not None:
            return
        try:
            self._file = open(self._path, "w", newline="", encoding="utf-8")
        except OSError as exc:
            raise SinkError(f"Unable to create csv file {self._path}: {exc}") from exc
        self._writer = csv.writer(self._file, lineterminator="\n")
        logger.debug("Opened %s", self._path)
        self._write(self._header)

    def write_row(self, row: list[str]) -> None:
        """Append one data row and flush it to disk."""
        if len(row) != len(self._header):
            raise SinkError(
                f"Row has {len(row)} columns, header has {len(self._header)}"
            )
        self._write(row)
        self._rows += 1

    def close(self) -> None:
        if self._file is None:
            return
        try:
            self._file.close()
        except OSError as exc:
            raise SinkError(f"Unable to close csv file {self._path}: {exc}") from exc
        finally:
            self._file = None
            self._writer = None

    def _write(self, row: list[str]) -> None:
        if self._file is None or self._writer is None:
            raise SinkError(f"csv file {self._path} is not open")
        try:
            self._writer.writerow(row)
        except OSError as exc:
            raise SinkError(f"Unable to write to csv file {self._path}: {exc}") from exc
        try:
            self._file.flush()
        except OSError as exc:
            raise SinkError(f"Unable to flush csv file {self._path}: {exc}") from exc

    def __enter__(self) -> "CsvSink":
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
