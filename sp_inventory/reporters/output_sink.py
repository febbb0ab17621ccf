"""Output sink for console, execution log and CSV exports."""

import csv
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

import click

from ..core.models import (FailureBatch, FailureRecord, FileBatch, FileRecord, PlainMessage,
                           SiteBatch, SiteRecord)
from ..utils.formatters import timestamp

Payload = Union[PlainMessage, FailureBatch, SiteBatch, FileBatch]

LEVEL_PREFIXES = {
    "INFO": "",
    "WARNING": "WARNING: ",
    "ERROR": "ERROR: ",
}


class OutputSink:
    """Single funnel for everything a run prints or writes to disk."""

    def __init__(self, log_file: Union[str, Path], failures_file: Union[str, Path],
                 sites_file: Union[str, Path], files_file: Union[str, Path],
                 console: bool = True):
        """Initialize output sink.

        Args:
            log_file: Execution log, appended as UTF-8 text.
            failures_file: CSV export for FailureRecords.
            sites_file: CSV export for SiteRecords.
            files_file: CSV export for FileRecords.
            console: Whether plain messages are echoed to the console.
        """
        self.log_file = Path(log_file)
        self.failures_file = Path(failures_file)
        self.sites_file = Path(sites_file)
        self.files_file = Path(files_file)
        self.console = console
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config) -> "OutputSink":
        return cls(
            log_file=config.log_path,
            failures_file=config.failures_path,
            sites_file=config.sites_path,
            files_file=config.files_path,
            console=True,
        )

    def emit(self, payload: Payload) -> None:
        """Route a payload to its destination. Never raises.

        Batches go to their CSV export; plain messages go to the console and
        the execution log. Write errors are reported as plain error messages.
        """
        try:
            if isinstance(payload, FailureBatch):
                self._append_rows(self.failures_file, FailureRecord.FIELDS, payload.records)
            elif isinstance(payload, SiteBatch):
                self._append_rows(self.sites_file, SiteRecord.FIELDS, payload.records)
            elif isinstance(payload, FileBatch):
                self._append_rows(self.files_file, FileRecord.FIELDS, payload.records)
            elif isinstance(payload, PlainMessage):
                self._write_message(payload)
            else:
                raise TypeError(f"Unsupported output payload: {type(payload).__name__}")
        except Exception as e:
            self._report_write_error(payload, e)

    def info(self, text: str) -> None:
        self.emit(PlainMessage(text))

    def warning(self, text: str) -> None:
        self.emit(PlainMessage(text, level="WARNING"))

    def error(self, text: str) -> None:
        self.emit(PlainMessage(text, level="ERROR"))

    def display(self, text: str) -> None:
        """Print report output to the console only, without a timestamp."""
        try:
            click.echo(text)
        except OSError as e:
            self.logger.warning(f"Could not print report: {e}")

    def _write_message(self, message: PlainMessage) -> None:
        line = f"{timestamp()} {LEVEL_PREFIXES.get(message.level, '')}{message.text}"

        if self.console:
            click.echo(line, err=(message.level == "ERROR"))

        self.logger.debug(f"log: {message.text}")
        with open(self.log_file, 'a', encoding='utf-8') as f:
            f.write(line + "\n")

    def _append_rows(self, path: Path, fieldnames: List[str], records: Sequence[Any]) -> None:
        """Append records to a CSV file, writing the header only once."""
        write_header = not path.exists() or path.stat().st_size == 0

        with open(path, 'a', encoding='utf-8', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            if write_header:
                writer.writeheader()
            writer.writerows(self._rows(records))

        self.logger.debug(f"Appended {len(records)} rows to {path}")

    @staticmethod
    def _rows(records: Sequence[Any]) -> List[Dict[str, Any]]:
        return [record.to_row() for record in records]

    def _report_write_error(self, payload: Payload, error: Exception) -> None:
        if isinstance(payload, PlainMessage):
            # The log itself is unwritable, so the console is the last resort
            click.echo(f"{timestamp()} ERROR: Failed to write to {self.log_file}: {error}",
                       err=True)
            if payload.level == "ERROR" and not self.console:
                click.echo(f"{timestamp()} ERROR: {payload.text}", err=True)
            return

        self.emit(PlainMessage(f"Failed to write {type(payload).__name__}: {error}",
                               level="ERROR"))
