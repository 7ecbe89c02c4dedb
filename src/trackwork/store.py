"""CSV-backed storage for work records.

The file holds a header row followed by one row per session, oldest first::

    Start,End,Objective
    2026-10-19 09:00:00 +0200,2026-10-19 10:30:00 +0200,write spec
    2026-10-19 11:00:00 +0200,,review

An empty ``End`` cell marks the open session. Every mutation rewrites the
whole file; there is no locking between concurrent invocations.
"""
from __future__ import annotations
import csv
import datetime
import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from .errors import StateError, StorageError
from .models import WorkRecord, now_local

log = logging.getLogger(__name__)

HEADER = ["Start", "End", "Objective"]
TS_FORMAT = "%Y-%m-%d %H:%M:%S %z"


def format_ts(ts: datetime.datetime) -> str:
    # strftime does not zero-pad years below 1000
    return f"{ts.year:04d}" + ts.strftime(TS_FORMAT[2:])


def parse_ts(s: str) -> datetime.datetime:
    return datetime.datetime.strptime(s.strip(), TS_FORMAT)


def to_row(record: WorkRecord) -> List[str]:
    return [
        format_ts(record.start),
        format_ts(record.end) if record.end is not None else "",
        record.objective,
    ]


def parse_row(row: List[str], lineno: int = 0) -> WorkRecord:
    """Turn one CSV row into a record; raises StorageError naming the line."""
    start_s = row[0] if row else ""
    end_s = row[1] if len(row) > 1 else ""
    objective = row[2] if len(row) > 2 else ""
    try:
        start = parse_ts(start_s)
    except ValueError:
        raise StorageError(f"line {lineno}: invalid start timestamp {start_s!r}")
    try:
        end = parse_ts(end_s) if end_s.strip() else None
    except ValueError:
        raise StorageError(f"line {lineno}: invalid end timestamp {end_s!r}")
    try:
        return WorkRecord(start=start, end=end, objective=objective)
    except ValueError as e:
        raise StorageError(f"line {lineno}: invalid record: {e}") from e


def parse_rows(lines: Iterable[str]) -> Iterator[WorkRecord]:
    """Parse CSV text lines (header optional) into records, lazily."""
    reader = csv.reader(lines)
    try:
        for row in reader:
            lineno = reader.line_num
            if not any(cell.strip() for cell in row):
                continue
            if lineno == 1 and [c.strip().lstrip("\ufeff").lower() for c in row] == [
                h.lower() for h in HEADER
            ]:
                continue
            log.debug("row %d: %r", lineno, row)
            yield parse_row(row, lineno)
    except csv.Error as e:
        raise StorageError(f"line {reader.line_num}: malformed CSV: {e}") from e


class RecordStore:
    """Ordered sequence of work records persisted in a single CSV file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def records(self) -> Iterator[WorkRecord]:
        """Yield records in creation order, re-reading the file on each call."""
        try:
            fh = self.path.open(newline="", encoding="utf-8-sig")
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageError(f"cannot read {self.path}: {e.strerror or e}") from e
        try:
            with fh:
                yield from parse_rows(fh)
        except UnicodeDecodeError as e:
            raise StorageError(f"{self.path} is not valid UTF-8 text: {e}") from e
        except OSError as e:
            raise StorageError(f"cannot read {self.path}: {e.strerror or e}") from e

    def read(self) -> List[WorkRecord]:
        return list(self.records())

    def write(self, records: Iterable[WorkRecord]) -> None:
        try:
            with self.path.open("w", newline="", encoding="utf-8") as fh:
                writer = csv.writer(fh)
                writer.writerow(HEADER)
                for record in records:
                    writer.writerow(to_row(record))
        except OSError as e:
            raise StorageError(f"cannot write {self.path}: {e.strerror or e}") from e

    def current(self) -> Optional[WorkRecord]:
        """Return the open record, if any."""
        open_records = [r for r in self.records() if r.is_open]
        return open_records[-1] if open_records else None

    def start(
        self, objective: str = "", now: Optional[datetime.datetime] = None
    ) -> WorkRecord:
        data = self.read()
        if any(r.is_open for r in data):
            raise StateError(
                "a session is already running; stop it (or fix the storage file) first"
            )
        record = WorkRecord(start=now or now_local(), objective=objective)
        data.append(record)
        self.write(data)
        log.info("started session at %s", format_ts(record.start))
        return record

    def stop(
        self, objective: Optional[str] = None, now: Optional[datetime.datetime] = None
    ) -> WorkRecord:
        data = self.read()
        for idx in range(len(data) - 1, -1, -1):
            if data[idx].is_open:
                break
        else:
            raise StateError("no running session to stop")
        closed = data[idx].close(now or now_local(), objective)
        data[idx] = closed
        self.write(data)
        log.info("stopped session started at %s", format_ts(closed.start))
        return closed
