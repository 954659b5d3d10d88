import csv
import io
import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Set

from calendar_date import CalendarDate

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    def __init__(self, message, line_number=None, line=None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number
        self.line = line


@dataclass(frozen=True)
class Event:
    date: date
    description: str

    def __str__(self):
        return f"{EventCSVCodec.format_date(self.date)}: {self.description}"


def as_date(value) -> date:
    if isinstance(value, CalendarDate):
        return value.to_date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected a date or CalendarDate, got {type(value).__name__}")


class EventCSVCodec:
    """Reads and writes events as ``dd-MM-yyyy,<description>`` rows.

    Descriptions with commas, quotes or line breaks are quoted the usual
    CSV way, so they survive a write/read cycle. Plain descriptions are
    written bare.
    """

    @staticmethod
    def format_date(value: date) -> str:
        return f"{value.day:02d}-{value.month:02d}-{value.year:04d}"

    @staticmethod
    def parse_date(text: str) -> date:
        return CalendarDate.parse(text).to_date()

    def format_line(self, event: Event) -> str:
        buffer = io.StringIO()
        csv.writer(buffer, lineterminator="\n").writerow(
            [self.format_date(event.date), event.description]
        )
        return buffer.getvalue().removesuffix("\n")

    def parse_line(self, line: str, line_number: int = None) -> Event:
        try:
            rows = list(csv.reader(io.StringIO(line)))
        except csv.Error as exc:
            raise ParseError(str(exc), line_number, line) from exc
        if len(rows) != 1:
            raise ParseError("expected exactly one row", line_number, line)
        return self._from_row(rows[0], line_number, line)

    def _from_row(self, row, line_number, line) -> Event:
        if len(row) != 2:
            raise ParseError(f"expected 2 columns, got {len(row)}", line_number, line)
        try:
            event_date = self.parse_date(row[0])
        except ValueError as exc:
            raise ParseError(str(exc), line_number, line) from exc
        return Event(event_date, row[1])

    def read(self, stream) -> List[Event]:
        """Parse every row of ``stream``; the first bad row aborts the read."""
        events = []
        reader = csv.reader(stream)
        try:
            for row in reader:
                # blank line
                if not row:
                    continue
                events.append(self._from_row(row, reader.line_num, ",".join(row)))
        except csv.Error as exc:
            raise ParseError(str(exc), reader.line_num) from exc
        return events

    def write(self, stream, events):
        writer = csv.writer(stream, lineterminator="\n")
        for event in events:
            writer.writerow([self.format_date(event.date), event.description])


class EventStore:
    """In-memory list of events mirrored in a CSV file.

    Nothing is read until :meth:`load` is called. Writes go to the file
    first and the in-memory list only changes once the file has been
    updated, so an I/O failure leaves both sides as they were. Such
    failures are logged and reported through the return value.
    """

    def __init__(self, file_path, codec: EventCSVCodec = None):
        self.file_path = Path(file_path)
        self.codec = codec or EventCSVCodec()
        self._events: List[Event] = []

    def __len__(self):
        return len(self._events)

    def load(self) -> bool:
        try:
            if not self.file_path.exists():
                self.file_path.parent.mkdir(parents=True, exist_ok=True)
                self.file_path.touch()
                self._events = []
                logger.info("Created empty event file %s", self.file_path)
                return True

            with self.file_path.open("r", encoding="utf-8", newline="") as f:
                events = self.codec.read(f)
        except UnicodeDecodeError as exc:
            raise ParseError(f"{self.file_path} is not valid UTF-8: {exc}") from exc
        except OSError as exc:
            logger.error("Failed to load events from %s: %s", self.file_path, exc)
            return False

        self._events = events
        logger.debug("Loaded %d events from %s", len(events), self.file_path)
        return True

    def add(self, event_date, description: str) -> bool:
        event = Event(as_date(event_date), description)
        try:
            self._append_line(self.codec.format_line(event))
        except OSError as exc:
            logger.error("Failed to save event %s to %s: %s", event, self.file_path, exc)
            return False

        self._events.append(event)
        return True

    def remove(self, event_date) -> int:
        """Delete every event on ``event_date`` and return how many went."""
        target = as_date(event_date)
        remaining = [e for e in self._events if e.date != target]
        removed = len(self._events) - len(remaining)
        if not removed:
            return 0

        try:
            self._rewrite(remaining)
        except OSError as exc:
            logger.error("Failed to remove events on %s from %s: %s", target, self.file_path, exc)
            return 0

        self._events = remaining
        return removed

    def replace(self, old_date, new_date, description: str) -> bool:
        """Swap all events on ``old_date`` for a single new event."""
        target = as_date(old_date)
        event = Event(as_date(new_date), description)
        updated = [e for e in self._events if e.date != target]
        updated.append(event)

        try:
            self._rewrite(updated)
        except OSError as exc:
            logger.error("Failed to update events on %s in %s: %s", target, self.file_path, exc)
            return False

        self._events = updated
        return True

    def events_for_date(self, event_date) -> List[Event]:
        target = as_date(event_date)
        return [e for e in self._events if e.date == target]

    def first_match_for_date(self, event_date) -> Optional[Event]:
        target = as_date(event_date)
        for event in self._events:
            if event.date == target:
                return event
        return None

    def last_match_for_date(self, event_date) -> Optional[Event]:
        target = as_date(event_date)
        for event in reversed(self._events):
            if event.date == target:
                return event
        return None

    def events_between(self, start, end) -> List[Event]:
        first, last = as_date(start), as_date(end)
        return [e for e in self._events if first <= e.date <= last]

    def event_dates(self) -> Set[date]:
        return {e.date for e in self._events}

    def all_events(self) -> List[Event]:
        return list(self._events)

    def _append_line(self, line):
        prefix = "\n" if self._missing_final_newline() else ""
        with self.file_path.open("a", encoding="utf-8", newline="") as f:
            f.write(prefix + line + "\n")

    def _missing_final_newline(self):
        try:
            if self.file_path.stat().st_size == 0:
                return False
            with self.file_path.open("rb") as f:
                f.seek(-1, os.SEEK_END)
                return f.read(1) != b"\n"
        except FileNotFoundError:
            return False

    def _rewrite(self, events):
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self.file_path.name}.", suffix=".tmp", dir=self.file_path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                self.codec.write(f, events)
            os.replace(tmp_path, self.file_path)
        except OSError:
            Path(tmp_path).unlink(missing_ok=True)
            raise
        logger.debug("Rewrote %s with %d events", self.file_path, len(events))
