"""Day-document persistence shared by the concrete session stores.

Each weekday is stored as one document holding its embedded class records::

    {"day": "Monday",
     "classes": [{"id": "...", "subject": "Physics", "time": "09:00 - 10:00",
                  "room": "Lab 1", "instructor": "Mr. Khan",
                  "className": "9th", "lectureNumber": "1"}]}
"""

from __future__ import annotations

import logging
from datetime import datetime, time
from typing import Any, Callable, Protocol

from pydantic import ValidationError as PydanticValidationError

from timetable.domain.bus import EventBus
from timetable.domain.errors import StoreError
from timetable.domain.events import DayScheduleReplaced
from timetable.domain.models import (
    WEEKDAYS,
    ClassSession,
    DayEntry,
    Grade,
    UnreadableRecord,
    Weekday,
    sessions_only,
)

log = logging.getLogger(__name__)

# Records written before grades were tracked belong to the first grade.
DEFAULT_GRADE = Grade.NINTH


class SessionStore(Protocol):
    """Persistence port used by the scheduling service.

    ``replace_day`` is an unconditional overwrite: no merge and no version
    check, so the last writer wins. Day lists may contain UnreadableRecord
    entries, which must be passed back to ``replace_day`` to be kept.
    """

    def load_day(self, day: Weekday) -> list[DayEntry]: ...

    def load_all_days(self) -> dict[Weekday, list[DayEntry]]: ...

    def replace_day(self, day: Weekday, sessions: list[DayEntry]) -> None: ...

    def subscribe(self, handler: Callable[[DayScheduleReplaced], None]) -> Callable[[], None]: ...


def _parse_clock(value: str) -> time:
    return datetime.strptime(value.strip(), "%H:%M").time()


def encode_session(session: ClassSession) -> dict[str, Any]:
    return {
        "id": session.id,
        "subject": session.subject,
        "time": session.time_range,
        "room": session.room,
        "instructor": session.instructor,
        "className": str(session.grade),
        "lectureNumber": session.lecture_number,
    }


def decode_session(record: dict[str, Any]) -> ClassSession:
    """Build a ClassSession from an embedded class record.

    Raises StoreError when the record cannot be read.
    """
    try:
        raw_time = record.get("time") or ""
        if not isinstance(raw_time, str):
            raise ValueError(f"expected 'HH:MM - HH:MM', got {raw_time!r}")
        start_str, sep, end_str = raw_time.partition(" - ")
        if not sep:
            raise ValueError(f"expected 'HH:MM - HH:MM', got {raw_time!r}")
        start_time, end_time = _parse_clock(start_str), _parse_clock(end_str)
        return ClassSession(
            id=str(record["id"]),
            subject=record.get("subject", ""),
            start_time=start_time,
            end_time=end_time,
            room=record.get("room", ""),
            instructor=record.get("instructor", ""),
            grade=record.get("className") or DEFAULT_GRADE,
            lecture_number=record.get("lectureNumber") or None,
        )
    except (AttributeError, KeyError, TypeError, ValueError, PydanticValidationError) as exc:
        record_id = record.get("id") if isinstance(record, dict) else None
        raise StoreError(f"Unreadable class record {record_id!r}: {exc}") from exc


def decode_entry(record: Any) -> DayEntry:
    """Decode a record, keeping it verbatim as an UnreadableRecord on failure."""
    try:
        return decode_session(record)
    except StoreError as exc:
        log.warning("%s; keeping it unchanged", exc)
        record_id = record.get("id") if isinstance(record, dict) else None
        return UnreadableRecord(
            id=str(record_id) if record_id is not None else None,
            record=record,
            problem=str(exc),
        )


def encode_entry(entry: DayEntry) -> Any:
    if isinstance(entry, UnreadableRecord):
        return entry.record
    return encode_session(entry)


def encode_day(day: Weekday, sessions: list[DayEntry]) -> dict[str, Any]:
    return {"day": str(day), "classes": [encode_entry(s) for s in sessions]}


def decode_day(document: dict[str, Any] | None) -> list[DayEntry]:
    if not document:
        return []
    return [decode_entry(record) for record in document.get("classes", [])]


class DocumentSessionStore:
    """Session store over one document per weekday.

    Subclasses provide ``_read_document`` / ``_write_document``; this class
    owns the record codec and the change notifications.
    """

    def __init__(self, bus: EventBus | None = None) -> None:
        self.bus = bus or EventBus()

    def _read_document(self, day: Weekday) -> dict[str, Any] | None:
        raise NotImplementedError

    def _write_document(self, day: Weekday, document: dict[str, Any]) -> None:
        raise NotImplementedError

    def load_day(self, day: Weekday) -> list[DayEntry]:
        return decode_day(self._read_document(Weekday(day)))

    def load_all_days(self) -> dict[Weekday, list[DayEntry]]:
        return {day: self.load_day(day) for day in WEEKDAYS}

    def replace_day(self, day: Weekday, sessions: list[DayEntry]) -> None:
        day = Weekday(day)
        self._write_document(day, encode_day(day, sessions))
        log.debug("Replaced %s with %d session(s)", day, len(sessions))
        self.bus.publish(DayScheduleReplaced(day=day, sessions=sessions_only(sessions)))

    def subscribe(self, handler: Callable[[DayScheduleReplaced], None]) -> Callable[[], None]:
        """Receive a DayScheduleReplaced event after every successful write."""
        return self.bus.subscribe(DayScheduleReplaced, handler)
