"""In-memory session store."""

from __future__ import annotations

import copy
from datetime import time
from typing import Any

from timetable.domain.bus import EventBus
from timetable.domain.models import ClassSession, Grade, Weekday
from timetable.repos.documents import DocumentSessionStore


class InMemorySessionStore(DocumentSessionStore):
    """Dict-backed store of day documents, keyed by weekday name.

    Documents are deep-copied on the way in and out, so callers only change
    stored state through ``replace_day``, as with a remote document store.
    """

    def __init__(self, bus: EventBus | None = None) -> None:
        super().__init__(bus)
        self._documents: dict[str, dict[str, Any]] = {}

    def _read_document(self, day: Weekday) -> dict[str, Any] | None:
        document = self._documents.get(str(day))
        return copy.deepcopy(document) if document is not None else None

    def _write_document(self, day: Weekday, document: dict[str, Any]) -> None:
        self._documents[str(day)] = copy.deepcopy(document)

    def clear(self) -> None:
        self._documents.clear()


# ---------------------------------------------------------------------------
# Seed data – a small week useful for manual conflict testing
# ---------------------------------------------------------------------------


def _seed_sessions(store: InMemorySessionStore) -> None:
    store.replace_day(
        Weekday.MONDAY,
        [
            ClassSession(
                subject="Mathematics",
                start_time=time(8, 0),
                end_time=time(9, 0),
                room="Room 201",
                instructor="Dr. Ahmed",
                grade=Grade.NINTH,
                lecture_number="1",
            ),
            ClassSession(
                subject="Physics",
                start_time=time(9, 0),
                end_time=time(10, 0),
                room="Lab 3",
                instructor="Ms. Sara",
                grade=Grade.NINTH,
                lecture_number="2",
            ),
            ClassSession(
                subject="English",
                start_time=time(8, 30),
                end_time=time(9, 30),
                room="Room 105",
                instructor="Mr. Khan",
                grade=Grade.FIRST_YEAR,
            ),
        ],
    )
    store.replace_day(
        Weekday.TUESDAY,
        [
            ClassSession(
                subject="Computer Science",
                start_time=time(10, 0),
                end_time=time(11, 30),
                room="Lab 1",
                instructor="Mr. Usman",
                grade=Grade.SECOND_YEAR,
            ),
        ],
    )


def create_session_store(seed: bool = False) -> InMemorySessionStore:
    """Return an InMemorySessionStore, optionally pre-loaded with sample data."""
    store = InMemorySessionStore()
    if seed:
        _seed_sessions(store)
    return store
