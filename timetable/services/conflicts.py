"""Service for detecting scheduling conflicts between class sessions."""

from __future__ import annotations

from typing import Iterable

from timetable.domain.models import (
    ClassSession,
    ConflictKind,
    ConflictResult,
    DayEntry,
    SessionFields,
    sessions_only,
)
from timetable.services.intervals import overlaps


def find_overlapping(
    candidate: SessionFields,
    existing_sessions: Iterable[DayEntry],
    exclude_id: str | None = None,
) -> list[ClassSession]:
    """Return existing sessions whose time range overlaps the candidate's.

    Entries that could not be decoded from storage never overlap.
    """
    return [
        session
        for session in sessions_only(existing_sessions)
        if session.id != exclude_id
        and overlaps(
            candidate.start_time,
            candidate.end_time,
            session.start_time,
            session.end_time,
        )
    ]


def check_conflict(
    candidate: SessionFields,
    existing_sessions: Iterable[DayEntry],
    exclude_id: str | None = None,
) -> ConflictResult:
    """Decide whether *candidate* may join a day holding *existing_sessions*.

    Only sessions whose time range overlaps the candidate's are considered.
    An overlapping session taught by the same instructor is an instructor
    conflict; otherwise one taught to the same grade is a grade conflict.
    Overlaps that share neither are allowed. The first conflict in list order
    wins. ``exclude_id`` removes the session being edited so it cannot clash
    with itself.
    """
    for session in find_overlapping(candidate, existing_sessions, exclude_id):
        if session.instructor == candidate.instructor:
            return ConflictResult(kind=ConflictKind.INSTRUCTOR, conflicting=session)
        if session.grade == candidate.grade:
            return ConflictResult(kind=ConflictKind.GRADE, conflicting=session)
    return ConflictResult()
