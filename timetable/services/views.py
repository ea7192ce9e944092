"""Read-side projections of the weekly timetable."""

from __future__ import annotations

from timetable.domain.models import (
    WEEKDAYS,
    DayEntry,
    Grade,
    GradeTimetableEntry,
    Weekday,
    sessions_only,
)
from timetable.repos.documents import SessionStore

_DAY_ORDER = {day: index for index, day in enumerate(WEEKDAYS)}


def grade_timetable(
    week: dict[Weekday, list[DayEntry]],
    grade: Grade,
    instructor: str | None = None,
) -> list[GradeTimetableEntry]:
    """Every session taught to *grade* this week, by weekday then start time.

    Passing *instructor* narrows the view to that staff member's sessions.
    """
    entries = [
        GradeTimetableEntry(day=day, session=session)
        for day, day_entries in week.items()
        for session in sessions_only(day_entries)
        if session.grade == grade
        and (instructor is None or session.instructor == instructor)
    ]
    entries.sort(key=lambda e: (_DAY_ORDER[e.day], e.session.start_time, e.session.end_time))
    return entries


def scheduled_instructors(week: dict[Weekday, list[DayEntry]]) -> list[str]:
    """Distinct instructor names appearing anywhere in the week, sorted."""
    return sorted({s.instructor for entries in week.values() for s in sessions_only(entries)})


def load_grade_timetable(
    store: SessionStore, grade: Grade, instructor: str | None = None
) -> list[GradeTimetableEntry]:
    return grade_timetable(store.load_all_days(), grade, instructor)
