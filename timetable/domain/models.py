"""Domain models for the class-timetable scheduler."""

from __future__ import annotations

import uuid
from datetime import time
from enum import StrEnum
from typing import Any, Iterable, Literal, Union

from pydantic import BaseModel, Field, field_validator


class Weekday(StrEnum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"


# Teaching days in display order; Sunday never carries sessions.
WEEKDAYS: tuple[Weekday, ...] = tuple(Weekday)

ALL_DAYS = "All"

DayTarget = Union[Weekday, Literal["All"]]


class Grade(StrEnum):
    NINTH = "9th"
    TENTH = "10th"
    FIRST_YEAR = "1st Year"
    SECOND_YEAR = "2nd Year"


class ConflictKind(StrEnum):
    INSTRUCTOR = "instructor_conflict"
    GRADE = "grade_conflict"


class AllDaysPolicy(StrEnum):
    INDEPENDENT = "independent"
    PRECHECK = "precheck"


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class SessionFields(BaseModel):
    """Fields shared by stored sessions and incoming drafts."""

    subject: str
    start_time: time
    end_time: time
    room: str
    instructor: str
    grade: Grade
    lecture_number: str | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _naive_minute_time(cls, value: time) -> time:
        # Session times are naive wall-clock values.
        if value.tzinfo is not None:
            raise ValueError("time must not carry a timezone offset")
        return value.replace(second=0, microsecond=0)

    @property
    def time_range(self) -> str:
        return f"{self.start_time:%H:%M} - {self.end_time:%H:%M}"


class ClassSession(SessionFields):
    """One weekly lecture slot, admitted into exactly one DaySchedule."""

    id: str = Field(default_factory=_new_id)

    @classmethod
    def from_draft(cls, draft: SessionFields, session_id: str | None = None) -> ClassSession:
        data = draft.model_dump(include=set(SessionFields.model_fields))
        if session_id is not None:
            data["id"] = session_id
        return cls(**data)


class UnreadableRecord(BaseModel):
    """A stored class record that could not be decoded.

    Kept verbatim so the day can still be written back without losing it.
    Conflict checks and views ignore it; delete and edit match it by ``id``.
    """

    id: str | None = None
    record: Any
    problem: str


DayEntry = Union[ClassSession, UnreadableRecord]


def sessions_only(entries: Iterable[DayEntry]) -> list[ClassSession]:
    return [e for e in entries if isinstance(e, ClassSession)]


class DaySchedule(BaseModel):
    day: Weekday
    sessions: list[ClassSession] = Field(default_factory=list)
    unreadable: list[UnreadableRecord] = Field(default_factory=list)

    @classmethod
    def from_entries(cls, day: Weekday, entries: list[DayEntry]) -> DaySchedule:
        return cls(
            day=day,
            sessions=sessions_only(entries),
            unreadable=[e for e in entries if isinstance(e, UnreadableRecord)],
        )


class ConflictResult(BaseModel):
    """Outcome of checking one candidate against one day's sessions."""

    kind: ConflictKind | None = None
    conflicting: ClassSession | None = None

    @property
    def admitted(self) -> bool:
        return self.kind is None

    def message(self, day: str, candidate: SessionFields) -> str:
        if self.kind is None or self.conflicting is None:
            return f"In {day}: no conflict."
        if self.kind == ConflictKind.INSTRUCTOR:
            return (
                f"In {day}: Instructor {candidate.instructor} is already teaching "
                f"{self.conflicting.subject} ({self.conflicting.grade}) at this time."
            )
        return (
            f"In {day}: Class {candidate.grade} already has a lecture "
            f"({self.conflicting.subject}) at this time."
        )


class DayOutcome(BaseModel):
    day: Weekday
    admitted: bool
    session: ClassSession | None = None
    conflict: ConflictResult | None = None
    message: str | None = None


class ScheduleResult(BaseModel):
    outcomes: list[DayOutcome] = Field(default_factory=list)

    @property
    def admitted(self) -> list[DayOutcome]:
        return [o for o in self.outcomes if o.admitted]

    @property
    def rejected(self) -> list[DayOutcome]:
        return [o for o in self.outcomes if not o.admitted]


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class SessionDraft(SessionFields):
    """A proposed session as submitted by the presentation layer.

    Field presence and time ordering are checked by the scheduling service,
    not here, so programmatic callers and the API share one rule set.
    """


class ScheduleResponse(BaseModel):
    outcomes: list[DayOutcome]
    admitted_count: int
    rejected_count: int

    @classmethod
    def from_result(cls, result: ScheduleResult) -> ScheduleResponse:
        return cls(
            outcomes=result.outcomes,
            admitted_count=len(result.admitted),
            rejected_count=len(result.rejected),
        )


class GradeTimetableEntry(BaseModel):
    day: Weekday
    session: ClassSession
