"""Exceptions raised by the scheduling service and session stores."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from timetable.domain.models import DayOutcome


class SchedulingError(Exception):
    """Base class for scheduler failures surfaced to the caller."""


class ValidationError(SchedulingError):
    """A candidate session is malformed and was never checked for conflicts."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        super().__init__("; ".join(problems))


class StoreError(SchedulingError):
    """The session store failed to read or write a day's document.

    ``completed`` holds the outcomes of days processed before the
    failure (only populated by "All" fan-out); those days are not rolled back.
    """

    def __init__(self, message: str, completed: list[DayOutcome] | None = None) -> None:
        self.completed: list[DayOutcome] = list(completed or [])
        super().__init__(message)
