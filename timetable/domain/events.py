"""Change events emitted by session stores."""

from __future__ import annotations

from pydantic import BaseModel

from timetable.domain.models import ClassSession, Weekday


class DayScheduleReplaced(BaseModel):
    """Fired after a day's whole session list has been overwritten."""

    day: Weekday
    sessions: list[ClassSession]
