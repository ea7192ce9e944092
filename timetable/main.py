"""FastAPI application: entry point for the class timetable service."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Response, status

from timetable.core.config import Settings, settings
from timetable.core.exceptions import register_exception_handlers
from timetable.core.logging import setup_logging
from timetable.domain.models import (
    ALL_DAYS,
    WEEKDAYS,
    ClassSession,
    DayOutcome,
    DaySchedule,
    DayTarget,
    Grade,
    GradeTimetableEntry,
    ScheduleResponse,
    SessionDraft,
    Weekday,
)
from timetable.repos.documents import SessionStore
from timetable.repos.memory import create_session_store
from timetable.services.scheduling import SchedulingService, parse_day_target
from timetable.services.views import load_grade_timetable, scheduled_instructors

setup_logging(settings.log_level)
log = logging.getLogger(__name__)


def build_store(config: Settings) -> SessionStore:
    if config.store_backend == "mongo":
        from timetable.repos.mongo import create_mongo_store

        return create_mongo_store(config)
    return create_session_store(seed=config.seed_sample_data)


app = FastAPI(title=settings.app_name)
register_exception_handlers(app)

# ── Singletons (created at import time for simplicity) ────────────────
session_store = build_store(settings)
scheduler = SchedulingService(
    session_store,
    enforce_time_order=settings.enforce_time_order,
    move_across_days=settings.move_across_days,
    all_days_policy=settings.all_days_policy,
)
log.info("Timetable service using the %s session store", settings.store_backend)


def _target(day: str) -> DayTarget:
    try:
        return parse_day_target(day)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown day {day!r}")


def _weekday(day: str) -> Weekday:
    target = _target(day)
    if target == ALL_DAYS:
        raise HTTPException(status_code=400, detail="A single weekday is required here")
    return target


def _conflict_detail(outcome: DayOutcome) -> dict:
    return {
        "message": outcome.message,
        "day": outcome.day,
        "conflict": outcome.conflict.model_dump(mode="json") if outcome.conflict else None,
    }


# ── Routes ────────────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict:
    return {"status": "healthy", "store": settings.store_backend}


@app.get("/timetable", response_model=list[DaySchedule])
def list_week() -> list[DaySchedule]:
    """Return every weekday's sessions in display order."""
    week = session_store.load_all_days()
    return [DaySchedule.from_entries(day, week.get(day, [])) for day in WEEKDAYS]


@app.get("/timetable/{day}", response_model=DaySchedule)
def get_day(day: str) -> DaySchedule:
    weekday = _weekday(day)
    return DaySchedule.from_entries(weekday, session_store.load_day(weekday))


@app.post(
    "/timetable/{day}",
    response_model=ScheduleResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_session(day: str, payload: SessionDraft) -> ScheduleResponse:
    """Schedule a class on one weekday, or on every weekday when *day* is ``All``.

    ``All`` admits each day independently: conflicting days are reported in
    the outcomes while the others are stored. Nothing admitted means 409.
    """
    result = scheduler.create(payload, _target(day))
    if not result.admitted:
        details = [_conflict_detail(o) for o in result.rejected]
        raise HTTPException(
            status_code=409,
            detail=details[0] if len(details) == 1 else details,
        )
    return ScheduleResponse.from_result(result)


@app.put("/timetable/{day}/sessions/{session_id}", response_model=ClassSession)
def edit_session(
    day: str,
    session_id: str,
    payload: SessionDraft,
    original_day: str | None = None,
    move_across_days: bool | None = None,
) -> ClassSession:
    """Replace a session on *day*; see SchedulingService.edit for day moves."""
    outcome = scheduler.edit(
        session_id,
        payload,
        _weekday(day),
        original_day=_weekday(original_day) if original_day else None,
        move_across_days=move_across_days,
    )
    if not outcome.admitted:
        raise HTTPException(status_code=409, detail=_conflict_detail(outcome))
    return outcome.session


@app.delete(
    "/timetable/{day}/sessions/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_session(day: str, session_id: str) -> Response:
    scheduler.delete(session_id, _weekday(day))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/grades/{grade}/timetable", response_model=list[GradeTimetableEntry])
def get_grade_timetable(grade: Grade, instructor: str | None = None) -> list[GradeTimetableEntry]:
    """Return a grade's week sorted by day then time, optionally for one instructor."""
    return load_grade_timetable(session_store, grade, instructor)


@app.get("/instructors", response_model=list[str])
def list_instructors() -> list[str]:
    return scheduled_instructors(session_store.load_all_days())
