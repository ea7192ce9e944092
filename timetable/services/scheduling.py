"""Create, edit and delete workflows for weekly class sessions.

Every write is a read-modify-write of one day's complete session list:
``load_day`` → conflict check → ``replace_day``. The two store calls are not
linked by a transaction or version token, so two writers racing on the same
day can both pass the conflict check and the later write replaces the
earlier one. Conflict-freedom therefore only holds when a day has a single
writer at a time.
"""

from __future__ import annotations

import logging

from timetable.domain.errors import StoreError, ValidationError
from timetable.domain.models import (
    ALL_DAYS,
    WEEKDAYS,
    AllDaysPolicy,
    ClassSession,
    ConflictResult,
    DayOutcome,
    DayTarget,
    ScheduleResult,
    SessionFields,
    Weekday,
)
from timetable.repos.documents import SessionStore
from timetable.services.conflicts import check_conflict

log = logging.getLogger(__name__)


def parse_day_target(value: str) -> DayTarget:
    """Resolve a weekday name (case-insensitive) or ``"All"``.

    Raises ValueError for anything else, including Sunday.
    """
    if value.strip().lower() == ALL_DAYS.lower():
        return ALL_DAYS
    for day in WEEKDAYS:
        if day.value.lower() == value.strip().lower():
            return day
    raise ValueError(f"Unknown day {value!r}")


def validate_candidate(candidate: SessionFields, enforce_time_order: bool = True) -> None:
    """Raise ValidationError when the candidate cannot be scheduled at all."""
    problems: list[str] = []
    for field in ("subject", "room", "instructor"):
        if not getattr(candidate, field, "").strip():
            problems.append(f"{field} is required")
    if enforce_time_order and candidate.start_time >= candidate.end_time:
        problems.append("end_time must be after start_time")
    if problems:
        raise ValidationError(problems)


class SchedulingService:
    """Entry point used by the presentation layer for timetable writes.

    Conflict rejections are reported through ``DayOutcome`` values and never
    persisted. Validation and store failures are raised.
    """

    def __init__(
        self,
        store: SessionStore,
        enforce_time_order: bool = True,
        move_across_days: bool = False,
        all_days_policy: AllDaysPolicy = AllDaysPolicy.INDEPENDENT,
    ) -> None:
        self.store = store
        self.enforce_time_order = enforce_time_order
        self.move_across_days = move_across_days
        self.all_days_policy = all_days_policy

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, candidate: SessionFields, target: DayTarget) -> ScheduleResult:
        """Admit *candidate* on one weekday, or on every weekday for ``"All"``."""
        validate_candidate(candidate, self.enforce_time_order)
        if target == ALL_DAYS:
            if self.all_days_policy == AllDaysPolicy.PRECHECK:
                return self._create_all_days_prechecked(candidate)
            return self._create_all_days(candidate)
        return ScheduleResult(outcomes=[self._admit(candidate, Weekday(target))])

    def _admit(self, candidate: SessionFields, day: Weekday) -> DayOutcome:
        sessions = self.store.load_day(day)
        result = check_conflict(candidate, sessions)
        if not result.admitted:
            return self._rejected(candidate, day, result)

        session = ClassSession.from_draft(candidate)
        sessions.append(session)
        self.store.replace_day(day, sessions)
        log.info("Admitted %s (%s) on %s as %s", session.subject, session.time_range, day, session.id)
        return DayOutcome(day=day, admitted=True, session=session)

    def _create_all_days(self, candidate: SessionFields) -> ScheduleResult:
        # Each day is its own load/check/write; earlier days stay admitted
        # whatever happens on later ones.
        outcomes: list[DayOutcome] = []
        for day in WEEKDAYS:
            try:
                outcomes.append(self._admit(candidate, day))
            except StoreError as exc:
                log.error("Store failure on %s after %d day(s) committed", day, len(outcomes))
                raise StoreError(str(exc), completed=outcomes) from exc
        return ScheduleResult(outcomes=outcomes)

    def _create_all_days_prechecked(self, candidate: SessionFields) -> ScheduleResult:
        week = self.store.load_all_days()
        for day in WEEKDAYS:
            result = check_conflict(candidate, week.get(day, []))
            if not result.admitted:
                return ScheduleResult(outcomes=[self._rejected(candidate, day, result)])
        return self._create_all_days(candidate)

    def _rejected(self, candidate: SessionFields, day: Weekday, result: ConflictResult) -> DayOutcome:
        message = result.message(day, candidate)
        log.info("Rejected %s (%s): %s", candidate.subject, candidate.time_range, message)
        return DayOutcome(day=day, admitted=False, conflict=result, message=message)

    # ------------------------------------------------------------------
    # Edit
    # ------------------------------------------------------------------

    def edit(
        self,
        session_id: str,
        candidate: SessionFields,
        target_day: Weekday,
        original_day: Weekday | None = None,
        move_across_days: bool | None = None,
    ) -> DayOutcome:
        """Replace session *session_id* with *candidate* on *target_day*.

        If the id is not in the target day's list (the edit moved it from
        another day) the session is appended there. The copy on the original
        day is left in place unless *move_across_days* (or the service-wide
        default) is set, in which case it is removed from *original_day*, or
        from every other weekday when no original day is given.
        """
        validate_candidate(candidate, self.enforce_time_order)
        target_day = Weekday(target_day)
        sessions = self.store.load_day(target_day)
        result = check_conflict(candidate, sessions, exclude_id=session_id)
        if not result.admitted:
            return self._rejected(candidate, target_day, result)

        updated = ClassSession.from_draft(candidate, session_id=session_id)
        if any(s.id == session_id for s in sessions):
            sessions = [updated if s.id == session_id else s for s in sessions]
        else:
            sessions.append(updated)
        self.store.replace_day(target_day, sessions)
        log.info("Updated %s on %s", session_id, target_day)

        if move_across_days is None:
            move_across_days = self.move_across_days
        if move_across_days:
            self._purge_elsewhere(session_id, target_day, original_day)
        return DayOutcome(day=target_day, admitted=True, session=updated)

    def _purge_elsewhere(
        self, session_id: str, target_day: Weekday, original_day: Weekday | None
    ) -> None:
        if original_day is not None:
            days = [Weekday(original_day)]
        else:
            days = list(WEEKDAYS)
        for day in days:
            if day == target_day:
                continue
            sessions = self.store.load_day(day)
            remaining = [s for s in sessions if s.id != session_id]
            if len(remaining) != len(sessions):
                self.store.replace_day(day, remaining)
                log.info("Moved %s off %s", session_id, day)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete(self, session_id: str, day: Weekday) -> None:
        """Remove *session_id* from *day*. Unknown ids leave the list unchanged.

        Unreadable stored records are matched by their stored id too, so a
        damaged entry can still be deleted.
        """
        day = Weekday(day)
        sessions = self.store.load_day(day)
        remaining = [s for s in sessions if s.id != session_id]
        self.store.replace_day(day, remaining)
        if len(remaining) != len(sessions):
            log.info("Deleted %s from %s", session_id, day)
