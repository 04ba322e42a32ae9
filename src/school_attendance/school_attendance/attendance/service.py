from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Optional

from ..classes.repository import ClassRepository
from ..common.datetime_utils import now_local
from ..core.constants import RECENT_ATTENDANCE_DAYS, RECENT_ATTENDANCE_LIMIT
from ..core.exceptions import (
    DataStoreError,
    DuplicateKeyError,
    DuplicateKeyFailure,
    LoadFailure,
    PersistFailure,
    ValidationError,
)
from ..students.repository import StudentRepository
from .model import SubmissionResult
from .reconciliation import AttendanceSheet, SheetContext
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Loads attendance sheets and persists their edits."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        classes: ClassRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._students = students
        self._classes = classes
        self._clock = clock

    def load_sheet(self, context: SheetContext) -> AttendanceSheet:
        try:
            cls = self._classes.get_by_id(context.class_id)
        except DataStoreError as e:
            logger.exception("failed to load class %s", context.class_id)
            raise LoadFailure("Failed to load class") from e
        if not cls or not cls.is_active:
            raise ValidationError("Class not found")

        try:
            roster = self._students.list_roster(context.class_id)
        except DataStoreError as e:
            logger.exception("failed to load roster for class %s", context.class_id)
            raise LoadFailure("Failed to load students") from e

        try:
            records = self._attendance.list_for_class_and_date(context.class_id, context.attendance_date)
        except DataStoreError as e:
            logger.exception(
                "failed to load attendance for class %s on %s", context.class_id, context.attendance_date
            )
            raise LoadFailure("Failed to load existing attendance") from e

        return AttendanceSheet.load(context, roster, records)

    def submit(self, sheet: AttendanceSheet) -> SubmissionResult:
        """Persist the sheet: one batched insert, then updates one at a time.

        Stops at the first failure. Writes applied before it are not undone.
        """

        submission = sheet.compute_submission(updated_at=self._clock())
        ctx = sheet.context
        inserted = 0
        updated = 0

        if submission.inserts:
            try:
                self._attendance.insert_many(submission.inserts)
            except DuplicateKeyError as e:
                logger.warning(
                    "duplicate attendance insert for class %s on %s: %s", ctx.class_id, ctx.attendance_date, e
                )
                raise DuplicateKeyFailure(
                    "Attendance for some students was already saved. Please reload and retry."
                ) from e
            except DataStoreError as e:
                logger.exception("failed to insert attendance for class %s on %s", ctx.class_id, ctx.attendance_date)
                raise PersistFailure("Failed to save attendance. Please try again.") from e
            inserted = len(submission.inserts)

        for update in submission.updates:
            try:
                found = self._attendance.update_record(
                    record_id=update.record_id,
                    status=update.status,
                    notes=update.notes,
                    updated_at=update.updated_at,
                )
            except DataStoreError as e:
                logger.exception("failed to update attendance record %s", update.record_id)
                raise PersistFailure(
                    "Failed to save attendance. Please try again.", inserted=inserted, updated=updated
                ) from e
            if not found:
                logger.warning("attendance record %s disappeared before update", update.record_id)
                raise PersistFailure(
                    "An attendance record no longer exists. Please reload and retry.",
                    inserted=inserted,
                    updated=updated,
                )
            updated += 1

        logger.info(
            "teacher %s saved attendance for class %s on %s: %s inserted, %s updated",
            ctx.teacher_id,
            ctx.class_id,
            ctx.attendance_date,
            inserted,
            updated,
        )
        return SubmissionResult(inserted=inserted, updated=updated)

    def recent_for_teacher(self, teacher_id: int, *, today: Optional[date] = None):
        today = today or self._clock().date()
        since = today - timedelta(days=RECENT_ATTENDANCE_DAYS)
        try:
            return self._attendance.list_recent_for_teacher(
                int(teacher_id), since=since, limit=RECENT_ATTENDANCE_LIMIT
            )
        except DataStoreError as e:
            logger.exception("failed to load recent attendance for teacher %s", teacher_id)
            raise LoadFailure("Failed to load recent attendance") from e
