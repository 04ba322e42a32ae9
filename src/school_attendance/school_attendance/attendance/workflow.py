from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Dict, Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.exceptions import LoadFailure, ValidationError, ValidationWarning
from .confirmation import Confirmation, ConfirmationBook, PendingAction
from .model import SubmissionResult
from .reconciliation import AttendanceSheet, SheetContext, coerce_status
from .service import AttendanceService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfirmOutcome:
    action: PendingAction
    message: str = ""
    result: Optional[SubmissionResult] = None


class AttendanceWorkflow:
    """One teacher's attendance-taking session.

    Holds the open sheet and the pending confirmations. Switching class or
    date while the sheet is dirty, marking everybody at once, and submitting
    with unmarked students all go through a confirmation token. Public methods
    run under a per-workflow lock so requests from one session do not interleave.
    """

    def __init__(self, service: AttendanceService, *, teacher_id: int):
        self._service = service
        self._teacher_id = int(teacher_id)
        self._sheet: Optional[AttendanceSheet] = None
        self._book = ConfirmationBook()
        self._lock = threading.Lock()

    @property
    def teacher_id(self) -> int:
        return self._teacher_id

    @property
    def sheet(self) -> Optional[AttendanceSheet]:
        return self._sheet

    def require_sheet(self) -> AttendanceSheet:
        if self._sheet is None:
            raise ValidationError("Select a class to get started")
        return self._sheet

    def open(self, class_id: int, attendance_date: date) -> Optional[Confirmation]:
        """Open (class, date); returns a confirmation instead when unsaved edits would be lost."""

        with self._lock:
            if self._sheet is not None and self._sheet.targets(class_id, attendance_date):
                return None

            if self._sheet is not None and self._sheet.dirty:
                return self._book.request(
                    PendingAction.SWITCH_SHEET,
                    "You have unsaved changes. Are you sure you want to switch? All unsaved changes will be lost.",
                    class_id=int(class_id),
                    attendance_date=attendance_date,
                )

            self._load(int(class_id), attendance_date)
            return None

    def _load(self, class_id: int, attendance_date: date) -> None:
        self._book.clear()
        self._sheet = None
        context = SheetContext(teacher_id=self._teacher_id, class_id=class_id, attendance_date=attendance_date)
        self._sheet = self._service.load_sheet(context)

    def set_field(self, student_id: int, field: str, value) -> None:
        with self._lock:
            self.require_sheet().set_field(int(student_id), field, value)

    def request_bulk_status(self, status: str) -> Confirmation:
        with self._lock:
            sheet = self.require_sheet()
            if not sheet.roster:
                raise ValidationError("There are no students in this class")
            # Validate now so a bad status fails before the prompt.
            parsed = coerce_status(status)
            if parsed is None:
                raise ValidationError("A status is required to mark all students")
            return self._book.request(
                PendingAction.BULK_STATUS,
                f'Mark ALL students as "{parsed.value.upper()}"? This will overwrite any existing selections.',
                status=parsed.value,
            )

    def submit(self) -> SubmissionResult:
        """Persist now, or raise ``ValidationWarning`` when some students are unmarked."""

        with self._lock:
            sheet = self.require_sheet()
            unmarked = sheet.unmarked()
            if unmarked:
                confirmation = self._book.request(
                    PendingAction.SUBMIT_UNMARKED,
                    f"{len(unmarked)} students don't have attendance marked. Do you want to continue? "
                    "Unmarked students will be skipped.",
                )
                raise ValidationWarning(confirmation.message, unmarked=unmarked, token=confirmation.token)
            return self._persist(sheet)

    def _persist(self, sheet: AttendanceSheet) -> SubmissionResult:
        result = self._service.submit(sheet)
        sheet.mark_saved()

        ctx = sheet.context
        try:
            self._load(ctx.class_id, ctx.attendance_date)
        except LoadFailure:
            # The write went through; the caller reopens the sheet.
            logger.warning("saved attendance but could not reload class %s on %s", ctx.class_id, ctx.attendance_date)
        return result

    def confirm(self, token: str) -> ConfirmOutcome:
        with self._lock:
            confirmation = self._book.confirm(token)

            if confirmation.action == PendingAction.SWITCH_SHEET:
                self._load(confirmation.params["class_id"], confirmation.params["attendance_date"])
                return ConfirmOutcome(action=confirmation.action, message="Switched, unsaved changes were discarded")

            sheet = self.require_sheet()
            if confirmation.action == PendingAction.BULK_STATUS:
                sheet.bulk_set_status(confirmation.params["status"])
                return ConfirmOutcome(
                    action=confirmation.action, message=f"All students marked as {confirmation.params['status']}"
                )

            return ConfirmOutcome(action=confirmation.action, result=self._persist(sheet))

    def decline(self, token: str) -> None:
        with self._lock:
            self._book.decline(token)


@dataclass
class _Entry:
    workflow: AttendanceWorkflow
    last_seen: datetime


class WorkflowRegistry:
    """Per-session workflows kept in process memory, keyed by an opaque id.

    Entries not used for ``max_idle`` are dropped on the next ``get``, so
    sessions that expire without logging out do not pile up.
    """

    def __init__(
        self,
        service: AttendanceService,
        *,
        max_idle: timedelta = timedelta(days=DEFAULT_SESSION_DAYS),
        clock: Callable[[], datetime] = now_local,
    ):
        self._service = service
        self._max_idle = max_idle
        self._clock = clock
        self._entries: Dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: Optional[str], *, teacher_id: int) -> tuple[str, AttendanceWorkflow]:
        now = self._clock()
        with self._lock:
            self._evict_idle(now)
            entry = self._entries.get(key) if key else None
            if entry is None or entry.workflow.teacher_id != int(teacher_id):
                key = uuid.uuid4().hex
                entry = _Entry(workflow=AttendanceWorkflow(self._service, teacher_id=teacher_id), last_seen=now)
                self._entries[key] = entry
            entry.last_seen = now
            return key, entry.workflow

    def discard(self, key: Optional[str]) -> None:
        if not key:
            return
        with self._lock:
            self._entries.pop(key, None)

    def _evict_idle(self, now: datetime) -> None:
        expired = [k for k, e in self._entries.items() if now - e.last_seen > self._max_idle]
        for k in expired:
            del self._entries[k]
        if expired:
            logger.info("evicted %s idle attendance workflows", len(expired))
