"""Attendance reconciliation.

Merges a class roster with the attendance already saved for one date into an
editable map (student id -> ``EditableEntry``) and turns edits back into the
minimal set of inserts and updates.

The free functions are pure; ``AttendanceSheet`` wraps them with the roster,
the ``SheetContext`` and a dirty flag.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..students.model import Student
from .model import (
    AttendanceInsert,
    AttendanceRecord,
    AttendanceUpdate,
    EditableEntry,
    Submission,
)

EditableMap = Dict[int, EditableEntry]
ExistingIdMap = Dict[int, int]

EDITABLE_FIELDS = ("status", "notes")


@dataclass(frozen=True)
class SheetContext:
    """Who is taking attendance, for which class and day."""

    teacher_id: int
    class_id: int
    attendance_date: date


def coerce_status(value) -> Optional[AttendanceStatus]:
    if value is None or value == "":
        return None
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown attendance status: {value!r}")


def build_editable_state(
    roster: Sequence[Student],
    existing_records: Iterable[AttendanceRecord],
) -> Tuple[EditableMap, ExistingIdMap]:
    on_roster = {s.student_id for s in roster}
    editable: EditableMap = {}
    existing_ids: ExistingIdMap = {}

    for record in existing_records:
        # Inactive or transferred students are not on the roster.
        if record.student_id not in on_roster:
            continue
        editable[record.student_id] = EditableEntry(status=record.status, notes=record.notes or "")
        existing_ids[record.student_id] = record.record_id

    return editable, existing_ids


def set_field(editable: Mapping[int, EditableEntry], student_id: int, field: str, value) -> EditableMap:
    if field not in EDITABLE_FIELDS:
        raise ValidationError(f"Unknown field: {field}")

    if field == "status":
        value = coerce_status(value)
    else:
        value = "" if value is None else str(value)

    current = editable.get(student_id, EditableEntry())
    updated = dict(editable)
    updated[student_id] = replace(current, **{field: value})
    return updated


def bulk_set_status(
    editable: Mapping[int, EditableEntry],
    roster: Sequence[Student],
    status,
) -> EditableMap:
    status = coerce_status(status)
    if status is None:
        raise ValidationError("A status is required to mark all students")

    return {
        s.student_id: EditableEntry(status=status, notes=editable.get(s.student_id, EditableEntry()).notes)
        for s in roster
    }


def compute_submission(
    editable: Mapping[int, EditableEntry],
    existing_ids: Mapping[int, int],
    context: SheetContext,
    *,
    updated_at: datetime,
) -> Submission:
    inserts: list[AttendanceInsert] = []
    updates: list[AttendanceUpdate] = []

    for student_id, entry in editable.items():
        if entry.status is None:
            continue

        notes = entry.notes or None
        record_id = existing_ids.get(student_id)
        if record_id is not None:
            updates.append(
                AttendanceUpdate(
                    record_id=record_id,
                    student_id=student_id,
                    status=entry.status,
                    notes=notes,
                    updated_at=updated_at,
                )
            )
        else:
            inserts.append(
                AttendanceInsert(
                    student_id=student_id,
                    class_id=context.class_id,
                    teacher_id=context.teacher_id,
                    attendance_date=context.attendance_date,
                    status=entry.status,
                    notes=notes,
                )
            )

    return Submission(inserts=tuple(inserts), updates=tuple(updates))


def unmarked_students(roster: Sequence[Student], editable: Mapping[int, EditableEntry]) -> list[Student]:
    return [s for s in roster if editable.get(s.student_id, EditableEntry()).status is None]


def attendance_stats(roster: Sequence[Student], editable: Mapping[int, EditableEntry]) -> dict:
    stats = {status.value: 0 for status in AttendanceStatus}
    stats["unmarked"] = 0
    for s in roster:
        status = editable.get(s.student_id, EditableEntry()).status
        stats[status.value if status else "unmarked"] += 1
    return stats


class AttendanceSheet:
    """Editable attendance for one (class, date) plus its clean/dirty state."""

    def __init__(
        self,
        context: SheetContext,
        roster: Sequence[Student],
        editable: Optional[Mapping[int, EditableEntry]] = None,
        existing_ids: Optional[Mapping[int, int]] = None,
    ):
        self._context = context
        self._roster = tuple(roster)
        self._editable: EditableMap = dict(editable or {})
        self._existing_ids: ExistingIdMap = dict(existing_ids or {})
        self._dirty = False

    @classmethod
    def load(
        cls,
        context: SheetContext,
        roster: Sequence[Student],
        existing_records: Iterable[AttendanceRecord],
    ) -> "AttendanceSheet":
        editable, existing_ids = build_editable_state(roster, existing_records)
        return cls(context, roster, editable, existing_ids)

    @property
    def context(self) -> SheetContext:
        return self._context

    @property
    def roster(self) -> tuple[Student, ...]:
        return self._roster

    @property
    def editable(self) -> EditableMap:
        return dict(self._editable)

    @property
    def existing_ids(self) -> ExistingIdMap:
        return dict(self._existing_ids)

    @property
    def dirty(self) -> bool:
        return self._dirty

    def targets(self, class_id: int, attendance_date: date) -> bool:
        return self._context.class_id == int(class_id) and self._context.attendance_date == attendance_date

    def set_field(self, student_id: int, field: str, value) -> None:
        if student_id not in {s.student_id for s in self._roster}:
            raise ValidationError("Student is not on this class roster")
        self._editable = set_field(self._editable, student_id, field, value)
        self._dirty = True

    def bulk_set_status(self, status) -> None:
        """Overwrite every roster student's status; callers confirm first."""

        self._editable = bulk_set_status(self._editable, self._roster, status)
        self._dirty = True

    def compute_submission(self, *, updated_at: datetime) -> Submission:
        return compute_submission(self._editable, self._existing_ids, self._context, updated_at=updated_at)

    def unmarked(self) -> list[Student]:
        return unmarked_students(self._roster, self._editable)

    def stats(self) -> dict:
        return attendance_stats(self._roster, self._editable)

    def mark_saved(self) -> None:
        self._dirty = False

    def to_public(self) -> dict:
        rows = []
        for s in self._roster:
            entry = self._editable.get(s.student_id, EditableEntry())
            rows.append(
                {
                    "student_id": s.student_id,
                    "student_number": s.student_number,
                    "first_name": s.first_name,
                    "last_name": s.last_name,
                    "status": entry.status.value if entry.status else None,
                    "notes": entry.notes,
                    "has_record": s.student_id in self._existing_ids,
                }
            )
        return {
            "class_id": self._context.class_id,
            "attendance_date": self._context.attendance_date.isoformat(),
            "dirty": self._dirty,
            "stats": self.stats(),
            "students": rows,
        }
