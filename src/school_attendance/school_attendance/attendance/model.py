from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's status for one day.

    At most one record exists per (student_id, attendance_date).
    """

    record_id: int
    student_id: int
    class_id: int
    teacher_id: int
    attendance_date: date
    status: AttendanceStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class RecentAttendanceRow:
    """Read-model for the teacher dashboard."""

    record_id: int
    attendance_date: date
    status: AttendanceStatus
    created_at: Optional[datetime]
    student_name: str
    student_number: str
    class_name: Optional[str]

    def to_public(self) -> dict:
        return {
            "id": self.record_id,
            "attendance_date": self.attendance_date.isoformat(),
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "student_name": self.student_name,
            "student_number": self.student_number,
            "class_name": self.class_name,
        }


@dataclass(frozen=True)
class EditableEntry:
    """Pending, not yet persisted status/notes for one student."""

    status: Optional[AttendanceStatus] = None
    notes: str = ""


@dataclass(frozen=True)
class AttendanceInsert:
    student_id: int
    class_id: int
    teacher_id: int
    attendance_date: date
    status: AttendanceStatus
    notes: Optional[str] = None


@dataclass(frozen=True)
class AttendanceUpdate:
    record_id: int
    student_id: int
    status: AttendanceStatus
    notes: Optional[str]
    updated_at: datetime


@dataclass(frozen=True)
class Submission:
    inserts: tuple[AttendanceInsert, ...] = ()
    updates: tuple[AttendanceUpdate, ...] = ()

    @property
    def total(self) -> int:
        return len(self.inserts) + len(self.updates)


@dataclass(frozen=True)
class SubmissionResult:
    inserted: int
    updated: int

    @property
    def total(self) -> int:
        return self.inserted + self.updated
