from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceInsert, AttendanceRecord, RecentAttendanceRow


class AttendanceRepository(Protocol):
    def list_for_class_and_date(self, class_id: int, attendance_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def insert_many(self, rows: Sequence[AttendanceInsert]) -> int:
        """Insert all rows in a single batched call; all or nothing."""

        raise NotImplementedError

    def update_record(
        self,
        *,
        record_id: int,
        status: AttendanceStatus,
        notes: Optional[str],
        updated_at: datetime,
    ) -> bool:
        raise NotImplementedError

    def list_recent_for_teacher(self, teacher_id: int, *, since: date, limit: int) -> Sequence[RecentAttendanceRow]:
        """Newest first by creation time."""

        raise NotImplementedError
