from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AttendanceInsert, AttendanceRecord, RecentAttendanceRow
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_class_and_date(self, class_id: int, attendance_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT record_id, student_id, class_id, teacher_id, attendance_date,
                       status, notes, created_at, updated_at
                FROM attendance_records
                WHERE class_id=%s AND attendance_date=%s
                ORDER BY record_id ASC
                """,
                (int(class_id), attendance_date),
            )
            return [
                AttendanceRecord(
                    record_id=int(r["record_id"]),
                    student_id=int(r["student_id"]),
                    class_id=int(r["class_id"]),
                    teacher_id=int(r["teacher_id"]),
                    attendance_date=r["attendance_date"],
                    status=AttendanceStatus(r["status"]),
                    notes=r.get("notes"),
                    created_at=r.get("created_at"),
                    updated_at=r.get("updated_at"),
                )
                for r in fetchall(cur)
            ]

    def insert_many(self, rows: Sequence[AttendanceInsert]) -> int:
        if not rows:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO attendance_records(student_id, class_id, teacher_id, attendance_date, status, notes)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                [
                    (r.student_id, r.class_id, r.teacher_id, r.attendance_date, r.status.value, r.notes)
                    for r in rows
                ],
            )
            return len(rows)

    def update_record(
        self,
        *,
        record_id: int,
        status: AttendanceStatus,
        notes: Optional[str],
        updated_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, notes=%s, updated_at=%s
                WHERE record_id=%s
                """,
                (status.value, notes, updated_at, int(record_id)),
            )
            # MySQL reports 0 changed rows when values are identical; match on existence instead.
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM attendance_records WHERE record_id=%s", (int(record_id),))
            return bool(fetchall(cur))

    def list_recent_for_teacher(self, teacher_id: int, *, since: date, limit: int) -> Sequence[RecentAttendanceRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT ar.record_id, ar.attendance_date, ar.status, ar.created_at,
                       s.first_name, s.last_name, s.student_number, c.name AS class_name
                FROM attendance_records ar
                JOIN students s ON s.student_id = ar.student_id
                LEFT JOIN classes c ON c.class_id = ar.class_id
                WHERE ar.teacher_id=%s AND ar.attendance_date >= %s
                ORDER BY ar.created_at DESC, ar.record_id DESC
                LIMIT %s
                """,
                (int(teacher_id), since, int(limit)),
            )
            return [
                RecentAttendanceRow(
                    record_id=int(r["record_id"]),
                    attendance_date=r["attendance_date"],
                    status=AttendanceStatus(r["status"]),
                    created_at=r.get("created_at"),
                    student_name=f"{r['first_name']} {r['last_name']}",
                    student_number=r["student_number"],
                    class_name=r.get("class_name"),
                )
                for r in fetchall(cur)
            ]
