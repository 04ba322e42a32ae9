from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository

_SELECT = """
    SELECT s.student_id, s.student_number, s.first_name, s.last_name, s.class_id,
           s.date_of_birth, s.enrollment_date, s.is_active, c.name AS class_name
    FROM students s
    LEFT JOIN classes c ON c.class_id = s.class_id
"""


def _to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        student_number=r["student_number"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        class_id=int(r["class_id"]),
        enrollment_date=r.get("enrollment_date"),
        date_of_birth=r.get("date_of_birth"),
        is_active=bool(r.get("is_active", True)),
        class_name=r.get("class_name"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE s.student_id=%s", (int(student_id),))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def list_roster(self, class_id: int) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE s.class_id=%s AND s.is_active=1 ORDER BY s.last_name ASC, s.first_name ASC",
                (int(class_id),),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY s.created_at DESC, s.student_id DESC")
            return [_to_student(r) for r in fetchall(cur)]

    def create_student(
        self,
        *,
        student_number: str,
        first_name: str,
        last_name: str,
        class_id: int,
        enrollment_date: date,
        date_of_birth: Optional[date] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(student_number, first_name, last_name, class_id,
                                     date_of_birth, enrollment_date, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,1)
                """,
                (student_number, first_name, last_name, int(class_id), date_of_birth, enrollment_date),
            )
            return int(cur.lastrowid)

    def update_student(
        self,
        *,
        student_id: int,
        student_number: str,
        first_name: str,
        last_name: str,
        class_id: int,
        date_of_birth: Optional[date],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET student_number=%s, first_name=%s, last_name=%s, class_id=%s, date_of_birth=%s
                WHERE student_id=%s
                """,
                (student_number, first_name, last_name, int(class_id), date_of_birth, int(student_id)),
            )
            return cur.rowcount > 0

    def set_active(self, student_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE students SET is_active=%s WHERE student_id=%s",
                (1 if is_active else 0, int(student_id)),
            )
            return cur.rowcount > 0
