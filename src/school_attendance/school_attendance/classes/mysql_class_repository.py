from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import SchoolClass
from .repository import ClassRepository

_SELECT = """
    SELECT c.class_id, c.name, c.year_level, c.section, c.is_active,
           COUNT(s.student_id) AS student_count
    FROM classes c
    LEFT JOIN students s ON s.class_id = c.class_id AND s.is_active = 1
"""


def _to_class(r: dict) -> SchoolClass:
    return SchoolClass(
        class_id=int(r["class_id"]),
        name=r["name"],
        year_level=int(r["year_level"]),
        section=r.get("section"),
        is_active=bool(r.get("is_active", True)),
        student_count=int(r.get("student_count") or 0),
    )


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE c.class_id=%s GROUP BY c.class_id", (int(class_id),))
            row = fetchone(cur)
            return _to_class(row) if row else None

    def list_classes(self, *, active_only: bool = False) -> Sequence[SchoolClass]:
        where = " WHERE c.is_active = 1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + where + " GROUP BY c.class_id ORDER BY c.year_level ASC, c.name ASC")
            return [_to_class(r) for r in fetchall(cur)]

    def create_class(self, *, name: str, year_level: int, section: Optional[str] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO classes(name, year_level, section) VALUES(%s,%s,%s)",
                (name, int(year_level), section),
            )
            return int(cur.lastrowid)

    def update_class(self, *, class_id: int, name: str, year_level: int, section: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE classes SET name=%s, year_level=%s, section=%s WHERE class_id=%s",
                (name, int(year_level), section, int(class_id)),
            )
            return cur.rowcount > 0

    def set_active(self, class_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE classes SET is_active=%s WHERE class_id=%s",
                (1 if is_active else 0, int(class_id)),
            )
            return cur.rowcount > 0
