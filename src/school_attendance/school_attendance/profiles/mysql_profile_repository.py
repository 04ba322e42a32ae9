from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import ProfileStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Profile
from .repository import ProfileRepository

_SELECT = """
    SELECT p.profile_id, p.email, p.full_name, p.password_hash, p.role, p.status,
           p.default_class_id, c.name AS default_class_name, p.created_at
    FROM profiles p
    LEFT JOIN classes c ON c.class_id = p.default_class_id
"""


def _to_profile(r: dict) -> Profile:
    return Profile(
        profile_id=int(r["profile_id"]),
        email=r["email"],
        full_name=r["full_name"],
        role=Role(r["role"]),
        status=ProfileStatus(r["status"]),
        default_class_id=r.get("default_class_id"),
        default_class_name=r.get("default_class_name"),
        password_hash=r.get("password_hash") or "",
        created_at=r.get("created_at"),
    )


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.profile_id=%s", (int(profile_id),))
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def get_by_email(self, email: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.email=%s", (email,))
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def create_profile(
        self,
        *,
        email: str,
        full_name: str,
        password_hash: str,
        role: Role,
        default_class_id: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO profiles(email, full_name, password_hash, role, status, default_class_id)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (email, full_name, password_hash, role.value, ProfileStatus.ACTIVE.value, default_class_id),
            )
            return int(cur.lastrowid)

    def update_profile(
        self,
        *,
        profile_id: int,
        full_name: str,
        role: Role,
        default_class_id: Optional[int],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE profiles
                SET full_name=%s, role=%s, default_class_id=%s
                WHERE profile_id=%s
                """,
                (full_name, role.value, default_class_id, int(profile_id)),
            )
            return cur.rowcount > 0

    def set_status(self, profile_id: int, *, status: ProfileStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE profiles SET status=%s WHERE profile_id=%s",
                (status.value, int(profile_id)),
            )
            return cur.rowcount > 0

    def list_all(self) -> Sequence[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY p.created_at DESC, p.profile_id DESC")
            return [_to_profile(r) for r in fetchall(cur)]
