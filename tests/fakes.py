"""In-memory repositories shared by the service and API tests."""
from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from werkzeug.security import generate_password_hash

from src.school_attendance.school_attendance.attendance.model import (
    AttendanceInsert,
    AttendanceRecord,
    RecentAttendanceRow,
)
from src.school_attendance.school_attendance.classes.model import SchoolClass
from src.school_attendance.school_attendance.core.enums import AttendanceStatus, ProfileStatus, Role
from src.school_attendance.school_attendance.core.exceptions import DataStoreError, DuplicateKeyError
from src.school_attendance.school_attendance.profiles.model import Profile
from src.school_attendance.school_attendance.students.model import Student


def make_student(student_id: int, first: str, last: str, *, class_id: int = 1, active: bool = True) -> Student:
    return Student(
        student_id=student_id,
        student_number=f"S-{student_id:04d}",
        first_name=first,
        last_name=last,
        class_id=class_id,
        enrollment_date=date(2026, 9, 1),
        is_active=active,
    )


def make_profile(
    profile_id: int,
    email: str,
    *,
    role: Role = Role.TEACHER,
    password: str = "secret123",
    status: ProfileStatus = ProfileStatus.ACTIVE,
    default_class_id: Optional[int] = None,
) -> Profile:
    return Profile(
        profile_id=profile_id,
        email=email,
        full_name=email.split("@")[0].title(),
        role=role,
        status=status,
        default_class_id=default_class_id,
        password_hash=generate_password_hash(password),
        created_at=datetime(2026, 9, 1, 8, 0),
    )


class InMemoryProfiles:
    def __init__(self, *profiles: Profile):
        self.by_id: dict[int, Profile] = {p.profile_id: p for p in profiles}
        self._next_id = max(self.by_id, default=0) + 1

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        return self.by_id.get(int(profile_id))

    def get_by_email(self, email: str) -> Optional[Profile]:
        return next((p for p in self.by_id.values() if p.email == email), None)

    def create_profile(self, *, email, full_name, password_hash, role, default_class_id=None) -> int:
        if self.get_by_email(email):
            raise DuplicateKeyError("Duplicate entry for key 'uq_profiles_email'")
        pid = self._next_id
        self._next_id += 1
        self.by_id[pid] = Profile(
            profile_id=pid,
            email=email,
            full_name=full_name,
            role=role,
            status=ProfileStatus.ACTIVE,
            default_class_id=default_class_id,
            password_hash=password_hash,
        )
        return pid

    def update_profile(self, *, profile_id, full_name, role, default_class_id) -> bool:
        p = self.by_id.get(int(profile_id))
        if not p:
            return False
        self.by_id[p.profile_id] = replace(p, full_name=full_name, role=role, default_class_id=default_class_id)
        return True

    def set_status(self, profile_id, *, status) -> bool:
        p = self.by_id.get(int(profile_id))
        if not p:
            return False
        self.by_id[p.profile_id] = replace(p, status=status)
        return True

    def list_all(self):
        return sorted(self.by_id.values(), key=lambda p: p.profile_id, reverse=True)


class InMemoryClasses:
    def __init__(self, *classes: SchoolClass):
        self.by_id: dict[int, SchoolClass] = {c.class_id: c for c in classes}
        self._next_id = max(self.by_id, default=0) + 1
        self.fail = False

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        if self.fail:
            raise DataStoreError("connection lost")
        return self.by_id.get(int(class_id))

    def list_classes(self, *, active_only: bool = False):
        items = [c for c in self.by_id.values() if c.is_active or not active_only]
        return sorted(items, key=lambda c: (c.year_level, c.name))

    def create_class(self, *, name, year_level, section=None) -> int:
        cid = self._next_id
        self._next_id += 1
        self.by_id[cid] = SchoolClass(class_id=cid, name=name, year_level=year_level, section=section)
        return cid

    def update_class(self, *, class_id, name, year_level, section) -> bool:
        c = self.by_id[int(class_id)]
        self.by_id[c.class_id] = replace(c, name=name, year_level=year_level, section=section)
        return True

    def set_active(self, class_id, *, is_active) -> bool:
        c = self.by_id[int(class_id)]
        self.by_id[c.class_id] = replace(c, is_active=is_active)
        return True


class InMemoryStudents:
    def __init__(self, *students: Student):
        self.by_id: dict[int, Student] = {s.student_id: s for s in students}
        self._next_id = max(self.by_id, default=0) + 1
        self.fail = False

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self.by_id.get(int(student_id))

    def list_roster(self, class_id: int):
        if self.fail:
            raise DataStoreError("connection lost")
        items = [s for s in self.by_id.values() if s.class_id == class_id and s.is_active]
        return sorted(items, key=lambda s: s.last_name)

    def list_all(self):
        return sorted(self.by_id.values(), key=lambda s: s.student_id, reverse=True)

    def create_student(self, *, student_number, first_name, last_name, class_id, enrollment_date, date_of_birth=None) -> int:
        if any(s.student_number == student_number for s in self.by_id.values()):
            raise DuplicateKeyError("Duplicate entry for key 'uq_students_number'")
        sid = self._next_id
        self._next_id += 1
        self.by_id[sid] = Student(
            student_id=sid,
            student_number=student_number,
            first_name=first_name,
            last_name=last_name,
            class_id=class_id,
            enrollment_date=enrollment_date,
            date_of_birth=date_of_birth,
        )
        return sid

    def update_student(self, *, student_id, student_number, first_name, last_name, class_id, date_of_birth) -> bool:
        if any(s.student_number == student_number and s.student_id != student_id for s in self.by_id.values()):
            raise DuplicateKeyError("Duplicate entry for key 'uq_students_number'")
        s = self.by_id[int(student_id)]
        self.by_id[s.student_id] = replace(
            s,
            student_number=student_number,
            first_name=first_name,
            last_name=last_name,
            class_id=class_id,
            date_of_birth=date_of_birth,
        )
        return True

    def set_active(self, student_id, *, is_active) -> bool:
        s = self.by_id[int(student_id)]
        self.by_id[s.student_id] = replace(s, is_active=is_active)
        return True


class InMemoryAttendance:
    """Enforces the one-record-per-student-per-day key like the real table."""

    def __init__(self, *records: AttendanceRecord):
        self.by_id: dict[int, AttendanceRecord] = {r.record_id: r for r in records}
        self._next_id = max(self.by_id, default=100) + 1
        self.insert_calls: list[list[AttendanceInsert]] = []
        self.update_calls: list[int] = []
        self.fail_load = False
        self.fail_insert = False
        self.fail_update_ids: set[int] = set()

    def list_for_class_and_date(self, class_id: int, attendance_date: date):
        if self.fail_load:
            raise DataStoreError("connection lost")
        return [
            r for r in sorted(self.by_id.values(), key=lambda r: r.record_id)
            if r.class_id == class_id and r.attendance_date == attendance_date
        ]

    def insert_many(self, rows) -> int:
        self.insert_calls.append(list(rows))
        if self.fail_insert:
            raise DataStoreError("connection lost")
        taken = {(r.student_id, r.attendance_date) for r in self.by_id.values()}
        if any((r.student_id, r.attendance_date) in taken for r in rows):
            raise DuplicateKeyError("Duplicate entry for key 'uq_attendance_student_date'")
        for row in rows:
            rid = self._next_id
            self._next_id += 1
            self.by_id[rid] = AttendanceRecord(
                record_id=rid,
                student_id=row.student_id,
                class_id=row.class_id,
                teacher_id=row.teacher_id,
                attendance_date=row.attendance_date,
                status=row.status,
                notes=row.notes,
                created_at=datetime(2026, 10, 17, 9, 0),
            )
        return len(rows)

    def update_record(self, *, record_id, status, notes, updated_at) -> bool:
        self.update_calls.append(record_id)
        if record_id in self.fail_update_ids:
            raise DataStoreError("connection lost")
        r = self.by_id.get(record_id)
        if not r:
            return False
        self.by_id[record_id] = replace(r, status=status, notes=notes, updated_at=updated_at)
        return True

    def list_recent_for_teacher(self, teacher_id, *, since, limit):
        rows = [
            r for r in self.by_id.values()
            if r.teacher_id == teacher_id and r.attendance_date >= since
        ]
        rows.sort(key=lambda r: (r.created_at or datetime.min, r.record_id), reverse=True)
        return [
            RecentAttendanceRow(
                record_id=r.record_id,
                attendance_date=r.attendance_date,
                status=r.status,
                created_at=r.created_at,
                student_name=f"Student {r.student_id}",
                student_number=f"S-{r.student_id:04d}",
                class_name=None,
            )
            for r in rows[:limit]
        ]


def make_record(record_id: int, student_id: int, status: AttendanceStatus, *, on: date, notes=None, class_id=1, teacher_id=10):
    return AttendanceRecord(
        record_id=record_id,
        student_id=student_id,
        class_id=class_id,
        teacher_id=teacher_id,
        attendance_date=on,
        status=status,
        notes=notes,
        created_at=datetime(on.year, on.month, on.day, 8, 0),
    )
