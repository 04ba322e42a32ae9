from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role stored on the profile record; drives which dashboard is served."""

    TEACHER = "teacher"
    ADMIN = "admin"


class ProfileStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"


class AttendanceStatus(str, Enum):
    """Daily status a teacher can mark for a student."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
