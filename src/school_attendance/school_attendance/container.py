from __future__ import annotations

from dataclasses import dataclass

from .admin.service import AdminOverviewService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.workflow import WorkflowRegistry
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.repository import ClassRepository
from .classes.service import ClassService
from .database.connection import DBConfig, DatabaseConnection
from .profiles.mysql_profile_repository import MySQLProfileRepository
from .profiles.repository import ProfileRepository
from .profiles.service import AuthService, ProfileAdminService, ProfileService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService


@dataclass(frozen=True)
class Container:
    profiles_repo: ProfileRepository
    classes_repo: ClassRepository
    students_repo: StudentRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    profile_service: ProfileService
    profile_admin_service: ProfileAdminService
    class_service: ClassService
    student_service: StudentService
    attendance_service: AttendanceService
    admin_overview_service: AdminOverviewService
    workflows: WorkflowRegistry


def wire(
    *,
    profiles_repo: ProfileRepository,
    classes_repo: ClassRepository,
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
    attendance_service: AttendanceService | None = None,
) -> Container:
    """Assemble services on top of any repository implementations."""

    attendance_service = attendance_service or AttendanceService(attendance_repo, students_repo, classes_repo)

    return Container(
        profiles_repo=profiles_repo,
        classes_repo=classes_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(profiles_repo),
        profile_service=ProfileService(profiles_repo),
        profile_admin_service=ProfileAdminService(profiles_repo),
        class_service=ClassService(classes_repo),
        student_service=StudentService(students_repo),
        attendance_service=attendance_service,
        admin_overview_service=AdminOverviewService(profiles_repo, classes_repo, students_repo),
        workflows=WorkflowRegistry(attendance_service),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return wire(
        profiles_repo=MySQLProfileRepository(conn),
        classes_repo=MySQLClassRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
    )
