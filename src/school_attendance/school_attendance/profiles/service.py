from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import ProfileStatus, Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DuplicateKeyError,
    ValidationError,
)
from .model import Profile
from .repository import ProfileRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionProfile:
    """What we store into Flask session after login."""

    profile_id: int
    full_name: str
    role: Role
    default_class_id: Optional[int]


class AuthService:
    """Use case: sign a profile in with email and password."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def authenticate(self, email: str, password: str) -> SessionProfile:
        email = (email or "").strip().lower()
        profile = self._profiles.get_by_email(email) if email else None
        if not profile:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(profile.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")
        if not profile.is_active:
            raise AuthenticationError("This account is paused")

        logger.info("profile %s signed in as %s", profile.profile_id, profile.role.value)
        return SessionProfile(
            profile_id=profile.profile_id,
            full_name=profile.full_name,
            role=profile.role,
            default_class_id=profile.default_class_id,
        )


class ProfileService:
    """Resolves the signed-in identity to its profile, role and default class."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def resolve(self, profile_id: int) -> Profile:
        profile = self._profiles.get_by_id(int(profile_id))
        if not profile:
            raise AuthenticationError("Profile not found")
        if not profile.is_active:
            raise AuthenticationError("This account is paused")
        return profile

    def navigation_for(self, profile: Profile) -> list[dict]:
        pages = [{"name": "Dashboard", "link": "/dashboard"}]

        if profile.role == Role.TEACHER:
            pages.append({"name": "Take Attendance", "link": "/teacher/dashboard"})
            if profile.default_class_id:
                pages.append(
                    {
                        "name": f"Quick: {profile.default_class_name or 'Default Class'}",
                        "link": "/teacher/quick-attendance",
                    }
                )

        if profile.role == Role.ADMIN:
            pages.append({"name": "Teacher Dashboard", "link": "/teacher/dashboard"})
            pages.append({"name": "Admin Panel", "link": "/admin/dashboard"})

        return pages


class ProfileAdminService:
    """Use case: manage teacher/admin accounts (admin only)."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

    def list_accounts(self, *, current_role: Role):
        self._require_admin(current_role)
        return self._profiles.list_all()

    def create_account(
        self,
        *,
        current_role: Role,
        email: str,
        full_name: str,
        password: str,
        role: Role = Role.TEACHER,
        default_class_id: Optional[int] = None,
    ) -> int:
        self._require_admin(current_role)

        email = require_non_empty(email, "Email").lower()
        full_name = require_non_empty(full_name, "Full name")
        require_non_empty(password, "Password")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._profiles.get_by_email(email):
            raise ValidationError("A user with this email already exists")

        try:
            profile_id = self._profiles.create_profile(
                email=email,
                full_name=full_name,
                password_hash=generate_password_hash(password),
                role=role,
                default_class_id=default_class_id,
            )
        except DuplicateKeyError:
            raise ValidationError("A user with this email already exists")

        logger.info("created %s profile %s", role.value, profile_id)
        return profile_id

    def update_account(
        self,
        *,
        current_role: Role,
        profile_id: int,
        full_name: str,
        role: Role,
        default_class_id: Optional[int],
    ) -> None:
        self._require_admin(current_role)
        full_name = require_non_empty(full_name, "Full name")

        if not self._profiles.get_by_id(profile_id):
            raise ValidationError("Teacher not found")

        self._profiles.update_profile(
            profile_id=int(profile_id),
            full_name=full_name,
            role=role,
            default_class_id=default_class_id,
        )

    def toggle_status(self, *, current_role: Role, current_profile_id: int, profile_id: int) -> ProfileStatus:
        """Flip active <-> paused and return the new status."""

        self._require_admin(current_role)

        profile = self._profiles.get_by_id(profile_id)
        if not profile:
            raise ValidationError("Teacher not found")
        if profile.profile_id == int(current_profile_id):
            raise ValidationError("You cannot pause your own account")

        new_status = ProfileStatus.PAUSED if profile.is_active else ProfileStatus.ACTIVE
        if not self._profiles.set_status(profile.profile_id, status=new_status):
            raise ValidationError("Failed to update teacher")

        logger.info("profile %s is now %s", profile.profile_id, new_status.value)
        return new_status
