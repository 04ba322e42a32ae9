from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ProfileStatus, Role
from .model import Profile


class ProfileRepository(Protocol):
    """Store contract for profiles; services depend on this, not on MySQL."""

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Profile]:
        raise NotImplementedError

    def create_profile(
        self,
        *,
        email: str,
        full_name: str,
        password_hash: str,
        role: Role,
        default_class_id: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def update_profile(
        self,
        *,
        profile_id: int,
        full_name: str,
        role: Role,
        default_class_id: Optional[int],
    ) -> bool:
        raise NotImplementedError

    def set_status(self, profile_id: int, *, status: ProfileStatus) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Profile]:
        """Newest first."""

        raise NotImplementedError
