from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ProfileStatus, Role


@dataclass(frozen=True)
class Profile:
    """Account record shared with the session identity.

    ``password_hash`` belongs to the identity side; it never leaves the
    service layer.
    """

    profile_id: int
    email: str
    full_name: str
    role: Role
    status: ProfileStatus
    default_class_id: Optional[int] = None
    default_class_name: Optional[str] = None
    password_hash: str = ""
    created_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == ProfileStatus.ACTIVE

    def to_public(self) -> dict:
        return {
            "id": self.profile_id,
            "email": self.email,
            "full_name": self.full_name,
            "role": self.role.value,
            "status": self.status.value,
            "default_class_id": self.default_class_id,
            "default_class_name": self.default_class_name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
