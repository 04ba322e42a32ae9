from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SchoolClass:
    class_id: int
    name: str
    year_level: int
    section: Optional[str] = None
    is_active: bool = True
    student_count: int = 0

    def to_public(self) -> dict:
        return {
            "id": self.class_id,
            "name": self.name,
            "year_level": self.year_level,
            "section": self.section,
            "is_active": self.is_active,
            "student_count": self.student_count,
        }
