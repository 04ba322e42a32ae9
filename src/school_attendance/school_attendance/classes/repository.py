from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import SchoolClass


class ClassRepository(Protocol):
    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        raise NotImplementedError

    def list_classes(self, *, active_only: bool = False) -> Sequence[SchoolClass]:
        """Ordered by year level, with active-student counts."""

        raise NotImplementedError

    def create_class(self, *, name: str, year_level: int, section: Optional[str] = None) -> int:
        raise NotImplementedError

    def update_class(self, *, class_id: int, name: str, year_level: int, section: Optional[str]) -> bool:
        raise NotImplementedError

    def set_active(self, class_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError
