from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

from ..core.exceptions import ValidationError


class PendingAction(str, Enum):
    BULK_STATUS = "bulk_status"
    SWITCH_SHEET = "switch_sheet"
    SUBMIT_UNMARKED = "submit_unmarked"


@dataclass(frozen=True)
class Confirmation:
    """A destructive action waiting for the user's yes/no."""

    token: str
    action: PendingAction
    message: str
    params: Dict[str, Any] = field(default_factory=dict)

    def to_public(self) -> dict:
        return {"token": self.token, "action": self.action.value, "message": self.message}


class ConfirmationBook:
    """Two-step command store: ``request`` issues a token, ``confirm`` redeems it once."""

    def __init__(self):
        self._pending: Dict[str, Confirmation] = {}

    def request(self, action: PendingAction, message: str, **params) -> Confirmation:
        confirmation = Confirmation(token=uuid.uuid4().hex, action=action, message=message, params=params)
        self._pending[confirmation.token] = confirmation
        return confirmation

    def confirm(self, token: str) -> Confirmation:
        confirmation = self._pending.pop(token, None)
        if confirmation is None:
            raise ValidationError("This confirmation has expired, please try again")
        return confirmation

    def decline(self, token: str) -> None:
        self._pending.pop(token, None)

    def clear(self) -> None:
        self._pending.clear()

    def __len__(self) -> int:
        return len(self._pending)
