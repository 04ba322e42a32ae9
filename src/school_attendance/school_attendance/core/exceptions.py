from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class LoadFailure(DomainError):
    """Roster or existing attendance could not be fetched."""


class ValidationWarning(DomainError):
    """Some roster students have no status at submit time.

    Non-fatal: the caller confirms with ``token`` to submit anyway, unmarked
    students are then omitted.
    """

    def __init__(self, message: str, *, unmarked: list, token: str):
        super().__init__(message)
        self.unmarked = unmarked
        self.token = token


class PersistFailure(DomainError):
    """An insert or update failed; writes applied before it are kept."""

    def __init__(self, message: str, *, inserted: int = 0, updated: int = 0):
        super().__init__(message)
        self.inserted = inserted
        self.updated = updated


class DuplicateKeyFailure(PersistFailure):
    """The store already holds a record for one of the (student, date) keys."""


class DataStoreError(Exception):
    """Technical failure talking to the database."""


class DuplicateKeyError(DataStoreError):
    """A unique key of the database rejected a write."""
