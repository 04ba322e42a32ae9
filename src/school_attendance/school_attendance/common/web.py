"""Helpers shared by the Flask controllers."""
from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Optional

from flask import current_app, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DataStoreError,
    DuplicateKeyFailure,
    LoadFailure,
    PersistFailure,
    ValidationError,
    ValidationWarning,
)


def payload() -> dict:
    """Request body as a dict, whether sent as JSON or as a form."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def optional_int(value) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid number: {value!r}")


def current_role() -> Role:
    return Role(session["role"])


def current_profile_id() -> int:
    return int(session["profile_id"])


def error(message: str, status: int, **extra):
    body = {"success": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "profile_id" not in session:
            return error("Please sign in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def role_required(*roles: Role, resolve: Optional[Callable[[int], Any]] = None):
    """Allow only the given roles.

    With ``resolve`` the profile is looked up on every request, so a paused
    account or a changed role takes effect immediately instead of at next login.
    """
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "profile_id" not in session:
                return error("Please sign in to continue", 401)
            if resolve is not None:
                try:
                    profile = resolve(current_profile_id())
                except AuthenticationError as e:
                    session.clear()
                    return error(str(e), 401)
                except DataStoreError:
                    current_app.logger.exception("database error while checking profile %s", session["profile_id"])
                    return error("Failed to load profile", 502)
                session["role"] = profile.role.value
                session["default_class_id"] = profile.default_class_id
            if session.get("role") not in allowed:
                return error("You do not have permission", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def handle_errors(action: str):
    """Turn domain errors into JSON responses; log anything unexpected."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationWarning as e:
                return error(
                    str(e),
                    409,
                    token=e.token,
                    unmarked=[s.student_id for s in e.unmarked],
                )
            except ValidationError as e:
                return error(str(e), 400)
            except AuthenticationError as e:
                return error(str(e), 401)
            except AuthorizationError as e:
                return error(str(e), 403)
            except DuplicateKeyFailure as e:
                return error(str(e), 409, inserted=e.inserted, updated=e.updated)
            except PersistFailure as e:
                return error(str(e), 502, inserted=e.inserted, updated=e.updated)
            except LoadFailure as e:
                return error(str(e), 502)
            except DataStoreError:
                current_app.logger.exception("database error while trying to %s", action)
                return error(f"Failed to {action}", 502)

        return wrapper

    return decorator
