from __future__ import annotations

from functools import wraps

from flask import jsonify, session

from ..core.exceptions import (
    AlreadyCheckedInError,
    BackendUnavailableError,
    CheckInCancelledError,
    DomainError,
    LocationUnavailableError,
    LogoutBlockedError,
    NoOpenRecordError,
    NotFoundError,
    OutsideZoneError,
    ValidationError,
)

# Most specific first: ZonesNotConfiguredError is an OutsideZoneError.
_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (OutsideZoneError, 403),
    (AlreadyCheckedInError, 409),
    (NoOpenRecordError, 409),
    (CheckInCancelledError, 409),
    (LogoutBlockedError, 423),
    (LocationUnavailableError, 503),
    (BackendUnavailableError, 503),
)


def status_for(exc: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(exc, cls):
            return status
    return 400


def error_response(exc: DomainError):
    body = {"success": False, "message": exc.message or type(exc).__name__}
    body.update(exc.audit())
    return jsonify(body), status_for(exc)


def current_employee_ref() -> str:
    return str(session["employee_ref"])


def employee_required(view):
    """The identity layer is external; it only has to put employee_ref in the session."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session.get("employee_ref"):
            return jsonify({"success": False, "message": "Please log in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper
