from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator, Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    Every error keeps an audit context (who, when, where) so callers can log
    or persist the failed attempt without re-deriving it.
    """

    def __init__(
        self,
        message: str = "",
        *,
        employee_ref: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
        location: Any = None,
        zone: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.employee_ref = employee_ref
        self.occurred_at = occurred_at or datetime.now()
        self.location = location
        self.zone = zone

    def audit(self) -> dict:
        location = self.location
        if location is not None and hasattr(location, "lat"):
            location = {"lat": location.lat, "lng": location.lng}
        return {
            "error": type(self).__name__,
            "message": self.message,
            "employee_ref": self.employee_ref,
            "occurred_at": self.occurred_at.isoformat(),
            "location": location,
            "zone": self.zone,
        }


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a zone or record id is unknown."""


class OutsideZoneError(DomainError):
    """Raised when the geofence rejects a check-in location."""


class ZonesNotConfiguredError(OutsideZoneError):
    """No active zone exists and the policy refuses unrestricted check-in."""


class LocationUnavailableError(DomainError):
    """Location acquisition timed out, was denied, or failed."""


class CheckInCancelledError(DomainError):
    """The caller abandoned the check-in before anything was written."""


class AlreadyCheckedInError(DomainError):
    """The employee already has an open attendance record."""


class NoOpenRecordError(DomainError):
    """Check-out attempted without an open attendance record."""


class BackendUnavailableError(DomainError):
    """The persistent store or object storage could not be reached."""


class LogoutBlockedError(DomainError):
    """Logout refused because a field task is still running."""


@contextmanager
def store_failure_context(
    *,
    employee_ref: Optional[str],
    occurred_at: Optional[datetime] = None,
    location: Any = None,
    zone: Optional[str] = None,
) -> Iterator[None]:
    """Re-raise store outages with the audit context of the attempt that hit them."""

    try:
        yield
    except BackendUnavailableError as exc:
        raise BackendUnavailableError(
            exc.message,
            employee_ref=employee_ref,
            occurred_at=occurred_at,
            location=location,
            zone=zone,
        ) from exc
