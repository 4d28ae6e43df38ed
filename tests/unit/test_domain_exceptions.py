"""Tests for domain exceptions (error_code, message, details)."""

from orgdesk.domain.exceptions import (
    InvalidStateTransitionException,
    OrgdeskException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    ValidationException,
)
from orgdesk.infrastructure.exceptions import CacheUnavailableError


def test_orgdesk_exception_default_error_code() -> None:
    exc = OrgdeskException("Something failed")
    assert exc.error_code == "OrgdeskException"
    assert exc.to_dict() == {
        "error": "OrgdeskException",
        "message": "Something failed",
        "details": {},
    }


def test_validation_exception_field() -> None:
    exc = ValidationException("bad slug", field="slug")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "slug"}


def test_resource_not_found() -> None:
    exc = ResourceNotFoundException("staff", "s-1")
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.details == {"resource_type": "staff", "resource_id": "s-1"}


def test_resource_already_exists() -> None:
    exc = ResourceAlreadyExistsException("organization", "slug", "acme")
    assert exc.error_code == "RESOURCE_ALREADY_EXISTS"
    assert "acme" in exc.message


def test_invalid_state_transition() -> None:
    exc = InvalidStateTransitionException("leave_request", "l-1", "APPROVED", "approve")
    assert exc.error_code == "INVALID_STATE_TRANSITION"
    assert exc.details["current"] == "APPROVED"


def test_sql_not_configured() -> None:
    assert SqlNotConfiguredException().error_code == "SERVICE_UNAVAILABLE"


def test_cache_unavailable_is_orgdesk_exception() -> None:
    exc = CacheUnavailableError("get", "staff:s-1", "timeout")
    assert isinstance(exc, OrgdeskException)
    assert exc.error_code == "CACHE_UNAVAILABLE"
