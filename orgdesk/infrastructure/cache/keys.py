"""Cache key builders. Single place for key format.

Layout: <entityPrefix>:<qualifier>:<value>[:<subqualifier>:<value>], with the
bare "<entityPrefix>:<id>" for primary keys. Key components (ids, slugs,
emails, tokens) must not contain CACHE_KEY_SEP to avoid colliding keys.
"""

from datetime import date

from orgdesk.core.constants import (
    CACHE_KEY_SEP,
    CACHE_PREFIX_ATTENDANCE,
    CACHE_PREFIX_DASHBOARD,
    CACHE_PREFIX_DEPARTMENT,
    CACHE_PREFIX_DOCUMENT,
    CACHE_PREFIX_INVITATION,
    CACHE_PREFIX_LEAVE_REQUEST,
    CACHE_PREFIX_NOTIFICATION,
    CACHE_PREFIX_ORGANIZATION,
    CACHE_PREFIX_PROJECT,
    CACHE_PREFIX_REPORT,
    CACHE_PREFIX_REPORT_TEMPLATE,
    CACHE_PREFIX_STAFF,
    CACHE_PREFIX_TASK,
    CACHE_PREFIX_USER,
    CACHE_PREFIX_WORKSPACE,
)


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains the cache key separator.

    Args:
        value: String component used in a cache key.
        name: Name of the component (for error message).

    Raises:
        ValueError: If value is empty or contains CACHE_KEY_SEP.
    """
    if not value:
        raise ValueError(f"Cache key component {name!r} must not be empty")
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def _join(*segments: str) -> str:
    return CACHE_KEY_SEP.join(segments)


def _entity_key(prefix: str, entity_id: str) -> str:
    _validate_key_component(entity_id, "id")
    return _join(prefix, entity_id)


def organization_key(organization_id: str) -> str:
    """Cache key for organization by ID."""
    return _entity_key(CACHE_PREFIX_ORGANIZATION, organization_id)


def organization_slug_key(slug: str) -> str:
    """Cache key for organization by slug."""
    _validate_key_component(slug, "slug")
    return _join(CACHE_PREFIX_ORGANIZATION, "slug", slug)


def workspace_key(workspace_id: str) -> str:
    return _entity_key(CACHE_PREFIX_WORKSPACE, workspace_id)


def workspace_slug_key(slug: str) -> str:
    _validate_key_component(slug, "slug")
    return _join(CACHE_PREFIX_WORKSPACE, "slug", slug)


def user_key(user_id: str) -> str:
    return _entity_key(CACHE_PREFIX_USER, user_id)


def user_email_key(email: str) -> str:
    """Cache key for user by (lower-cased) email."""
    _validate_key_component(email, "email")
    return _join(CACHE_PREFIX_USER, "email", email)


def staff_key(staff_id: str) -> str:
    return _entity_key(CACHE_PREFIX_STAFF, staff_id)


def staff_email_key(organization_id: str, email: str) -> str:
    """Cache key for staff by email inside one organization."""
    _validate_key_component(organization_id, "organization_id")
    _validate_key_component(email, "email")
    return _join(CACHE_PREFIX_STAFF, "org", organization_id, "email", email)


def staff_employee_key(organization_id: str, employee_id: str) -> str:
    """Cache key for staff by employee number inside one organization."""
    _validate_key_component(organization_id, "organization_id")
    _validate_key_component(employee_id, "employee_id")
    return _join(CACHE_PREFIX_STAFF, "org", organization_id, "employee", employee_id)


def department_key(department_id: str) -> str:
    return _entity_key(CACHE_PREFIX_DEPARTMENT, department_id)


def department_list_key(organization_id: str) -> str:
    """Cache key for the department list of an organization (aggregate)."""
    _validate_key_component(organization_id, "organization_id")
    return _join(CACHE_PREFIX_DEPARTMENT, "org", organization_id, "list")


def attendance_key(attendance_id: str) -> str:
    return _entity_key(CACHE_PREFIX_ATTENDANCE, attendance_id)


def attendance_day_key(organization_id: str, day: date) -> str:
    """Cache key for the attendance of an organization on one UTC day (aggregate)."""
    _validate_key_component(organization_id, "organization_id")
    return _join(CACHE_PREFIX_ATTENDANCE, "org", organization_id, "day", day.isoformat())


def attendance_recent_key(staff_id: str) -> str:
    """Cache key for the most recent attendance rows of one staff member (aggregate)."""
    _validate_key_component(staff_id, "staff_id")
    return _join(CACHE_PREFIX_ATTENDANCE, "staff", staff_id, "recent")


def leave_request_key(leave_request_id: str) -> str:
    return _entity_key(CACHE_PREFIX_LEAVE_REQUEST, leave_request_id)


def project_key(project_id: str) -> str:
    return _entity_key(CACHE_PREFIX_PROJECT, project_id)


def project_slug_key(workspace_id: str, slug: str) -> str:
    """Cache key for project by slug inside one workspace."""
    _validate_key_component(workspace_id, "workspace_id")
    _validate_key_component(slug, "slug")
    return _join(CACHE_PREFIX_PROJECT, "ws", workspace_id, "slug", slug)


def project_task_summary_key(project_id: str) -> str:
    """Cache key for task counts per status of one project (aggregate)."""
    _validate_key_component(project_id, "project_id")
    return _join(CACHE_PREFIX_PROJECT, project_id, "task-summary")


def task_key(task_id: str) -> str:
    return _entity_key(CACHE_PREFIX_TASK, task_id)


def report_key(report_id: str) -> str:
    return _entity_key(CACHE_PREFIX_REPORT, report_id)


def report_template_key(template_id: str) -> str:
    return _entity_key(CACHE_PREFIX_REPORT_TEMPLATE, template_id)


def document_key(document_id: str) -> str:
    return _entity_key(CACHE_PREFIX_DOCUMENT, document_id)


def notification_key(notification_id: str) -> str:
    return _entity_key(CACHE_PREFIX_NOTIFICATION, notification_id)


def unread_count_key(user_id: str) -> str:
    """Cache key for a user's unread notification count (aggregate)."""
    _validate_key_component(user_id, "user_id")
    return _join(CACHE_PREFIX_NOTIFICATION, "user", user_id, "unread")


def invitation_key(invitation_id: str) -> str:
    return _entity_key(CACHE_PREFIX_INVITATION, invitation_id)


def invitation_token_key(token: str) -> str:
    """Cache key for invitation by token (accept link)."""
    _validate_key_component(token, "token")
    return _join(CACHE_PREFIX_INVITATION, "token", token)


def dashboard_key(organization_id: str, day: date) -> str:
    """Cache key for the dashboard summary of an organization on one UTC day (aggregate)."""
    _validate_key_component(organization_id, "organization_id")
    return _join(CACHE_PREFIX_DASHBOARD, "org", organization_id, "day", day.isoformat())
