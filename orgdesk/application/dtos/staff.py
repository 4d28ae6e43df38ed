"""DTOs for staff and departments (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class StaffResult:
    """Staff member of an organization.

    (organization_id, email) and (organization_id, employee_id) are unique
    and double as cache lookup keys.
    """

    id: str
    organization_id: str
    user_id: str | None
    department_id: str | None
    employee_id: str
    first_name: str
    last_name: str
    email: str
    phone: str | None
    position: str | None
    employment_type: str
    hire_date: date | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class DepartmentResult:
    id: str
    organization_id: str
    name: str
    code: str | None
    description: str | None
    manager_id: str | None
    created_at: datetime
    updated_at: datetime
