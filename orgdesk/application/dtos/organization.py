"""DTOs for organizations and workspaces (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class OrganizationResult:
    """Organization read-model. slug is unique across the platform."""

    id: str
    name: str
    slug: str
    description: str | None
    timezone: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class WorkspaceResult:
    """Workspace read-model. slug is unique across the platform."""

    id: str
    organization_id: str
    name: str
    slug: str
    description: str | None
    created_at: datetime
    updated_at: datetime
