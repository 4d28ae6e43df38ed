"""Organization repository with read-through cache by id and slug."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from orgdesk.application.dtos import OrganizationResult
from orgdesk.infrastructure.cache import keys
from orgdesk.infrastructure.cache.cache_protocol import CacheProtocol
from orgdesk.infrastructure.cache.policy import CachePolicies
from orgdesk.infrastructure.persistence.models import (
    Attendance,
    Department,
    Document,
    Invitation,
    LeaveRequest,
    Notification,
    Organization,
    Project,
    Report,
    ReportTemplate,
    Staff,
    Task,
    Workspace,
)
from orgdesk.infrastructure.persistence.repositories.cached_repo import (
    CachedRepository,
    Dependent,
    require_key_safe,
)

# every tenant-owned table cascades from organization.id
_TENANT_TABLES: tuple[tuple[Any, str], ...] = (
    (Workspace, "workspace"),
    (Staff, "staff"),
    (Department, "department"),
    (Attendance, "attendance"),
    (LeaveRequest, "leave_request"),
    (Project, "project"),
    (Task, "task"),
    (Report, "report"),
    (ReportTemplate, "report_template"),
    (Document, "document"),
    (Invitation, "invitation"),
    (Notification, "notification"),
)


class OrganizationRepository(CachedRepository[Organization, OrganizationResult]):
    """Organization repository. Keys: organization:{id}, organization:slug:{slug}."""

    policy_name = "organization"
    updatable_fields = frozenset({"name", "slug", "description", "timezone", "is_active"})

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        policies: CachePolicies | None = None,
    ) -> None:
        super().__init__(db, Organization, cache_service, policies=policies)

    async def get_by_slug(self, slug: str) -> OrganizationResult | None:
        """Get organization by unique slug; a miss populates the id key as well."""
        return await self._get_cached_by(
            keys.organization_slug_key(require_key_safe("slug", slug)),
            Organization.slug == slug,
        )

    async def list_organizations(
        self, *, active_only: bool = False, skip: int = 0, limit: int = 100
    ) -> list[OrganizationResult]:
        stmt = select(Organization)
        if active_only:
            stmt = stmt.where(Organization.is_active.is_(True))
        return await self._list(stmt.order_by(Organization.name).offset(skip).limit(limit))

    async def create_organization(
        self,
        name: str,
        slug: str,
        *,
        description: str | None = None,
        timezone: str = "UTC",
    ) -> OrganizationResult:
        """Create organization. Raises ResourceAlreadyExistsException on duplicate slug."""
        organization = Organization(
            name=name,
            slug=require_key_safe("slug", slug),
            description=description,
            timezone=timezone,
            is_active=True,
        )
        return await self._create(organization, conflict=("slug", slug))

    async def update_organization(
        self, organization_id: str, **changes: Any
    ) -> OrganizationResult:
        """Update organization; a slug change also drops the old slug key."""
        if "slug" in changes:
            require_key_safe("slug", changes["slug"])
        return await self.update_fields(
            organization_id, changes, conflict=("slug", str(changes.get("slug", "")))
        )

    def _dependents(self, entity_id: str) -> list[Dependent]:
        return [
            (model, policy_name, model.organization_id == entity_id)
            for model, policy_name in _TENANT_TABLES
        ]

    async def delete_organization(self, organization_id: str) -> None:
        """Delete organization; the store cascades to every tenant-owned row."""
        await self.delete_by_id(organization_id)
