"""Department repository with a cached per-organization department list."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from orgdesk.application.dtos import DepartmentResult
from orgdesk.infrastructure.cache import keys
from orgdesk.infrastructure.cache.cache_protocol import CacheProtocol
from orgdesk.infrastructure.cache.policy import CachePolicies
from orgdesk.infrastructure.persistence.models import Department, Invitation, Staff
from orgdesk.infrastructure.persistence.repositories.cached_repo import (
    CachedRepository,
    Dependent,
)


class DepartmentRepository(CachedRepository[Department, DepartmentResult]):
    """Department repository. Keys: department:{id}; aggregate department:org:{org}:list."""

    policy_name = "department"
    updatable_fields = frozenset({"name", "code", "description", "manager_id"})

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        policies: CachePolicies | None = None,
    ) -> None:
        super().__init__(db, Department, cache_service, policies=policies)

    async def list_by_organization(self, organization_id: str) -> list[DepartmentResult]:
        """All departments of an organization ordered by name (cached as one list)."""
        departments = await self.cache.get_or_load(
            keys.department_list_key(organization_id),
            lambda: self._list(
                select(Department)
                .where(Department.organization_id == organization_id)
                .order_by(Department.name)
            ),
            ttl=self.policies.ttl_department_list,
            value_type=list[DepartmentResult],
        )
        return departments if departments is not None else []

    async def create_department(
        self,
        organization_id: str,
        name: str,
        *,
        code: str | None = None,
        description: str | None = None,
        manager_id: str | None = None,
    ) -> DepartmentResult:
        department = Department(
            organization_id=organization_id,
            name=name,
            code=code,
            description=description,
            manager_id=manager_id,
        )
        return await self._create(department)

    async def update_department(self, department_id: str, **changes: Any) -> DepartmentResult:
        return await self.update_fields(department_id, changes)

    def _dependents(self, entity_id: str) -> list[Dependent]:
        # department_id is SET NULL on both
        return [
            (Staff, "staff", Staff.department_id == entity_id),
            (Invitation, "invitation", Invitation.department_id == entity_id),
        ]

    async def delete_department(self, department_id: str) -> None:
        await self.delete_by_id(department_id)
