"""Organization and workspace repositories: slug lookups and invalidation."""

import pytest

from orgdesk.domain.exceptions import ResourceAlreadyExistsException, ValidationException
from orgdesk.infrastructure.cache import keys
from orgdesk.infrastructure.persistence.repositories import (
    OrganizationRepository,
    StaffRepository,
    WorkspaceRepository,
)
from orgdesk.infrastructure.persistence.transaction import commit


async def test_slug_lookup_populates_both_keys_and_delete_drops_both(
    db_session, cache, sql_counter
) -> None:
    repo = OrganizationRepository(db_session, cache)
    org = await repo.create_organization("Acme Corp", "acme")
    await commit(db_session)

    found = await repo.get_by_slug("acme")
    assert found == org
    assert await cache.get(keys.organization_key(org.id)) is not None
    assert await cache.get(keys.organization_slug_key("acme")) is not None

    statements = sql_counter.count
    assert await repo.get_by_id(org.id) == org
    assert sql_counter.count == statements

    await repo.delete_organization(org.id)

    assert await cache.get(keys.organization_key(org.id)) is None
    assert await cache.get(keys.organization_slug_key("acme")) is None
    assert await repo.get_by_slug("acme") is None
    assert await repo.get_by_id(org.id) is None


async def test_slug_change_invalidates_old_slug(db_session, cache) -> None:
    repo = OrganizationRepository(db_session, cache)
    org = await repo.create_organization("Acme Corp", "acme")
    await commit(db_session)
    await repo.get_by_slug("acme")

    updated = await repo.update_organization(org.id, slug="acme-global", name="Acme Global")

    assert updated.slug == "acme-global"
    assert await cache.get(keys.organization_slug_key("acme")) is None
    assert await repo.get_by_slug("acme") is None
    renamed = await repo.get_by_slug("acme-global")
    assert renamed is not None and renamed.name == "Acme Global"


async def test_duplicate_slug_rejected(db_session) -> None:
    repo = OrganizationRepository(db_session)
    await repo.create_organization("Acme", "acme")
    with pytest.raises(ResourceAlreadyExistsException):
        await repo.create_organization("Acme Again", "acme")


async def test_slug_with_separator_rejected(db_session) -> None:
    repo = OrganizationRepository(db_session)
    with pytest.raises(ValidationException):
        await repo.create_organization("Bad", "a:b")


async def test_list_organizations(db_session) -> None:
    repo = OrganizationRepository(db_session)
    await repo.create_organization("Beta", "beta")
    alpha = await repo.create_organization("Alpha", "alpha")
    await repo.update_organization(alpha.id, is_active=False)

    assert [o.slug for o in await repo.list_organizations()] == ["alpha", "beta"]
    assert [o.slug for o in await repo.list_organizations(active_only=True)] == ["beta"]


async def test_workspace_slug_lookup_and_update(db_session, cache, organization) -> None:
    repo = WorkspaceRepository(db_session, cache)
    workspace = await repo.create_workspace(organization.id, "Engineering", "eng")
    await commit(db_session)

    assert await repo.get_by_slug("eng") == workspace
    assert await cache.get(keys.workspace_key(workspace.id)) is not None

    await repo.update_workspace(workspace.id, slug="engineering")

    assert await cache.get(keys.workspace_slug_key("eng")) is None
    assert await cache.get(keys.workspace_key(workspace.id)) is None
    assert await repo.get_by_slug("eng") is None
    assert [w.slug for w in await repo.list_by_organization(organization.id)] == [
        "engineering"
    ]

    await repo.delete_workspace(workspace.id)
    assert await repo.get_by_id(workspace.id) is None


async def test_organization_delete_drops_cascaded_children(
    db_session, cache, organization
) -> None:
    workspaces = WorkspaceRepository(db_session, cache)
    staff_repo = StaffRepository(db_session, cache)
    workspace = await workspaces.create_workspace(organization.id, "Engineering", "eng")
    staff = await staff_repo.create_staff(
        organization.id, "E-001", "Ada", "Lovelace", "ada@example.com"
    )
    await commit(db_session)
    assert await workspaces.get_by_slug("eng") == workspace
    assert await staff_repo.get_by_id(staff.id) == staff

    await OrganizationRepository(db_session, cache).delete_organization(organization.id)
    await commit(db_session)

    assert await cache.get(keys.workspace_key(workspace.id)) is None
    assert await cache.get(keys.workspace_slug_key("eng")) is None
    assert await cache.get(keys.staff_key(staff.id)) is None
    assert await workspaces.get_by_id(workspace.id) is None
    assert await staff_repo.get_by_id(staff.id) is None
