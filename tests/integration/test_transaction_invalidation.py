"""Cache invalidation follows the session transaction (commit, rollback, close)."""

from orgdesk.application.dtos import StaffResult
from orgdesk.infrastructure.cache import keys
from orgdesk.infrastructure.cache.codec import encode_value
from orgdesk.infrastructure.cache.memory_cache import InMemoryCache
from orgdesk.infrastructure.persistence import database
from orgdesk.infrastructure.persistence.database import create_session_factory
from orgdesk.infrastructure.persistence.repositories import (
    OrganizationRepository,
    StaffRepository,
)
from orgdesk.infrastructure.persistence.transaction import commit, has_uncommitted_writes


async def _staff(repo: StaffRepository, organization_id: str) -> StaffResult:
    return await repo.create_staff(
        organization_id, "E-001", "Ada", "Lovelace", "ada@example.com"
    )


async def test_rolled_back_update_is_never_served(
    engine, db_session, cache, organization
) -> None:
    repo = StaffRepository(db_session, cache)
    staff = await _staff(repo, organization.id)
    await commit(db_session)
    assert await repo.get_by_id(staff.id) == staff

    await repo.update_staff(staff.id, last_name="NEVER-COMMITTED")
    during = await repo.get_by_id(staff.id)
    assert during is not None and during.last_name == "NEVER-COMMITTED"
    assert await cache.get(keys.staff_key(staff.id)) is None
    await db_session.rollback()

    async with create_session_factory(engine)() as fresh:
        reread = await StaffRepository(fresh, cache).get_by_id(staff.id)
    assert reread is not None and reread.last_name == "Lovelace"


async def test_reads_skip_cache_until_commit(
    db_session, cache, sql_counter, organization
) -> None:
    repo = StaffRepository(db_session, cache)
    staff = await _staff(repo, organization.id)
    assert has_uncommitted_writes(db_session)

    await repo.get_by_id(staff.id)
    assert len(cache) == 0

    await commit(db_session)
    assert not has_uncommitted_writes(db_session)
    await repo.get_by_id(staff.id)
    statements = sql_counter.count
    await repo.get_by_id(staff.id)
    assert sql_counter.count == statements


async def test_commit_drops_copy_cached_before_it(
    db_session, cache, organization, policies
) -> None:
    repo = StaffRepository(db_session, cache)
    staff = await _staff(repo, organization.id)
    await commit(db_session)

    await repo.update_staff(staff.id, last_name="Byron")
    # another reader caches the committed, pre-update row before this commit
    await cache.set(
        keys.staff_key(staff.id), encode_value(staff, StaffResult), policies.staff.ttl
    )

    await commit(db_session)

    assert await cache.get(keys.staff_key(staff.id)) is None
    reread = await repo.get_by_id(staff.id)
    assert reread is not None and reread.last_name == "Byron"


async def test_rollback_and_close_discard_pending_keys(engine, cache, organization) -> None:
    factory = create_session_factory(engine)
    async with factory() as session:
        await _staff(StaffRepository(session, cache), organization.id)
        assert has_uncommitted_writes(session)
        await session.rollback()
        assert not has_uncommitted_writes(session)

    async with factory() as session:
        await _staff(StaffRepository(session, cache), organization.id)
        await session.close()
        assert not has_uncommitted_writes(session)


async def test_transactional_dependency_invalidates_after_commit(app_database) -> None:
    cache = InMemoryCache()
    async for session in database.get_db_transactional():
        organization = await OrganizationRepository(session, cache).create_organization(
            "Acme", "acme"
        )
    async for session in database.get_db():
        assert await OrganizationRepository(session, cache).get_by_slug("acme") == organization
    assert await cache.get(keys.organization_slug_key("acme")) is not None

    async for session in database.get_db_transactional():
        repo = OrganizationRepository(session, cache)
        await repo.update_organization(organization.id, name="Acme Global")
        # stale copy written by a concurrent reader while the write is in flight
        await cache.set(
            keys.organization_key(organization.id), {"stale": True}, 3600
        )

    assert await cache.get(keys.organization_key(organization.id)) is None
    assert await cache.get(keys.organization_slug_key("acme")) is None
    async for session in database.get_db():
        renamed = await OrganizationRepository(session, cache).get_by_id(organization.id)
        assert renamed is not None and renamed.name == "Acme Global"
