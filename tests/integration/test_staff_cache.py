"""Staff repository against SQLite + InMemoryCache: read-through and invalidation."""

import pytest

from orgdesk.domain.exceptions import (
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    ValidationException,
)
from orgdesk.infrastructure.cache import keys
from orgdesk.infrastructure.persistence.repositories import (
    AttendanceRepository,
    DepartmentRepository,
    StaffRepository,
)
from orgdesk.infrastructure.persistence.transaction import commit
from orgdesk.shared.utils.datetime import utc_day


async def _create(repo: StaffRepository, organization_id: str, **overrides):
    values = {
        "employee_id": "E-001",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "Ada@Example.com",
    }
    values.update(overrides)
    return await repo.create_staff(organization_id, **values)


async def test_second_read_served_from_cache_without_store_call(
    db_session, cache, sql_counter, organization
) -> None:
    repo = StaffRepository(db_session, cache)
    staff = await _create(repo, organization.id)
    await commit(db_session)
    assert await cache.get(keys.staff_key(staff.id)) is None

    first = await repo.get_by_id(staff.id)
    assert first == staff
    assert await cache.get(keys.staff_key(staff.id)) is not None

    statements = sql_counter.count
    second = await repo.get_by_id(staff.id)

    assert second == first
    assert sql_counter.count == statements


async def test_update_invalidates_so_next_read_sees_new_value(
    db_session, cache, organization
) -> None:
    repo = StaffRepository(db_session, cache)
    staff = await _create(repo, organization.id)
    await commit(db_session)
    await repo.get_by_id(staff.id)

    await repo.update_staff(staff.id, last_name="X")

    assert await cache.get(keys.staff_key(staff.id)) is None
    reread = await repo.get_by_id(staff.id)
    assert reread is not None
    assert reread.last_name == "X"


async def test_email_lookup_populates_primary_and_email_change_drops_old_key(
    db_session, cache, organization
) -> None:
    repo = StaffRepository(db_session, cache)
    staff = await _create(repo, organization.id)
    await commit(db_session)
    old_key = keys.staff_email_key(organization.id, "ada@example.com")

    found = await repo.get_by_email(organization.id, "ADA@example.com")
    assert found is not None and found.id == staff.id
    assert await cache.get(old_key) is not None
    assert await cache.get(keys.staff_key(staff.id)) is not None

    await repo.update_staff(staff.id, email="ada.l@example.com")

    assert await cache.get(old_key) is None
    assert await cache.get(keys.staff_key(staff.id)) is None
    assert await repo.get_by_email(organization.id, "ada@example.com") is None
    moved = await repo.get_by_email(organization.id, "ada.l@example.com")
    assert moved is not None and moved.id == staff.id


async def test_delete_drops_all_lookup_keys(db_session, cache, organization) -> None:
    repo = StaffRepository(db_session, cache)
    staff = await _create(repo, organization.id)
    await commit(db_session)
    await repo.get_by_email(organization.id, staff.email)
    await repo.get_by_employee_id(organization.id, "E-001")

    await repo.delete_staff(staff.id)

    assert len(cache) == 0
    assert await repo.get_by_id(staff.id) is None
    assert await repo.get_by_employee_id(organization.id, "E-001") is None


async def test_missing_staff_not_cached_then_visible_after_create(
    db_session, cache, organization
) -> None:
    repo = StaffRepository(db_session, cache)
    assert await repo.get_by_employee_id(organization.id, "E-404") is None
    assert len(cache) == 0

    staff = await _create(repo, organization.id, employee_id="E-404")

    found = await repo.get_by_employee_id(organization.id, "E-404")
    assert found is not None and found.id == staff.id


async def test_cached_entry_expires_after_ttl(
    db_session, cache, clock, sql_counter, organization, policies
) -> None:
    repo = StaffRepository(db_session, cache)
    staff = await _create(repo, organization.id)
    await commit(db_session)
    await repo.get_by_id(staff.id)

    clock.advance(policies.staff.ttl)
    statements = sql_counter.count
    await repo.get_by_id(staff.id)

    assert sql_counter.count > statements


async def test_duplicate_email_in_organization_rejected(db_session, cache, organization) -> None:
    repo = StaffRepository(db_session, cache)
    await _create(repo, organization.id)

    with pytest.raises(ResourceAlreadyExistsException) as exc_info:
        await _create(repo, organization.id, employee_id="E-002")
    assert exc_info.value.details["field"] == "email"

    with pytest.raises(ResourceAlreadyExistsException) as exc_info:
        await _create(repo, organization.id, email="other@example.com")
    assert exc_info.value.details["field"] == "employee_id"


async def test_update_unknown_field_and_unknown_id(db_session, cache, organization) -> None:
    repo = StaffRepository(db_session, cache)
    staff = await _create(repo, organization.id)

    with pytest.raises(ValidationException):
        await repo.update_staff(staff.id, organization_id="elsewhere")
    with pytest.raises(ResourceNotFoundException):
        await repo.update_staff("missing-id", last_name="X")
    with pytest.raises(ResourceNotFoundException):
        await repo.delete_staff("missing-id")


async def test_staff_write_drops_dashboard(db_session, cache, organization) -> None:
    repo = StaffRepository(db_session, cache)
    await cache.set(keys.dashboard_key(organization.id, utc_day()), {"stale": True}, ttl=300)

    await _create(repo, organization.id)

    assert await cache.get(keys.dashboard_key(organization.id, utc_day())) is None


async def test_works_without_cache(db_session, organization) -> None:
    repo = StaffRepository(db_session, None)
    staff = await _create(repo, organization.id)
    assert await repo.get_by_id(staff.id) == staff
    listed = await repo.list_by_organization(organization.id)
    assert [s.id for s in listed] == [staff.id]


async def test_staff_delete_drops_cascaded_attendance(db_session, cache, organization) -> None:
    staff_repo = StaffRepository(db_session, cache)
    attendance_repo = AttendanceRepository(db_session, cache)
    staff = await _create(staff_repo, organization.id)
    record = await attendance_repo.check_in(organization.id, staff.id)
    await commit(db_session)
    assert await attendance_repo.get_by_id(record.id) == record
    assert [a.id for a in await attendance_repo.get_recent_for_staff(staff.id)] == [record.id]

    await staff_repo.delete_staff(staff.id)
    await commit(db_session)

    assert await cache.get(keys.attendance_key(record.id)) is None
    assert await cache.get(keys.attendance_recent_key(staff.id)) is None
    assert await attendance_repo.get_by_id(record.id) is None
    assert await attendance_repo.get_recent_for_staff(staff.id) == []


async def test_department_delete_refreshes_cached_members(
    db_session, cache, organization
) -> None:
    departments = DepartmentRepository(db_session, cache)
    repo = StaffRepository(db_session, cache)
    department = await departments.create_department(organization.id, "Research")
    staff = await _create(repo, organization.id, department_id=department.id)
    await commit(db_session)
    cached = await repo.get_by_id(staff.id)
    assert cached is not None and cached.department_id == department.id

    await departments.delete_department(department.id)
    await commit(db_session)

    assert await cache.get(keys.staff_key(staff.id)) is None
    reread = await repo.get_by_id(staff.id)
    assert reread is not None and reread.department_id is None
