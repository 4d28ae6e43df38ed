"""Attendance repository: today/recent aggregates and check-out rules."""

from datetime import UTC, datetime, timedelta

import pytest

from orgdesk.domain.enums import AttendanceStatus
from orgdesk.domain.exceptions import InvalidStateTransitionException, ValidationException
from orgdesk.infrastructure.cache import keys
from orgdesk.infrastructure.persistence.repositories import (
    AttendanceRepository,
    StaffRepository,
)
from orgdesk.infrastructure.persistence.transaction import commit
from orgdesk.shared.utils.datetime import utc_day, utc_now


@pytest.fixture
async def staff(db_session, organization):
    created = await StaffRepository(db_session).create_staff(
        organization.id, "E-100", "Alan", "Turing", "alan@example.com"
    )
    await commit(db_session)
    return created


async def test_check_in_invalidates_today_and_recent(
    db_session, cache, sql_counter, organization, staff
) -> None:
    repo = AttendanceRepository(db_session, cache)
    assert await repo.get_today(organization.id) == []
    assert await repo.get_recent_for_staff(staff.id) == []
    statements = sql_counter.count
    assert await repo.get_today(organization.id) == []
    assert sql_counter.count == statements

    record = await repo.check_in(organization.id, staff.id, status=AttendanceStatus.LATE)

    assert await cache.get(keys.attendance_day_key(organization.id, utc_day())) is None
    assert await cache.get(keys.attendance_recent_key(staff.id)) is None
    assert [a.id for a in await repo.get_today(organization.id)] == [record.id]
    recent = await repo.get_recent_for_staff(staff.id)
    assert [a.id for a in recent] == [record.id]
    assert recent[0].status is AttendanceStatus.LATE


async def test_check_out_once(db_session, cache, organization, staff) -> None:
    repo = AttendanceRepository(db_session, cache)
    record = await repo.check_in(organization.id, staff.id)
    await commit(db_session)
    await repo.get_by_id(record.id)
    await repo.get_today(organization.id)

    closed = await repo.check_out(record.id)

    assert closed.check_out is not None
    assert await cache.get(keys.attendance_key(record.id)) is None
    assert await cache.get(keys.attendance_day_key(organization.id, utc_day())) is None
    today = await repo.get_today(organization.id)
    assert today[0].check_out is not None

    with pytest.raises(InvalidStateTransitionException):
        await repo.check_out(record.id)


async def test_range_listing_is_read_from_store(
    db_session, cache, organization, staff
) -> None:
    repo = AttendanceRepository(db_session, cache)
    now = utc_now()
    yesterday = await repo.check_in(organization.id, staff.id, at=now - timedelta(days=1))
    await repo.check_in(organization.id, staff.id, at=now - timedelta(days=10))

    rows = await repo.list_for_staff(staff.id, now - timedelta(days=2), now)

    assert [a.id for a in rows] == [yesterday.id]
    assert len(cache) == 0
    with pytest.raises(ValidationException):
        await repo.list_for_staff(staff.id, now, now)


async def test_update_attendance_notes(db_session, cache, organization, staff) -> None:
    repo = AttendanceRepository(db_session, cache)
    record = await repo.check_in(organization.id, staff.id)
    await commit(db_session)
    await repo.get_recent_for_staff(staff.id)

    updated = await repo.update_attendance(
        record.id, notes="forgot badge", status=AttendanceStatus.PRESENT
    )

    assert updated.notes == "forgot badge"
    assert await cache.get(keys.attendance_recent_key(staff.id)) is None


async def test_day_view_is_keyed_by_date(db_session, cache, organization, staff) -> None:
    repo = AttendanceRepository(db_session, cache)
    day1 = datetime(2026, 1, 1, 9, 0, tzinfo=UTC)
    day2 = day1 + timedelta(days=1)
    record = await repo.check_in(organization.id, staff.id, at=day1)
    await commit(db_session)

    assert [a.id for a in await repo.get_today(organization.id, now=day1)] == [record.id]
    assert await repo.get_today(organization.id, now=day2) == []
    assert await cache.get(keys.attendance_day_key(organization.id, day1.date())) is not None
    assert await cache.get(keys.attendance_day_key(organization.id, day2.date())) == []

    later = await repo.check_in(organization.id, staff.id, at=day2)
    await commit(db_session)

    assert await cache.get(keys.attendance_day_key(organization.id, day1.date())) is not None
    assert await cache.get(keys.attendance_day_key(organization.id, day2.date())) is None
    assert [a.id for a in await repo.get_today(organization.id, now=day2)] == [later.id]
