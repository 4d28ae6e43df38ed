"""Invitation repository: token lookups, resend rotation, accept rules."""

from datetime import timedelta

import pytest

from orgdesk.domain.enums import InvitationStatus, OrganizationRole
from orgdesk.domain.exceptions import InvalidStateTransitionException, ResourceNotFoundException
from orgdesk.infrastructure.cache import keys
from orgdesk.infrastructure.persistence import database
from orgdesk.infrastructure.persistence.repositories import (
    InvitationRepository,
    OrganizationRepository,
    UserRepository,
)
from orgdesk.infrastructure.persistence.transaction import commit
from orgdesk.shared.utils.datetime import ensure_utc, utc_now


async def test_create_sets_pending_seven_day_expiry(db_session, organization, user) -> None:
    repo = InvitationRepository(db_session)
    issued = utc_now()

    invitation = await repo.create_invitation(
        organization.id, "New.Hire@Example.com", user.id, role=OrganizationRole.ADMIN, now=issued
    )

    assert invitation.email == "new.hire@example.com"
    assert invitation.status is InvitationStatus.PENDING
    assert invitation.role is OrganizationRole.ADMIN
    assert invitation.token
    assert ensure_utc(invitation.expires_at) - issued == timedelta(days=7)


async def test_resend_rotates_token_and_drops_old_token_key(
    db_session, cache, organization, user
) -> None:
    repo = InvitationRepository(db_session, cache)
    invitation = await repo.create_invitation(organization.id, "new@example.com", user.id)
    await commit(db_session)
    old_token = invitation.token
    assert await repo.get_by_token(old_token) == invitation

    resent = await repo.resend(invitation.id)

    assert resent.token != old_token
    assert await cache.get(keys.invitation_token_key(old_token)) is None
    assert await cache.get(keys.invitation_key(invitation.id)) is None
    assert await repo.get_by_token(old_token) is None
    found = await repo.get_by_token(resent.token)
    assert found is not None and found.id == invitation.id


async def test_accept_pending_invitation(db_session, cache, organization, user) -> None:
    repo = InvitationRepository(db_session, cache)
    invitation = await repo.create_invitation(organization.id, "new@example.com", user.id)
    await commit(db_session)
    await repo.get_by_token(invitation.token)

    accepted = await repo.accept(invitation.token)

    assert accepted.status is InvitationStatus.ACCEPTED
    assert accepted.accepted_at is not None
    cached = await repo.get_by_token(invitation.token)
    assert cached is not None and cached.status is InvitationStatus.ACCEPTED
    with pytest.raises(InvalidStateTransitionException):
        await repo.accept(invitation.token)


async def test_accept_expired_invitation_marks_it_expired(
    db_session, cache, organization, user
) -> None:
    repo = InvitationRepository(db_session, cache)
    invitation = await repo.create_invitation(
        organization.id, "late@example.com", user.id, now=utc_now() - timedelta(days=8)
    )
    assert await repo.list_pending(organization.id) == []

    result = await repo.accept(invitation.token)
    assert result.status is InvitationStatus.EXPIRED
    assert result.accepted_at is None
    await commit(db_session)

    expired = await repo.get_by_id(invitation.id)
    assert expired is not None and expired.status is InvitationStatus.EXPIRED

    resent = await repo.resend(invitation.id)
    assert resent.status is InvitationStatus.PENDING
    assert [i.id for i in await repo.list_pending(organization.id)] == [invitation.id]


async def test_cancel_and_unknown_token(db_session, organization, user) -> None:
    repo = InvitationRepository(db_session)
    invitation = await repo.create_invitation(organization.id, "x@example.com", user.id)

    cancelled = await repo.cancel(invitation.id)

    assert cancelled.status is InvitationStatus.CANCELLED
    with pytest.raises(InvalidStateTransitionException):
        await repo.resend(invitation.id)
    with pytest.raises(ResourceNotFoundException):
        await repo.accept("no-such-token")

    await repo.delete_invitation(invitation.id)
    assert await repo.get_by_id(invitation.id) is None


async def test_expired_mark_survives_transactional_dependency(app_database) -> None:
    async for session in database.get_db_transactional():
        organization = await OrganizationRepository(session).create_organization("Acme", "acme")
        inviter = await UserRepository(session).create_user("ada@example.com", "Ada")
        invitation = await InvitationRepository(session).create_invitation(
            organization.id, "late@example.com", inviter.id, now=utc_now() - timedelta(days=8)
        )

    async for session in database.get_db_transactional():
        result = await InvitationRepository(session).accept(invitation.token)
        assert result.status is InvitationStatus.EXPIRED

    async for session in database.get_db():
        stored = await InvitationRepository(session).get_by_id(invitation.id)
        assert stored is not None and stored.status is InvitationStatus.EXPIRED
