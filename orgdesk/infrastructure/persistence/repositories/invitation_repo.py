"""Invitation repository: create, accept, cancel and resend by token."""

from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from orgdesk.application.dtos import InvitationResult
from orgdesk.core.constants import INVITATION_EXPIRY_DAYS
from orgdesk.domain.enums import InvitationStatus, OrganizationRole
from orgdesk.domain.exceptions import (
    InvalidStateTransitionException,
    ResourceNotFoundException,
)
from orgdesk.infrastructure.cache import keys
from orgdesk.infrastructure.cache.cache_protocol import CacheProtocol
from orgdesk.infrastructure.cache.policy import CachePolicies
from orgdesk.infrastructure.persistence.models.invitation import Invitation
from orgdesk.infrastructure.persistence.repositories.cached_repo import (
    CachedRepository,
    require_key_safe,
)
from orgdesk.infrastructure.persistence.repositories.user_repo import normalize_email
from orgdesk.shared.utils.datetime import ensure_utc, utc_now
from orgdesk.shared.utils.generators import generate_token


class InvitationRepository(CachedRepository[Invitation, InvitationResult]):
    """Invitation repository. Keys: invitation:{id}, invitation:token:{token}.

    A resend rotates the token; the update hook drops the key of the old
    token along with the new one.
    """

    policy_name = "invitation"

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        policies: CachePolicies | None = None,
    ) -> None:
        super().__init__(db, Invitation, cache_service, policies=policies)

    async def get_by_token(self, token: str) -> InvitationResult | None:
        return await self._get_cached_by(
            keys.invitation_token_key(require_key_safe("token", token)),
            Invitation.token == token,
        )

    async def list_pending(
        self, organization_id: str, now: datetime | None = None
    ) -> list[InvitationResult]:
        """PENDING invitations that have not expired yet, newest first."""
        return await self._list(
            select(Invitation)
            .where(
                Invitation.organization_id == organization_id,
                Invitation.status == InvitationStatus.PENDING.value,
                Invitation.expires_at > (ensure_utc(now) or utc_now()),
            )
            .order_by(Invitation.created_at.desc())
        )

    async def create_invitation(
        self,
        organization_id: str,
        email: str,
        invited_by: str,
        *,
        role: OrganizationRole = OrganizationRole.MEMBER,
        department_id: str | None = None,
        now: datetime | None = None,
    ) -> InvitationResult:
        """Create a PENDING invitation valid for INVITATION_EXPIRY_DAYS."""
        issued_at = ensure_utc(now) or utc_now()
        invitation = Invitation(
            organization_id=organization_id,
            email=normalize_email(email),
            role=role.value,
            department_id=department_id,
            invited_by=invited_by,
            token=generate_token(),
            status=InvitationStatus.PENDING.value,
            expires_at=issued_at + timedelta(days=INVITATION_EXPIRY_DAYS),
        )
        return await self._create(invitation)

    async def _require_by_token(self, token: str) -> Invitation:
        result = await self.db.execute(select(Invitation).where(Invitation.token == token))
        invitation = result.scalar_one_or_none()
        if invitation is None:
            raise ResourceNotFoundException("invitation", token)
        return invitation

    async def accept(self, token: str, now: datetime | None = None) -> InvitationResult:
        """Accept a PENDING invitation.

        A PENDING invitation past expires_at is not accepted: it is saved as
        EXPIRED and returned with that status, so the caller's commit keeps
        the mark. Callers check result.status before granting membership.

        Raises:
            ResourceNotFoundException: Unknown token.
            InvalidStateTransitionException: Invitation is not PENDING.
        """
        invitation = await self._require_by_token(token)
        if invitation.status != InvitationStatus.PENDING.value:
            raise InvalidStateTransitionException(
                "invitation", invitation.id, invitation.status, "accept"
            )
        current = ensure_utc(now) or utc_now()
        if ensure_utc(invitation.expires_at) <= current:  # type: ignore[operator]
            invitation.status = InvitationStatus.EXPIRED.value
            return await self._save(invitation)
        invitation.status = InvitationStatus.ACCEPTED.value
        invitation.accepted_at = current
        return await self._save(invitation)

    async def cancel(self, invitation_id: str) -> InvitationResult:
        invitation = await self.require_entity(invitation_id)
        if invitation.status != InvitationStatus.PENDING.value:
            raise InvalidStateTransitionException(
                "invitation", invitation_id, invitation.status, "cancel"
            )
        invitation.status = InvitationStatus.CANCELLED.value
        return await self._save(invitation)

    async def resend(
        self, invitation_id: str, now: datetime | None = None
    ) -> InvitationResult:
        """Issue a new token and expiry for a PENDING or EXPIRED invitation."""
        invitation = await self.require_entity(invitation_id)
        if invitation.status not in (
            InvitationStatus.PENDING.value,
            InvitationStatus.EXPIRED.value,
        ):
            raise InvalidStateTransitionException(
                "invitation", invitation_id, invitation.status, "resend"
            )
        issued_at = ensure_utc(now) or utc_now()
        invitation.token = generate_token()
        invitation.status = InvitationStatus.PENDING.value
        invitation.expires_at = issued_at + timedelta(days=INVITATION_EXPIRY_DAYS)
        return await self._save(invitation)

    async def delete_invitation(self, invitation_id: str) -> None:
        await self.delete_by_id(invitation_id)
