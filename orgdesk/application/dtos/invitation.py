"""DTOs for organization invitations (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime

from orgdesk.domain.enums import InvitationStatus, OrganizationRole


@dataclass(frozen=True)
class InvitationResult:
    """Invitation read-model. token is unique and rotates on resend."""

    id: str
    organization_id: str
    email: str
    role: OrganizationRole
    department_id: str | None
    invited_by: str
    token: str
    status: InvitationStatus
    expires_at: datetime
    accepted_at: datetime | None
    created_at: datetime
    updated_at: datetime
