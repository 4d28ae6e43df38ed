"""Invitation ORM model. Email invite to join an organization with a role."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from orgdesk.domain.enums import InvitationStatus, OrganizationRole
from orgdesk.infrastructure.persistence.database import Base
from orgdesk.infrastructure.persistence.models.mixins import OrganizationScopedModel


class Invitation(OrganizationScopedModel, Base):
    """Table: invitation. token is unique; a resend replaces it."""

    __tablename__ = "invitation"

    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=OrganizationRole.MEMBER.value
    )
    department_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("department.id", ondelete="SET NULL"), nullable=True
    )
    invited_by: Mapped[str] = mapped_column(String, nullable=False)
    token: Mapped[str] = mapped_column(String(128), unique=True, nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=InvitationStatus.PENDING.value, index=True
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    accepted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ({})".format(", ".join(f"'{v}'" for v in InvitationStatus.values())),
            name="invitation_status_check",
        ),
    )
