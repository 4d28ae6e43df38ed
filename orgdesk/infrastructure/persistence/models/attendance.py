"""Attendance ORM model. One row per check-in; check_out set on check-out."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from orgdesk.domain.enums import AttendanceStatus
from orgdesk.infrastructure.persistence.database import Base
from orgdesk.infrastructure.persistence.models.mixins import OrganizationScopedModel


class Attendance(OrganizationScopedModel, Base):
    """Table: attendance."""

    __tablename__ = "attendance"

    staff_id: Mapped[str] = mapped_column(
        String, ForeignKey("staff.id", ondelete="CASCADE"), nullable=False, index=True
    )
    check_in: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    check_out: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AttendanceStatus.PRESENT.value
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_attendance_org_check_in", "organization_id", "check_in"),
        CheckConstraint(
            "status IN ({})".format(", ".join(f"'{v}'" for v in AttendanceStatus.values())),
            name="attendance_status_check",
        ),
    )
