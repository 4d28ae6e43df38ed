"""Leave request ORM model."""

from datetime import date, datetime

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from orgdesk.domain.enums import LeaveStatus
from orgdesk.infrastructure.persistence.database import Base
from orgdesk.infrastructure.persistence.models.mixins import OrganizationScopedModel


class LeaveRequest(OrganizationScopedModel, Base):
    """Table: leave_request. reviewed_* are set on approve/reject."""

    __tablename__ = "leave_request"

    staff_id: Mapped[str] = mapped_column(
        String, ForeignKey("staff.id", ondelete="CASCADE"), nullable=False, index=True
    )
    leave_type: Mapped[str] = mapped_column(String(30), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=LeaveStatus.PENDING.value, index=True
    )
    reviewed_by: Mapped[str | None] = mapped_column(String, nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    review_note: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="leave_request_dates_check"),
        CheckConstraint(
            "status IN ({})".format(", ".join(f"'{v}'" for v in LeaveStatus.values())),
            name="leave_request_status_check",
        ),
    )
