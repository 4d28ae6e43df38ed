"""Department ORM model."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from orgdesk.infrastructure.persistence.database import Base
from orgdesk.infrastructure.persistence.models.mixins import OrganizationScopedModel


class Department(OrganizationScopedModel, Base):
    """Table: department. manager_id holds a staff id (no FK: staff references department)."""

    __tablename__ = "department"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    manager_id: Mapped[str | None] = mapped_column(String, nullable=True)
