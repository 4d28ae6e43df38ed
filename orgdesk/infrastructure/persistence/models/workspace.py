"""Workspace ORM model. Groups projects, tasks and reports inside an organization."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from orgdesk.infrastructure.persistence.database import Base
from orgdesk.infrastructure.persistence.models.mixins import OrganizationScopedModel


class Workspace(OrganizationScopedModel, Base):
    """Table: workspace. slug is globally unique (used in URLs)."""

    __tablename__ = "workspace"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
