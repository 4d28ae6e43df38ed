"""Document ORM model. Metadata only; bytes live in external storage at file_url."""

from sqlalchemy import BigInteger, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from orgdesk.infrastructure.persistence.database import Base
from orgdesk.infrastructure.persistence.models.mixins import OrganizationScopedModel


class Document(OrganizationScopedModel, Base):
    """Table: document. task_id links a document to a task (optional)."""

    __tablename__ = "document"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(255), nullable=False)
    size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    uploaded_by: Mapped[str] = mapped_column(String, nullable=False, index=True)
    task_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("task.id", ondelete="SET NULL"), nullable=True, index=True
    )
