"""DTOs for document metadata (file bytes live in external storage)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class DocumentResult:
    id: str
    organization_id: str
    name: str
    file_url: str
    mime_type: str
    size: int
    uploaded_by: str
    task_id: str | None
    created_at: datetime
    updated_at: datetime
