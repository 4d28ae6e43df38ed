"""Document metadata repository (file bytes live in external storage)."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from orgdesk.application.dtos import DocumentResult
from orgdesk.domain.exceptions import ResourceNotFoundException, ValidationException
from orgdesk.infrastructure.cache.cache_protocol import CacheProtocol
from orgdesk.infrastructure.cache.policy import CachePolicies
from orgdesk.infrastructure.persistence.models import Document, Task
from orgdesk.infrastructure.persistence.repositories.cached_repo import CachedRepository


class DocumentRepository(CachedRepository[Document, DocumentResult]):
    """Document repository. Keys: document:{id}."""

    policy_name = "document"
    updatable_fields = frozenset({"name", "task_id"})

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        policies: CachePolicies | None = None,
    ) -> None:
        super().__init__(db, Document, cache_service, policies=policies)

    async def list_documents(
        self,
        organization_id: str,
        *,
        task_id: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[DocumentResult]:
        stmt = select(Document).where(Document.organization_id == organization_id)
        if task_id is not None:
            stmt = stmt.where(Document.task_id == task_id)
        return await self._list(
            stmt.order_by(Document.created_at.desc()).offset(skip).limit(limit)
        )

    async def create_document(
        self,
        organization_id: str,
        name: str,
        file_url: str,
        mime_type: str,
        size: int,
        uploaded_by: str,
        *,
        task_id: str | None = None,
    ) -> DocumentResult:
        if size < 0:
            raise ValidationException("size must not be negative", field="size")
        document = Document(
            organization_id=organization_id,
            name=name,
            file_url=file_url,
            mime_type=mime_type,
            size=size,
            uploaded_by=uploaded_by,
            task_id=task_id,
        )
        return await self._create(document)

    async def update_document(self, document_id: str, **changes: Any) -> DocumentResult:
        """Rename or (un)link a document to a task."""
        return await self.update_fields(document_id, changes)

    async def link_task(self, document_id: str, task_id: str) -> DocumentResult:
        """Attach document to a task of the same organization.

        Raises:
            ResourceNotFoundException: Unknown document, or no such task in
                the document's organization.
        """
        document = await self.require_entity(document_id)
        result = await self.db.execute(
            select(Task.id).where(
                Task.id == task_id, Task.organization_id == document.organization_id
            )
        )
        if result.scalar_one_or_none() is None:
            raise ResourceNotFoundException("task", task_id)
        document.task_id = task_id
        return await self._save(document)

    async def unlink_task(self, document_id: str, task_id: str) -> DocumentResult:
        """Detach document from task_id.

        Raises:
            ResourceNotFoundException: Unknown document.
            ValidationException: Document is not linked to task_id.
        """
        document = await self.require_entity(document_id)
        if document.task_id != task_id:
            raise ValidationException(
                f"Document is not linked to task {task_id}", field="task_id"
            )
        document.task_id = None
        return await self._save(document)

    async def delete_document(self, document_id: str) -> None:
        await self.delete_by_id(document_id)
