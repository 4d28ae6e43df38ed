"""Base repository: generic CRUD and lifecycle hooks (cache invalidation)."""

from typing import Any

from sqlalchemy import and_, inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import object_session

from orgdesk.domain.exceptions import ResourceNotFoundException
from orgdesk.infrastructure.persistence.database import Base


class BaseRepository[ModelType: Base]:
    """Base repository with get_by_id, create, update, delete and hooks.

    Subclasses override _on_after_create, _on_after_update and _on_after_delete
    for cache invalidation. _on_after_update receives the column values the row
    had before the write so keys derived from old values (slug, email, token)
    can be dropped too.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and run _on_after_create hook."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_create(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush pending changes on obj (merge if detached) and run _on_after_update hook.

        Raises ResourceNotFoundException if obj is detached and no row exists
        for its primary key.
        """
        mapper = sa_inspect(self.model)
        pk_attrs = mapper.primary_key
        for col in pk_attrs:
            if getattr(obj, col.key) is None:
                raise ValueError(
                    f"Cannot update: primary key '{col.key}' is missing on "
                    f"{self.model.__name__} instance."
                )
        if object_session(obj) is not self.db.sync_session:
            stmt = select(self.model).where(
                and_(
                    *(getattr(self.model, c.key) == getattr(obj, c.key) for c in pk_attrs)
                )
            )
            result = await self.db.execute(stmt)
            if result.scalar_one_or_none() is None:
                pk_str = ",".join(str(getattr(obj, c.key)) for c in pk_attrs)
                raise ResourceNotFoundException(self.model.__name__, pk_str)
            obj = await self.db.merge(obj)
        state = sa_inspect(obj)
        if state.unloaded:
            # expired server-side values (updated_at); history cannot see them
            await self.db.refresh(obj, attribute_names=list(state.unloaded))
        previous = self._previous_values(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_update(obj, previous)
        return obj

    async def delete(self, obj: ModelType) -> None:
        """Delete the record, flush, then run _on_after_delete hook."""
        await self.db.delete(obj)
        await self.db.flush()
        await self._on_after_delete(obj)

    def _previous_values(self, obj: ModelType) -> dict[str, Any]:
        """Column values as loaded from the store, before pending changes.

        Must be called before flush; afterwards the attribute history is reset.
        """
        state = sa_inspect(obj)
        previous: dict[str, Any] = {}
        for attr in state.mapper.column_attrs:
            history = state.attrs[attr.key].history
            if history.deleted:
                previous[attr.key] = history.deleted[0]
            elif history.unchanged:
                previous[attr.key] = history.unchanged[0]
            else:
                previous[attr.key] = None
        return previous

    async def _on_after_create(self, obj: ModelType) -> None:
        """Override in subclasses to invalidate caches or emit events."""

    async def _on_after_update(self, obj: ModelType, previous: dict[str, Any]) -> None:
        """Override in subclasses to invalidate caches or emit events."""

    async def _on_after_delete(self, obj: ModelType) -> None:
        """Override in subclasses to invalidate caches or emit events."""
