"""Cached repository: read-through lookups and policy-driven invalidation.

Reads return frozen read models (application DTOs). Lookups by primary or
secondary key go through ReadThroughCache; every create/update/delete
runs the BaseRepository hooks, which drop the keys the entity policy
derives from the record before and after the write.

Invalidation follows the session's transaction: keys are dropped right
after the flush and recorded with defer_invalidation(), which drops them
again once the transaction commits. Until then reads through the session
skip the cache, so uncommitted rows are never cached. Deleting a row also
drops the keys of the child rows the store deletes or detaches
(ON DELETE CASCADE / SET NULL), as listed by _dependents().
"""

from collections.abc import Iterable, Mapping
from dataclasses import fields
from enum import Enum
from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from orgdesk.core.constants import CACHE_KEY_SEP
from orgdesk.domain.exceptions import (
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    ValidationException,
)
from orgdesk.infrastructure.cache.cache_protocol import CacheProtocol
from orgdesk.infrastructure.cache.codec import decode_value
from orgdesk.infrastructure.cache.policy import (
    CachePolicies,
    EntityCachePolicy,
    get_cache_policies,
)
from orgdesk.infrastructure.cache.read_through import ReadThroughCache
from orgdesk.infrastructure.persistence.database import Base
from orgdesk.infrastructure.persistence.repositories.base import BaseRepository
from orgdesk.infrastructure.persistence.transaction import (
    defer_invalidation,
    has_uncommitted_writes,
)

# (child model, policy name, where clause) for rows changed by a parent delete
type Dependent = tuple[type[Base], str, Any]


def require_key_safe(field: str, value: str) -> str:
    """Return value if it can be used as a cache key component.

    Raises:
        ValidationException: If value is empty or contains the key separator.
    """
    if not value or CACHE_KEY_SEP in value:
        raise ValidationException(
            f"{field} must be non-empty and must not contain {CACHE_KEY_SEP!r}", field=field
        )
    return value


def values_to_read_model[R](values: Mapping[str, Any], result_type: type[R]) -> R:
    data = {f.name: values.get(f.name) for f in fields(result_type)}  # type: ignore[arg-type]
    return decode_value(data, result_type)


def to_read_model[R](obj: Any, result_type: type[R]) -> R:
    """Map an ORM row to the read model result_type."""
    return values_to_read_model(
        {f.name: getattr(obj, f.name) for f in fields(result_type)},  # type: ignore[arg-type]
        result_type,
    )


class CachedRepository[ModelType: Base, ResultType](BaseRepository[ModelType]):
    """Base for entity repositories backed by an EntityCachePolicy.

    Subclasses set policy_name (attribute of CachePolicies) and
    updatable_fields (columns update_fields may change), and override
    _dependents when other tables reference theirs.
    """

    policy_name: str = ""
    updatable_fields: frozenset[str] = frozenset()

    def __init__(
        self,
        db: AsyncSession,
        model: type[ModelType],
        cache_service: CacheProtocol | None = None,
        *,
        policies: CachePolicies | None = None,
    ) -> None:
        super().__init__(db, model)
        self.policies = policies or get_cache_policies()
        self.policy: EntityCachePolicy[ResultType] = getattr(self.policies, self.policy_name)
        self.cache = ReadThroughCache(
            cache_service, bypass=lambda: has_uncommitted_writes(db)
        )

    @property
    def result_type(self) -> type[ResultType]:
        return self.policy.result_type

    def to_result(self, obj: ModelType) -> ResultType:
        """Map an ORM row to its read model."""
        return to_read_model(obj, self.result_type)

    def _from_values(self, values: Mapping[str, Any]) -> ResultType:
        return values_to_read_model(values, self.result_type)

    async def get_entity_by_id(self, entity_id: str) -> ModelType | None:
        """Get ORM row by ID for update/delete (bypasses cache, reads from DB)."""
        return await super().get_by_id(entity_id)

    async def require_entity(self, entity_id: str) -> ModelType:
        """Get ORM row by ID or raise ResourceNotFoundException."""
        obj = await self.get_entity_by_id(entity_id)
        if obj is None:
            raise ResourceNotFoundException(self.policy.entity, entity_id)
        return obj

    async def get_by_id(self, entity_id: str) -> ResultType | None:  # type: ignore[override]
        """Get read model by ID, from cache if available."""
        model: Any = self.model
        return await self.cache.get_or_load(
            self.policy.id_key(require_key_safe("id", entity_id)),
            lambda: self._load_one(model.id == entity_id),
            ttl=self.policy.ttl,
            value_type=self.result_type,
        )

    async def _get_cached_by(self, key: str, *conditions: Any) -> ResultType | None:
        """Read-through lookup by a secondary key; populates the primary key too."""
        return await self.cache.get_or_load(
            key,
            lambda: self._load_one(*conditions),
            ttl=self.policy.ttl,
            value_type=self.result_type,
            alias_keys=self.policy.entity_keys,
        )

    async def _load_one(self, *conditions: Any) -> ResultType | None:
        result = await self.db.execute(select(self.model).where(*conditions))
        obj = result.scalar_one_or_none()
        return self.to_result(obj) if obj is not None else None

    async def _list(self, stmt: Select[Any]) -> list[ResultType]:
        result = await self.db.execute(stmt)
        return [self.to_result(obj) for obj in result.scalars().all()]

    async def _create(
        self, obj: ModelType, conflict: tuple[str, str] | None = None
    ) -> ResultType:
        """Create obj; map a unique violation to ResourceAlreadyExistsException(conflict)."""
        try:
            created = await self.create(obj)
        except IntegrityError as e:
            if conflict is None:
                raise
            raise ResourceAlreadyExistsException(self.policy.entity, *conflict) from e
        return self.to_result(created)

    async def _save(
        self, obj: ModelType, conflict: tuple[str, str] | None = None
    ) -> ResultType:
        """Flush pending changes on obj; same conflict mapping as _create."""
        try:
            updated = await self.update(obj)
        except IntegrityError as e:
            if conflict is None:
                raise
            raise ResourceAlreadyExistsException(self.policy.entity, *conflict) from e
        return self.to_result(updated)

    def _apply_changes(self, obj: ModelType, changes: Mapping[str, Any]) -> None:
        unknown = set(changes) - self.updatable_fields
        if unknown:
            raise ValidationException(
                f"Cannot update {self.policy.entity} field(s): {', '.join(sorted(unknown))}",
                field=sorted(unknown)[0],
            )
        for name, value in changes.items():
            setattr(obj, name, value.value if isinstance(value, Enum) else value)

    async def update_fields(
        self,
        entity_id: str,
        changes: Mapping[str, Any],
        conflict: tuple[str, str] | None = None,
    ) -> ResultType:
        """Apply changes to the row with entity_id and return the new read model.

        Raises:
            ResourceNotFoundException: No row with entity_id.
            ValidationException: A field is not in updatable_fields.
        """
        obj = await self.require_entity(entity_id)
        self._apply_changes(obj, changes)
        return await self._save(obj, conflict)

    async def delete_by_id(self, entity_id: str) -> None:
        """Delete the row with entity_id; raises ResourceNotFoundException if missing.

        Child rows the store cascades to (or detaches) are read before the
        delete and their keys are dropped along with the parent's.
        """
        obj = await self.require_entity(entity_id)
        dependent_keys = await self._dependent_keys(entity_id)
        await self.delete(obj)
        await self._drop_keys(dependent_keys)

    def _dependents(self, entity_id: str) -> list[Dependent]:
        """Child rows whose stored state changes when entity_id is deleted."""
        return []

    async def _dependent_keys(self, entity_id: str) -> list[str]:
        collected: list[str] = []
        for model, policy_name, condition in self._dependents(entity_id):
            policy: EntityCachePolicy[Any] = getattr(self.policies, policy_name)
            result = await self.db.execute(select(model).where(condition))
            for row in result.scalars().all():
                collected.extend(policy.affected_keys(to_read_model(row, policy.result_type)))
        return collected

    async def _drop_keys(self, keys: list[str]) -> None:
        """Delete keys now and once more after the transaction commits."""
        await self.cache.invalidate(keys)
        defer_invalidation(self.db, self.cache, keys)

    async def _on_after_create(self, obj: ModelType) -> None:
        await super()._on_after_create(obj)
        dropped = await self.cache.invalidate_created(self.policy, self.to_result(obj))
        defer_invalidation(self.db, self.cache, dropped)

    async def _on_after_update(self, obj: ModelType, previous: dict[str, Any]) -> None:
        await super()._on_after_update(obj, previous)
        dropped = await self.cache.invalidate_updated(
            self.policy, self._from_values(previous), self.to_result(obj)
        )
        defer_invalidation(self.db, self.cache, dropped)

    async def _on_after_delete(self, obj: ModelType) -> None:
        await super()._on_after_delete(obj)
        dropped = await self.cache.invalidate_deleted(self.policy, self.to_result(obj))
        defer_invalidation(self.db, self.cache, dropped)

    async def _invalidate_records(self, records: Iterable[ResultType]) -> None:
        """Drop every key affected by records (bulk writes that bypass the hooks)."""
        await self._drop_keys(
            [key for record in records for key in self.policy.affected_keys(record)]
        )
