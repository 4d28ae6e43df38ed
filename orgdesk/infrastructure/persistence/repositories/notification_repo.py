"""Notification repository with a cached unread count per user."""

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from orgdesk.application.dtos import NotificationResult
from orgdesk.infrastructure.cache import keys
from orgdesk.infrastructure.cache.cache_protocol import CacheProtocol
from orgdesk.infrastructure.cache.policy import CachePolicies
from orgdesk.infrastructure.persistence.models.notification import Notification
from orgdesk.infrastructure.persistence.repositories.cached_repo import CachedRepository


class NotificationRepository(CachedRepository[Notification, NotificationResult]):
    """Notification repository.

    Keys: notification:{id}; aggregate notification:user:{user}:unread. Any
    create, read-flag change or delete drops the recipient's unread count.
    """

    policy_name = "notification"
    updatable_fields = frozenset({"is_read"})

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        policies: CachePolicies | None = None,
    ) -> None:
        super().__init__(db, Notification, cache_service, policies=policies)

    async def list_for_user(
        self,
        user_id: str,
        *,
        unread_only: bool = False,
        skip: int = 0,
        limit: int = 50,
    ) -> list[NotificationResult]:
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.is_read.is_(False))
        return await self._list(
            stmt.order_by(Notification.created_at.desc()).offset(skip).limit(limit)
        )

    async def get_unread_count(self, user_id: str) -> int:
        """Number of unread notifications for user (short-TTL cache)."""
        count = await self.cache.get_or_load(
            keys.unread_count_key(user_id),
            lambda: self._count_unread(user_id),
            ttl=self.policies.ttl_unread_count,
            value_type=int,
        )
        return count or 0

    async def _count_unread(self, user_id: str) -> int:
        result = await self.db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id, Notification.is_read.is_(False)
            )
        )
        return result.scalar() or 0

    async def create_notification(
        self,
        user_id: str,
        type: str,
        title: str,
        message: str,
        *,
        organization_id: str | None = None,
        link: str | None = None,
    ) -> NotificationResult:
        notification = Notification(
            user_id=user_id,
            organization_id=organization_id,
            type=type,
            title=title,
            message=message,
            link=link,
            is_read=False,
        )
        return await self._create(notification)

    async def mark_as_read(self, notification_id: str) -> NotificationResult:
        return await self.update_fields(notification_id, {"is_read": True})

    async def mark_all_as_read(self, user_id: str) -> int:
        """Mark every unread notification of user as read; returns how many changed.

        One bulk UPDATE; the affected ids are read first so each
        notification:{id} key can be dropped explicitly.
        """
        unread = await self._list(
            select(Notification).where(
                Notification.user_id == user_id, Notification.is_read.is_(False)
            )
        )
        if not unread:
            return 0
        await self.db.execute(
            update(Notification)
            .where(Notification.id.in_([n.id for n in unread]))
            .values(is_read=True)
        )
        await self.db.flush()
        await self._invalidate_records(unread)
        return len(unread)

    async def delete_notification(self, notification_id: str) -> None:
        await self.delete_by_id(notification_id)
