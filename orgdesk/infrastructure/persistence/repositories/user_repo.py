"""User repository with read-through cache by id and email.

Emails are stored and looked up lower-cased so user:email:{email} has a
single spelling per account.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from orgdesk.application.dtos import UserResult
from orgdesk.infrastructure.cache import keys
from orgdesk.infrastructure.cache.cache_protocol import CacheProtocol
from orgdesk.infrastructure.cache.policy import CachePolicies
from orgdesk.infrastructure.persistence.models import Notification, Staff, User
from orgdesk.infrastructure.persistence.repositories.cached_repo import (
    CachedRepository,
    Dependent,
    require_key_safe,
)


def normalize_email(email: str) -> str:
    return require_key_safe("email", email.strip().lower())


class UserRepository(CachedRepository[User, UserResult]):
    """User repository. Keys: user:{id}, user:email:{email}."""

    policy_name = "user"
    updatable_fields = frozenset({"email", "name", "image", "email_verified"})

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        policies: CachePolicies | None = None,
    ) -> None:
        super().__init__(db, User, cache_service, policies=policies)

    async def get_by_email(self, email: str) -> UserResult | None:
        normalized = normalize_email(email)
        return await self._get_cached_by(
            keys.user_email_key(normalized), User.email == normalized
        )

    async def create_user(
        self,
        email: str,
        name: str,
        *,
        image: str | None = None,
        email_verified: bool = False,
    ) -> UserResult:
        """Create user. Raises ResourceAlreadyExistsException on duplicate email."""
        normalized = normalize_email(email)
        user = User(email=normalized, name=name, image=image, email_verified=email_verified)
        return await self._create(user, conflict=("email", normalized))

    async def update_user(self, user_id: str, **changes: Any) -> UserResult:
        """Update user; an email change drops the key of the previous email too."""
        if "email" in changes:
            changes["email"] = normalize_email(changes["email"])
        return await self.update_fields(
            user_id, changes, conflict=("email", str(changes.get("email", "")))
        )

    def _dependents(self, entity_id: str) -> list[Dependent]:
        # staff.user_id is SET NULL, notifications cascade
        return [
            (Staff, "staff", Staff.user_id == entity_id),
            (Notification, "notification", Notification.user_id == entity_id),
        ]

    async def delete_user(self, user_id: str) -> None:
        await self.delete_by_id(user_id)
