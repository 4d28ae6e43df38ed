"""Cache invalidation tied to the transaction of an AsyncSession.

Repositories delete the keys affected by a write right after their flush
and record the same keys on the session with defer_invalidation(). While
that transaction is open, reads through the session bypass the cache: they
can see rows that are not committed and must never be cached. After commit,
invalidate_committed() (called by commit() and get_db_transactional) deletes
the recorded keys again, dropping any pre-write copy another session cached
between the flush and the commit. When the transaction rolls back or the
session closes the record is discarded; the cache never saw those rows.
"""

import logging
from collections.abc import Iterable

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session, SessionTransaction

from orgdesk.infrastructure.cache.read_through import ReadThroughCache

logger = logging.getLogger(__name__)

_PENDING = "orgdesk.pending_invalidations"
_COMMITTED = "orgdesk.committed_invalidations"

type _Invalidations = list[tuple[ReadThroughCache, list[str]]]


def defer_invalidation(
    session: AsyncSession, cache: ReadThroughCache, keys: Iterable[str]
) -> None:
    """Record keys to delete again once the session's transaction commits."""
    pending: _Invalidations = session.info.setdefault(_PENDING, [])
    pending.append((cache, list(keys)))


def has_uncommitted_writes(session: AsyncSession) -> bool:
    return _PENDING in session.info


@event.listens_for(Session, "after_commit")
def _promote_pending(session: Session) -> None:
    pending: _Invalidations | None = session.info.pop(_PENDING, None)
    if pending:
        session.info.setdefault(_COMMITTED, []).extend(pending)


@event.listens_for(Session, "after_transaction_end")
def _discard_pending(session: Session, transaction: SessionTransaction) -> None:
    # rollback or close of the outermost transaction; a commit already promoted
    if transaction.parent is None:
        session.info.pop(_PENDING, None)


async def invalidate_committed(session: AsyncSession) -> None:
    """Delete the keys recorded by writes of the last committed transaction."""
    committed: _Invalidations = session.info.pop(_COMMITTED, [])
    for cache, keys in committed:
        await cache.invalidate(keys)
    if committed:
        logger.debug("Post-commit invalidation of %d key group(s)", len(committed))


async def commit(session: AsyncSession) -> None:
    """Commit session, then run the post-commit invalidation."""
    await session.commit()
    await invalidate_committed(session)
