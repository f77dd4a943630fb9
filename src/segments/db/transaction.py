"""Transaction primitives over an AsyncSession."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, AsyncSessionTransaction

logger = logging.getLogger(__name__)


async def create_transaction(session: AsyncSession) -> AsyncSessionTransaction:
    """Return the session's open transaction, beginning one if needed."""
    if session.in_transaction():
        return session.get_transaction()
    return await session.begin()


async def commit_transaction(txn: AsyncSessionTransaction) -> None:
    await txn.commit()


async def rollback_transaction(txn: AsyncSessionTransaction) -> None:
    await txn.rollback()


@asynccontextmanager
async def atomic(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Commit everything written inside the block, or roll all of it back.

    The exception that caused the rollback is re-raised unchanged.
    """
    txn = await create_transaction(session)
    try:
        yield session
    except Exception:
        logger.warning("Rolling back transaction")
        await rollback_transaction(txn)
        raise
    await commit_transaction(txn)
