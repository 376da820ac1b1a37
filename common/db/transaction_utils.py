"""Database transaction utilities for services that hold a request session."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import ResourceClosedError


@asynccontextmanager
async def transaction(db_session: AsyncSession) -> AsyncGenerator[None, None]:
    """
    All-or-nothing block on an existing session.

    Opens a savepoint when the session already has a transaction running
    (the request session usually does), otherwise begins and commits a
    new one. Any exception rolls the block back and is re-raised.
    """
    if db_session.in_transaction():
        savepoint = await db_session.begin_nested()
        try:
            yield
            try:
                await savepoint.commit()
            except ResourceClosedError:
                # Savepoint already released by an inner commit
                pass
        except Exception:
            try:
                await savepoint.rollback()
            except ResourceClosedError:
                pass
            raise
    else:
        await db_session.begin()
        try:
            yield
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise
