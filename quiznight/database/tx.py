# quiznight/database/tx.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession


@asynccontextmanager
async def transactional(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Unit-of-work scope for multi-step writes.

    - If the session already has a transaction (e.g. the per-update middleware
      autobegan one), the block runs in a SAVEPOINT so a failure only undoes
      this block.
    - Otherwise a new transaction is started and committed on exit.

    Any exception rolls the block back and propagates.
    """
    if session.in_transaction():
        async with session.begin_nested():
            yield session
    else:
        async with session.begin():
            yield session
