# tests/conftest.py
from __future__ import annotations

import pytest_asyncio

from quiznight.database.session import Database
from quiznight.database.models import User
from quiznight.services.formats import ensure_default_formats


@pytest_asyncio.fixture
async def db(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await database.init_models()
    try:
        yield database
    finally:
        await database.close()


async def _make_user(db: Database, telegram_id: int, first_name: str) -> User:
    async with db.session() as session:
        user = User(telegram_id=telegram_id, first_name=first_name)
        session.add(user)
        await session.commit()
        return user


@pytest_asyncio.fixture
async def user(db):
    return await _make_user(db, 1001, "Karl")


@pytest_asyncio.fixture
async def other_user(db):
    return await _make_user(db, 2002, "Someone Else")


@pytest_asyncio.fixture
async def chelsea(db):
    async with db.session() as session:
        await ensure_default_formats(session)
        await session.commit()
