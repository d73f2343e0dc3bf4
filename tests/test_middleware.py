# tests/test_middleware.py
from __future__ import annotations

from types import SimpleNamespace

import pytest
from sqlalchemy import select

from quiznight.database.models import User
from quiznight.utils.middleware import DbSessionMiddleware


def _event(telegram_id: int, username: str = "karl"):
    return SimpleNamespace(
        from_user=SimpleNamespace(id=telegram_id, username=username, first_name="Karl", last_name=None)
    )


async def _users(db) -> list[User]:
    async with db.session() as session:
        return list((await session.execute(select(User))).scalars())


async def test_injects_session_and_upserts_user(db):
    mw = DbSessionMiddleware(db)
    seen = {}

    async def handler(event, data):
        seen.update(data)
        return "ok"

    assert await mw(handler, _event(42), {}) == "ok"
    assert seen["db_user"].telegram_id == 42
    assert "session" in seen

    await mw(handler, _event(42, username="karl_renamed"), {})
    users = await _users(db)
    assert [(u.telegram_id, u.username) for u in users] == [(42, "karl_renamed")]


async def test_no_sender_gives_no_user(db):
    mw = DbSessionMiddleware(db)
    seen = {}

    async def handler(event, data):
        seen.update(data)

    await mw(handler, SimpleNamespace(), {})
    assert seen["db_user"] is None


async def test_handler_error_rolls_back(db):
    mw = DbSessionMiddleware(db)

    async def handler(event, data):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await mw(handler, _event(7), {})
    assert await _users(db) == []
