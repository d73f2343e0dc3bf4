# tests/test_handlers.py
from __future__ import annotations

from datetime import date

import pytest_asyncio
from aiogram.filters import CommandObject

from quiznight.database.repo import player_repo, quiz_repo
from quiznight.handlers.quiz import move_quiz_cmd, regulars_cmd, roster_cmd
from quiznight.services.provisioning import create_quiz_from_format

NOV_25 = date(2025, 11, 25)
DEC_02 = date(2025, 12, 2)


class FakeMessage:
    def __init__(self) -> None:
        self.answers: list[str] = []

    async def answer(self, text: str, **kwargs) -> None:
        self.answers.append(text)


async def _new_quiz(db, user, quiz_date, names):
    async with db.session() as session:
        return await create_quiz_from_format(
            session,
            user=user,
            format_slug="chelsea",
            quiz_date=quiz_date,
            is_big_quiz=False,
            team_names=names,
        )


async def _run(db, handler, command: str, args: str, user) -> str:
    message = FakeMessage()
    async with db.session() as session:
        await handler(message, CommandObject(command=command, args=args), session, user)
        await session.commit()
    assert len(message.answers) == 1
    return message.answers[0]


@pytest_asyncio.fixture
async def first_quiz(db, user, chelsea):
    return await _new_quiz(db, user, NOV_25, ["Karl", "Jess"])


async def test_date_moves_quiz(db, user, first_quiz):
    reply = await _run(db, move_quiz_cmd, "date", "2025-11-25 2025-12-02", user)

    assert "2025-12-02" in reply
    async with db.session() as session:
        assert await quiz_repo.find_quiz_by_date(session, user.id, NOV_25) is None
        assert await quiz_repo.find_quiz_by_date(session, user.id, DEC_02) is not None


async def test_date_clash_is_reported(db, user, first_quiz):
    await _new_quiz(db, user, DEC_02, ["Karl"])

    reply = await _run(db, move_quiz_cmd, "date", "2025-11-25 2025-12-02", user)

    assert reply == "❌ A quiz already exists on that date."
    async with db.session() as session:
        assert await quiz_repo.find_quiz_by_date(session, user.id, NOV_25) is not None


async def test_date_usage(db, user, first_quiz):
    reply = await _run(db, move_quiz_cmd, "date", "2025-11-25", user)
    assert reply.startswith("❌ Usage: /date")


async def test_roster_by_player_ids(db, user, first_quiz):
    jess_id = first_quiz.player_ids_by_name["Jess"]

    reply = await _run(db, roster_cmd, "roster", f"2025-11-25 #{jess_id}", user)

    assert reply == "✅ Roster saved: Jess"
    async with db.session() as session:
        roster = await player_repo.list_quiz_roster(session, first_quiz.quiz.id)
    assert [p.name for p in roster] == ["Jess"]


async def test_roster_unknown_player_id(db, user, first_quiz):
    reply = await _run(db, roster_cmd, "roster", "2025-11-25 #999", user)
    assert reply == "❌ One or more players were not found."


async def test_regulars_shows_player_ids(db, user, first_quiz):
    karl_id = first_quiz.player_ids_by_name["Karl"]

    message = FakeMessage()
    async with db.session() as session:
        await regulars_cmd(message, session, user)

    assert f"#{karl_id} Karl" in message.answers[0]
