# tests/test_roster_results.py
from __future__ import annotations

from datetime import date

import pytest
import pytest_asyncio

from quiznight.database.repo import player_repo
from quiznight.services import roster
from quiznight.services.errors import NotFoundError, ValidationError
from quiznight.services.provisioning import create_quiz_from_format
from quiznight.services.results import PodiumEntry, derive_position, save_results


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


@pytest_asyncio.fixture
async def two_quizzes(db, user, chelsea):
    first = await _new_quiz(db, user, date(2025, 11, 18), ["Karl", "Jess", "Sam"])
    second = await _new_quiz(db, user, date(2025, 11, 25), ["Karl", "Jess", "Ana"])
    return first, second


async def test_roster_by_names_replaces_links(db, user, two_quizzes):
    _, second = two_quizzes
    async with db.session() as session:
        players = await roster.set_quiz_roster_by_names(
            session, user=user, quiz_id=second.quiz.id, names=[" Ana ", "Bob", "Ana", ""]
        )
        await session.commit()

    assert [p.name for p in players] == ["Ana", "Bob"]
    async with db.session() as session:
        linked = await player_repo.list_quiz_roster(session, second.quiz.id)
    assert [p.name for p in linked] == ["Ana", "Bob"]


async def test_replace_roster_by_ids(db, user, two_quizzes):
    first, second = two_quizzes
    sam_id = first.player_ids_by_name["Sam"]
    async with db.session() as session:
        players = await roster.replace_quiz_roster(
            session, user=user, quiz_id=second.quiz.id, player_ids=[sam_id, sam_id]
        )
        await session.commit()

    assert [p.name for p in players] == ["Sam"]


async def test_replace_roster_rejects_unknown_player(db, user, two_quizzes):
    _, second = two_quizzes
    async with db.session() as session:
        with pytest.raises(NotFoundError):
            await roster.replace_quiz_roster(session, user=user, quiz_id=second.quiz.id, player_ids=[9999])


async def test_roster_needs_a_name(db, user, two_quizzes):
    _, second = two_quizzes
    async with db.session() as session:
        with pytest.raises(ValidationError):
            await roster.set_quiz_roster_by_names(session, user=user, quiz_id=second.quiz.id, names=["  "])


async def test_suggestions(db, user, two_quizzes):
    async with db.session() as session:
        suggestions = await roster.suggest_roster(session, user=user, limit=2)

    assert [p.name for p in suggestions.frequent] == ["Jess", "Karl"]
    assert [p.name for p in suggestions.last_quiz] == ["Ana", "Jess", "Karl"]


async def test_suggestions_empty_for_new_user(db, other_user):
    async with db.session() as session:
        suggestions = await roster.suggest_roster(session, user=other_user)

    assert suggestions.frequent == []
    assert suggestions.last_quiz == []


def test_derive_position():
    podium = [PodiumEntry("A", 80), PodiumEntry("Us", 75, is_us=True), PodiumEntry()]
    assert derive_position(podium, 5, None) == 2
    assert derive_position([PodiumEntry()] * 3, 5, 4) == 5
    assert derive_position([PodiumEntry()] * 3, None, 4) == 4


async def test_save_results(db, user, two_quizzes):
    _, second = two_quizzes
    async with db.session() as session:
        quiz = await save_results(
            session,
            user=user,
            quiz_id=second.quiz.id,
            podium=[PodiumEntry(" Brains ", 80), PodiumEntry("Us", 78, is_us=True)],
            teams_total=18,
        )
        await session.commit()

    assert quiz.position == 2
    assert quiz.teams_total == 18
    assert quiz.first_team_name == "Brains"
    assert quiz.first_team_is_us is None
    assert quiz.second_team_is_us is True
    assert quiz.third_team_name is None


@pytest.mark.parametrize(
    "podium, teams_total, position",
    [
        ([PodiumEntry()] * 4, None, None),
        ([PodiumEntry("A", 1, is_us=True), PodiumEntry("B", 1, is_us=True)], None, None),
        ([], 0, None),
        ([], None, 0),
        ([], 5, 7),
    ],
)
async def test_save_results_validation(db, user, two_quizzes, podium, teams_total, position):
    _, second = two_quizzes
    async with db.session() as session:
        with pytest.raises(ValidationError):
            await save_results(
                session,
                user=user,
                quiz_id=second.quiz.id,
                podium=podium,
                teams_total=teams_total,
                our_position=position,
            )
