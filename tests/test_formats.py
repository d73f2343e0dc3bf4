# tests/test_formats.py
from __future__ import annotations

import pytest

from quiznight.services.errors import NotFoundError, ValidationError
from quiznight.services.formats import (
    FormatRoundDraft,
    chelsea_default_max,
    create_format,
    ensure_default_formats,
    get_format_by_slug,
    list_formats,
    slugify,
)


def test_slugify():
    assert slugify("  Pub Quiz: Tuesdays! ") == "pub-quiz-tuesdays"
    assert slugify("!!!") == ""


def test_chelsea_defaults():
    assert chelsea_default_max(1, False) == 5
    assert chelsea_default_max(1, True) == 8
    assert chelsea_default_max(7, False) == 8
    assert chelsea_default_max(7, True) == 10
    assert chelsea_default_max(8, False) == 10
    assert chelsea_default_max(8, True) == 16


async def test_ensure_default_formats_is_idempotent(db):
    async with db.session() as session:
        assert await ensure_default_formats(session) is True
        await session.commit()
    async with db.session() as session:
        assert await ensure_default_formats(session) is False
        formats = await list_formats(session)

    assert [f.slug for f in formats] == ["chelsea"]
    chelsea = formats[0]
    assert chelsea.has_joker is True
    assert chelsea.supports_big_quiz is True
    assert [r.round_number for r in chelsea.rounds] == list(range(1, 11))
    assert chelsea.rounds[6].round_name == "Facebook"
    assert chelsea.rounds[7].round_name == "Pictures"


async def test_create_format_numbers_rounds_without_gaps(db):
    async with db.session() as session:
        fmt = await create_format(
            session,
            name="Pub Quiz",
            has_joker=False,
            supports_big_quiz=False,
            rounds=[FormatRoundDraft("One", 10), FormatRoundDraft("  "), FormatRoundDraft("Two", 5)],
        )
        fmt_id = fmt.id

    async with db.session() as session:
        stored = await get_format_by_slug(session, "pub-quiz")

    assert stored.id == fmt_id
    assert [(r.round_number, r.round_name) for r in stored.rounds] == [(1, "One"), (2, "Two")]


async def test_create_format_validation(db):
    async with db.session() as session:
        with pytest.raises(ValidationError):
            await create_format(session, name=" ", has_joker=False, supports_big_quiz=False, rounds=[FormatRoundDraft("R")])
        with pytest.raises(ValidationError):
            await create_format(session, name="Pub", has_joker=False, supports_big_quiz=False, rounds=[])


async def test_duplicate_slug_rejected(db, chelsea):
    async with db.session() as session:
        with pytest.raises(ValidationError, match="already exists"):
            await create_format(
                session, name="Chelsea", has_joker=False, supports_big_quiz=False, rounds=[FormatRoundDraft("R")]
            )


async def test_unknown_slug(db):
    async with db.session() as session:
        with pytest.raises(NotFoundError):
            await get_format_by_slug(session, "missing")
