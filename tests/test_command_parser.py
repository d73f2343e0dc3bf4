# tests/test_command_parser.py
from __future__ import annotations

from datetime import date

import pytest

from quiznight.utils.command_parser import (
    parse_correctness,
    parse_format_add,
    parse_new_quiz,
    parse_question_line,
    parse_results,
    parse_roster_args,
    parse_round_number,
    parse_round_sheet,
)


def test_parse_new_quiz_full():
    parsed = parse_new_quiz(
        "/newquiz Chelsea | 2025-11-25 | big | Karl, Jess; Sam | teams=20 | position=3 | notes=\"late start\""
    )

    assert parsed.format_slug == "chelsea"
    assert parsed.quiz_date == date(2025, 11, 25)
    assert parsed.is_big_quiz is True
    assert parsed.team_names == ["Karl", "Jess", "Sam"]
    assert (parsed.teams_total, parsed.position, parsed.notes) == (20, 3, "late start")


def test_parse_new_quiz_in_group_with_bot_mention():
    parsed = parse_new_quiz("/newquiz@QuizNightBot chelsea | 2025-11-25 | small | Karl")
    assert parsed.is_big_quiz is False


@pytest.mark.parametrize(
    "text",
    [
        "/newquiz chelsea | 2025-11-25 | small",
        "/newquiz chelsea | 25/11/2025 | small | Karl",
        "/newquiz chelsea | 2025-11-25 | medium | Karl",
        "/newquiz chelsea | 2025-11-25 | small | Karl | teams=many",
        "/newquiz chelsea | 2025-11-25 | small | Karl | colour=red",
    ],
)
def test_parse_new_quiz_rejects(text):
    with pytest.raises(ValueError):
        parse_new_quiz(text)


def test_parse_format_add():
    parsed = parse_format_add("/format_add Pub Quiz | joker=yes | big=no | Round One:5/8 | Round Two:10 | Bonus")

    assert parsed.name == "Pub Quiz"
    assert parsed.has_joker is True
    assert parsed.supports_big_quiz is False
    assert [(r.name, r.small_max, r.big_max) for r in parsed.rounds] == [
        ("Round One", 5, 8),
        ("Round Two", 10, None),
        ("Bonus", None, None),
    ]


def test_parse_format_add_bad_maxima():
    with pytest.raises(ValueError):
        parse_format_add("/format_add Pub | Round One:five")


def test_parse_correctness():
    assert parse_correctness("y") is True
    assert parse_correctness("✗") is False
    assert parse_correctness("?") is None
    assert parse_correctness("") is None
    with pytest.raises(ValueError):
        parse_correctness("maybe")


def test_parse_question_line_pads_missing_fields():
    q = parse_question_line("Who wrote Hamlet? | Shakespeare | y", 3)

    assert q.question_number == 3
    assert q.our_answer == "Shakespeare"
    assert q.is_correct is True
    assert q.question_type == "normal"
    assert q.points_value is None


def test_parse_question_line_stores_points_from_correctness():
    right = parse_question_line("Q | A | y | normal | 2", 1)
    wrong = parse_question_line("Q | A | n | normal | 2", 1)
    unknown = parse_question_line("Q | A | ?", 1)

    assert right.points_scored == 2
    assert wrong.points_scored == 0
    assert unknown.points_scored is None


def test_parse_question_line_keeps_explicit_and_killer_scores():
    explicit = parse_question_line("Q | A | y | normal | 2 | 1", 1)
    killer = parse_question_line("Q | A | y | killer | 3", 1)

    assert explicit.points_scored == 1
    assert killer.points_scored is None
    assert killer.scored_points == 0


def test_parse_round_sheet():
    parsed = parse_round_sheet(
        "/round 2025-11-25 7 notes=tough one\n"
        "Q one | A | y\n"
        "\n"
        "Killer Q | 3 | ? | killer | 3 | -3\n"
    )

    assert parsed.round_number == 7
    assert parsed.notes == "tough one"
    assert [q.question_number for q in parsed.questions] == [1, 2]
    assert parsed.questions[0].points_scored == 1
    assert parsed.questions[1].question_type == "killer"
    assert parsed.questions[1].points_scored == -3


def test_parse_round_sheet_header_only():
    parsed = parse_round_sheet("/round 2025-11-25 2")
    assert parsed.questions == []
    assert parsed.notes is None


def test_parse_round_sheet_rejects_extra_header_tokens():
    with pytest.raises(ValueError):
        parse_round_sheet("/round 2025-11-25 2 something")


def test_parse_results():
    parsed = parse_results("/results 2025-11-25 | 1=Quizzly Bears:78 | 2=Us:75:us | teams=18")

    assert parsed.quiz_date == date(2025, 11, 25)
    assert parsed.podium[0].team_name == "Quizzly Bears"
    assert parsed.podium[0].score == 78
    assert parsed.podium[1].is_us is True
    assert parsed.podium[2].team_name is None
    assert parsed.teams_total == 18
    assert parsed.position is None


def test_parse_round_number():
    assert parse_round_number(" 4 ") == 4
    with pytest.raises(ValueError):
        parse_round_number("0")
    with pytest.raises(ValueError):
        parse_round_number("four")


def test_parse_roster_args():
    by_name = parse_roster_args(" Karl, Jess Smith ;Ana ")
    by_id = parse_roster_args("#3 #5, #8")

    assert by_name.names == ["Karl", "Jess Smith", "Ana"]
    assert by_name.player_ids == []
    assert by_id.player_ids == [3, 5, 8]
    assert by_id.names == []


def test_parse_roster_args_rejects_mixed_input():
    with pytest.raises(ValueError):
        parse_roster_args("#3 Karl")
