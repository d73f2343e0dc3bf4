# tests/test_scoring.py
from __future__ import annotations

from quiznight.services.scoring import (
    QuestionDraft,
    apply_correctness,
    compute_round_totals,
    prepare_questions,
    question_from_mapping,
    to_number,
    to_question_type,
)


def _correct(n: int, count: int | None = None) -> list[QuestionDraft]:
    return [
        QuestionDraft(question_number=i, question_text=f"Q{i}", is_correct=True)
        for i in range(1, (count or n) + 1)
    ]


def test_facebook_joker_doubles_first_five_on_small_quiz():
    totals = compute_round_totals(_correct(8), 7, False, 7, "Facebook")

    assert totals.base_score == 8
    assert totals.base_max == 8
    assert totals.score == 13
    assert totals.max_score == 13
    assert totals.joker_applied is True


def test_facebook_joker_doubles_first_eight_on_big_quiz():
    totals = compute_round_totals(_correct(10), 7, True, 7, "Facebook")

    assert totals.score == 18
    assert totals.max_score == 18


def test_facebook_detected_by_name_on_other_round_numbers():
    totals = compute_round_totals(_correct(8), 3, False, 3, "Facebook Friends")
    assert totals.max_score == 13


def test_normal_round_joker_doubles_everything():
    questions = [
        QuestionDraft(question_number=i, question_text=f"Q{i}", is_correct=i <= 3)
        for i in range(1, 6)
    ]
    totals = compute_round_totals(questions, 2, False, 2, "Entertainment")

    assert (totals.base_score, totals.base_max) == (3, 5)
    assert (totals.score, totals.max_score) == (6, 10)


def test_joker_on_another_round_is_ignored():
    totals = compute_round_totals(_correct(5), 4, False, 2, "Entertainment")

    assert totals.joker_applied is False
    assert (totals.score, totals.max_score) == (5, 5)


def test_pictures_round_never_doubled():
    by_number = compute_round_totals(_correct(10), 8, False, 8, "Round 8")
    by_name = compute_round_totals(_correct(10), 2, False, 2, "Pictures")

    for totals in (by_number, by_name):
        assert totals.joker_applied is False
        assert (totals.score, totals.max_score) == (10, 10)


def test_killer_and_wipeout_do_not_auto_score():
    questions = [
        QuestionDraft(question_number=1, question_text="normal", is_correct=True, points_value=2),
        QuestionDraft(question_number=2, question_text="killer", is_correct=True, question_type="killer", points_value=3),
        QuestionDraft(question_number=3, question_text="wipeout", is_correct=True, question_type="wipeout", points_value=5),
    ]
    totals = compute_round_totals(questions, None, False, 1, "General Knowledge 1")

    assert totals.score == 2
    assert totals.max_score == 10


def test_explicit_points_scored_wins_even_negative():
    questions = [
        QuestionDraft(question_number=1, question_text="killer", question_type="killer", points_value=3, points_scored=-3),
        QuestionDraft(question_number=2, question_text="normal", is_correct=False, points_scored=1),
    ]
    totals = compute_round_totals(questions, None, False, 1, "General Knowledge 1")

    assert totals.score == -2
    assert totals.max_score == 4


def test_empty_rows_are_dropped_and_rest_renumbered():
    questions = [
        QuestionDraft(question_number=1, question_text="first", is_correct=True),
        QuestionDraft(question_number=2, question_text="   ", our_answer=""),
        QuestionDraft(question_number=3),
        QuestionDraft(question_number=4, our_answer="Lima", is_correct=False),
    ]
    totals = compute_round_totals(questions, None, False, 1, "General Knowledge 1")

    assert [q.question_number for q in totals.questions] == [1, 2]
    assert [q.our_answer for q in totals.questions] == [None, "Lima"]
    assert (totals.score, totals.max_score) == (1, 2)


def test_no_questions_gives_zero_and_no_joker():
    totals = compute_round_totals([QuestionDraft(question_number=1)], 1, False, 1, "General Knowledge 1")

    assert totals.questions == ()
    assert (totals.score, totals.max_score) == (0, 0)
    assert totals.joker_applied is False


def test_rescoring_saved_output_is_stable():
    first = compute_round_totals(_correct(8), 7, False, 7, "Facebook")
    again = compute_round_totals(first.questions, 7, False, 7, "Facebook")

    assert again == first


def test_to_number_is_lenient():
    assert to_number("3") == 3
    assert to_number(" 2.5 ") == 2.5
    assert to_number("") is None
    assert to_number("abc") is None
    assert to_number(None) is None
    assert to_number(True) is None
    assert to_number(float("nan")) is None
    assert to_number("inf") is None
    assert to_number(4) == 4


def test_to_question_type_defaults_to_normal():
    assert to_question_type("Killer") == "killer"
    assert to_question_type("bonus") == "normal"
    assert to_question_type(None) == "normal"


def test_question_from_mapping_coerces_loose_input():
    q = question_from_mapping(
        {"question_text": "Capital?", "is_correct": 1, "points_value": "2", "points_scored": "x"},
        question_number=4,
    )

    assert q.question_number == 4
    assert q.is_correct is True
    assert q.points_value == 2
    assert q.points_scored is None
    assert q.scored_points == 2


def test_apply_correctness_derives_points_for_normal_questions():
    q = QuestionDraft(question_number=1, question_text="Q", points_value=2)

    assert apply_correctness(q, True).points_scored == 2
    assert apply_correctness(q, False).points_scored == 0
    assert apply_correctness(q, None).points_scored is None


def test_apply_correctness_leaves_killer_points_alone():
    q = QuestionDraft(question_number=1, question_text="Q", question_type="killer", points_scored=-3)
    marked = apply_correctness(q, True)

    assert marked.is_correct is True
    assert marked.points_scored == -3


def test_as_row_defaults_points_value():
    row = prepare_questions([QuestionDraft(question_number=9, question_text="Q")])[0].as_row()

    assert row["question_number"] == 1
    assert row["points_value"] == 1
