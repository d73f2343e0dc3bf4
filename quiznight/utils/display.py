# quiznight/utils/display.py
from __future__ import annotations

from html import escape

from quiznight.database.models import Quiz, Round

NO_DATA = "no data"

_PODIUM_MEDALS = ("🥇", "🥈", "🥉")


def format_points(value: float | int | None) -> str:
    if value is None:
        return "–"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def format_percentage(score: float | int | None, max_score: float | int | None) -> str:
    # a zero ceiling means nothing to compare against
    if score is None or not max_score:
        return NO_DATA
    return f"{round(score / max_score * 100)}%"


def quiz_totals(rounds: list[Round]) -> tuple[float, float]:
    score = sum((r.score or 0) for r in rounds)
    max_score = sum((r.max_score or 0) for r in rounds)
    return score, max_score


def format_round_line(rnd: Round, joker_round_number: int | None) -> str:
    badges = []
    if joker_round_number is not None and rnd.round_number == joker_round_number:
        badges.append("🃏")
    if rnd.highest_unique:
        badges.append("HU")
    suffix = f" {' '.join(badges)}" if badges else ""
    return (
        f"<b>{rnd.round_number}.</b> {escape(rnd.round_name or '?')}: "
        f"{format_points(rnd.score)}/{format_points(rnd.max_score)} "
        f"({format_percentage(rnd.score, rnd.max_score)}){suffix}"
    )


def _podium_lines(quiz: Quiz) -> list[str]:
    slots = (
        (quiz.first_team_name, quiz.first_team_score, quiz.first_team_is_us),
        (quiz.second_team_name, quiz.second_team_score, quiz.second_team_is_us),
        (quiz.third_team_name, quiz.third_team_score, quiz.third_team_is_us),
    )
    lines = []
    for medal, (name, score, is_us) in zip(_PODIUM_MEDALS, slots):
        if not name and score is None:
            continue
        us = " (us)" if is_us else ""
        lines.append(f"{medal} {escape(name or '?')}: {format_points(score)}{us}")
    return lines


def format_quiz(quiz: Quiz) -> str:
    size = "Big quiz" if quiz.is_big_quiz else "Small quiz"
    lines = [
        f"🧠 <b>{escape(quiz.quiz_name)}</b> · {quiz.quiz_date.isoformat()} · {size}",
    ]
    if quiz.joker_round_number is not None:
        lines.append(f"🃏 Joker: Round {quiz.joker_round_number}")
    if quiz.position is not None:
        of_total = f" of {quiz.teams_total}" if quiz.teams_total else ""
        lines.append(f"🏁 Position: {quiz.position}{of_total}")
    lines.append("")

    for rnd in quiz.rounds or []:
        lines.append(format_round_line(rnd, quiz.joker_round_number))

    score, max_score = quiz_totals(list(quiz.rounds or []))
    lines.append("")
    lines.append(
        f"<b>Total:</b> {format_points(score)}/{format_points(max_score)} "
        f"({format_percentage(score, max_score)})"
    )

    podium = _podium_lines(quiz)
    if podium:
        lines.append("")
        lines.extend(podium)

    if quiz.notes:
        lines.append(f"📝 {escape(quiz.notes)}")
    return "\n".join(lines)
