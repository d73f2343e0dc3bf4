# quiznight/utils/command_parser.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date

from quiznight.services.formats import FormatRoundDraft
from quiznight.services.results import PodiumEntry
from quiznight.services.scoring import QuestionDraft, apply_correctness, question_from_mapping, to_number
from quiznight.utils.dates import parse_iso_date

_KEYVAL_RE = re.compile(r"^\s*([a-zA-Z_]+)\s*=\s*(.*?)\s*$")
_PODIUM_RE = re.compile(r"^\s*([123])\s*=\s*(.+?)\s*$")

_TRUE = {"y", "yes", "true", "1", "on", "✓", "✅"}
_FALSE = {"n", "no", "false", "0", "off", "x", "✗", "❌"}


@dataclass(frozen=True, slots=True)
class ParsedNewQuiz:
    format_slug: str
    quiz_date: date
    is_big_quiz: bool
    team_names: list[str]
    teams_total: int | None = None
    position: int | None = None
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class ParsedFormat:
    name: str
    has_joker: bool
    supports_big_quiz: bool
    rounds: list[FormatRoundDraft]


@dataclass(frozen=True, slots=True)
class ParsedRoundSheet:
    quiz_date: date
    round_number: int
    notes: str | None
    questions: list[QuestionDraft] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ParsedRoster:
    player_ids: list[int]
    names: list[str]


@dataclass(frozen=True, slots=True)
class ParsedResults:
    quiz_date: date
    podium: list[PodiumEntry]
    teams_total: int | None = None
    position: int | None = None


def _strip_quotes(s: str) -> str:
    s = s.strip()
    if len(s) >= 2 and ((s[0] == s[-1]) and s[0] in {"'", '"'}):
        return s[1:-1].strip()
    return s


def _payload(text: str, command: str) -> str:
    raw = (text or "").strip()
    head, _, rest = raw.partition(" ")
    # "/newquiz@SomeBot ..." in groups
    if head.split("@", 1)[0].lower() != command:
        raise ValueError(f"Not a {command} command")
    return rest.strip()


def _split_pipes(payload: str) -> list[str]:
    return [p.strip() for p in payload.split("|")]


def parse_bool(raw: str, key_name: str) -> bool:
    value = (raw or "").strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{key_name} must be yes or no")


def parse_correctness(raw: str) -> bool | None:
    value = (raw or "").strip().lower()
    if value in ("", "?", "-"):
        return None
    return parse_bool(value, "correct")


def _parse_positive_int(raw: str, key_name: str) -> int:
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{key_name} must be a whole number like {key_name}=3") from e
    if value < 1:
        raise ValueError(f"{key_name} must be at least 1")
    return value


def _split_names(raw: str) -> list[str]:
    return [n.strip() for n in re.split(r"[,;\n]+", raw or "") if n.strip()]


def parse_new_quiz(text: str) -> ParsedNewQuiz:
    """
    Accepts:
      /newquiz chelsea | 2025-11-25 | big | Karl, Jess | teams=20 | position=3 | notes=...
    """
    payload = _payload(text, "/newquiz")
    parts = [p for p in _split_pipes(payload) if p]
    if len(parts) < 4:
        raise ValueError("Usage: /newquiz format | YYYY-MM-DD | small|big | Name, Name")

    slug = _strip_quotes(parts[0]).lower()
    quiz_date = parse_iso_date(parts[1])

    size = parts[2].strip().lower()
    if size not in ("small", "big"):
        raise ValueError("Quiz size must be small or big")

    names = _split_names(parts[3])
    if not names:
        raise ValueError("You must provide at least one team member name")

    teams_total: int | None = None
    position: int | None = None
    notes: str | None = None

    for token in parts[4:]:
        m = _KEYVAL_RE.match(token)
        if not m:
            raise ValueError(f"Unexpected value: {token!r}. Allowed: teams=, position=, notes=")
        key = m.group(1).strip().lower()
        val = _strip_quotes(m.group(2))

        if key == "teams":
            teams_total = _parse_positive_int(val, "teams")
        elif key == "position":
            position = _parse_positive_int(val, "position")
        elif key == "notes":
            notes = val or None
        else:
            raise ValueError(f"Unknown setting: {key}. Allowed: teams, position, notes")

    return ParsedNewQuiz(
        format_slug=slug,
        quiz_date=quiz_date,
        is_big_quiz=size == "big",
        team_names=names,
        teams_total=teams_total,
        position=position,
        notes=notes,
    )


def _parse_round_template(token: str) -> FormatRoundDraft:
    # "Round name:5/8", "Round name:5", "Round name"
    name, sep, maxima = token.rpartition(":")
    if not sep:
        return FormatRoundDraft(name=_strip_quotes(token))

    small_raw, _, big_raw = maxima.partition("/")
    small = to_number(small_raw)
    big = to_number(big_raw)
    if (small_raw.strip() and small is None) or (big_raw.strip() and big is None):
        raise ValueError(f"Invalid round maxima in {token!r} (expected Name:small/big)")
    return FormatRoundDraft(name=_strip_quotes(name), small_max=small, big_max=big)


def parse_format_add(text: str) -> ParsedFormat:
    """
    Accepts:
      /format_add Pub Quiz | joker=yes | big=no | Round One:5/8 | Round Two:10
    """
    payload = _payload(text, "/format_add")
    parts = [p for p in _split_pipes(payload) if p]
    if not parts:
        raise ValueError("Usage: /format_add Name | joker=yes | big=yes | Round:small/big | ...")

    name = _strip_quotes(parts[0])
    has_joker = False
    supports_big = False
    rounds: list[FormatRoundDraft] = []

    for token in parts[1:]:
        m = _KEYVAL_RE.match(token)
        if m and m.group(1).lower() in ("joker", "big"):
            key = m.group(1).lower()
            if key == "joker":
                has_joker = parse_bool(m.group(2), "joker")
            else:
                supports_big = parse_bool(m.group(2), "big")
            continue
        rounds.append(_parse_round_template(token))

    return ParsedFormat(name=name, has_joker=has_joker, supports_big_quiz=supports_big, rounds=rounds)


def parse_question_line(line: str, question_number: int) -> QuestionDraft:
    """
    text | answer | y/n/? | normal|killer|wipeout | points | scored
    Trailing fields may be omitted. Without a scored value, y/n on a
    normal question stores the derived points.
    """
    fields = [f.strip() for f in line.split("|")]
    fields += [""] * (6 - len(fields))
    text, answer, correct, qtype, points, scored = fields[:6]

    draft = question_from_mapping(
        {
            "question_text": text,
            "our_answer": answer,
            "is_correct": parse_correctness(correct),
            "question_type": qtype,
            "points_value": points,
            "points_scored": scored,
        },
        question_number=question_number,
    )
    if draft.points_scored is None and draft.is_correct is not None:
        draft = apply_correctness(draft, draft.is_correct)
    return draft


def parse_round_sheet(text: str) -> ParsedRoundSheet:
    """
    Accepts:
      /round 2025-11-25 7 notes=tough one
      Who wrote Hamlet? | Shakespeare | y
      Capital of Peru? | Lima | n | normal | 1
      Killer: how many moons? | 3 | ? | killer | 3 | -3
    """
    lines = (text or "").splitlines()
    if not lines:
        raise ValueError("Not a /round command")

    head = _payload(lines[0], "/round")
    date_raw, _, rest = head.partition(" ")
    number_raw, _, rest = rest.strip().partition(" ")
    if not date_raw or not number_raw:
        raise ValueError("Usage: /round YYYY-MM-DD ROUND [notes=...] then one question per line")

    quiz_date = parse_iso_date(date_raw)
    round_number = _parse_positive_int(number_raw, "round")

    notes: str | None = None
    rest = rest.strip()
    if rest:
        m = _KEYVAL_RE.match(rest)
        if not m or m.group(1).lower() != "notes":
            raise ValueError("Only notes=... may follow the round number")
        notes = _strip_quotes(m.group(2)) or None

    questions = [
        parse_question_line(line, i)
        for i, line in enumerate((ln for ln in lines[1:] if ln.strip()), start=1)
    ]
    return ParsedRoundSheet(quiz_date=quiz_date, round_number=round_number, notes=notes, questions=questions)


def _parse_podium_entry(raw: str) -> PodiumEntry:
    # "Team name:78" or "Team name:78:us"
    pieces = [p.strip() for p in raw.split(":")]
    is_us = len(pieces) > 1 and pieces[-1].lower() == "us"
    if is_us:
        pieces = pieces[:-1]

    score = None
    if len(pieces) > 1:
        score = to_number(pieces[-1])
        if score is None:
            raise ValueError(f"Invalid score in {raw!r}")
        pieces = pieces[:-1]

    name = _strip_quotes(":".join(pieces))
    return PodiumEntry(team_name=name or None, score=score, is_us=is_us)


def parse_results(text: str) -> ParsedResults:
    """
    Accepts:
      /results 2025-11-25 | 1=Quizzly Bears:78 | 2=Us:75:us | 3=Brains:70 | teams=18 | position=2
    """
    payload = _payload(text, "/results")
    parts = [p for p in _split_pipes(payload) if p]
    if not parts:
        raise ValueError("Usage: /results YYYY-MM-DD | 1=Team:score[:us] | 2=... | 3=... | teams=N | position=N")

    quiz_date = parse_iso_date(parts[0])
    podium: dict[int, PodiumEntry] = {}
    teams_total: int | None = None
    position: int | None = None

    for token in parts[1:]:
        pm = _PODIUM_RE.match(token)
        if pm:
            podium[int(pm.group(1))] = _parse_podium_entry(pm.group(2))
            continue

        m = _KEYVAL_RE.match(token)
        if not m:
            raise ValueError(f"Unexpected value: {token!r}")
        key = m.group(1).lower()
        if key == "teams":
            teams_total = _parse_positive_int(m.group(2), "teams")
        elif key == "position":
            position = _parse_positive_int(m.group(2), "position")
        else:
            raise ValueError(f"Unknown setting: {key}. Allowed: 1=, 2=, 3=, teams, position")

    return ParsedResults(
        quiz_date=quiz_date,
        podium=[podium.get(place, PodiumEntry()) for place in (1, 2, 3)],
        teams_total=teams_total,
        position=position,
    )


def parse_round_number(raw: str) -> int:
    return _parse_positive_int((raw or "").strip(), "round")


def parse_roster_args(raw: str) -> ParsedRoster:
    """
    Accepts either names or player ids as shown by /regulars:
      Karl, Jess Smith
      #3 #5, #8
    """
    raw = (raw or "").strip()
    if not raw.startswith("#"):
        return ParsedRoster(player_ids=[], names=_split_names(raw))

    ids: list[int] = []
    for token in re.split(r"[,\s]+", raw):
        if not token:
            continue
        if not re.fullmatch(r"#\d+", token):
            raise ValueError(f"Expected a player id like #3, got {token!r} (use names or ids, not both)")
        ids.append(int(token[1:]))
    return ParsedRoster(player_ids=ids, names=[])
