# quiznight/utils/dates.py
from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo


def today_in(timezone: str = "UTC") -> date:
    return datetime.now(tz=ZoneInfo(timezone)).date()


def parse_iso_date(raw: str) -> date:
    """YYYY-MM-DD only; raises ValueError with a user-facing message."""
    try:
        return datetime.strptime((raw or "").strip(), "%Y-%m-%d").date()
    except ValueError as e:
        raise ValueError(f"Invalid date {raw!r} (expected YYYY-MM-DD)") from e
