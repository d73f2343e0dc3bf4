# quiznight/database/integrity.py
from __future__ import annotations

from sqlalchemy.exc import IntegrityError

UNIQUE_VIOLATION_SQLSTATE = "23505"


def _sqlstate(exc: IntegrityError) -> str | None:
    orig = exc.orig
    # asyncpg exposes .sqlstate, psycopg2 .pgcode, psycopg3 .sqlstate
    for attr in ("sqlstate", "pgcode"):
        code = getattr(orig, attr, None)
        if code:
            return str(code)
    return None


def is_unique_violation(
    exc: IntegrityError,
    *,
    constraint: str,
    columns: tuple[str, ...] = (),
) -> bool:
    """
    True when `exc` was raised by the named unique constraint.

    PostgreSQL reports the constraint name; SQLite only reports
    "UNIQUE constraint failed: table.col, table.col", so `columns`
    (as "table.column") are matched there.
    """
    message = str(exc.orig).lower()

    if constraint.lower() in message:
        return True

    if _sqlstate(exc) == UNIQUE_VIOLATION_SQLSTATE:
        # another unique constraint on the same table
        return False

    if "unique constraint failed" in message and columns:
        failed = message.split("unique constraint failed:", 1)[1]
        failed_cols = {c.strip() for c in failed.split(",")}
        return failed_cols == {c.lower() for c in columns}

    return False
