# quiznight/config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./quiznight.db"


def _require(env: dict[str, str], key: str) -> str:
    v = env.get(key)
    if v is None or not v.strip():
        raise RuntimeError(f"Missing required environment variable: {key}")
    return v.strip()


def _to_bool(value: str | None, key_name: str, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    raise RuntimeError(f"Invalid boolean for {key_name}: {value!r}")


def _check_timezone(name: str) -> str:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise RuntimeError(f"Unknown TIMEZONE: {name!r}") from e
    return name


@dataclass(frozen=True, slots=True)
class Settings:
    # --- required ---
    bot_token: str

    # --- optional ---
    database_url: str = DEFAULT_DATABASE_URL

    # --- time ---
    timezone: str = "UTC"

    # --- environment ---
    environment: str = "production"  # production | development

    # create the Chelsea format on startup if missing
    seed_default_formats: bool = True

    @property
    def is_dev(self) -> bool:
        return self.environment.lower() in {"dev", "development", "local"}

    @classmethod
    def load(cls) -> "Settings":
        """
        Loads from process env (and .env if present).
        Fails fast for required fields.
        """
        load_dotenv()
        env = os.environ

        bot_token = _require(env, "BOT_TOKEN")
        database_url = (env.get("DATABASE_URL") or DEFAULT_DATABASE_URL).strip()
        timezone = _check_timezone((env.get("TIMEZONE") or "UTC").strip() or "UTC")
        environment = (env.get("ENVIRONMENT") or "production").strip() or "production"
        seed = _to_bool(env.get("SEED_DEFAULT_FORMATS"), "SEED_DEFAULT_FORMATS", True)

        return cls(
            bot_token=bot_token,
            database_url=database_url,
            timezone=timezone,
            environment=environment,
            seed_default_formats=seed,
        )
