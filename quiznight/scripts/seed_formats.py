# quiznight/scripts/seed_formats.py
from __future__ import annotations

import asyncio

from quiznight.config import Settings
from quiznight.database.session import Database
from quiznight.services.formats import ensure_default_formats


async def main() -> None:
    settings = Settings.load()
    db = Database(settings.database_url)
    await db.init_models()

    async with db.session() as session:
        created = await ensure_default_formats(session)
        await session.commit()

    await db.close()
    print("Chelsea format installed." if created else "Chelsea format already present.")


if __name__ == "__main__":
    asyncio.run(main())
