"""
seed_topics.py
──────────────
Loads the topic catalogue from a spreadsheet (.xlsx or .csv).
Run after the migration:

    alembic upgrade head
    python seed_topics.py topics.xlsx

Columns: lesson, unit, topic, curriculum_ref, sub_refs, question_types.
The first row is a header. Rows without a lesson or topic are skipped.
"""
import asyncio
import os
import sys

from dotenv import load_dotenv

load_dotenv()

SEED_TOPICS_FILE = os.getenv("SEED_TOPICS_FILE", "topics.xlsx")


async def seed(path: str) -> None:
    from app.controllers.topic_controller import bulk_import
    from app.core.config import settings
    from app.core.database import create_engine_and_sessionmaker
    from app.core.logging import configure_logging
    from app.services.spreadsheet import parse_spreadsheet

    configure_logging(settings.LOG_LEVEL)

    with open(path, "rb") as f:
        rows = parse_spreadsheet(f.read(), os.path.basename(path))

    if not rows:
        print(f"⚠️  No data rows in {path}. Nothing imported.")
        return

    engine, Session = create_engine_and_sessionmaker(settings.DATABASE_URL)
    try:
        async with Session() as db:
            result = await bulk_import(db, rows)
    finally:
        await engine.dispose()

    print(f"\n✅  {result['message']}")
    print(f"    File     : {path}")
    print(f"    Imported : {result['imported']}")
    print(f"    Skipped  : {result['skipped']}")


if __name__ == "__main__":
    asyncio.run(seed(sys.argv[1] if len(sys.argv) > 1 else SEED_TOPICS_FILE))
