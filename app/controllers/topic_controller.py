import logging
from typing import Iterable, Optional

from sqlalchemy import or_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

from app.core.config import settings
from app.core.errors import NotFound, StorageError, ValidationError
from app.models.lesson import Lesson
from app.models.topic import Topic
from app.schemas.topic import ImportPreviewOut, ImportPreviewRow, TopicCreate
from app.services.spreadsheet import ImportRow

logger = logging.getLogger(__name__)

PREVIEW_LIMIT = 50
SEARCH_MAX_LIMIT = 50

_ON_CONFLICT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def _clean(v: Optional[str]) -> Optional[str]:
    v = (v or "").strip()
    return v or None


def _topics_query():
    return (
        select(Topic)
        .join(Topic.lesson)
        .options(contains_eager(Topic.lesson))
        .order_by(Lesson.name.asc(), Topic.unit.asc(), Topic.topic.asc())
    )


# ─────────────────────────────────────────────────────────────
# Lessons
# ─────────────────────────────────────────────────────────────

async def find_or_create_lesson(db: AsyncSession, name: str) -> int:
    """
    Return the id of the lesson with exactly this name, creating it if needed.

    Uses "insert, ignore conflict" on the unique name, so repeated or
    concurrent calls with the same name never produce a second row.
    """
    name = name.strip()
    if not name:
        raise ValidationError("Lesson name is required")

    res = await db.execute(select(Lesson.id).where(Lesson.name == name))
    lesson_id = res.scalar_one_or_none()
    if lesson_id is not None:
        return lesson_id

    insert = _ON_CONFLICT_INSERTS.get(db.get_bind().dialect.name)
    if insert is not None:
        await db.execute(
            insert(Lesson).values(name=name).on_conflict_do_nothing(index_elements=["name"])
        )
    else:
        try:
            async with db.begin_nested():
                db.add(Lesson(name=name))
        except IntegrityError:
            pass

    res = await db.execute(select(Lesson.id).where(Lesson.name == name))
    return res.scalar_one()


async def list_lessons(db: AsyncSession) -> list[Lesson]:
    res = await db.execute(select(Lesson).order_by(Lesson.name.asc()))
    return list(res.scalars().all())


# ─────────────────────────────────────────────────────────────
# Topics
# ─────────────────────────────────────────────────────────────

async def create_topic(
    db: AsyncSession,
    lesson_id: int,
    topic: str,
    unit: Optional[str] = None,
    curriculum_ref: Optional[str] = None,
    sub_refs: Optional[str] = None,
    question_types: Optional[str] = None,
) -> Topic:
    """Always inserts; the same topic name may appear under many lessons/units."""
    t = Topic(
        lesson_id=lesson_id,
        unit=_clean(unit),
        topic=topic.strip(),
        curriculum_ref=_clean(curriculum_ref),
        sub_refs=_clean(sub_refs),
        question_types=_clean(question_types),
    )
    db.add(t)
    await db.flush()
    return t


async def create_topic_manual(db: AsyncSession, payload: TopicCreate) -> Topic:
    lesson_name = _clean(payload.lesson)
    topic_name = _clean(payload.topic)
    if not lesson_name or not topic_name:
        raise ValidationError("Lesson and topic are required")

    lesson_id = await find_or_create_lesson(db, lesson_name)
    t = await create_topic(
        db,
        lesson_id=lesson_id,
        topic=topic_name,
        unit=payload.unit,
        curriculum_ref=payload.curriculum_ref,
        sub_refs=payload.sub_refs,
        question_types=payload.question_types,
    )
    await db.commit()

    logger.info("Created topic id=%s under lesson id=%s", t.id, lesson_id)
    return await find_topic(db, t.id)


async def list_topics(db: AsyncSession, lesson_id: Optional[int] = None) -> list[Topic]:
    q = _topics_query()
    if lesson_id is not None:
        q = q.where(Topic.lesson_id == lesson_id)
    res = await db.execute(q)
    return list(res.scalars().all())


async def find_topic(db: AsyncSession, topic_id: int) -> Optional[Topic]:
    res = await db.execute(_topics_query().where(Topic.id == topic_id))
    return res.scalar_one_or_none()


async def get_topic(db: AsyncSession, topic_id: int) -> Topic:
    t = await find_topic(db, topic_id)
    if t is None:
        raise NotFound("topic")
    return t


async def search_topics(db: AsyncSession, query: str, limit: Optional[int] = None) -> list[dict]:
    """
    Case-insensitive substring match on topic, lesson name and unit.
    % and _ in the query match themselves, not LIKE wildcards.

    Queries shorter than SEARCH_MIN_QUERY_LENGTH return [] without
    touching the database.
    """
    query = (query or "").strip()
    if len(query) < settings.SEARCH_MIN_QUERY_LENGTH:
        return []

    limit = min(limit or settings.SEARCH_RESULT_LIMIT, SEARCH_MAX_LIMIT)

    res = await db.execute(
        _topics_query()
        .where(
            or_(
                Topic.topic.icontains(query, autoescape=True),
                Lesson.name.icontains(query, autoescape=True),
                Topic.unit.icontains(query, autoescape=True),
            )
        )
        .limit(limit)
    )
    return [
        {"id": t.id, "topic": t.topic, "unit": t.unit, "lesson_name": t.lesson_name}
        for t in res.scalars().all()
    ]


# ─────────────────────────────────────────────────────────────
# Bulk import
# ─────────────────────────────────────────────────────────────

async def bulk_import(db: AsyncSession, rows: Iterable[ImportRow]) -> dict:
    """
    Import topic rows in a single transaction.

    Rows without a lesson or topic are skipped and counted; they never abort
    the batch. Any other failure rolls back every row of the batch.
    """
    imported = 0
    skipped = 0
    lesson_ids: dict[str, int] = {}

    try:
        for row in rows:
            if not row.is_valid:
                skipped += 1
                continue

            lesson_id = lesson_ids.get(row.lesson)
            if lesson_id is None:
                lesson_id = await find_or_create_lesson(db, row.lesson)
                lesson_ids[row.lesson] = lesson_id

            await create_topic(
                db,
                lesson_id=lesson_id,
                topic=row.topic,
                unit=row.unit,
                curriculum_ref=row.curriculum_ref,
                sub_refs=row.sub_refs,
                question_types=row.question_types,
            )
            imported += 1

        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Topic import rolled back: %s", e)
        raise StorageError("Import failed, no topics were saved") from e
    except Exception:
        await db.rollback()
        logger.exception("Topic import rolled back")
        raise

    logger.info("Topic import finished: imported=%s skipped=%s", imported, skipped)
    return {
        "imported": imported,
        "skipped": skipped,
        "message": f"{imported} topics imported. {skipped} rows skipped.",
    }


def preview_import(rows: list[ImportRow]) -> ImportPreviewOut:
    """Validate rows without writing anything."""
    preview: list[ImportPreviewRow] = []
    errors: list[str] = []

    for row in rows:
        if not row.is_valid:
            errors.append(f"Row {row.row_number}: lesson or topic is missing")
            continue
        preview.append(
            ImportPreviewRow(
                row=row.row_number,
                lesson=row.lesson,
                unit=row.unit or "",
                topic=row.topic,
                curriculum_ref=row.curriculum_ref or "",
                sub_refs=row.sub_refs or "",
                question_types=row.question_types or "",
            )
        )

    return ImportPreviewOut(
        total_rows=len(rows),
        valid_rows=len(preview),
        errors=len(errors),
        error_messages=errors,
        preview=preview[:PREVIEW_LIMIT],
        has_more=len(preview) > PREVIEW_LIMIT,
    )
