import logging
from datetime import date
from typing import Optional, Type

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFound, ValidationError
from app.models.activity_records import BookReading, GameSession, GoingOut
from app.schemas.activity_record import BookReadingIn, GameSessionIn, GoingOutIn

logger = logging.getLogger(__name__)

# model -> its date column name
DATE_FIELDS = {
    BookReading: "reading_date",
    GameSession: "play_date",
    GoingOut: "out_date",
}

NOT_FOUND_NAMES = {
    BookReading: "book reading",
    GameSession: "game session",
    GoingOut: "record",
}


def _text(v: Optional[str]) -> Optional[str]:
    v = (v or "").strip()
    return v or None


# ─────────────────────────────────────────────────────────────
# Generic store operations
# ─────────────────────────────────────────────────────────────

async def list_records(
    db: AsyncSession,
    model: Type,
    student_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list:
    """Newest first; the date range applies only when both ends are given (inclusive)."""
    date_col = getattr(model, DATE_FIELDS[model])
    q = select(model).where(model.student_id == student_id)
    if start_date and end_date:
        q = q.where(date_col.between(start_date, end_date))
    q = q.order_by(date_col.desc(), model.id.desc())
    res = await db.execute(q)
    return list(res.scalars().all())


async def insert_record(db: AsyncSession, record):
    db.add(record)
    await db.commit()
    await db.refresh(record)
    logger.info("Created %s id=%s student=%s", record.__tablename__, record.id, record.student_id)
    return record


async def delete_record(db: AsyncSession, model: Type, student_id: int, record_id: int) -> None:
    """Deletes only a row owned by the student; anything else is NotFound."""
    res = await db.execute(
        delete(model)
        .where(model.id == record_id, model.student_id == student_id)
        .execution_options(synchronize_session=False)
    )
    if res.rowcount == 0:
        raise NotFound(NOT_FOUND_NAMES[model])
    await db.commit()
    logger.info("Deleted %s id=%s student=%s", model.__tablename__, record_id, student_id)


async def activity_counts(db: AsyncSession, student_id: int) -> dict:
    books = (
        await db.execute(
            select(func.count(BookReading.id), func.coalesce(func.sum(BookReading.pages_read), 0))
            .where(BookReading.student_id == student_id)
        )
    ).one()
    games = (
        await db.execute(
            select(func.count(GameSession.id), func.coalesce(func.sum(GameSession.duration_minutes), 0))
            .where(GameSession.student_id == student_id)
        )
    ).one()
    outs = (
        await db.execute(
            select(func.count(GoingOut.id), func.coalesce(func.sum(GoingOut.duration_hours), 0.0))
            .where(GoingOut.student_id == student_id)
        )
    ).one()

    return {
        "books": int(books[0]),
        "pages_read": int(books[1]),
        "games": int(games[0]),
        "game_minutes": int(games[1]),
        "going_out": int(outs[0]),
        "going_out_hours": float(outs[1]),
    }


# ─────────────────────────────────────────────────────────────
# Per-type creation (validation differs per record type)
# ─────────────────────────────────────────────────────────────

async def create_book_reading(db: AsyncSession, student_id: int, payload: BookReadingIn) -> BookReading:
    title = _text(payload.book_title)
    if not title or not payload.reading_date:
        raise ValidationError("Book title and reading date are required")

    return await insert_record(
        db,
        BookReading(
            student_id=student_id,
            book_title=title,
            pages_read=max(0, payload.pages_read or 0),
            reading_date=payload.reading_date,
            notes=_text(payload.notes),
        ),
    )


async def create_game_session(db: AsyncSession, student_id: int, payload: GameSessionIn) -> GameSession:
    name = _text(payload.game_name)
    if not name or not payload.play_date:
        raise ValidationError("Game name and play date are required")

    return await insert_record(
        db,
        GameSession(
            student_id=student_id,
            game_name=name,
            duration_minutes=max(0, payload.duration_minutes or 0),
            play_date=payload.play_date,
            notes=_text(payload.notes),
        ),
    )


async def create_going_out(db: AsyncSession, student_id: int, payload: GoingOutIn) -> GoingOut:
    if not payload.out_date:
        raise ValidationError("Date is required")

    return await insert_record(
        db,
        GoingOut(
            student_id=student_id,
            out_date=payload.out_date,
            duration_hours=max(0.0, payload.duration_hours or 0.0),
            purpose=_text(payload.purpose),
            notes=_text(payload.notes),
        ),
    )
