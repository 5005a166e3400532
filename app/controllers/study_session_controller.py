import logging
from datetime import date
from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.core.config import settings
from app.core.errors import NotFound, ValidationError
from app.models.lesson import Lesson
from app.models.study_session import StudySession
from app.models.topic import Topic
from app.schemas.study_session import StudySessionIn

logger = logging.getLogger(__name__)


def _non_negative(v: Optional[int]) -> int:
    # malformed or negative amounts are clamped, not rejected
    return max(0, int(v or 0))


def _session_rows_query():
    return (
        select(
            StudySession,
            Topic.topic.label("topic"),
            Topic.unit.label("unit"),
            Lesson.name.label("lesson_name"),
        )
        .outerjoin(Topic, StudySession.topic_id == Topic.id)
        .outerjoin(Lesson, Topic.lesson_id == Lesson.id)
    )


def _row_to_dict(row) -> dict:
    s: StudySession = row[0]
    return {
        "id": s.id,
        "student_id": s.student_id,
        "date": s.date,
        "topic_id": s.topic_id,
        "work_minutes": s.work_minutes,
        "study_hours": s.work_minutes / 60.0,
        "questions_answered": s.questions_answered,
        "question_type": s.question_type,
        "notes": s.notes,
        "topic": row.topic,
        "unit": row.unit,
        "lesson_name": row.lesson_name,
        "created_at": s.created_at,
        "updated_at": s.updated_at,
    }


async def get_session(db: AsyncSession, student_id: int, session_id: int) -> dict:
    res = await db.execute(
        _session_rows_query()
        .where(
            StudySession.id == session_id,
            StudySession.student_id == student_id,
        )
        .execution_options(populate_existing=True)
    )
    row = res.first()
    if row is None:
        raise NotFound("record")
    return _row_to_dict(row)


async def record_session(db: AsyncSession, student_id: int, payload: StudySessionIn) -> dict:
    """
    Validate and upsert one day's study entry.

    The upsert key is (student, date, topic), or (student, date) alone when
    STUDY_SESSION_UPSERT_BY_TOPIC is off. The write goes first (an UPDATE of
    the oldest matching row, then an INSERT if nothing matched), so the
    store's write lock serialises concurrent submissions for the same key.
    """
    if payload.topic_id is None:
        raise ValidationError("topic_id is required")

    topic_exists = await db.execute(select(Topic.id).where(Topic.id == payload.topic_id))
    if topic_exists.scalar_one_or_none() is None:
        raise NotFound("topic")

    day = payload.date or date.today()
    values = {
        "topic_id": payload.topic_id,
        "work_minutes": _non_negative(payload.work_minutes),
        "questions_answered": _non_negative(payload.questions_answered),
        "question_type": (payload.question_type or "").strip() or None,
        "notes": (payload.notes or "").strip() or None,
    }

    # aliased so the subquery is not correlated to the UPDATE target
    match = aliased(StudySession)
    key = [match.student_id == student_id, match.date == day]
    if settings.STUDY_SESSION_UPSERT_BY_TOPIC:
        key.append(match.topic_id == payload.topic_id)

    oldest_match = select(func.min(match.id)).where(*key).scalar_subquery()
    res = await db.execute(
        update(StudySession)
        .where(StudySession.id == oldest_match)
        .values(**values, updated_at=func.now())
        .returning(StudySession.id)
        .execution_options(synchronize_session=False)
    )
    session_id = res.scalar_one_or_none()

    if session_id is None:
        s = StudySession(student_id=student_id, date=day, **values)
        db.add(s)
        await db.flush()
        session_id = s.id
        logger.info("Recorded study session id=%s student=%s date=%s", session_id, student_id, day)
    else:
        logger.info("Updated study session id=%s student=%s date=%s", session_id, student_id, day)

    await db.commit()
    return await get_session(db, student_id, session_id)


async def list_sessions(
    db: AsyncSession,
    student_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    topic_id: Optional[int] = None,
) -> list[dict]:
    """Newest first; the date range applies only when both ends are given (inclusive)."""
    q = _session_rows_query().where(StudySession.student_id == student_id)

    if topic_id is not None:
        q = q.where(StudySession.topic_id == topic_id)

    if start_date and end_date:
        q = q.where(StudySession.date.between(start_date, end_date))

    q = q.order_by(StudySession.date.desc(), StudySession.created_at.desc(), StudySession.id.desc())
    q = q.execution_options(populate_existing=True)
    res = await db.execute(q)
    return [_row_to_dict(r) for r in res.all()]


async def list_today(db: AsyncSession, student_id: int) -> list[dict]:
    today = date.today()
    return await list_sessions(db, student_id, start_date=today, end_date=today)


async def delete_session(db: AsyncSession, student_id: int, session_id: int) -> None:
    """Deletes only a row owned by the student; anything else is NotFound."""
    res = await db.execute(
        delete(StudySession)
        .where(StudySession.id == session_id, StudySession.student_id == student_id)
        .execution_options(synchronize_session=False)
    )
    if res.rowcount == 0:
        raise NotFound("record")
    await db.commit()
    logger.info("Deleted study session id=%s student=%s", session_id, student_id)
