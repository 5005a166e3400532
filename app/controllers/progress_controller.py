from datetime import date
from typing import List, Optional

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.lesson import Lesson
from app.models.study_session import StudySession
from app.models.topic import Topic
from app.services.metrics import completion_percentage, progress_status


def as_date(v) -> Optional[date]:
    # MIN/MAX over a Date column come back untyped on SQLite
    if v is None or isinstance(v, date):
        return v
    return date.fromisoformat(str(v)[:10])


async def aggregate_progress(db: AsyncSession, student_id: int) -> List[dict]:
    """
    Per-topic cumulative study totals for one student.

    Every topic appears, including those never studied (zeros and null
    dates). The whole aggregate is one grouped query, so it is a single
    snapshot even while sessions are being recorded.
    """
    sessions_join = and_(
        StudySession.topic_id == Topic.id,
        StudySession.student_id == student_id,
        StudySession.topic_id.isnot(None),
    )

    q = (
        select(
            Topic.id,
            Topic.topic,
            Topic.unit,
            Topic.lesson_id,
            Lesson.name.label("lesson_name"),
            func.coalesce(func.sum(StudySession.work_minutes), 0).label("total_minutes"),
            func.coalesce(func.sum(StudySession.questions_answered), 0).label("total_questions"),
            func.count(func.distinct(StudySession.date)).label("study_days"),
            func.max(StudySession.date).label("last_study_date"),
            func.min(StudySession.date).label("first_study_date"),
        )
        .join(Lesson, Topic.lesson_id == Lesson.id)
        .outerjoin(StudySession, sessions_join)
        .group_by(Topic.id, Topic.topic, Topic.unit, Topic.lesson_id, Lesson.name)
        .order_by(Lesson.name.asc(), Topic.unit.asc(), Topic.topic.asc())
    )

    res = await db.execute(q)

    target = settings.TOPIC_TARGET_HOURS
    progress = []
    for r in res.all():
        hours = int(r.total_minutes) / 60.0
        percentage = completion_percentage(hours, target)
        progress.append(
            {
                "id": r.id,
                "topic": r.topic,
                "unit": r.unit,
                "lesson_id": r.lesson_id,
                "lesson_name": r.lesson_name,
                "total_study_hours": hours,
                "total_questions_solved": int(r.total_questions),
                "study_days": int(r.study_days),
                "last_study_date": as_date(r.last_study_date),
                "first_study_date": as_date(r.first_study_date),
                "percentage": percentage,
                "status": progress_status(percentage),
            }
        )
    return progress


def summarize_progress(progress: List[dict]) -> dict:
    total_topics = len(progress)
    studied = sum(1 for p in progress if p["total_study_hours"] > 0)
    return {
        "total_topics": total_topics,
        "studied_topics": studied,
        "completion_rate": (studied / total_topics * 100) if total_topics else 0.0,
        "total_study_hours": sum(p["total_study_hours"] for p in progress),
        "total_questions_solved": sum(p["total_questions_solved"] for p in progress),
    }
