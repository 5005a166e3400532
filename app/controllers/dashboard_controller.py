from datetime import date, timedelta
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.activity_record_controller import activity_counts
from app.controllers.progress_controller import as_date, aggregate_progress, summarize_progress
from app.core.config import settings
from app.models.study_session import StudySession
from app.services.metrics import compute_study_metrics, fill_daily_window

MAX_WINDOW_DAYS = 366


async def daily_totals(db: AsyncSession, student_id: int, start: date, end: date) -> dict[date, tuple[int, int]]:
    """(work_minutes, questions_answered) per date, all sessions including topic-less ones."""
    res = await db.execute(
        select(
            StudySession.date,
            func.coalesce(func.sum(StudySession.work_minutes), 0),
            func.coalesce(func.sum(StudySession.questions_answered), 0),
        )
        .where(
            StudySession.student_id == student_id,
            StudySession.date.between(start, end),
        )
        .group_by(StudySession.date)
    )
    return {as_date(d): (int(m), int(q)) for d, m, q in res.all()}


async def get_dashboard(
    db: AsyncSession,
    student_id: int,
    days: Optional[int] = None,
    today: Optional[date] = None,
) -> dict:
    days = max(1, min(days or settings.DASHBOARD_WINDOW_DAYS, MAX_WINDOW_DAYS))
    end = today or date.today()
    start = end - timedelta(days=days - 1)

    totals = await daily_totals(db, student_id, start, end)
    points = fill_daily_window(totals, end=end, days=days)
    metrics = compute_study_metrics(points)

    progress = await aggregate_progress(db, student_id)

    return {
        "metrics": metrics.to_dict(),
        "daily_points": [
            {"date": p.date, "work_minutes": p.work_minutes, "questions_answered": p.questions_answered}
            for p in points
        ],
        "topics": summarize_progress(progress),
        "counts": await activity_counts(db, student_id),
        "target_hours": settings.TOPIC_TARGET_HOURS,
    }
