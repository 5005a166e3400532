"""
Study Metrics and Streak Calculation

Turns a window of daily study totals into dashboard scalars, and a topic's
cumulative study hours into a completion percentage and status band.

Everything here is pure: no database, no clock. Callers build the window
with `fill_daily_window`, which zero-fills days without sessions so the
rolling calculations can work on positions instead of dates.

Usage:
    from app.services.metrics import fill_daily_window, compute_study_metrics

    points = fill_daily_window(totals_by_date, end=date.today(), days=30)
    metrics = compute_study_metrics(points)
"""

from dataclasses import dataclass, asdict
from datetime import date, timedelta
from typing import Mapping, Sequence

WEEK_DAYS = 7

STATUS_COMPLETED = "Completed"
STATUS_GOOD = "Good progress"
STATUS_MODERATE = "Moderate progress"
STATUS_STARTING = "Starting"


@dataclass(frozen=True)
class DailyPoint:
    date: date
    work_minutes: int = 0
    questions_answered: int = 0

    @property
    def is_active(self) -> bool:
        return self.work_minutes > 0 or self.questions_answered > 0


@dataclass(frozen=True)
class StudyMetrics:
    last_7_days_minutes: int
    last_7_days_questions: int
    avg_daily_minutes: float
    avg_daily_questions: float
    total_minutes: int
    total_questions: int
    active_days: int
    window_days: int
    consistency: float
    current_streak: int

    def to_dict(self) -> dict:
        return asdict(self)


def fill_daily_window(
    totals: Mapping[date, tuple[int, int]],
    end: date,
    days: int,
) -> list[DailyPoint]:
    """
    Build `days` consecutive points ending at `end` (inclusive), oldest first.

    Args:
        totals: (work_minutes, questions_answered) per date; missing dates are 0.
        end: Last calendar day of the window.
        days: Window length. Zero or negative gives an empty window.

    Returns:
        One DailyPoint per calendar day, ascending by date.
    """
    points = []
    for offset in range(days - 1, -1, -1):
        day = end - timedelta(days=offset)
        minutes, questions = totals.get(day, (0, 0))
        points.append(DailyPoint(date=day, work_minutes=int(minutes or 0), questions_answered=int(questions or 0)))
    return points


def current_streak(points: Sequence[DailyPoint]) -> int:
    """Consecutive active days counted backwards from the last point."""
    streak = 0
    for point in reversed(points):
        if not point.is_active:
            break
        streak += 1
    return streak


def compute_study_metrics(points: Sequence[DailyPoint]) -> StudyMetrics:
    """
    Compute rollups over an ascending, zero-filled daily window.

    The 7-day averages always divide by 7, even when fewer than 7 points
    exist: they are a rate over the nominal week, not a mean of the
    available days.
    """
    last_week = points[-WEEK_DAYS:]
    week_minutes = sum(p.work_minutes for p in last_week)
    week_questions = sum(p.questions_answered for p in last_week)

    active_days = sum(1 for p in points if p.is_active)
    window_days = len(points)
    consistency = (active_days / window_days * 100) if window_days else 0.0

    return StudyMetrics(
        last_7_days_minutes=week_minutes,
        last_7_days_questions=week_questions,
        avg_daily_minutes=week_minutes / WEEK_DAYS,
        avg_daily_questions=week_questions / WEEK_DAYS,
        total_minutes=sum(p.work_minutes for p in points),
        total_questions=sum(p.questions_answered for p in points),
        active_days=active_days,
        window_days=window_days,
        consistency=consistency,
        current_streak=current_streak(points),
    )


def completion_percentage(total_study_hours: float, target_hours: float) -> float:
    """Share of the target reached, capped at 100."""
    if target_hours <= 0:
        return 100.0 if total_study_hours > 0 else 0.0
    return min(total_study_hours / target_hours * 100, 100.0)


def progress_status(percentage: float) -> str:
    # thresholds match the progress bar colours in the UI
    if percentage >= 100:
        return STATUS_COMPLETED
    if percentage >= 70:
        return STATUS_GOOD
    if percentage >= 40:
        return STATUS_MODERATE
    return STATUS_STARTING
