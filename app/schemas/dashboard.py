from datetime import date
from typing import List

from pydantic import BaseModel


class DailyPointOut(BaseModel):
    date: date
    work_minutes: int
    questions_answered: int


class StudyMetricsOut(BaseModel):
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


class TopicSummaryOut(BaseModel):
    total_topics: int
    studied_topics: int
    completion_rate: float
    total_study_hours: float
    total_questions_solved: int


class ActivityCountsOut(BaseModel):
    books: int
    pages_read: int
    games: int
    game_minutes: int
    going_out: int
    going_out_hours: float


class DashboardOut(BaseModel):
    metrics: StudyMetricsOut
    daily_points: List[DailyPointOut]
    topics: TopicSummaryOut
    counts: ActivityCountsOut
    target_hours: float
