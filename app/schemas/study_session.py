from datetime import date as Date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class StudySessionIn(BaseModel):
    # topic_id is checked by the recorder so a missing value is a 400, not a 422
    topic_id: Optional[int] = None
    date: Optional[Date] = None
    work_minutes: Optional[int] = None
    questions_answered: Optional[int] = None
    question_type: Optional[str] = Field(None, max_length=120)
    notes: Optional[str] = Field(None, max_length=2000)


class StudySessionOut(BaseModel):
    id: int
    student_id: int
    date: Date
    topic_id: Optional[int] = None
    work_minutes: int
    study_hours: float
    questions_answered: int
    question_type: Optional[str] = None
    notes: Optional[str] = None
    topic: Optional[str] = None
    unit: Optional[str] = None
    lesson_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class DeleteResult(BaseModel):
    success: bool = True
