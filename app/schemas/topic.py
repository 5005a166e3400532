from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class LessonOut(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class TopicCreate(BaseModel):
    lesson: str = Field(..., max_length=200)
    unit: Optional[str] = Field(None, max_length=200)
    topic: str = Field(..., max_length=300)
    curriculum_ref: Optional[str] = None
    sub_refs: Optional[str] = None
    question_types: Optional[str] = None


class TopicOut(BaseModel):
    id: int
    lesson_id: int
    lesson_name: str
    unit: Optional[str] = None
    topic: str
    curriculum_ref: Optional[str] = None
    sub_refs: Optional[str] = None
    question_types: Optional[str] = None
    question_type_list: List[str] = []

    model_config = ConfigDict(from_attributes=True)


class TopicSearchOut(BaseModel):
    id: int
    topic: str
    unit: Optional[str] = None
    lesson_name: str


class TopicProgressOut(BaseModel):
    id: int
    topic: str
    unit: Optional[str] = None
    lesson_id: int
    lesson_name: str
    total_study_hours: float
    total_questions_solved: int
    study_days: int
    last_study_date: Optional[date] = None
    first_study_date: Optional[date] = None
    percentage: float
    status: str


class ImportResult(BaseModel):
    imported: int
    skipped: int
    message: str


class ImportPreviewRow(BaseModel):
    row: int
    lesson: str
    unit: str = ""
    topic: str
    curriculum_ref: str = ""
    sub_refs: str = ""
    question_types: str = ""


class ImportPreviewOut(BaseModel):
    total_rows: int
    valid_rows: int
    errors: int
    error_messages: List[str] = []
    preview: List[ImportPreviewRow] = []
    has_more: bool = False
