from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ── Book reading ──────────────────────────────────────────────────────
class BookReadingIn(BaseModel):
    book_title: Optional[str] = Field(None, max_length=300)
    pages_read: Optional[int] = None
    reading_date: Optional[date] = None
    notes: Optional[str] = None


class BookReadingOut(BaseModel):
    id: int
    student_id: int
    book_title: str
    pages_read: int
    reading_date: date
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ── Games ─────────────────────────────────────────────────────────────
class GameSessionIn(BaseModel):
    game_name: Optional[str] = Field(None, max_length=200)
    duration_minutes: Optional[int] = None
    play_date: Optional[date] = None
    notes: Optional[str] = None


class GameSessionOut(BaseModel):
    id: int
    student_id: int
    game_name: str
    duration_minutes: int
    play_date: date
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ── Going out ─────────────────────────────────────────────────────────
class GoingOutIn(BaseModel):
    out_date: Optional[date] = None
    duration_hours: Optional[float] = None
    purpose: Optional[str] = Field(None, max_length=300)
    notes: Optional[str] = None


class GoingOutOut(BaseModel):
    id: int
    student_id: int
    out_date: date
    duration_hours: float
    purpose: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
