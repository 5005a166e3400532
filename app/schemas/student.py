from datetime import datetime
from pydantic import BaseModel, Field


class StudentProfileOut(BaseModel):
    id: int
    user_id: int
    name: str
    email: str
    student_number: str | None
    department: str | None
    phone: str | None
    bio: str | None
    avatar: str | None
    updated_at: datetime


class StudentProfileUpdate(BaseModel):
    """Only fields present in the request body are changed."""
    department: str | None = Field(None, max_length=120)
    phone: str | None = Field(None, max_length=30)
    bio: str | None = None
    avatar: str | None = None
