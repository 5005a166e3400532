from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.study_session_controller import (
    delete_session,
    list_sessions,
    list_today,
    record_session,
)
from app.core.database import get_db
from app.core.dependencies import get_current_student
from app.core.errors import ValidationError
from app.models.student import Student
from app.schemas.study_session import DeleteResult, StudySessionIn, StudySessionOut

router = APIRouter(prefix="/study-sessions", tags=["Study Sessions"])


@router.get("", response_model=list[StudySessionOut])
async def sessions(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    topic_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    return await list_sessions(db, student.id, start_date, end_date, topic_id)


@router.get("/today", response_model=list[StudySessionOut])
async def today(
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    return await list_today(db, student.id)


@router.post("", response_model=StudySessionOut, status_code=status.HTTP_201_CREATED)
async def record(
    payload: StudySessionIn,
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    return await record_session(db, student.id, payload)


@router.delete("", response_model=DeleteResult)
async def remove(
    id: Optional[int] = Query(None, description="Study session id"),
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    if id is None:
        raise ValidationError("Record ID is required")
    await delete_session(db, student.id, id)
    return DeleteResult()
