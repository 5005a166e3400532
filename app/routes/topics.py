from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.progress_controller import aggregate_progress
from app.controllers.topic_controller import (
    bulk_import,
    create_topic_manual,
    get_topic,
    list_lessons,
    list_topics,
    preview_import,
    search_topics,
)
from app.core.database import get_db
from app.core.dependencies import get_current_student
from app.core.errors import ValidationError
from app.models.student import Student
from app.schemas.topic import (
    ImportPreviewOut,
    ImportResult,
    LessonOut,
    TopicCreate,
    TopicOut,
    TopicProgressOut,
    TopicSearchOut,
)
from app.services.spreadsheet import ImportRow, SpreadsheetError, parse_spreadsheet

router = APIRouter(prefix="/topics", tags=["Topics"])
lessons_router = APIRouter(prefix="/lessons", tags=["Topics"])


async def _read_rows(file: Optional[UploadFile]) -> list[ImportRow]:
    if file is None:
        raise ValidationError("No file provided")
    data = await file.read()
    try:
        rows = parse_spreadsheet(data, file.filename)
    except SpreadsheetError as e:
        raise ValidationError(str(e))
    if not rows:
        raise ValidationError("Spreadsheet is empty or has no data rows")
    return rows


@lessons_router.get("", response_model=list[LessonOut])
async def lessons(
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    return await list_lessons(db)


@router.get("", response_model=list[TopicOut])
async def topics(
    lesson_id: int | None = Query(None, description="Optional filter by lesson."),
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    return await list_topics(db, lesson_id)


@router.post("", response_model=TopicOut, status_code=status.HTTP_201_CREATED)
async def add_topic(
    payload: TopicCreate,
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    return await create_topic_manual(db, payload)


@router.get("/progress", response_model=list[TopicProgressOut])
async def progress(
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    return await aggregate_progress(db, student.id)


@router.get("/search", response_model=list[TopicSearchOut])
async def search(
    q: str = Query("", description="Matches topic, lesson name and unit."),
    limit: int | None = Query(None, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    return await search_topics(db, q, limit)


@router.post("/import/preview", response_model=ImportPreviewOut)
async def import_preview(
    file: UploadFile | None = File(None),
    student: Student = Depends(get_current_student),
):
    return preview_import(await _read_rows(file))


@router.post("/import", response_model=ImportResult)
async def import_topics(
    file: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    return await bulk_import(db, await _read_rows(file))


@router.get("/{topic_id}", response_model=TopicOut)
async def topic_detail(
    topic_id: int,
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    return await get_topic(db, topic_id)
