from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.activity_record_controller import (
    create_book_reading,
    create_game_session,
    create_going_out,
    delete_record,
    list_records,
)
from app.core.database import get_db
from app.core.dependencies import get_current_student
from app.core.errors import ValidationError
from app.models.activity_records import BookReading, GameSession, GoingOut
from app.models.student import Student
from app.schemas.activity_record import (
    BookReadingIn,
    BookReadingOut,
    GameSessionIn,
    GameSessionOut,
    GoingOutIn,
    GoingOutOut,
)
from app.schemas.study_session import DeleteResult

books_router = APIRouter(prefix="/books", tags=["Books"])
games_router = APIRouter(prefix="/games", tags=["Games"])
going_out_router = APIRouter(prefix="/going-out", tags=["Going Out"])


def _require_id(id: Optional[int]) -> int:
    if id is None:
        raise ValidationError("Record ID is required")
    return id


# ─────────────────────────────────────────────────────────────
# BOOKS
# ─────────────────────────────────────────────────────────────

@books_router.get("", response_model=list[BookReadingOut])
async def list_books(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    return await list_records(db, BookReading, student.id, start_date, end_date)


@books_router.post("", response_model=BookReadingOut, status_code=status.HTTP_201_CREATED)
async def add_book(
    payload: BookReadingIn,
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    return await create_book_reading(db, student.id, payload)


@books_router.delete("", response_model=DeleteResult)
async def remove_book(
    id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    await delete_record(db, BookReading, student.id, _require_id(id))
    return DeleteResult()


# ─────────────────────────────────────────────────────────────
# GAMES
# ─────────────────────────────────────────────────────────────

@games_router.get("", response_model=list[GameSessionOut])
async def list_games(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    return await list_records(db, GameSession, student.id, start_date, end_date)


@games_router.post("", response_model=GameSessionOut, status_code=status.HTTP_201_CREATED)
async def add_game(
    payload: GameSessionIn,
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    return await create_game_session(db, student.id, payload)


@games_router.delete("", response_model=DeleteResult)
async def remove_game(
    id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    await delete_record(db, GameSession, student.id, _require_id(id))
    return DeleteResult()


# ─────────────────────────────────────────────────────────────
# GOING OUT
# ─────────────────────────────────────────────────────────────

@going_out_router.get("", response_model=list[GoingOutOut])
async def list_going_out(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    return await list_records(db, GoingOut, student.id, start_date, end_date)


@going_out_router.post("", response_model=GoingOutOut, status_code=status.HTTP_201_CREATED)
async def add_going_out(
    payload: GoingOutIn,
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    return await create_going_out(db, student.id, payload)


@going_out_router.delete("", response_model=DeleteResult)
async def remove_going_out(
    id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    await delete_record(db, GoingOut, student.id, _require_id(id))
    return DeleteResult()
