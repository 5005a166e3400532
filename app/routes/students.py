from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.student_controller import get_profile, update_profile
from app.core.database import get_db
from app.core.dependencies import get_current_student
from app.models.student import Student
from app.schemas.student import StudentProfileOut, StudentProfileUpdate

router = APIRouter(prefix="/students", tags=["Students"])


@router.get("/profile", response_model=StudentProfileOut)
async def read_profile(student: Student = Depends(get_current_student)):
    return await get_profile(student)


@router.put("/profile", response_model=StudentProfileOut)
async def edit_profile(
    payload: StudentProfileUpdate,
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    return await update_profile(db, student, payload)
