from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.dashboard_controller import get_dashboard
from app.core.database import get_db
from app.core.dependencies import get_current_student
from app.models.student import Student
from app.schemas.dashboard import DashboardOut

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardOut)
async def dashboard(
    days: int | None = Query(None, ge=1, le=366, description="Window length in days, ending today."),
    db: AsyncSession = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    return await get_dashboard(db, student.id, days)
