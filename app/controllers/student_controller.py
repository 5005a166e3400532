from sqlalchemy.ext.asyncio import AsyncSession

from app.models.student import Student
from app.schemas.student import StudentProfileOut, StudentProfileUpdate


def _profile_out(student: Student) -> StudentProfileOut:
    return StudentProfileOut(
        id=student.id,
        user_id=student.user_id,
        name=student.user.name,
        email=student.user.email,
        student_number=student.student_number,
        department=student.department,
        phone=student.phone,
        bio=student.bio,
        avatar=student.avatar,
        updated_at=student.updated_at,
    )


async def get_profile(student: Student) -> StudentProfileOut:
    return _profile_out(student)


async def update_profile(db: AsyncSession, student: Student, payload: StudentProfileUpdate) -> StudentProfileOut:
    for field, value in payload.model_dump(exclude_unset=True).items():
        if isinstance(value, str):
            value = value.strip() or None
        setattr(student, field, value)

    await db.commit()
    await db.refresh(student, attribute_names=["updated_at"])
    return _profile_out(student)
