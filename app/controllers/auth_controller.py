import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import Conflict, Unauthenticated, ValidationError
from app.core.security import (
    MIN_PASSWORD_LENGTH,
    create_access_token,
    hash_password,
    verify_password,
)
from app.models.student import Student
from app.models.user import User
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    RegisterRequest,
    RegisterResponse,
    UserInfo,
)

logger = logging.getLogger(__name__)


def _clean(v: str | None) -> str | None:
    v = (v or "").strip()
    return v or None


async def register(payload: RegisterRequest, db: AsyncSession) -> RegisterResponse:
    """
    Create a user and its student profile in one transaction.

    Every registered user gets a student row, so every authenticated
    caller can own activity records.
    """
    name = _clean(payload.name)
    if not name or not payload.password:
        raise ValidationError("Email, password and name are required")
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    email = str(payload.email).lower()
    existing = await db.execute(select(User.id).where(User.email == email))
    if existing.scalar_one_or_none() is not None:
        raise Conflict("This email is already registered")

    student_number = _clean(payload.student_number)
    if student_number:
        taken = await db.execute(select(Student.id).where(Student.student_number == student_number))
        if taken.scalar_one_or_none() is not None:
            raise Conflict("This student number is already registered")

    user = User(
        email=email,
        password_hash=hash_password(payload.password),
        name=name,
        role="student",
    )
    db.add(user)
    await db.flush()

    db.add(
        Student(
            user_id=user.id,
            student_number=student_number,
            department=_clean(payload.department),
            phone=_clean(payload.phone),
        )
    )
    await db.commit()
    await db.refresh(user)

    logger.info("Registered user id=%s", user.id)
    return RegisterResponse(message="Registered successfully", user=UserInfo.model_validate(user))


async def login(payload: LoginRequest, db: AsyncSession) -> tuple[LoginResponse, str]:
    """
    Verify credentials and issue a JWT.

    Wrong email and wrong password produce the same 401, and bcrypt
    verification runs in both cases.
    """
    result = await db.execute(select(User).where(User.email == str(payload.email).lower()))
    user = result.scalar_one_or_none()

    password_ok = verify_password(payload.password, user.password_hash if user else None)

    if not user or not password_ok:
        logger.info("Failed login attempt")
        raise Unauthenticated("Invalid email or password")

    token = create_access_token(user.id, user.email, user.name)

    response = LoginResponse(
        access_token=token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserInfo.model_validate(user),
    )
    return response, token


async def get_me(student: Student) -> MeResponse:
    """No DB call needed; student and user are already loaded by the dependency."""
    user = student.user
    return MeResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        student_id=student.id,
        created_at=user.created_at,
    )
