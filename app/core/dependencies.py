from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.errors import Unauthenticated
from app.core.security import decode_access_token
from app.models.student import Student

bearer = HTTPBearer(auto_error=False)


def _extract_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
) -> str | None:
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.COOKIE_NAME)


async def get_current_student(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: AsyncSession = Depends(get_db),
) -> Student:
    """
    Student auth guard dependency.

    Token is read from `Authorization: Bearer <jwt>` first, then from the
    http-only cookie set at login. payload["sub"] is the user id; the
    student owning that user is returned.
    """
    token = _extract_token(request, credentials)
    if not token:
        raise Unauthenticated()

    try:
        payload = decode_access_token(token)
        if payload.get("type") != "access":
            raise Unauthenticated()
        user_id = int(payload["sub"])
    except (JWTError, KeyError, ValueError, TypeError):
        raise Unauthenticated()

    result = await db.execute(select(Student).where(Student.user_id == user_id))
    student = result.scalar_one_or_none()

    if student is None:
        raise Unauthenticated()

    return student
