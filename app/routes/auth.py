from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.auth_controller import get_me, login, register
from app.core.config import settings
from app.core.database import get_db
from app.core.dependencies import get_current_student
from app.models.student import Student
from app.schemas.auth import LoginRequest, LoginResponse, MeResponse, RegisterRequest, RegisterResponse

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Creates a user and its student profile.",
)
async def register_student(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> RegisterResponse:
    return await register(payload, db)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login",
    description="""
Authenticate with email + password.
Returns a JWT and also sets it as an http-only `token` cookie.

**How to use the token:**
Add to request headers: `Authorization: Bearer <your_token>`, or let the browser send the cookie.
    """,
)
async def student_login(
    payload: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    body, token = await login(payload, db)
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    return body


@router.get(
    "/me",
    response_model=MeResponse,
    summary="Get Current User",
)
async def me(
    student: Student = Depends(get_current_student),
) -> MeResponse:
    return await get_me(student)


@router.post(
    "/logout",
    summary="Logout",
    description="JWTs are stateless; this clears the cookie. Clients using the header should drop their token.",
)
async def logout(response: Response) -> dict:
    response.delete_cookie(settings.COOKIE_NAME)
    return {"detail": "Logged out"}
