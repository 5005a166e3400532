from datetime import datetime
from pydantic import BaseModel, EmailStr, Field


# ── Request Bodies ────────────────────────────────────────────────────
class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    name: str = Field(..., max_length=120)
    student_number: str | None = Field(None, max_length=30)
    department: str | None = Field(None, max_length=120)
    phone: str | None = Field(None, max_length=30)

    model_config = {
        "json_schema_extra": {
            "example": {
                "email": "ayse@example.com",
                "password": "secret123",
                "name": "Ayşe Yılmaz",
                "student_number": "2024001",
            }
        }
    }


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


# ── Response Bodies ───────────────────────────────────────────────────
class UserInfo(BaseModel):
    """
    Safe user info sent to the frontend.
    password_hash is never included here.
    """
    id: int
    email: str
    name: str
    role: str

    model_config = {"from_attributes": True}


class RegisterResponse(BaseModel):
    message: str
    user: UserInfo


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds
    user: UserInfo


class MeResponse(UserInfo):
    student_id: int
    created_at: datetime
