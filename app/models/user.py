from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.student import Student


class User(Base):
    """
    Authentication identity. One user owns exactly one student profile.

    Columns:
      id             INT : auto-increment primary key
      email          TEXT: unique login email
      password_hash  TEXT: bcrypt hash (plaintext never stored)
      name           TEXT: display name
      role           TEXT: always "student" for now
      created_at     TS
    """
    __tablename__ = "users"

    id:            Mapped[int]      = mapped_column(Integer, primary_key=True, autoincrement=True)
    email:         Mapped[str]      = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str]      = mapped_column(Text, nullable=False)
    name:          Mapped[str]      = mapped_column(String(120), nullable=False)
    role:          Mapped[str]      = mapped_column(String(20), nullable=False, default="student", server_default="student")
    created_at:    Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    student: Mapped[Optional["Student"]] = relationship(
        "Student",
        back_populates="user",
        uselist=False,
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
