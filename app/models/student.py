from __future__ import annotations

from typing import List, Optional, TYPE_CHECKING
from datetime import datetime

from sqlalchemy import (
    String,
    Integer,
    Text,
    DateTime,
    func,
    UniqueConstraint,
    ForeignKey,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.study_session import StudySession
    from app.models.activity_records import BookReading, GameSession, GoingOut


class Student(Base):
    __tablename__ = "students"

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_students_user_id"),
        UniqueConstraint("student_number", name="uq_students_student_number"),
    )

    # --------------------------------------------------
    # PRIMARY KEY / IDENTITY
    # --------------------------------------------------

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # --------------------------------------------------
    # PROFILE
    # --------------------------------------------------

    student_number: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    department: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    avatar: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # --------------------------------------------------
    # RELATIONSHIPS
    # --------------------------------------------------

    user: Mapped["User"] = relationship(
        "User",
        back_populates="student",
        lazy="joined",
    )

    study_sessions: Mapped[List["StudySession"]] = relationship(
        "StudySession",
        back_populates="student",
        cascade="all, delete-orphan",
    )

    book_readings: Mapped[List["BookReading"]] = relationship(
        "BookReading",
        back_populates="student",
        cascade="all, delete-orphan",
    )

    game_sessions: Mapped[List["GameSession"]] = relationship(
        "GameSession",
        back_populates="student",
        cascade="all, delete-orphan",
    )

    going_outs: Mapped[List["GoingOut"]] = relationship(
        "GoingOut",
        back_populates="student",
        cascade="all, delete-orphan",
    )
