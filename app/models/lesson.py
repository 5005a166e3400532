from __future__ import annotations

from typing import List, TYPE_CHECKING

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.topic import Topic


class Lesson(Base):
    __tablename__ = "lessons"

    __table_args__ = (
        UniqueConstraint("name", name="uq_lessons_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # exact, case-sensitive name; lookups go through find_or_create_lesson
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)

    topics: Mapped[List["Topic"]] = relationship(
        "Topic",
        back_populates="lesson",
        cascade="all, delete-orphan",
    )
