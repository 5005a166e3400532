from __future__ import annotations

from typing import Optional, TYPE_CHECKING
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.lesson import Lesson


class Topic(Base):
    __tablename__ = "topics"

    __table_args__ = (
        Index("ix_topics_lesson_unit_topic", "lesson_id", "unit", "topic"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    lesson_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("lessons.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    unit: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    topic: Mapped[str] = mapped_column(String(300), nullable=False)

    # free-text curriculum references
    curriculum_ref: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sub_refs: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # comma-separated question type tags, e.g. "Multiple choice, Open ended"
    question_types: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    lesson: Mapped["Lesson"] = relationship("Lesson", back_populates="topics", lazy="joined")

    @property
    def lesson_name(self) -> str:
        return self.lesson.name

    @property
    def question_type_list(self) -> list[str]:
        if not self.question_types:
            return []
        return [q.strip() for q in self.question_types.split(",") if q.strip()]
