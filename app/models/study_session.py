from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, func, Index
from sqlalchemy.orm import relationship

from app.core.database import Base


class StudySession(Base):
    """
    One logged study entry for a student and a calendar day.

    topic_id is NULL for legacy/general entries; those never count
    towards topic progress. (student_id, date, topic_id) is deliberately
    NOT unique; the recorder keeps one row per key in normal use.
    """
    __tablename__ = "daily_stats"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    topic_id = Column(Integer, ForeignKey("topics.id", ondelete="SET NULL"), nullable=True, index=True)

    work_minutes = Column(Integer, nullable=False, default=0, server_default="0")
    questions_answered = Column(Integer, nullable=False, default=0, server_default="0")

    question_type = Column(String(120), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    student = relationship("Student", back_populates="study_sessions")
    topic = relationship("Topic")

Index("ix_daily_stats_student_date", StudySession.student_id, StudySession.date)
