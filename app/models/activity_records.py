from sqlalchemy import Column, Integer, Float, String, Text, Date, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship

from app.core.database import Base


# Book reading, games and going out are structurally identical side records:
# something done on a date, an amount, an optional note, owned by a student.

class BookReading(Base):
    __tablename__ = "book_reading"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)

    book_title = Column(String(300), nullable=False)
    pages_read = Column(Integer, nullable=False, default=0)
    reading_date = Column(Date, nullable=False, index=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    student = relationship("Student", back_populates="book_readings")


class GameSession(Base):
    __tablename__ = "game_sessions"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)

    game_name = Column(String(200), nullable=False)
    duration_minutes = Column(Integer, nullable=False, default=0)
    play_date = Column(Date, nullable=False, index=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    student = relationship("Student", back_populates="game_sessions")


class GoingOut(Base):
    __tablename__ = "going_out"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)

    out_date = Column(Date, nullable=False, index=True)
    duration_hours = Column(Float, nullable=False, default=0.0)
    purpose = Column(String(300), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    student = relationship("Student", back_populates="going_outs")
