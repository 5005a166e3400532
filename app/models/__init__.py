# Import every model so Base.metadata is complete for Alembic and tests.
from app.models.user import User  # noqa: F401
from app.models.student import Student  # noqa: F401
from app.models.lesson import Lesson  # noqa: F401
from app.models.topic import Topic  # noqa: F401
from app.models.study_session import StudySession  # noqa: F401
from app.models.activity_records import BookReading, GameSession, GoingOut  # noqa: F401
