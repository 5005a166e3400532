"""
Shared Test Fixtures

Every test gets its own SQLite database file under tmp_path, created from
the model metadata. The app is built with create_app() and its
session factory is pointed at that database, so the production database
is never touched.
"""

from datetime import date
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.controllers.auth_controller import register
from app.core.database import Base, create_engine_and_sessionmaker
from app.models.student import Student
from app.models.study_session import StudySession
from app.models.user import User
from app.schemas.auth import RegisterRequest


# ============================================================================
# Database
# ============================================================================


@pytest_asyncio.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine, factory = create_engine_and_sessionmaker(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield factory
    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


async def make_student(db: AsyncSession, email: str = "ayse@studytracker.io", name: str = "Ayşe") -> Student:
    await register(RegisterRequest(email=email, password="secret123", name=name), db)
    res = await db.execute(select(Student).join(User, Student.user_id == User.id).where(User.email == email))
    return res.scalar_one()


async def add_raw_session(
    db: AsyncSession,
    student_id: int,
    day: date,
    minutes: int = 0,
    questions: int = 0,
    topic_id: int | None = None,
) -> StudySession:
    """Insert a row directly, bypassing the recorder (e.g. legacy topic-less rows)."""
    s = StudySession(
        student_id=student_id,
        date=day,
        topic_id=topic_id,
        work_minutes=minutes,
        questions_answered=questions,
    )
    db.add(s)
    await db.commit()
    return s


@pytest_asyncio.fixture
async def student(db) -> Student:
    return await make_student(db)


# ============================================================================
# HTTP
# ============================================================================


@pytest.fixture
def app(session_factory):
    from app.main import create_app

    application = create_app()
    # ASGITransport does not run the lifespan; wire the test database directly
    application.state.session_factory = session_factory
    return application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


async def register_and_login(client: httpx.AsyncClient, email: str, name: str = "Student") -> dict:
    resp = await client.post(
        "/api/auth/register",
        json={"email": email, "password": "secret123", "name": name},
    )
    assert resp.status_code == 201, resp.text

    resp = await client.post("/api/auth/login", json={"email": email, "password": "secret123"})
    assert resp.status_code == 200, resp.text
    client.cookies.clear()
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest_asyncio.fixture
async def auth_headers(client) -> dict:
    return await register_and_login(client, "ayse@studytracker.io", "Ayşe")
