"""Integration tests for recording, listing and deleting study sessions."""

from datetime import date

import pytest
from sqlalchemy import func, select

from app.controllers.study_session_controller import (
    delete_session,
    list_sessions,
    list_today,
    record_session,
)
from app.controllers.topic_controller import create_topic_manual
from app.core.config import settings
from app.core.errors import NotFound, ValidationError
from app.models.study_session import StudySession
from app.schemas.study_session import StudySessionIn
from app.schemas.topic import TopicCreate
from tests.conftest import add_raw_session, make_student

DAY = date(2024, 3, 10)


@pytest.fixture
async def topics(db):
    algebra = await create_topic_manual(db, TopicCreate(lesson="Mathematics", unit="Algebra", topic="Equations"))
    motion = await create_topic_manual(db, TopicCreate(lesson="Physics", unit="Motion", topic="Velocity"))
    return algebra, motion


async def _row_count(db, student_id: int) -> int:
    res = await db.execute(select(func.count(StudySession.id)).where(StudySession.student_id == student_id))
    return res.scalar_one()


class TestRecordSession:
    async def test_records_and_reports_hours(self, db, student, topics):
        algebra, _ = topics

        out = await record_session(
            db,
            student.id,
            StudySessionIn(topic_id=algebra.id, date=DAY, work_minutes=90, questions_answered=12, notes=" drills "),
        )

        assert out["work_minutes"] == 90
        assert out["study_hours"] == pytest.approx(1.5)
        assert out["questions_answered"] == 12
        assert out["notes"] == "drills"
        assert out["topic"] == "Equations"
        assert out["lesson_name"] == "Mathematics"

    async def test_missing_topic_is_rejected(self, db, student):
        with pytest.raises(ValidationError):
            await record_session(db, student.id, StudySessionIn(date=DAY, work_minutes=30))

    async def test_unknown_topic_is_not_found(self, db, student):
        with pytest.raises(NotFound):
            await record_session(db, student.id, StudySessionIn(topic_id=999, date=DAY))

    async def test_negative_amounts_are_clamped(self, db, student, topics):
        algebra, _ = topics

        out = await record_session(
            db, student.id, StudySessionIn(topic_id=algebra.id, date=DAY, work_minutes=-20, questions_answered=-3)
        )

        assert out["work_minutes"] == 0
        assert out["questions_answered"] == 0

    async def test_date_defaults_to_today(self, db, student, topics):
        algebra, _ = topics

        out = await record_session(db, student.id, StudySessionIn(topic_id=algebra.id, work_minutes=10))

        assert out["date"] == date.today()
        assert [s["id"] for s in await list_today(db, student.id)] == [out["id"]]


class TestUpsert:
    async def test_same_day_and_topic_replaces_values(self, db, student, topics):
        algebra, _ = topics

        first = await record_session(db, student.id, StudySessionIn(topic_id=algebra.id, date=DAY, work_minutes=30))
        second = await record_session(
            db, student.id, StudySessionIn(topic_id=algebra.id, date=DAY, work_minutes=45, questions_answered=5)
        )

        assert second["id"] == first["id"]
        assert second["work_minutes"] == 45
        assert second["questions_answered"] == 5
        assert await _row_count(db, student.id) == 1

    async def test_other_topic_same_day_gets_its_own_row(self, db, student, topics):
        algebra, motion = topics

        await record_session(db, student.id, StudySessionIn(topic_id=algebra.id, date=DAY, work_minutes=30))
        await record_session(db, student.id, StudySessionIn(topic_id=motion.id, date=DAY, work_minutes=20))

        sessions = await list_sessions(db, student.id)
        assert {s["topic"] for s in sessions} == {"Equations", "Velocity"}

    async def test_per_day_mode_overwrites_topic(self, db, student, topics, monkeypatch):
        monkeypatch.setattr(settings, "STUDY_SESSION_UPSERT_BY_TOPIC", False)
        algebra, motion = topics

        first = await record_session(db, student.id, StudySessionIn(topic_id=algebra.id, date=DAY, work_minutes=30))
        second = await record_session(db, student.id, StudySessionIn(topic_id=motion.id, date=DAY, work_minutes=20))

        assert second["id"] == first["id"]
        assert second["topic_id"] == motion.id
        assert second["work_minutes"] == 20
        assert await _row_count(db, student.id) == 1

    async def test_duplicate_rows_update_the_oldest(self, db, student, topics):
        algebra, _ = topics
        oldest = await add_raw_session(db, student.id, DAY, minutes=10, topic_id=algebra.id)
        newer = await add_raw_session(db, student.id, DAY, minutes=20, topic_id=algebra.id)

        out = await record_session(db, student.id, StudySessionIn(topic_id=algebra.id, date=DAY, work_minutes=60))

        assert out["id"] == oldest.id
        by_id = {s["id"]: s for s in await list_sessions(db, student.id)}
        assert by_id[oldest.id]["work_minutes"] == 60
        assert by_id[newer.id]["work_minutes"] == 20

    async def test_students_do_not_share_rows(self, db, student, topics):
        algebra, _ = topics
        other = await make_student(db, "mehmet@studytracker.io", "Mehmet")

        a = await record_session(db, student.id, StudySessionIn(topic_id=algebra.id, date=DAY, work_minutes=30))
        b = await record_session(db, other.id, StudySessionIn(topic_id=algebra.id, date=DAY, work_minutes=40))

        assert a["id"] != b["id"]
        assert (await list_sessions(db, student.id))[0]["work_minutes"] == 30


class TestListSessions:
    async def test_newest_first_with_legacy_rows(self, db, student, topics):
        algebra, _ = topics
        await add_raw_session(db, student.id, date(2024, 3, 8), minutes=15)
        await record_session(db, student.id, StudySessionIn(topic_id=algebra.id, date=DAY, work_minutes=30))

        sessions = await list_sessions(db, student.id)

        assert [s["date"] for s in sessions] == [DAY, date(2024, 3, 8)]
        assert sessions[1]["topic_id"] is None
        assert sessions[1]["topic"] is None

    async def test_range_applies_only_with_both_ends(self, db, student, topics):
        algebra, _ = topics
        for day in (date(2024, 3, 1), date(2024, 3, 5), date(2024, 3, 9)):
            await record_session(db, student.id, StudySessionIn(topic_id=algebra.id, date=day, work_minutes=10))

        ranged = await list_sessions(db, student.id, date(2024, 3, 2), date(2024, 3, 9))
        half_open = await list_sessions(db, student.id, start_date=date(2024, 3, 2))

        assert [s["date"] for s in ranged] == [date(2024, 3, 9), date(2024, 3, 5)]
        assert len(half_open) == 3

    async def test_filter_by_topic(self, db, student, topics):
        algebra, motion = topics
        await record_session(db, student.id, StudySessionIn(topic_id=algebra.id, date=DAY, work_minutes=10))
        await record_session(db, student.id, StudySessionIn(topic_id=motion.id, date=DAY, work_minutes=10))

        sessions = await list_sessions(db, student.id, topic_id=motion.id)

        assert [s["topic"] for s in sessions] == ["Velocity"]


class TestDeleteSession:
    async def test_owner_can_delete(self, db, student, topics):
        algebra, _ = topics
        out = await record_session(db, student.id, StudySessionIn(topic_id=algebra.id, date=DAY, work_minutes=10))

        await delete_session(db, student.id, out["id"])

        assert await _row_count(db, student.id) == 0

    async def test_other_student_gets_not_found_and_row_survives(self, db, student, topics):
        algebra, _ = topics
        other = await make_student(db, "mehmet@studytracker.io", "Mehmet")
        out = await record_session(db, student.id, StudySessionIn(topic_id=algebra.id, date=DAY, work_minutes=10))

        with pytest.raises(NotFound):
            await delete_session(db, other.id, out["id"])

        assert await _row_count(db, student.id) == 1

    async def test_unknown_id(self, db, student):
        with pytest.raises(NotFound):
            await delete_session(db, student.id, 12345)
