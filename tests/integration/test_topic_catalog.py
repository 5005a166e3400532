"""
Integration tests for the lesson/topic catalog and bulk import.

Runs against a real SQLite database (see tests/conftest.py).
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.controllers import topic_controller
from app.controllers.topic_controller import (
    bulk_import,
    create_topic_manual,
    find_or_create_lesson,
    get_topic,
    list_topics,
    preview_import,
    search_topics,
)
from app.core.errors import NotFound, StorageError, ValidationError
from app.models.lesson import Lesson
from app.models.topic import Topic
from app.schemas.topic import TopicCreate
from app.services.spreadsheet import ImportRow


async def _count(db, model) -> int:
    return (await db.execute(select(func.count(model.id)))).scalar_one()


def _rows() -> list[ImportRow]:
    return [
        ImportRow(2, "Mathematics", "Algebra", "Linear equations", "M.9.1"),
        ImportRow(3, "Mathematics", "Algebra", "Inequalities"),
        ImportRow(4, "Physics", "Motion", "Velocity"),
        ImportRow(5, "Physics", "Motion", None),
        ImportRow(6, "Physics", "Forces", "Newton's laws", question_types="Open ended"),
    ]


class TestFindOrCreateLesson:
    async def test_same_name_returns_same_id(self, db):
        first = await find_or_create_lesson(db, "Mathematics")
        second = await find_or_create_lesson(db, "Mathematics")
        await db.commit()

        assert first == second
        assert await _count(db, Lesson) == 1

    async def test_surrounding_whitespace_is_ignored(self, db):
        assert await find_or_create_lesson(db, "  Mathematics ") == await find_or_create_lesson(db, "Mathematics")

    async def test_names_are_case_sensitive(self, db):
        upper = await find_or_create_lesson(db, "Math")
        lower = await find_or_create_lesson(db, "math")

        assert upper != lower

    async def test_blank_name_rejected(self, db):
        with pytest.raises(ValidationError):
            await find_or_create_lesson(db, "   ")


class TestTopics:
    async def test_manual_create_reuses_lesson(self, db):
        a = await create_topic_manual(db, TopicCreate(lesson="Biology", unit="Cells", topic="Mitosis"))
        b = await create_topic_manual(db, TopicCreate(lesson="Biology", unit="Cells", topic="Meiosis"))

        assert a.lesson_id == b.lesson_id
        assert a.lesson_name == "Biology"
        assert await _count(db, Lesson) == 1

    async def test_duplicate_topic_names_are_allowed(self, db):
        await create_topic_manual(db, TopicCreate(lesson="Biology", topic="Review"))
        await create_topic_manual(db, TopicCreate(lesson="Biology", topic="Review"))

        assert await _count(db, Topic) == 2

    async def test_manual_create_requires_lesson_and_topic(self, db):
        with pytest.raises(ValidationError):
            await create_topic_manual(db, TopicCreate(lesson="Biology", topic="  "))

    async def test_list_is_ordered_and_filterable(self, db):
        await bulk_import(db, _rows())

        topics = await list_topics(db)
        assert [t.lesson_name for t in topics] == ["Mathematics", "Mathematics", "Physics", "Physics"]
        assert [t.topic for t in topics[:2]] == ["Inequalities", "Linear equations"]

        physics_id = topics[-1].lesson_id
        assert {t.topic for t in await list_topics(db, physics_id)} == {"Velocity", "Newton's laws"}

    async def test_get_unknown_topic(self, db):
        with pytest.raises(NotFound):
            await get_topic(db, 999)

    async def test_question_type_list(self, db):
        t = await create_topic_manual(
            db, TopicCreate(lesson="History", topic="Reforms", question_types="Multiple choice, Open ended,")
        )
        assert t.question_type_list == ["Multiple choice", "Open ended"]


class TestSearch:
    async def test_short_query_returns_nothing(self, db):
        await bulk_import(db, _rows())

        assert await search_topics(db, "a") == []
        assert await search_topics(db, "  ") == []

    async def test_matches_topic_lesson_and_unit_case_insensitively(self, db):
        await bulk_import(db, _rows())

        by_topic = await search_topics(db, "veloc")
        by_lesson = await search_topics(db, "PHYS")
        by_unit = await search_topics(db, "algebra")

        assert [r["topic"] for r in by_topic] == ["Velocity"]
        assert len(by_lesson) == 2
        assert {r["topic"] for r in by_unit} == {"Linear equations", "Inequalities"}
        assert by_topic[0]["lesson_name"] == "Physics"

    async def test_two_characters_is_enough(self, db):
        await bulk_import(db, _rows())

        assert {r["lesson_name"] for r in await search_topics(db, "ma")} == {"Mathematics"}

    async def test_like_wildcards_match_literally(self, db):
        await bulk_import(db, _rows())
        await create_topic_manual(db, TopicCreate(lesson="Chemistry", topic="100% yield"))

        assert await search_topics(db, "__") == []
        assert await search_topics(db, "%%") == []
        assert [r["topic"] for r in await search_topics(db, "0%")] == ["100% yield"]

    async def test_non_ascii_case_folding(self, db):
        await create_topic_manual(db, TopicCreate(lesson="Türkçe", topic="Ünlü uyumu"))

        found = await search_topics(db, "ÜNLÜ")
        by_lesson = await search_topics(db, "TÜRK")

        assert [r["topic"] for r in found] == ["Ünlü uyumu"]
        assert [r["lesson_name"] for r in by_lesson] == ["Türkçe"]

    async def test_limit(self, db):
        await bulk_import(db, _rows())
        assert len(await search_topics(db, "Mathematics", limit=1)) == 1


class TestBulkImport:
    async def test_invalid_rows_are_skipped(self, db):
        result = await bulk_import(db, _rows())

        assert result["imported"] == 4
        assert result["skipped"] == 1
        assert result["message"] == "4 topics imported. 1 rows skipped."
        assert await _count(db, Topic) == 4
        assert await _count(db, Lesson) == 2

    async def test_import_reuses_existing_lessons(self, db):
        await find_or_create_lesson(db, "Physics")
        await db.commit()

        await bulk_import(db, _rows())

        assert await _count(db, Lesson) == 2

    async def test_failure_mid_batch_rolls_back_everything(self, db, monkeypatch):
        original = topic_controller.create_topic
        calls = {"n": 0}

        async def failing_after_three(session, **kwargs):
            calls["n"] += 1
            if calls["n"] > 3:
                raise RuntimeError("simulated failure")
            return await original(session, **kwargs)

        monkeypatch.setattr(topic_controller, "create_topic", failing_after_three)

        with pytest.raises(RuntimeError):
            await bulk_import(db, _rows())

        assert await _count(db, Topic) == 0
        assert await _count(db, Lesson) == 0

    async def test_storage_failure_is_reported_as_storage_error(self, db, monkeypatch):
        async def broken(session, **kwargs):
            raise OperationalError("INSERT INTO topics", {}, Exception("disk I/O error"))

        monkeypatch.setattr(topic_controller, "create_topic", broken)

        with pytest.raises(StorageError):
            await bulk_import(db, _rows())

        assert await _count(db, Topic) == 0


class TestPreview:
    def test_preview_reports_errors_without_writing(self):
        out = preview_import(_rows())

        assert out.total_rows == 5
        assert out.valid_rows == 4
        assert out.errors == 1
        assert out.error_messages == ["Row 5: lesson or topic is missing"]
        assert out.preview[0].curriculum_ref == "M.9.1"
        assert out.has_more is False

    def test_preview_is_capped(self):
        rows = [ImportRow(i + 2, "Mathematics", None, f"Topic {i}") for i in range(60)]

        out = preview_import(rows)

        assert len(out.preview) == topic_controller.PREVIEW_LIMIT
        assert out.has_more is True
