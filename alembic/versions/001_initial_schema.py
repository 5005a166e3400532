"""initial schema: users, students, lessons, topics, daily_stats and activity records

Revision ID: 001
Revises: 
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision      = "001"
down_revision = None
branch_labels = None
depends_on    = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id",            sa.Integer(),               primary_key=True, autoincrement=True),
        sa.Column("email",         sa.String(255),             nullable=False),
        sa.Column("password_hash", sa.Text(),                  nullable=False),
        sa.Column("name",          sa.String(120),             nullable=False),
        sa.Column("role",          sa.String(20),              nullable=False, server_default="student"),
        sa.Column("created_at",    sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "students",
        sa.Column("id",             sa.Integer(),  primary_key=True),
        sa.Column("user_id",        sa.Integer(),  sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("student_number", sa.String(30),  nullable=True),
        sa.Column("department",     sa.String(120), nullable=True),
        sa.Column("phone",          sa.String(30),  nullable=True),
        sa.Column("bio",            sa.Text(),      nullable=True),
        sa.Column("avatar",         sa.Text(),      nullable=True),
        sa.Column("updated_at",     sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id",        name="uq_students_user_id"),
        sa.UniqueConstraint("student_number", name="uq_students_student_number"),
    )
    op.create_index("ix_students_user_id", "students", ["user_id"])

    op.create_table(
        "lessons",
        sa.Column("id",   sa.Integer(),    primary_key=True),
        sa.Column("name", sa.String(200),  nullable=False),
        sa.UniqueConstraint("name", name="uq_lessons_name"),
    )
    op.create_index("ix_lessons_name", "lessons", ["name"])

    op.create_table(
        "topics",
        sa.Column("id",             sa.Integer(),   primary_key=True),
        sa.Column("lesson_id",      sa.Integer(),   sa.ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False),
        sa.Column("unit",           sa.String(200), nullable=True),
        sa.Column("topic",          sa.String(300), nullable=False),
        sa.Column("curriculum_ref", sa.Text(),      nullable=True),
        sa.Column("sub_refs",       sa.Text(),      nullable=True),
        sa.Column("question_types", sa.Text(),      nullable=True),
        sa.Column("created_at",     sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_topics_lesson_id",          "topics", ["lesson_id"])
    op.create_index("ix_topics_lesson_unit_topic",  "topics", ["lesson_id", "unit", "topic"])

    # study sessions; (student_id, date, topic_id) is intentionally not unique
    op.create_table(
        "daily_stats",
        sa.Column("id",                 sa.Integer(),   primary_key=True),
        sa.Column("student_id",         sa.Integer(),   sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date",               sa.Date(),      nullable=False),
        sa.Column("topic_id",           sa.Integer(),   sa.ForeignKey("topics.id", ondelete="SET NULL"), nullable=True),
        sa.Column("work_minutes",       sa.Integer(),   nullable=False, server_default="0"),
        sa.Column("questions_answered", sa.Integer(),   nullable=False, server_default="0"),
        sa.Column("question_type",      sa.String(120), nullable=True),
        sa.Column("notes",              sa.Text(),      nullable=True),
        sa.Column("created_at",         sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at",         sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_daily_stats_id",           "daily_stats", ["id"])
    op.create_index("ix_daily_stats_student_id",   "daily_stats", ["student_id"])
    op.create_index("ix_daily_stats_topic_id",     "daily_stats", ["topic_id"])
    op.create_index("ix_daily_stats_student_date", "daily_stats", ["student_id", "date"])

    op.create_table(
        "book_reading",
        sa.Column("id",           sa.Integer(),   primary_key=True),
        sa.Column("student_id",   sa.Integer(),   sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
        sa.Column("book_title",   sa.String(300), nullable=False),
        sa.Column("pages_read",   sa.Integer(),   nullable=False),
        sa.Column("reading_date", sa.Date(),      nullable=False),
        sa.Column("notes",        sa.Text(),      nullable=True),
        sa.Column("created_at",   sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_book_reading_id",           "book_reading", ["id"])
    op.create_index("ix_book_reading_student_id",   "book_reading", ["student_id"])
    op.create_index("ix_book_reading_reading_date", "book_reading", ["reading_date"])

    op.create_table(
        "game_sessions",
        sa.Column("id",               sa.Integer(),   primary_key=True),
        sa.Column("student_id",       sa.Integer(),   sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
        sa.Column("game_name",        sa.String(200), nullable=False),
        sa.Column("duration_minutes", sa.Integer(),   nullable=False),
        sa.Column("play_date",        sa.Date(),      nullable=False),
        sa.Column("notes",            sa.Text(),      nullable=True),
        sa.Column("created_at",       sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_game_sessions_id",         "game_sessions", ["id"])
    op.create_index("ix_game_sessions_student_id", "game_sessions", ["student_id"])
    op.create_index("ix_game_sessions_play_date",  "game_sessions", ["play_date"])

    op.create_table(
        "going_out",
        sa.Column("id",             sa.Integer(),   primary_key=True),
        sa.Column("student_id",     sa.Integer(),   sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
        sa.Column("out_date",       sa.Date(),      nullable=False),
        sa.Column("duration_hours", sa.Float(),     nullable=False),
        sa.Column("purpose",        sa.String(300), nullable=True),
        sa.Column("notes",          sa.Text(),      nullable=True),
        sa.Column("created_at",     sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_going_out_id",         "going_out", ["id"])
    op.create_index("ix_going_out_student_id", "going_out", ["student_id"])
    op.create_index("ix_going_out_out_date",   "going_out", ["out_date"])


def downgrade() -> None:
    op.drop_table("going_out")
    op.drop_table("game_sessions")
    op.drop_table("book_reading")
    op.drop_table("daily_stats")
    op.drop_table("topics")
    op.drop_table("lessons")
    op.drop_table("students")
    op.drop_table("users")
