"""
Table definitions for ForsaLink.

SQLAlchemy Core is used only to emit dialect-correct DDL (PostgreSQL in
production, SQLite in tests). Route handlers query with raw text() SQL.
"""

from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Integer, MetaData, String, Table, Text,
    UniqueConstraint, false, func,
)

metadata = MetaData()

users = Table(
    "users", metadata,
    Column("id", Integer, primary_key=True),
    Column("full_name", String(150), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("role", String(20), nullable=False),
    Column("bio", Text),
    Column("level_of_study", String(100)),
    Column("cv_link", String(500)),
    Column("interests", Text),
    Column("company_description", Text),
    Column("company_logo", String(500)),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)

jobs = Table(
    "jobs", metadata,
    Column("id", Integer, primary_key=True),
    Column("company_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("title", String(200), nullable=False),
    Column("description", Text),
    Column("job_type", String(20), nullable=False, server_default="full-time"),
    Column("location", String(200)),
    Column("salary", String(100)),
    Column("requirements", Text),
    Column("status", String(20), nullable=False, server_default="active"),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)

applications = Table(
    "applications", metadata,
    Column("id", Integer, primary_key=True),
    Column("job_id", Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False),
    Column("student_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("status", String(20), nullable=False, server_default="pending"),
    Column("applied_at", DateTime, nullable=False, server_default=func.current_timestamp()),
    UniqueConstraint("student_id", "job_id", name="uq_applications_student_job"),
)

bookmarks = Table(
    "bookmarks", metadata,
    Column("id", Integer, primary_key=True),
    Column("student_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("job_id", Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
    UniqueConstraint("student_id", "job_id", name="uq_bookmarks_student_job"),
)

notifications = Table(
    "notifications", metadata,
    Column("id", Integer, primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("message", Text, nullable=False),
    Column("is_read", Boolean, nullable=False, server_default=false()),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)

conversations = Table(
    "conversations", metadata,
    Column("id", Integer, primary_key=True),
    Column("student_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("company_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("job_id", Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False),
    Column("last_message", Text),
    Column("last_message_time", DateTime, server_default=func.current_timestamp()),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
    UniqueConstraint("student_id", "company_id", "job_id", name="uq_conversations_participants_job"),
)

messages = Table(
    "messages", metadata,
    Column("id", Integer, primary_key=True),
    Column("conversation_id", Integer, ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("sender_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("message", Text, nullable=False),
    Column("is_read", Boolean, nullable=False, server_default=false()),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)


def init_db(bind=None) -> None:
    """Create all tables that don't exist yet."""
    if bind is None:
        from app.db.postgres import engine as bind
    metadata.create_all(bind=bind)


def drop_db(bind=None) -> None:
    if bind is None:
        from app.db.postgres import engine as bind
    metadata.drop_all(bind=bind)
