"""
Relational schema (SQLAlchemy Core tables).

PostgreSQL stores:
- users, student_profiles, recruiter_profiles
- jobs, applications (pipeline state lives in applications.status)
- chat_messages

Timestamps are naive UTC everywhere (see utcnow()).
"""

from datetime import datetime, timezone

from sqlalchemy import (
    JSON, BigInteger, Boolean, Column, DateTime, ForeignKey, Index, Integer,
    MetaData, Numeric, String, Table, Text, UniqueConstraint,
)

metadata = MetaData()


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


users = Table(
    "users", metadata,
    Column("id", String(36), primary_key=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("first_name", String(100)),
    Column("last_name", String(100)),
    Column("profile_image_url", String(500)),
    Column("role", String(20), nullable=False, default="student"),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime, nullable=False, default=utcnow),
    Column("updated_at", DateTime, nullable=False, default=utcnow),
)

student_profiles = Table(
    "student_profiles", metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(36), ForeignKey("users.id"), nullable=False, unique=True),
    Column("college", String(200)),
    Column("degree", String(100)),
    Column("branch", String(100)),
    Column("graduation_year", Integer),
    Column("cgpa", Numeric(3, 2)),
    Column("skills", JSON, nullable=False, default=list),
    Column("resume", Text),
    Column("resume_score", Integer, nullable=False, default=0),
    Column("interview_score", Integer, nullable=False, default=0),
    Column("learning_streak", Integer, nullable=False, default=0),
    Column("created_at", DateTime, nullable=False, default=utcnow),
    Column("updated_at", DateTime, nullable=False, default=utcnow),
)

recruiter_profiles = Table(
    "recruiter_profiles", metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(36), ForeignKey("users.id"), nullable=False, unique=True),
    Column("company", String(200), nullable=False),
    Column("position", String(100)),
    Column("department", String(100)),
    Column("verified", Boolean, nullable=False, default=False),
    Column("created_at", DateTime, nullable=False, default=utcnow),
    Column("updated_at", DateTime, nullable=False, default=utcnow),
)

jobs = Table(
    "jobs", metadata,
    Column("id", String(36), primary_key=True),
    Column("recruiter_id", String(36), ForeignKey("users.id"), nullable=False),
    Column("title", String(200), nullable=False),
    Column("company", String(200), nullable=False),
    Column("location", String(200)),
    Column("type", String(20), nullable=False),
    Column("salary_min", BigInteger),
    Column("salary_max", BigInteger),
    Column("description", Text),
    Column("requirements", JSON, nullable=False, default=list),
    Column("skills", JSON, nullable=False, default=list),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime, nullable=False, default=utcnow),
    Column("updated_at", DateTime, nullable=False, default=utcnow),
    Index("ix_jobs_recruiter_id", "recruiter_id"),
)

applications = Table(
    "applications", metadata,
    Column("id", String(36), primary_key=True),
    Column("student_id", String(36), ForeignKey("users.id"), nullable=False),
    Column("job_id", String(36), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False),
    Column("status", String(20), nullable=False, default="applied"),
    Column("cover_letter", Text),
    Column("resume_version", String(100)),
    Column("resume_file", String(500)),
    Column("linkedin_url", String(500)),
    Column("github_url", String(500)),
    Column("portfolio_url", String(500)),
    Column("expected_salary", BigInteger),
    Column("available_from", String(20)),
    Column("custom_answers", JSON),
    Column("version", Integer, nullable=False, default=1),
    Column("applied_at", DateTime, nullable=False, default=utcnow),
    Column("updated_at", DateTime, nullable=False, default=utcnow),
    UniqueConstraint("student_id", "job_id", name="uq_applications_student_job"),
    Index("ix_applications_job_id", "job_id"),
)

chat_messages = Table(
    "chat_messages", metadata,
    Column("id", String(36), primary_key=True),
    Column("sender_id", String(36), ForeignKey("users.id"), nullable=False),
    Column("receiver_id", String(36), ForeignKey("users.id")),
    Column("event_id", String(36)),
    Column("message", Text, nullable=False),
    Column("type", String(20), nullable=False, default="text"),
    Column("created_at", DateTime, nullable=False, default=utcnow),
    Index("ix_chat_messages_pair", "sender_id", "receiver_id"),
)
