"""
Relational schema - six tables.

users ─┬─ student_profiles ─┬─ applications ─┐
       │                    └─ saved_jobs ───┤
       └─ employer_profiles ── jobs ─────────┘

Every foreign key cascades on delete. applications and saved_jobs carry a
UNIQUE (job_id, student_id) index; the services rely on it to turn
concurrent duplicate inserts into a conflict instead of a second row.

Columns stay portable (no ARRAY/ENUM types) so the same DDL runs on
PostgreSQL and on the SQLite test database. Enum values are enforced by
CHECK constraints; job requirements are stored as JSON text.
"""

from sqlalchemy import (
    Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer,
    MetaData, String, Table, Text, UniqueConstraint
)
from sqlalchemy.engine import Engine

metadata = MetaData()

USER_ROLES = ("student", "employer")
JOB_TYPES = ("internship", "entry-level")
WORK_MODES = ("remote", "onsite", "hybrid")
APPLICATION_STATUSES = ("submitted", "reviewing", "interview", "rejected", "accepted")


def _in(column: str, values: tuple) -> str:
    quoted = ", ".join(f"'{v}'" for v in values)
    return f"{column} IN ({quoted})"


users = Table(
    "users", metadata,
    Column("id", String(36), primary_key=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("role", String(20), nullable=False),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
    CheckConstraint(_in("role", USER_ROLES), name="ck_users_role"),
)

student_profiles = Table(
    "student_profiles", metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
    Column("full_name", String(255), nullable=False),
    Column("university", String(255)),
    Column("major", String(255)),
    Column("graduation_year", Integer),
    Column("gpa", String(10)),
    Column("bio", Text),
    Column("resume_url", String(500)),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
)

employer_profiles = Table(
    "employer_profiles", metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
    Column("company_name", String(255), nullable=False),
    Column("industry", String(255)),
    Column("company_size", String(50)),
    Column("website", String(500)),
    Column("description", Text),
    Column("logo_url", String(500)),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
)

jobs = Table(
    "jobs", metadata,
    Column("id", String(36), primary_key=True),
    Column("employer_id", String(36), ForeignKey("employer_profiles.id", ondelete="CASCADE"),
           nullable=False, index=True),
    Column("title", String(255), nullable=False),
    Column("description", Text, nullable=False),
    Column("requirements", Text, nullable=False, default="[]"),
    Column("location", String(255), nullable=False),
    Column("type", String(20), nullable=False),
    Column("work_mode", String(20), nullable=False),
    Column("salary", String(100)),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime, nullable=False, index=True),
    Column("updated_at", DateTime, nullable=False),
    CheckConstraint(_in("type", JOB_TYPES), name="ck_jobs_type"),
    CheckConstraint(_in("work_mode", WORK_MODES), name="ck_jobs_work_mode"),
)

applications = Table(
    "applications", metadata,
    Column("id", String(36), primary_key=True),
    Column("job_id", String(36), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("student_id", String(36), ForeignKey("student_profiles.id", ondelete="CASCADE"),
           nullable=False, index=True),
    Column("status", String(20), nullable=False, default="submitted"),
    Column("cover_letter", Text),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
    UniqueConstraint("job_id", "student_id", name="uq_applications_job_student"),
    CheckConstraint(_in("status", APPLICATION_STATUSES), name="ck_applications_status"),
)

saved_jobs = Table(
    "saved_jobs", metadata,
    Column("id", String(36), primary_key=True),
    Column("job_id", String(36), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("student_id", String(36), ForeignKey("student_profiles.id", ondelete="CASCADE"),
           nullable=False, index=True),
    Column("created_at", DateTime, nullable=False),
    UniqueConstraint("job_id", "student_id", name="uq_saved_jobs_job_student"),
)


def create_tables(bind: Engine) -> None:
    """Create all tables that don't exist yet. Migrations are out of scope."""
    metadata.create_all(bind=bind)


def drop_tables(bind: Engine) -> None:
    metadata.drop_all(bind=bind)
