"""
Job Catalog - create, list and delete job postings.

Only active jobs are visible to students. A job belongs to exactly one
employer profile; only that employer may delete it. Deleting a job
cascades to its applications and saved-job rows.

Listing pages may be cached by the web layer; register a callback with
`register_listing_invalidator` to be told when the active listing changes.
Callbacks run after the write commits, never for a rolled-back one.
"""

import json
import logging
import uuid
from typing import Callable, List, Optional

from sqlalchemy import text
from sqlalchemy.orm import Session

from jobboard.core.auth import SessionClaims
from jobboard.core.authorization import enforce, require_profile
from jobboard.core.errors import NotFoundError
from jobboard.db.postgres import fetch_all, fetch_one, on_commit, utc_now
from jobboard.schemas.schemas import (
    JobCreate, JobResponse, EmployerJobResponse, EmployerSummary, UserRole
)

logger = logging.getLogger(__name__)

JOB_NOT_FOUND = "Job not found"
JOB_NOT_FOUND_OR_UNAUTHORIZED = "Job not found or unauthorized"

JOB_COLUMNS = """
    j.id, j.employer_id, j.title, j.description, j.requirements, j.location,
    j.type, j.work_mode, j.salary, j.is_active, j.created_at,
    e.company_name, e.logo_url
"""

_listing_invalidators: List[Callable[[], None]] = []


def register_listing_invalidator(callback: Callable[[], None]) -> None:
    _listing_invalidators.append(callback)


def unregister_listing_invalidator(callback: Callable[[], None]) -> None:
    if callback in _listing_invalidators:
        _listing_invalidators.remove(callback)


def invalidate_listing_cache() -> None:
    """Notify listeners that the active job listing changed."""
    logger.debug("Invalidating job listing cache (%d listeners)", len(_listing_invalidators))
    for callback in list(_listing_invalidators):
        try:
            callback()
        except Exception:
            # A broken cache must not fail the write that already happened
            logger.exception("Listing cache invalidator %r failed", callback)


def _row_to_job(row: dict, response_cls=JobResponse):
    """Map a jobs ⟕ employer_profiles row to the API shape."""
    employer = None
    if row.get("company_name") is not None:
        employer = EmployerSummary(
            id=row["employer_id"], company_name=row["company_name"], logo_url=row.get("logo_url")
        )
    extra = {}
    if "applicant_count" in row:
        extra["applicant_count"] = row["applicant_count"] or 0
    return response_cls(
        id=row["id"], employer_id=row["employer_id"], title=row["title"],
        description=row["description"], requirements=json.loads(row["requirements"] or "[]"),
        location=row["location"], type=row["type"], work_mode=row["work_mode"],
        salary=row["salary"], is_active=bool(row["is_active"]), created_at=row["created_at"],
        employer=employer, **extra
    )


def get_job_row(db: Session, job_id: str) -> Optional[dict]:
    """Raw job row (no employer join), or None."""
    return fetch_one(
        db,
        "SELECT id, employer_id, title, is_active FROM jobs WHERE id = :jid",
        {"jid": job_id}
    )


def create_job(db: Session, claims: Optional[SessionClaims], job: JobCreate) -> JobResponse:
    """Post a new job. Employers only; the poster becomes the owner."""
    enforce(claims, UserRole.employer.value)
    employer_id = require_profile(claims)

    job_id = str(uuid.uuid4())
    now = utc_now()
    db.execute(
        text("""
            INSERT INTO jobs (id, employer_id, title, description, requirements, location,
                type, work_mode, salary, is_active, created_at, updated_at)
            VALUES (:id, :employer_id, :title, :description, :requirements, :location,
                :type, :work_mode, :salary, :is_active, :now, :now)
        """),
        {
            "id": job_id, "employer_id": employer_id, "title": job.title,
            "description": job.description, "requirements": json.dumps(job.requirements),
            "location": job.location, "type": job.type.value, "work_mode": job.work_mode.value,
            "salary": job.salary, "is_active": True, "now": now
        }
    )

    row = fetch_one(
        db,
        f"""
            SELECT {JOB_COLUMNS}
            FROM jobs j LEFT JOIN employer_profiles e ON j.employer_id = e.id
            WHERE j.id = :jid
        """,
        {"jid": job_id}
    )
    logger.info("Employer %s posted job %s", employer_id, job_id)
    on_commit(db, invalidate_listing_cache)
    return _row_to_job(row)


def list_active_jobs(db: Session) -> List[JobResponse]:
    """All active jobs, newest first. Public."""
    rows = fetch_all(
        db,
        f"""
            SELECT {JOB_COLUMNS}
            FROM jobs j LEFT JOIN employer_profiles e ON j.employer_id = e.id
            WHERE j.is_active = :active
            ORDER BY j.created_at DESC
        """,
        {"active": True}
    )
    return [_row_to_job(r) for r in rows]


def list_employer_jobs(db: Session, claims: Optional[SessionClaims]) -> List[EmployerJobResponse]:
    """The caller's own postings, active or not, with applicant counts."""
    enforce(claims, UserRole.employer.value)
    rows = fetch_all(
        db,
        f"""
            SELECT {JOB_COLUMNS},
                   (SELECT COUNT(*) FROM applications a WHERE a.job_id = j.id) AS applicant_count
            FROM jobs j LEFT JOIN employer_profiles e ON j.employer_id = e.id
            WHERE j.employer_id = :eid
            ORDER BY j.created_at DESC
        """,
        {"eid": require_profile(claims)}
    )
    return [_row_to_job(r, EmployerJobResponse) for r in rows]


def get_owned_job(db: Session, claims: Optional[SessionClaims], job_id: str) -> dict:
    """
    Load a job the calling employer owns.

    Missing and foreign jobs raise the same NotFoundError so callers
    cannot probe for other employers' job ids.
    """
    enforce(claims, UserRole.employer.value)
    job = get_job_row(db, job_id)
    if not job:
        raise NotFoundError(JOB_NOT_FOUND_OR_UNAUTHORIZED)
    enforce(
        claims, UserRole.employer.value, job["employer_id"],
        not_owner_error=NotFoundError, not_owner_message=JOB_NOT_FOUND_OR_UNAUTHORIZED
    )
    return job


def delete_job(db: Session, claims: Optional[SessionClaims], job_id: str) -> None:
    """Delete an owned job. Applications and saved jobs go with it."""
    get_owned_job(db, claims, job_id)

    # Explicit child deletes keep behaviour identical where FK cascades are off
    db.execute(text("DELETE FROM applications WHERE job_id = :jid"), {"jid": job_id})
    db.execute(text("DELETE FROM saved_jobs WHERE job_id = :jid"), {"jid": job_id})
    result = db.execute(text("DELETE FROM jobs WHERE id = :jid"), {"jid": job_id})
    if result.rowcount == 0:
        # Deleted concurrently between the ownership check and here
        raise NotFoundError(JOB_NOT_FOUND_OR_UNAUTHORIZED)

    logger.info("Employer %s deleted job %s", claims.profile_id, job_id)
    on_commit(db, invalidate_listing_cache)
