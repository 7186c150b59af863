"""
Application / Save Tracker

Two independent relations per (student, job) pair:

    applied:  NotApplied ──apply──▶ Applied          (one way)
    saved:    NotSaved ◀──toggle_save──▶ Saved        (both ways)

Each relation has a UNIQUE (job_id, student_id) index. The existence check
gives the friendly error; the index settles concurrent duplicates, whose
IntegrityError is reported as the same conflict.
"""

import logging
import uuid
from typing import List, Optional, Union

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobboard.core.auth import SessionClaims
from jobboard.core.authorization import enforce, require_profile
from jobboard.core.errors import ConflictError, NotFoundError, ValidationError
from jobboard.db.postgres import fetch_all, fetch_one, utc_now
from jobboard.services.job_service import JOB_NOT_FOUND, get_job_row, get_owned_job
from jobboard.schemas.schemas import (
    ApplicationResponse, ApplicantResponse, SaveToggleResponse, SavedJobResponse, UserRole
)

logger = logging.getLogger(__name__)

ALREADY_APPLIED = "Already applied to this job"
ALREADY_SAVED = "Job already saved"

APPLICATION_COLUMNS = """
    a.id, a.job_id, a.student_id, a.status, a.cover_letter, a.created_at,
    j.title AS job_title, e.company_name
"""


def _is_foreign_key_violation(exc: IntegrityError) -> bool:
    # PostgreSQL: "violates foreign key constraint", SQLite: "FOREIGN KEY constraint failed"
    return "foreign key" in str(exc.orig).lower()


def _require_active_job(db: Session, job_id: str) -> dict:
    job = get_job_row(db, job_id)
    if not job or not job["is_active"]:
        raise NotFoundError(JOB_NOT_FOUND)
    return job


# ============================================================
# APPLY
# ============================================================

def apply(
    db: Session, claims: Optional[SessionClaims], job_id: str, cover_letter: Optional[str] = None
) -> ApplicationResponse:
    """Apply to an active job. Students only, once per job."""
    enforce(claims, UserRole.student.value)
    student_id = require_profile(claims)

    existing = fetch_one(
        db,
        "SELECT id FROM applications WHERE job_id = :jid AND student_id = :sid",
        {"jid": job_id, "sid": student_id}
    )
    if existing:
        raise ConflictError(ALREADY_APPLIED)

    _require_active_job(db, job_id)

    application_id = str(uuid.uuid4())
    now = utc_now()
    try:
        db.execute(
            text("""
                INSERT INTO applications (id, job_id, student_id, status, cover_letter, created_at, updated_at)
                VALUES (:id, :jid, :sid, 'submitted', :cover, :now, :now)
            """),
            {"id": application_id, "jid": job_id, "sid": student_id, "cover": cover_letter, "now": now}
        )
    except IntegrityError as exc:
        # Either a concurrent duplicate apply or the job vanished mid-flight
        if _is_foreign_key_violation(exc):
            raise NotFoundError(JOB_NOT_FOUND)
        raise ConflictError(ALREADY_APPLIED)

    logger.info("Student %s applied to job %s", student_id, job_id)
    row = fetch_one(
        db,
        f"""
            SELECT {APPLICATION_COLUMNS}
            FROM applications a
            LEFT JOIN jobs j ON a.job_id = j.id
            LEFT JOIN employer_profiles e ON j.employer_id = e.id
            WHERE a.id = :aid
        """,
        {"aid": application_id}
    )
    return ApplicationResponse(**row)


# ============================================================
# SAVE (toggle)
# ============================================================

def toggle_save(db: Session, claims: Optional[SessionClaims], job_id: str) -> SaveToggleResponse:
    """
    Flip the saved state of a job for the calling student.

    Saved -> row deleted, saved=False. Not saved -> job must be active,
    row inserted, saved=True.
    """
    enforce(claims, UserRole.student.value)
    student_id = require_profile(claims)

    result = db.execute(
        text("DELETE FROM saved_jobs WHERE job_id = :jid AND student_id = :sid"),
        {"jid": job_id, "sid": student_id}
    )
    if result.rowcount > 0:
        logger.info("Student %s unsaved job %s", student_id, job_id)
        return SaveToggleResponse(saved=False)

    _require_active_job(db, job_id)

    try:
        db.execute(
            text("""
                INSERT INTO saved_jobs (id, job_id, student_id, created_at)
                VALUES (:id, :jid, :sid, :now)
            """),
            {"id": str(uuid.uuid4()), "jid": job_id, "sid": student_id, "now": utc_now()}
        )
    except IntegrityError as exc:
        if _is_foreign_key_violation(exc):
            raise NotFoundError(JOB_NOT_FOUND)
        raise ConflictError(ALREADY_SAVED)

    logger.info("Student %s saved job %s", student_id, job_id)
    return SaveToggleResponse(saved=True)


# ============================================================
# LISTINGS
# ============================================================

def list_applications(
    db: Session, claims: Optional[SessionClaims], job_id: Optional[str] = None
) -> Union[List[ApplicationResponse], List[ApplicantResponse]]:
    """
    Students: their own applications (optionally for one job).
    Employers: the applicants of one job they own.
    """
    if claims is not None and claims.role == UserRole.employer.value:
        if not job_id:
            raise ValidationError("job_id is required", {"job_id": "Required for employers"})
        return list_applicants(db, claims, job_id)

    enforce(claims, UserRole.student.value)
    sql = f"""
        SELECT {APPLICATION_COLUMNS}
        FROM applications a
        LEFT JOIN jobs j ON a.job_id = j.id
        LEFT JOIN employer_profiles e ON j.employer_id = e.id
        WHERE a.student_id = :sid
    """
    params = {"sid": require_profile(claims)}
    if job_id:
        sql += " AND a.job_id = :jid"
        params["jid"] = job_id
    sql += " ORDER BY a.created_at DESC"

    return [ApplicationResponse(**r) for r in fetch_all(db, sql, params)]


def list_applicants(db: Session, claims: Optional[SessionClaims], job_id: str) -> List[ApplicantResponse]:
    """Applicants for an owned job with their student profile and email."""
    get_owned_job(db, claims, job_id)

    rows = fetch_all(
        db,
        """
            SELECT a.id AS application_id, a.student_id, a.status, a.cover_letter, a.created_at,
                   s.full_name, s.university, s.major, s.gpa, u.email
            FROM applications a
            LEFT JOIN student_profiles s ON a.student_id = s.id
            LEFT JOIN users u ON s.user_id = u.id
            WHERE a.job_id = :jid
            ORDER BY a.created_at DESC
        """,
        {"jid": job_id}
    )
    return [
        ApplicantResponse(
            id=r["student_id"], application_id=r["application_id"],
            name=r["full_name"] or "Unknown", email=r["email"],
            university=r["university"] or "N/A", major=r["major"] or "N/A", gpa=r["gpa"] or "N/A",
            status=r["status"], cover_letter=r["cover_letter"], created_at=r["created_at"]
        ) for r in rows
    ]


def list_saved_jobs(db: Session, claims: Optional[SessionClaims]) -> List[SavedJobResponse]:
    """The calling student's saved jobs, newest first."""
    enforce(claims, UserRole.student.value)
    rows = fetch_all(
        db,
        """
            SELECT sj.id, sj.job_id, sj.student_id, sj.created_at,
                   j.title AS job_title, j.location, j.is_active, e.company_name
            FROM saved_jobs sj
            LEFT JOIN jobs j ON sj.job_id = j.id
            LEFT JOIN employer_profiles e ON j.employer_id = e.id
            WHERE sj.student_id = :sid
            ORDER BY sj.created_at DESC
        """,
        {"sid": require_profile(claims)}
    )
    for r in rows:
        if r["is_active"] is not None:
            r["is_active"] = bool(r["is_active"])
    return [SavedJobResponse(**r) for r in rows]
