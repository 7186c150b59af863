"""
Job Routes

POST /jobs - Create job posting (employer only)
GET /jobs - List all active jobs (public)
DELETE /jobs/{job_id} - Delete job (owning employer only)
GET /jobs/{job_id}/applicants - Applicants for a job (owning employer only)
"""

from fastapi import APIRouter, Depends
from typing import List, Optional

from jobboard.db.postgres import get_db_session
from jobboard.core.auth import SessionClaims, get_session_claims
from jobboard.services import job_service, tracker_service
from jobboard.schemas.schemas import (
    JobCreate, JobResponse, JobCreateResponse, ApplicantResponse, MessageResponse
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.post("", response_model=JobCreateResponse)
def create_job(job: JobCreate, claims: Optional[SessionClaims] = Depends(get_session_claims)):
    """Create a new job posting. Only employers can create jobs."""
    with get_db_session() as db:
        created = job_service.create_job(db, claims, job)
    return JobCreateResponse(job=created)


@router.get("", response_model=List[JobResponse])
def list_jobs():
    """List all active job postings, newest first."""
    with get_db_session() as db:
        return job_service.list_active_jobs(db)


@router.delete("/{job_id}", response_model=MessageResponse)
def delete_job(job_id: str, claims: Optional[SessionClaims] = Depends(get_session_claims)):
    """Delete a job posting. Cascades to applications and saved jobs."""
    with get_db_session() as db:
        job_service.delete_job(db, claims, job_id)
    return MessageResponse(message="Job deleted successfully")


@router.get("/{job_id}/applicants", response_model=List[ApplicantResponse])
def list_applicants(job_id: str, claims: Optional[SessionClaims] = Depends(get_session_claims)):
    """Applicants for one of the caller's jobs, with student profile details."""
    with get_db_session() as db:
        return tracker_service.list_applicants(db, claims, job_id)
