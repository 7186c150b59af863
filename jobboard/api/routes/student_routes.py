"""
Student Routes

POST /student/apply - Apply to a job
POST /student/save-job - Toggle a saved job
GET /student/applications - Get my applications (optionally ?job_id=)
GET /student/saved-jobs - Get my saved jobs
GET /student/profile - Get own profile
PATCH /student/profile - Update profile
POST /student/upload-resume - Upload resume (base64 JSON)
"""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from jobboard.db.postgres import get_db_session
from jobboard.core.auth import SessionClaims, get_session_claims
from jobboard.core.authorization import enforce
from jobboard.services import account_service, tracker_service
from jobboard.utils.file_upload import store_resume
from jobboard.schemas.schemas import (
    ApplyRequest, ApplyResponse, SaveJobRequest, SaveToggleResponse, ApplicationResponse,
    SavedJobResponse, StudentProfileResponse, StudentProfileUpdate, ProfileUpdateResponse,
    ResumeUpload, ResumeUploadResponse, UserRole
)

router = APIRouter(prefix="/student", tags=["Students"])


@router.post("/apply", response_model=ApplyResponse)
def apply_to_job(request: ApplyRequest, claims: Optional[SessionClaims] = Depends(get_session_claims)):
    """Apply to a job. Students only. Cannot apply twice to same job."""
    with get_db_session() as db:
        application = tracker_service.apply(db, claims, request.job_id, request.cover_letter)
    return ApplyResponse(application=application)


@router.post("/save-job", response_model=SaveToggleResponse)
def toggle_save_job(request: SaveJobRequest, claims: Optional[SessionClaims] = Depends(get_session_claims)):
    """Save the job if not saved yet, otherwise remove it from saved jobs."""
    with get_db_session() as db:
        return tracker_service.toggle_save(db, claims, request.job_id)


@router.get("/applications", response_model=List[ApplicationResponse])
def get_my_applications(
    job_id: Optional[str] = Query(None),
    claims: Optional[SessionClaims] = Depends(get_session_claims)
):
    """Get all job applications for current student."""
    enforce(claims, UserRole.student.value)
    with get_db_session() as db:
        return tracker_service.list_applications(db, claims, job_id)


@router.get("/saved-jobs", response_model=List[SavedJobResponse])
def get_saved_jobs(claims: Optional[SessionClaims] = Depends(get_session_claims)):
    with get_db_session() as db:
        return tracker_service.list_saved_jobs(db, claims)


@router.get("/profile", response_model=StudentProfileResponse)
def get_profile(claims: Optional[SessionClaims] = Depends(get_session_claims)):
    """Get current student's profile."""
    with get_db_session() as db:
        return account_service.get_student_profile(db, claims)


@router.patch("/profile", response_model=ProfileUpdateResponse)
def update_profile(
    data: StudentProfileUpdate,
    claims: Optional[SessionClaims] = Depends(get_session_claims)
):
    """Update student profile. Only provided fields are updated."""
    with get_db_session() as db:
        profile = account_service.update_student_profile(db, claims, data)
    return ProfileUpdateResponse(profile=profile)


@router.post("/upload-resume", response_model=ResumeUploadResponse)
def upload_resume(upload: ResumeUpload, claims: Optional[SessionClaims] = Depends(get_session_claims)):
    """
    Upload a resume.

    Body: {"file_name": "cv.pdf", "content": "<base64>"} (max 5MB)
    The stored file URL is saved on the profile and returned.
    """
    with get_db_session() as db:
        return store_resume(db, claims, upload)
