"""
Employer Routes

GET /employer/profile - Get own profile
PATCH /employer/profile - Update profile
GET /employer/jobs - Get employer's own jobs with applicant counts
"""

from fastapi import APIRouter, Depends
from typing import List, Optional

from jobboard.db.postgres import get_db_session
from jobboard.core.auth import SessionClaims, get_session_claims
from jobboard.services import account_service, job_service
from jobboard.schemas.schemas import (
    EmployerProfileResponse, EmployerProfileUpdate, ProfileUpdateResponse, EmployerJobResponse
)

router = APIRouter(prefix="/employer", tags=["Employers"])


@router.get("/profile", response_model=EmployerProfileResponse)
def get_profile(claims: Optional[SessionClaims] = Depends(get_session_claims)):
    """Get current employer's profile."""
    with get_db_session() as db:
        return account_service.get_employer_profile(db, claims)


@router.patch("/profile", response_model=ProfileUpdateResponse)
def update_profile(
    data: EmployerProfileUpdate,
    claims: Optional[SessionClaims] = Depends(get_session_claims)
):
    """Update employer profile."""
    with get_db_session() as db:
        profile = account_service.update_employer_profile(db, claims, data)
    return ProfileUpdateResponse(profile=profile)


@router.get("/jobs", response_model=List[EmployerJobResponse])
def get_employer_jobs(claims: Optional[SessionClaims] = Depends(get_session_claims)):
    """Get all jobs posted by this employer, including inactive ones."""
    with get_db_session() as db:
        return job_service.list_employer_jobs(db, claims)
