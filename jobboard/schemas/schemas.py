"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Request bodies reject unknown fields.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional, List, Union
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    employer = "employer"


class JobType(str, Enum):
    internship = "internship"
    entry_level = "entry-level"


class WorkMode(str, Enum):
    remote = "remote"
    onsite = "onsite"
    hybrid = "hybrid"


class ApplicationStatus(str, Enum):
    submitted = "submitted"
    reviewing = "reviewing"
    interview = "interview"
    rejected = "rejected"
    accepted = "accepted"


class RequestModel(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class CredentialsModel(BaseModel):
    """Auth request bodies: passwords are kept byte-for-byte, other text fields are trimmed."""
    model_config = ConfigDict(extra="forbid")

    @field_validator("*", mode="before")
    @classmethod
    def strip_text(cls, v, info):
        if info.field_name != "password" and isinstance(v, str):
            return v.strip()
        return v


# ============================================================
# AUTH SCHEMAS
# ============================================================

class SignUpRequest(CredentialsModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole
    # Student profile
    full_name: Optional[str] = Field(None, max_length=255)
    university: Optional[str] = Field(None, max_length=255)
    # Employer profile
    company_name: Optional[str] = Field(None, max_length=255)
    industry: Optional[str] = Field(None, max_length=255)

class SignUpResponse(BaseModel):
    success: bool = True
    user_id: str
    email: str
    role: UserRole

class SignInRequest(CredentialsModel):
    email: EmailStr
    password: str
    role: UserRole

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user_id: str
    role: UserRole
    profile_id: Optional[str] = None

class AccountResponse(BaseModel):
    user_id: str
    email: str
    role: UserRole
    profile_id: Optional[str] = None
    created_at: datetime


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class StudentProfileUpdate(RequestModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    university: Optional[str] = Field(None, max_length=255)
    major: Optional[str] = Field(None, max_length=255)
    graduation_year: Optional[int] = Field(None, ge=1900, le=2100)
    gpa: Optional[str] = Field(None, max_length=10)
    bio: Optional[str] = None
    resume_url: Optional[str] = Field(None, max_length=500)

class StudentProfileResponse(BaseModel):
    id: str
    user_id: str
    full_name: str
    university: Optional[str] = None
    major: Optional[str] = None
    graduation_year: Optional[int] = None
    gpa: Optional[str] = None
    bio: Optional[str] = None
    resume_url: Optional[str] = None

class EmployerProfileUpdate(RequestModel):
    company_name: Optional[str] = Field(None, min_length=1, max_length=255)
    industry: Optional[str] = Field(None, max_length=255)
    company_size: Optional[str] = Field(None, max_length=50)
    website: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = None
    logo_url: Optional[str] = Field(None, max_length=500)

class EmployerProfileResponse(BaseModel):
    id: str
    user_id: str
    company_name: str
    industry: Optional[str] = None
    company_size: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None

class ProfileUpdateResponse(BaseModel):
    success: bool = True
    profile: Union[StudentProfileResponse, EmployerProfileResponse]


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(RequestModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    requirements: Union[str, List[str]] = []
    location: str = Field(..., min_length=1, max_length=255)
    type: JobType
    work_mode: WorkMode
    salary: Optional[str] = Field(None, max_length=100)

    @field_validator("requirements")
    @classmethod
    def split_requirements(cls, v):
        """Accept textarea input (one per line) or a list; keep non-empty trimmed lines in order."""
        lines = v.splitlines() if isinstance(v, str) else v
        return [line.strip() for line in lines if line and line.strip()]

    @field_validator("salary")
    @classmethod
    def blank_salary_is_none(cls, v):
        return v or None

class EmployerSummary(BaseModel):
    id: str
    company_name: str
    logo_url: Optional[str] = None

class JobResponse(BaseModel):
    id: str
    employer_id: str
    title: str
    description: str
    requirements: List[str] = []
    location: str
    type: JobType
    work_mode: WorkMode
    salary: Optional[str] = None
    is_active: bool = True
    created_at: datetime
    employer: Optional[EmployerSummary] = None

class EmployerJobResponse(JobResponse):
    applicant_count: int = 0

class JobCreateResponse(BaseModel):
    success: bool = True
    job: JobResponse


# ============================================================
# APPLICATION / SAVED JOB SCHEMAS
# ============================================================

class ApplyRequest(RequestModel):
    job_id: str = Field(..., min_length=1)
    cover_letter: Optional[str] = None

class SaveJobRequest(RequestModel):
    job_id: str = Field(..., min_length=1)

class ApplicationResponse(BaseModel):
    id: str
    job_id: str
    student_id: str
    status: ApplicationStatus
    cover_letter: Optional[str] = None
    created_at: datetime
    job_title: Optional[str] = None
    company_name: Optional[str] = None

class ApplyResponse(BaseModel):
    success: bool = True
    application: ApplicationResponse

class ApplicantResponse(BaseModel):
    id: str  # student profile id
    application_id: str
    name: str
    email: Optional[str] = None
    university: str
    major: str
    gpa: str
    status: ApplicationStatus
    cover_letter: Optional[str] = None
    created_at: datetime

class SaveToggleResponse(BaseModel):
    success: bool = True
    saved: bool

class SavedJobResponse(BaseModel):
    id: str
    job_id: str
    student_id: str
    created_at: datetime
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    location: Optional[str] = None
    is_active: Optional[bool] = None


# ============================================================
# RESUME SCHEMAS
# ============================================================

class ResumeUpload(RequestModel):
    file_name: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1, description="Base64-encoded file bytes")

class ResumeUploadResponse(BaseModel):
    success: bool = True
    url: str


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
