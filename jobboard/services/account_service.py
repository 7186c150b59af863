"""
Account Service - credential store and session issuance.

sign_up    - user row + role profile row in one transaction
sign_in    - credentials + claimed role -> signed session token
sign_out   - stateless, the client drops its token
profiles   - read/patch the caller's own student or employer profile

Every function takes an open session from `get_db_session()`; the caller's
`with` block is the transaction boundary.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobboard.core.auth import SessionClaims, hash_password, verify_password, issue_session_token
from jobboard.core.authorization import enforce, require_profile
from jobboard.core.config import get_settings
from jobboard.core.errors import (
    AuthenticationError, ConflictError, NotFoundError, ValidationError
)
from jobboard.db.postgres import fetch_one, utc_now
from jobboard.schemas.schemas import (
    SignUpRequest, SignUpResponse, TokenResponse, AccountResponse, UserRole,
    StudentProfileUpdate, StudentProfileResponse,
    EmployerProfileUpdate, EmployerProfileResponse
)

logger = logging.getLogger(__name__)

STUDENT_PROFILE_FIELDS = ["full_name", "university", "major", "graduation_year", "gpa", "bio", "resume_url"]
EMPLOYER_PROFILE_FIELDS = ["company_name", "industry", "company_size", "website", "description", "logo_url"]


def _new_id() -> str:
    return str(uuid.uuid4())


# ============================================================
# SIGN UP / SIGN IN / SIGN OUT
# ============================================================

def sign_up(db: Session, request: SignUpRequest) -> SignUpResponse:
    """
    Register a user together with the profile for its role.

    Students must supply full_name, employers company_name.
    """
    if request.role == UserRole.student and not request.full_name:
        raise ValidationError("Invalid data", {"full_name": "Required for student accounts"})
    if request.role == UserRole.employer and not request.company_name:
        raise ValidationError("Invalid data", {"company_name": "Required for employer accounts"})

    email = request.email.lower()
    existing = fetch_one(db, "SELECT id FROM users WHERE email = :email", {"email": email})
    if existing:
        raise ConflictError("Email already registered")

    user_id = _new_id()
    now = utc_now()
    try:
        db.execute(
            text("""
                INSERT INTO users (id, email, password_hash, role, created_at, updated_at)
                VALUES (:id, :email, :password_hash, :role, :now, :now)
            """),
            {
                "id": user_id,
                "email": email,
                "password_hash": hash_password(request.password),
                "role": request.role.value,
                "now": now
            }
        )
    except IntegrityError:
        # Lost a race with a concurrent sign-up for the same email
        raise ConflictError("Email already registered")

    if request.role == UserRole.student:
        db.execute(
            text("""
                INSERT INTO student_profiles (id, user_id, full_name, university, created_at, updated_at)
                VALUES (:id, :user_id, :full_name, :university, :now, :now)
            """),
            {
                "id": _new_id(), "user_id": user_id, "full_name": request.full_name,
                "university": request.university, "now": now
            }
        )
    else:
        db.execute(
            text("""
                INSERT INTO employer_profiles (id, user_id, company_name, industry, created_at, updated_at)
                VALUES (:id, :user_id, :company_name, :industry, :now, :now)
            """),
            {
                "id": _new_id(), "user_id": user_id, "company_name": request.company_name,
                "industry": request.industry, "now": now
            }
        )

    logger.info("Registered %s account %s", request.role.value, user_id)
    return SignUpResponse(user_id=user_id, email=email, role=request.role)


def _profile_id_for(db: Session, user_id: str, role: str) -> Optional[str]:
    table = "student_profiles" if role == UserRole.student.value else "employer_profiles"
    row = fetch_one(db, f"SELECT id FROM {table} WHERE user_id = :uid", {"uid": user_id})
    return row["id"] if row else None


def sign_in(db: Session, email: str, password: str, role: str) -> TokenResponse:
    """
    Exchange credentials for a session token.

    Unknown email, wrong role and wrong password all fail the same way.
    """
    role = role.value if isinstance(role, UserRole) else role
    user = fetch_one(
        db,
        "SELECT id, password_hash, role FROM users WHERE email = :email",
        {"email": email.lower()}
    )
    if not user or user["role"] != role or not verify_password(password, user["password_hash"]):
        logger.info("Rejected sign-in for %s as %s", email, role)
        raise AuthenticationError("Invalid credentials")

    claims = SessionClaims(
        user_id=user["id"],
        role=user["role"],
        profile_id=_profile_id_for(db, user["id"], user["role"])
    )
    token = issue_session_token(claims)
    return TokenResponse(
        access_token=token,
        expires_in=get_settings().jwt_expire_minutes * 60,
        user_id=claims.user_id,
        role=claims.role,
        profile_id=claims.profile_id
    )


def sign_out(claims: Optional[SessionClaims]) -> None:
    """Tokens are stateless; nothing to revoke server-side."""
    if claims is not None:
        logger.info("User %s signed out", claims.user_id)


def get_current_account(db: Session, claims: Optional[SessionClaims]) -> AccountResponse:
    """Account info for the caller (either role)."""
    if claims is None:
        raise AuthenticationError("Unauthorized")
    user = fetch_one(
        db,
        "SELECT id, email, role, created_at FROM users WHERE id = :id",
        {"id": claims.user_id}
    )
    if not user:
        raise AuthenticationError("Unauthorized")
    return AccountResponse(
        user_id=user["id"], email=user["email"], role=user["role"],
        profile_id=claims.profile_id, created_at=user["created_at"]
    )


# ============================================================
# PROFILES
# ============================================================

def _apply_update(db: Session, table: str, profile_id: str, fields: list, data) -> None:
    changes = data.model_dump(exclude_unset=True)
    updates = []
    params = {"id": profile_id, "now": utc_now()}

    for field in fields:
        if field in changes and changes[field] is not None:
            updates.append(f"{field} = :{field}")
            params[field] = changes[field]

    if not updates:
        raise ValidationError("No fields to update")

    db.execute(
        text(f"UPDATE {table} SET {', '.join(updates)}, updated_at = :now WHERE id = :id"),
        params
    )


def get_student_profile(db: Session, claims: Optional[SessionClaims]) -> StudentProfileResponse:
    enforce(claims, UserRole.student.value)
    row = fetch_one(
        db,
        f"SELECT id, user_id, {', '.join(STUDENT_PROFILE_FIELDS)} FROM student_profiles WHERE id = :id",
        {"id": require_profile(claims)}
    )
    if not row:
        raise NotFoundError("Profile not found")
    return StudentProfileResponse(**row)


def update_student_profile(
    db: Session, claims: Optional[SessionClaims], data: StudentProfileUpdate
) -> StudentProfileResponse:
    """Patch only the provided fields of the caller's student profile."""
    enforce(claims, UserRole.student.value)
    get_student_profile(db, claims)
    _apply_update(db, "student_profiles", claims.profile_id, STUDENT_PROFILE_FIELDS, data)
    return get_student_profile(db, claims)


def get_employer_profile(db: Session, claims: Optional[SessionClaims]) -> EmployerProfileResponse:
    enforce(claims, UserRole.employer.value)
    row = fetch_one(
        db,
        f"SELECT id, user_id, {', '.join(EMPLOYER_PROFILE_FIELDS)} FROM employer_profiles WHERE id = :id",
        {"id": require_profile(claims)}
    )
    if not row:
        raise NotFoundError("Profile not found")
    return EmployerProfileResponse(**row)


def update_employer_profile(
    db: Session, claims: Optional[SessionClaims], data: EmployerProfileUpdate
) -> EmployerProfileResponse:
    """Patch only the provided fields of the caller's employer profile."""
    enforce(claims, UserRole.employer.value)
    get_employer_profile(db, claims)
    _apply_update(db, "employer_profiles", claims.profile_id, EMPLOYER_PROFILE_FIELDS, data)
    return get_employer_profile(db, claims)


def set_resume_url(db: Session, profile_id: str, url: str) -> None:
    db.execute(
        text("UPDATE student_profiles SET resume_url = :url, updated_at = :now WHERE id = :id"),
        {"url": url, "id": profile_id, "now": utc_now()}
    )
