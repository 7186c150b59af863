"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT session token creation/verification
- SessionClaims: the verified {user_id, role, profile_id} of a caller
- FastAPI dependency that extracts claims from the Bearer header
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from jobboard.core.config import get_settings

settings = get_settings()

# Password hashing
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds
)

# Bearer token extractor; a missing header is not an error here,
# the Authorization Gate decides what an anonymous caller may do
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class SessionClaims:
    user_id: str
    role: str
    profile_id: Optional[str] = None


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def issue_session_token(claims: SessionClaims, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a session token carrying {sub, role, profile_id}."""
    return create_access_token(
        {"sub": claims.user_id, "role": claims.role, "profile_id": claims.profile_id},
        expires_delta=expires_delta
    )


def verify_token(token: Optional[str]) -> Optional[SessionClaims]:
    """
    Verify a session token.

    Returns the claims, or None when the token is missing, malformed,
    expired, signed with another key, or lacks subject/role.
    """
    if not token:
        return None
    payload = decode_token(token)
    if not payload:
        return None
    user_id = payload.get("sub")
    role = payload.get("role")
    if not user_id or not role:
        return None
    return SessionClaims(user_id=str(user_id), role=role, profile_id=payload.get("profile_id"))


async def get_session_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Optional[SessionClaims]:
    """
    FastAPI dependency - claims of the caller, or None if anonymous.

    Usage:
        @router.post("/apply")
        async def route(claims: Optional[SessionClaims] = Depends(get_session_claims)):
            apply(db, claims, ...)
    """
    if credentials is None:
        return None
    return verify_token(credentials.credentials)
