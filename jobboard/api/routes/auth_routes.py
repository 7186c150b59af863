"""
Authentication Routes

POST /auth/signup - Register a student or employer account
POST /auth/signin - Exchange credentials + role for a JWT
POST /auth/signout - Drop the session (client discards its token)
GET /auth/me - Current account info
"""

from typing import Optional
from fastapi import APIRouter, Depends

from jobboard.db.postgres import get_db_session
from jobboard.core.auth import SessionClaims, get_session_claims
from jobboard.services import account_service
from jobboard.schemas.schemas import (
    SignUpRequest, SignUpResponse, SignInRequest, TokenResponse, AccountResponse, MessageResponse
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/signup", response_model=SignUpResponse)
def signup(request: SignUpRequest):
    """
    Register a new account together with its profile.

    Students must send full_name, employers company_name.
    """
    with get_db_session() as db:
        return account_service.sign_up(db, request)


@router.post("/signin", response_model=TokenResponse)
def signin(request: SignInRequest):
    """
    Sign in and receive a JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    with get_db_session() as db:
        return account_service.sign_in(db, request.email, request.password, request.role)


@router.post("/signout", response_model=MessageResponse)
def signout(claims: Optional[SessionClaims] = Depends(get_session_claims)):
    account_service.sign_out(claims)
    return MessageResponse(message="Signed out")


@router.get("/me", response_model=AccountResponse)
def get_me(claims: Optional[SessionClaims] = Depends(get_session_claims)):
    """Get current authenticated account's info."""
    with get_db_session() as db:
        return account_service.get_current_account(db, claims)
