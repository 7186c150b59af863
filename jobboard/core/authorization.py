"""
Authorization Gate - per-operation access rules.

`authorize` is a pure function; `enforce` turns a Deny into the matching
error. Every mutating or profile-scoped service calls one of them before
touching storage.
"""

from dataclasses import dataclass
from typing import Optional, Type

from jobboard.core.auth import SessionClaims
from jobboard.core.errors import AuthenticationError, AuthorizationError, JobBoardError

UNAUTHENTICATED = "unauthenticated"
WRONG_ROLE = "wrong role"
NOT_OWNER = "not owner"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(allowed=True)


def deny(reason: str) -> Decision:
    return Decision(allowed=False, reason=reason)


def authorize(
    claims: Optional[SessionClaims],
    required_role: str,
    resource_owner_profile_id: Optional[str] = None,
) -> Decision:
    """
    Rules, first failing one wins:
      1. no claims                         -> Deny("unauthenticated")
      2. claims.role != required_role      -> Deny("wrong role")
      3. owner given and != profile_id     -> Deny("not owner")
    """
    if claims is None:
        return deny(UNAUTHENTICATED)
    if claims.role != required_role:
        return deny(WRONG_ROLE)
    if resource_owner_profile_id is not None and resource_owner_profile_id != claims.profile_id:
        return deny(NOT_OWNER)
    return ALLOW


def enforce(
    claims: Optional[SessionClaims],
    required_role: str,
    resource_owner_profile_id: Optional[str] = None,
    not_owner_error: Type[JobBoardError] = AuthorizationError,
    not_owner_message: Optional[str] = None,
) -> SessionClaims:
    """Raise unless `authorize` allows; returns the claims for convenience."""
    decision = authorize(claims, required_role, resource_owner_profile_id)
    if decision:
        return claims
    if decision.reason == UNAUTHENTICATED:
        raise AuthenticationError("Unauthorized")
    if decision.reason == NOT_OWNER:
        raise not_owner_error(not_owner_message)
    raise AuthorizationError("Unauthorized")


def require_profile(claims: SessionClaims) -> str:
    """Profile-scoped operations need a profile id in the session."""
    if not claims.profile_id:
        raise AuthorizationError("No profile attached to this account")
    return claims.profile_id
