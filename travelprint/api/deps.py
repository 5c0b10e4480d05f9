"""FastAPI dependency injection wiring."""

from __future__ import annotations

from fastapi import Depends, HTTPException

from travelprint.api.auth import UserClaims, verify_firebase_token
from travelprint.persistence.repositories.event_repo import EventRepository
from travelprint.persistence.repositories.submission_repo import SubmissionRepository


# ------------------------------------------------------------------
# Current user
# ------------------------------------------------------------------


def get_current_user(
    claims: UserClaims = Depends(verify_firebase_token),
) -> UserClaims:
    """Return the authenticated caller with its admin capability."""
    return claims


def require_admin(
    user: UserClaims = Depends(get_current_user),
) -> UserClaims:
    """Reject callers without the admin capability."""
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin role required")
    return user


# ------------------------------------------------------------------
# Repositories (stateless, one instance per request)
# ------------------------------------------------------------------


def get_event_repo() -> EventRepository:
    return EventRepository()


def get_submission_repo() -> SubmissionRepository:
    return SubmissionRepository()
