"""Firebase Auth bearer-token verification.

Event reads and submissions are public. Reports need a signed-in user,
event management needs the admin role, carried as the ``role`` custom
claim on the Firebase ID token.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from fastapi import Header, HTTPException

DEV_USER_ID = "dev-user"


@dataclass
class UserClaims:
    uid: str
    email: str | None = None
    name: str | None = None
    is_admin: bool = False

    @classmethod
    def from_token(cls, decoded: dict) -> "UserClaims":
        admin_role = os.environ.get("TRAVELPRINT_ADMIN_ROLE", "admin")
        return cls(
            uid=decoded["uid"],
            email=decoded.get("email"),
            name=decoded.get("name"),
            is_admin=decoded.get("role") == admin_role,
        )


def _auth_disabled() -> bool:
    return os.environ.get("TRAVELPRINT_AUTH_DISABLED") == "1"


def _bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing authorization header")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Invalid authorization header")
    return token


async def verify_firebase_token(
    authorization: str | None = Header(None, description="Bearer <Firebase ID token>"),
) -> UserClaims:
    """Resolve the caller from the Authorization header.

    With ``TRAVELPRINT_AUTH_DISABLED=1`` (local development) every request
    runs as a fixed admin user and no token is checked.
    """
    if _auth_disabled():
        return UserClaims(uid=DEV_USER_ID, email="dev@localhost", name="Dev User", is_admin=True)

    token = _bearer_token(authorization)
    try:
        from firebase_admin import auth as firebase_auth

        decoded = firebase_auth.verify_id_token(token)
    except Exception as exc:
        raise HTTPException(status_code=401, detail=f"Invalid token: {exc}") from exc
    return UserClaims.from_token(decoded)
