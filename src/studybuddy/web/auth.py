"""Identity dependencies for the Web API.

Tokens are issued by the authentication service; this module only
verifies them. A token is read from the auth cookie (default "token")
or from an "Authorization: Bearer" header and must carry:
- id: numeric user id
- userType (or role): "student" or "tutor"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import jwt
import structlog
from fastapi import Depends, HTTPException, Request, status

from studybuddy.config.app_config import load_app_config

logger = structlog.get_logger(__name__)

Role = Literal["student", "tutor"]
ROLES = ("student", "tutor")


@dataclass(frozen=True)
class Principal:
    """Authenticated caller."""

    id: int
    role: Role

    @property
    def is_tutor(self) -> bool:
        return self.role == "tutor"


def _extract_token(request: Request, cookie_name: str) -> str | None:
    """Get the raw token from cookie or bearer header."""
    token = request.cookies.get(cookie_name)
    if token:
        return token

    authorization = request.headers.get("Authorization", "")
    if authorization.startswith("Bearer "):
        return authorization.split(" ", 1)[1].strip() or None

    return None


def decode_principal(token: str, secret: str, algorithm: str = "HS256") -> Principal:
    """Verify a token and build the principal it names.

    Raises:
        HTTPException: 401 if the token is invalid or lacks id/role claims
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.PyJWTError as e:
        logger.info("auth.invalid_token", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token.",
        )

    user_id = payload.get("id")
    role = payload.get("userType", payload.get("role"))

    if isinstance(user_id, bool) or not isinstance(user_id, int) or role not in ROLES:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token.",
        )

    return Principal(id=user_id, role=role)


async def get_principal(request: Request) -> Principal:
    """FastAPI dependency: the authenticated caller."""
    auth = load_app_config().auth

    token = _extract_token(request, auth.cookie_name)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied. No token provided.",
        )

    secret = auth.get_secret()
    if not secret:
        logger.error("auth.secret_missing", env=auth.secret_env)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token.",
        )

    return decode_principal(token, secret, auth.algorithm)


async def require_tutor(principal: Principal = Depends(get_principal)) -> Principal:
    """FastAPI dependency: the authenticated caller, who must be a tutor."""
    if not principal.is_tutor:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Tutors only.",
        )
    return principal
