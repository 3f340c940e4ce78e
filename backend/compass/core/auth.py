"""
Authentication helpers for verifying Supabase JWTs and resolving the current app User.
"""

from __future__ import annotations

import logging
from typing import Optional, Dict, Any

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from compass.core.config import settings
from compass.database import get_db
from compass.models import User
from compass.core.user_helpers import get_or_create_user_by_auth_id

logger = logging.getLogger(__name__)


def _unauthorized(detail: str = "Not authenticated") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def extract_bearer_token(request: Request) -> str:
    """
    Extract 'Bearer <token>' from Authorization header.
    """
    auth = request.headers.get("Authorization")
    if not auth:
        raise _unauthorized("Missing Authorization header")

    parts = auth.split()
    if len(parts) != 2:
        raise _unauthorized("Invalid Authorization header format. Expected 'Bearer <token>'")

    scheme, token = parts
    if scheme.lower() != "bearer":
        raise _unauthorized("Invalid auth scheme. Expected 'Bearer'")

    return token


def decode_supabase_jwt(token: str) -> Dict[str, Any]:
    """
    Decode and validate a Supabase access token.

    HS256 with SUPABASE_JWT_SECRET; validates issuer and audience.
    """
    try:
        settings.require_supabase()
    except RuntimeError as e:
        logger.error(f"Supabase configuration missing: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Supabase environment variables not configured. Authentication is not available.",
        )

    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=["HS256"],
            audience=settings.SUPABASE_JWT_AUD,
            issuer=settings.SUPABASE_JWT_ISS,
        )
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized("Token validation failed")


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
) -> User:
    """
    FastAPI dependency: returns the current authenticated User (SQLAlchemy object).

    - Reads Authorization: Bearer <token>
    - Verifies JWT
    - Upserts into local users table via get_or_create_user_by_auth_id()
    """
    token = extract_bearer_token(request)
    payload = decode_supabase_jwt(token)

    auth_user_id = payload.get("sub")
    if not auth_user_id:
        raise _unauthorized("Token missing subject (sub)")

    email = payload.get("email") or ""
    endpoint = f"{request.method} {request.url.path}"

    try:
        return get_or_create_user_by_auth_id(
            db=db,
            auth_user_id=str(auth_user_id),
            email=str(email),
            endpoint_path=endpoint,
        )
    except HTTPException as e:
        if e.status_code == 409:
            logger.error(
                f"[409_AUTH_CONFLICT] endpoint={endpoint}, "
                f"auth_user_id={auth_user_id}, auth_email={email}, detail={e.detail}"
            )
        raise


def get_optional_user(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    """Optional user dependency - returns None if not authenticated."""
    if not request.headers.get("Authorization"):
        return None
    try:
        return get_current_user(request, db)
    except HTTPException:
        return None
