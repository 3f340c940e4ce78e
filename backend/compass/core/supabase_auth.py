"""
Supabase token claims and the admin allowlist gate.
"""
from typing import Dict, Any

from fastapi import HTTPException, status, Request

from compass.core.auth import extract_bearer_token, decode_supabase_jwt
from compass.core.config import settings

import logging


logger = logging.getLogger(__name__)


async def get_supabase_user(request: Request) -> Dict[str, Any]:
    """
    FastAPI dependency returning the verified token claims as a plain dict.

    Does not touch the local users table; used by admin routes.
    """
    token = extract_bearer_token(request)
    payload = decode_supabase_jwt(token)

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing subject (sub)",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {
        "id": user_id,
        "email": payload.get("email", "") or "",
        "auth_user_id": user_id,
        "claims": payload,
    }


def require_admin(user: Dict[str, Any]) -> Dict[str, Any]:
    """
    Check if user email is in admin allowlist.
    """
    email = user.get("email", "").lower().strip()
    if not email:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User email not available",
        )

    allowlist = settings.admin_emails
    if not allowlist:
        logger.warning("ADMIN_EMAIL_ALLOWLIST not configured - denying all admin access")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access not configured",
        )

    if email not in allowlist:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )

    return user


async def get_admin_user(request: Request) -> Dict[str, Any]:
    user = await get_supabase_user(request)
    return require_admin(user)
