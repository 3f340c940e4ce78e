"""
Helper functions for user management with Supabase auth.
"""
from sqlalchemy.orm import Session
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException
from compass.models import User
import logging

logger = logging.getLogger(__name__)


def get_or_create_user_by_auth_id(
    db: Session,
    auth_user_id: str,
    email: str = "",
    endpoint_path: str = "",
) -> User:
    """
    Get or create the local User row for a Supabase auth user (JWT "sub").

    Supabase Auth is the source of truth; our users row is keyed by auth_user_id.

    1. Found by auth_user_id -> return it (409 if the token email disagrees with the stored one).
    2. Legacy row found by email with no auth_user_id -> link it.
    3. Otherwise create a new user. An email claim is required to create.

    Idempotent under concurrent first requests: an IntegrityError on insert re-fetches.
    """
    normalized_email = email.lower().strip() if email else None

    user = db.query(User).filter(User.auth_user_id == auth_user_id).one_or_none()
    if user:
        normalized_db_email = user.email.lower().strip() if user.email else None
        if normalized_email and normalized_db_email and normalized_email != normalized_db_email:
            logger.error(
                f"[AUTH_EMAIL_MISMATCH] endpoint={endpoint_path}, "
                f"token_auth_user_id={auth_user_id}, token_email={normalized_email}, "
                f"db_email={normalized_db_email}, user_id={user.id}"
            )
            raise HTTPException(status_code=409, detail="email_mismatch_cannot_link")

        if normalized_email and not user.email:
            user.email = normalized_email
            db.commit()
            db.refresh(user)
        return user

    if normalized_email:
        existing_by_email = db.query(User).filter(
            func.lower(User.email) == normalized_email
        ).one_or_none()

        if existing_by_email and not existing_by_email.auth_user_id:
            existing_by_email.auth_user_id = auth_user_id
            try:
                db.commit()
                db.refresh(existing_by_email)
                logger.info(f"Linked legacy user {existing_by_email.id} to auth_user_id={auth_user_id}")
                return existing_by_email
            except IntegrityError:
                db.rollback()
                user = db.query(User).filter(User.auth_user_id == auth_user_id).one_or_none()
                if user:
                    return user
                raise

        if existing_by_email:
            logger.error(
                f"[AUTH_CONFLICT_409] endpoint={endpoint_path}, "
                f"token_auth_user_id={auth_user_id}, token_email={normalized_email}, "
                f"existing_user_id={existing_by_email.id}, existing_auth_user_id={existing_by_email.auth_user_id}"
            )
            raise HTTPException(status_code=409, detail="email_already_linked_to_different_auth_user")

    if not normalized_email:
        logger.error(
            f"[AUTH_CREATE_BLOCKED] endpoint={endpoint_path}, "
            f"token_auth_user_id={auth_user_id}, reason=email_claim_missing"
        )
        raise HTTPException(status_code=400, detail="email_claim_missing_cannot_create_user")

    new_user = User(auth_user_id=auth_user_id, email=normalized_email)
    db.add(new_user)
    try:
        db.commit()
        db.refresh(new_user)
        logger.info(f"Created new user for auth_user_id={auth_user_id}, local_id={new_user.id}")
        return new_user
    except IntegrityError:
        db.rollback()
        user = db.query(User).filter(User.auth_user_id == auth_user_id).one_or_none()
        if user:
            return user
        raise
