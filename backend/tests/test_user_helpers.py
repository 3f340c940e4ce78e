"""Tests for user helper functions."""
import pytest
from uuid import uuid4
from sqlalchemy.orm import Session
from sqlalchemy import func
from fastapi import HTTPException
from compass.models import User
from compass.core.user_helpers import get_or_create_user_by_auth_id


def test_get_or_create_user_by_auth_id_creates_user(db: Session):
    """A fresh auth id with an email claim creates a normalized user row."""
    auth_user_id = str(uuid4())

    user = get_or_create_user_by_auth_id(
        db=db,
        auth_user_id=auth_user_id,
        email="  Fresh@Example.com ",
        endpoint_path="GET /api/me",
    )

    assert user is not None
    assert user.auth_user_id == auth_user_id
    assert user.email == "fresh@example.com"

    db.refresh(user)
    assert user.auth_user_id == auth_user_id


def test_get_or_create_user_by_auth_id_returns_existing_user(db: Session):
    """Test that get_or_create_user_by_auth_id returns existing user."""
    auth_user_id = str(uuid4())
    email = "test@example.com"

    user1 = get_or_create_user_by_auth_id(db=db, auth_user_id=auth_user_id, email=email)
    user2 = get_or_create_user_by_auth_id(db=db, auth_user_id=auth_user_id, email=email)

    # Should be the same user
    assert user1.id == user2.id
    assert db.query(User).count() == 1


def test_existing_user_without_email_claim_is_returned(db: Session):
    auth_user_id = str(uuid4())
    user1 = get_or_create_user_by_auth_id(db=db, auth_user_id=auth_user_id, email="quiet@example.com")

    user2 = get_or_create_user_by_auth_id(db=db, auth_user_id=auth_user_id, email="")

    assert user2.id == user1.id
    assert user2.email == "quiet@example.com"


def test_missing_stored_email_is_backfilled(db: Session):
    auth_user_id = str(uuid4())
    user = User(auth_user_id=auth_user_id)
    db.add(user)
    db.commit()

    returned = get_or_create_user_by_auth_id(db=db, auth_user_id=auth_user_id, email="Backfill@Example.com")

    assert returned.id == user.id
    assert returned.email == "backfill@example.com"


def test_email_mismatch_for_same_auth_id_raises_409(db: Session):
    """The token email must agree with the email stored for that auth id."""
    auth_user_id = str(uuid4())
    get_or_create_user_by_auth_id(db=db, auth_user_id=auth_user_id, email="old@example.com")

    with pytest.raises(HTTPException) as exc_info:
        get_or_create_user_by_auth_id(db=db, auth_user_id=auth_user_id, email="new@example.com")

    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == "email_mismatch_cannot_link"


def test_legacy_user_linking(db: Session):
    """Test that legacy user (email exists but no auth_user_id) gets linked."""
    email = "legacy@example.com"
    auth_user_id = str(uuid4())

    # Create a legacy user (no auth_user_id)
    legacy_user = User(email=email)
    db.add(legacy_user)
    db.commit()
    db.refresh(legacy_user)

    assert legacy_user.auth_user_id is None

    linked_user = get_or_create_user_by_auth_id(
        db=db,
        auth_user_id=auth_user_id,
        email="LEGACY@example.com",
    )

    assert linked_user.id == legacy_user.id
    assert linked_user.auth_user_id == auth_user_id
    users_with_email = db.query(User).filter(func.lower(User.email) == email).all()
    assert len(users_with_email) == 1


def test_email_owned_by_another_auth_user_raises_409(db: Session):
    """An email already linked to a different auth id is never relinked."""
    email = "taken@example.com"
    original_auth_id = str(uuid4())
    user1 = get_or_create_user_by_auth_id(db=db, auth_user_id=original_auth_id, email=email)

    with pytest.raises(HTTPException) as exc_info:
        get_or_create_user_by_auth_id(db=db, auth_user_id=str(uuid4()), email=email)

    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == "email_already_linked_to_different_auth_user"

    # Verify original user is unchanged
    db.refresh(user1)
    assert user1.auth_user_id == original_auth_id


def test_new_user_without_email_claim_raises_400(db: Session):
    with pytest.raises(HTTPException) as exc_info:
        get_or_create_user_by_auth_id(db=db, auth_user_id=str(uuid4()), email="")

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "email_claim_missing_cannot_create_user"
    assert db.query(User).count() == 0
