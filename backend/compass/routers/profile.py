from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from compass.database import get_db
from compass.models import User
from compass.schemas.profile import ProfilePayload, ProfileResponse
from compass.core.auth import get_current_user
from compass.core.errors import internal_error
from compass.services.profiles import get_profile, upsert_profile
from compass.services.assessment_integration import refresh_recommendations
from compass.utils.instrumentation import log_event_best_effort

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ProfileResponse)
def read_profile(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    profile = get_profile(db, user.id)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return profile


@router.put("", response_model=ProfileResponse)
def update_profile(
    payload: ProfilePayload,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create or update the caller's profile, then regenerate their recommendations.
    """
    try:
        profile = upsert_profile(db, user.id, payload.model_dump())
        db.commit()
        db.refresh(profile)
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.exception("PUT /api/profile failed for user %s", user.id)
        raise internal_error(e)

    recommendations = refresh_recommendations(db, user.id)

    log_event_best_effort(
        event_name="profile_updated",
        user_id=user.id,
        properties={
            "role": profile.role,
            "industry": profile.industry,
            "recommendation_count": len(recommendations),
        },
    )
    return profile
