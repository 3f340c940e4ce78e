from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from compass.database import get_db
from compass.models import User
from compass.core.auth import get_current_user
from compass.schemas.ai import AIAssessmentRequest, AIAssessmentResponse
from compass.services.ai_analysis import AIConfigurationError, AIServiceError, run_assessment
from compass.services.profiles import get_profile, to_scoring_profile
from compass.services.scoring import UserProfile

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/assessment", response_model=AIAssessmentResponse, status_code=status.HTTP_201_CREATED)
def ai_assessment(
    payload: AIAssessmentRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Generate an AI consulting/organization/strategy assessment for the caller.

    Uses the profile in the request body, or the stored profile when omitted.
    """
    if payload.user_profile is not None:
        profile = UserProfile(**payload.user_profile.model_dump())
    else:
        stored = get_profile(db, user.id)
        if not stored:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Profile not found. Send user_profile or complete an assessment first.",
            )
        profile = to_scoring_profile(stored)

    try:
        return run_assessment(db, user.id, payload.analysis_type, profile, payload.specific_context)
    except AIConfigurationError as e:
        db.rollback()
        logger.error("AI assessment unavailable: %s", e)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="AI assessment is not configured")
    except AIServiceError as e:
        db.rollback()
        logger.warning("AI assessment failed for user %s: %s", user.id, e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="AI assessment failed")
