from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from compass.database import get_db
from compass.models import User
from compass.core.auth import get_current_user
from compass.core.config import settings
from compass.schemas.recommendation import RecommendationsResponse, to_item
from compass.services import recommendation_engine
from compass.services.assessment_integration import (
    enhanced_from_cache,
    load_enhanced_profile,
    refresh_recommendations,
)
from compass.utils.timing import now_ms, log_elapsed

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.get("", response_model=RecommendationsResponse)
def list_recommendations(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The caller's cached recommendations, best first."""
    items = recommendation_engine.get_user_recommendations(db, user.id)
    return RecommendationsResponse(items=[to_item(rec) for rec in items])


@router.post("/generate", response_model=RecommendationsResponse)
def regenerate_recommendations(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Recompute recommendations from the enhanced profile and replace the cache."""
    t0 = now_ms()
    profile = load_enhanced_profile(db, user.id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found. Complete an assessment or PUT /api/profile first.",
        )

    items = refresh_recommendations(db, user.id, profile)
    if settings.DEBUG:
        log_elapsed(t0, f"user={user.id} POST /recommendations/generate", logger.debug)
    return RecommendationsResponse(items=[to_item(rec) for rec in items])


@router.get("/enhanced", response_model=RecommendationsResponse)
def enhanced_recommendations(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Cached recommendations re-scored against the caller's latest assessments."""
    profile = load_enhanced_profile(db, user.id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )

    items = enhanced_from_cache(db, user.id, profile)
    return RecommendationsResponse(
        items=[to_item(rec) for rec in items],
        assessment_type=profile.assessment_type.value if profile.assessment_type else None,
    )
