from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional, Dict, Any, List
import logging

from compass.database import get_db
from compass.models import User, Assessment, AssessmentType
from compass.core.auth import get_current_user
from compass.core.errors import internal_error
from compass.schemas.assessment import (
    AssessmentResponse,
    PersonalProductivityPayload,
    BusinessTransformationPayload,
    CFOAssessmentPayload,
    StepValidationRequest,
    StepValidationResponse,
)
from compass.services import wizards
from compass.services.assessment_integration import latest_assessment, track_assessment_completion
from compass.services.profiles import get_profile, upsert_profile

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/assessments", tags=["assessments"])


def _parse_type(raw: str) -> AssessmentType:
    try:
        return AssessmentType(raw)
    except ValueError:
        allowed = ", ".join(t.value for t in AssessmentType)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown assessment type '{raw}'. Allowed: {allowed}",
        )


def _record_assessment(
    db: Session,
    user: User,
    assessment_type: AssessmentType,
    data: Dict[str, Any],
    score: Optional[float] = None,
    profile_fields: Optional[Dict[str, Any]] = None,
) -> Assessment:
    """Append the assessment (and upsert the derived profile) then refresh recommendations."""
    try:
        assessment = Assessment(
            user_id=user.id,
            assessment_type=assessment_type,
            assessment_data=data,
            assessment_score=score,
            status="completed",
        )
        db.add(assessment)
        if profile_fields is not None:
            upsert_profile(db, user.id, profile_fields)
        db.commit()
        db.refresh(assessment)
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Saving %s assessment failed for user %s", assessment_type.value, user.id)
        raise internal_error(e)

    logger.info(
        "Stored %s assessment %s for user %s (score=%s)",
        assessment_type.value,
        assessment.id,
        user.id,
        score,
    )
    track_assessment_completion(db, user.id, assessment_type, data)
    return assessment


@router.post("/personal_productivity", response_model=AssessmentResponse, status_code=status.HTTP_201_CREATED)
def submit_personal_productivity(
    payload: PersonalProductivityPayload,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    fields = wizards.profile_from_personal(payload, get_profile(db, user.id))
    return _record_assessment(
        db, user, AssessmentType.PERSONAL_PRODUCTIVITY, payload.model_dump(), profile_fields=fields
    )


@router.post("/business_transformation", response_model=AssessmentResponse, status_code=status.HTTP_201_CREATED)
def submit_business_transformation(
    payload: BusinessTransformationPayload,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    fields = wizards.profile_from_business(payload, get_profile(db, user.id))
    return _record_assessment(
        db, user, AssessmentType.BUSINESS_TRANSFORMATION, payload.model_dump(), profile_fields=fields
    )


@router.post("/cfo", response_model=AssessmentResponse, status_code=status.HTTP_201_CREATED)
def submit_cfo(
    payload: CFOAssessmentPayload,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    score = wizards.calculate_cfo_readiness_score(payload)
    return _record_assessment(db, user, AssessmentType.CFO, payload.model_dump(), score=score)


@router.post("/{assessment_type}/steps/{step}/validate", response_model=StepValidationResponse)
def validate_step(
    assessment_type: str,
    step: int,
    payload: StepValidationRequest,
    user: User = Depends(get_current_user),
):
    """Check a wizard step's answers before the client advances."""
    parsed = _parse_type(assessment_type)
    try:
        wizard_step = wizards.get_step(parsed, step)
        missing = wizards.missing_fields(parsed, step, payload.answers)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    total = wizards.total_steps(parsed)
    return StepValidationResponse(
        valid=not missing,
        step=step,
        total_steps=total,
        section=wizard_step.section,
        missing_fields=missing,
        progress=wizards.progress_percent(step, total),
    )


@router.get("/latest", response_model=AssessmentResponse)
def get_latest_assessment(
    assessment_type: str = Query(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    assessment = latest_assessment(db, user.id, _parse_type(assessment_type))
    if not assessment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No {assessment_type} assessment found",
        )
    return assessment


@router.get("", response_model=List[AssessmentResponse])
def list_assessments(
    limit: int = Query(50, ge=1, le=200),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return (
        db.query(Assessment)
        .filter(Assessment.user_id == user.id)
        .order_by(Assessment.created_at.desc())
        .limit(limit)
        .all()
    )
