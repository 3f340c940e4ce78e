from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload
from typing import List
from datetime import datetime
import logging

from compass.database import get_db
from compass.models import User, Tool, ImplementationProgress, AssessmentType
from compass.core.auth import get_current_user
from compass.core.errors import internal_error
from compass.schemas.dashboard import (
    AssessmentSummary,
    DashboardOverview,
    ProgressDashboard,
    ProgressResponse,
    ProgressSummary,
    ProgressUpsert,
    ROIRequest,
    ROIResponse,
)
from compass.schemas.recommendation import to_item
from compass.services.assessment_integration import latest_assessment
from compass.services.dashboard import ROIInputs, calculate_roi, summarize_progress
from compass.services.recommendation_engine import get_user_recommendations
from compass.utils.instrumentation import log_event

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"])


def _progress_rows(db: Session, user: User) -> List[ImplementationProgress]:
    return (
        db.query(ImplementationProgress)
        .options(joinedload(ImplementationProgress.tool))
        .filter(ImplementationProgress.user_id == user.id)
        .order_by(ImplementationProgress.updated_at.desc())
        .all()
    )


def _progress_response(row: ImplementationProgress) -> ProgressResponse:
    response = ProgressResponse.model_validate(row)
    response.tool_name = row.tool.name if row.tool else None
    return response


@router.get("/dashboard/progress", response_model=ProgressDashboard)
def progress_dashboard(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    rows = _progress_rows(db, user)
    return ProgressDashboard(
        summary=ProgressSummary(**summarize_progress(rows)),
        items=[_progress_response(row) for row in rows],
    )


@router.post("/dashboard/roi", response_model=ROIResponse)
def roi_calculator(
    payload: ROIRequest,
    user: User = Depends(get_current_user),
):
    result = calculate_roi(ROIInputs(**payload.model_dump()))
    return ROIResponse(**result.as_dict())


@router.get("/dashboard/overview", response_model=DashboardOverview)
def dashboard_overview(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Latest assessment per type, current recommendations and progress in one call."""
    assessments = {}
    for assessment_type in AssessmentType:
        latest = latest_assessment(db, user.id, assessment_type)
        assessments[assessment_type.value] = (
            AssessmentSummary(
                id=latest.id,
                assessment_score=latest.assessment_score,
                created_at=latest.created_at,
            )
            if latest
            else None
        )

    return DashboardOverview(
        assessments=assessments,
        recommendations=[to_item(rec) for rec in get_user_recommendations(db, user.id)],
        progress=ProgressSummary(**summarize_progress(_progress_rows(db, user))),
    )


@router.post("/progress", response_model=ProgressResponse)
@router.put("/progress", response_model=ProgressResponse)
def upsert_progress(
    payload: ProgressUpsert,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create or update the caller's implementation progress for one tool."""
    tool = db.query(Tool).filter(Tool.id == payload.tool_id).first()
    if not tool:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tool not found")

    try:
        row = db.query(ImplementationProgress).filter(
            ImplementationProgress.user_id == user.id,
            ImplementationProgress.tool_id == payload.tool_id,
        ).first()

        previous_status = row.status if row else None
        if row:
            row.status = payload.status.value
            row.time_invested_minutes = payload.time_invested_minutes
            row.notes = payload.notes
            row.updated_at = datetime.utcnow()
        else:
            row = ImplementationProgress(
                user_id=user.id,
                tool_id=payload.tool_id,
                status=payload.status.value,
                time_invested_minutes=payload.time_invested_minutes,
                notes=payload.notes,
            )
            db.add(row)

        if previous_status != row.status:
            log_event(
                db,
                "implementation_status_changed",
                user_id=user.id,
                properties={
                    "tool_id": str(payload.tool_id),
                    "from": previous_status,
                    "to": row.status,
                },
            )
        db.commit()
        db.refresh(row)
        return _progress_response(row)
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Progress upsert failed for user %s tool %s", user.id, payload.tool_id)
        raise internal_error(e)
