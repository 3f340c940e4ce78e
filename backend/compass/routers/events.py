"""
Client-side analytics events.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session
from typing import List
import uuid as uuid_lib
import logging

from compass.database import get_db
from compass.core.auth import get_current_user, get_optional_user
from compass.core.config import settings
from compass.models import User, AnalyticsEvent
from compass.schemas.event import TrackEventRequest, EventResponse
from compass.utils.instrumentation import log_event_best_effort

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/events", tags=["events"])


@router.post("/track", status_code=status.HTTP_204_NO_CONTENT)
def track_event(
    payload: TrackEventRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Record a client event. Authentication is optional; when present the
    event is attributed to the caller. Never fails the request.
    """
    user = get_optional_user(request, db)
    log_event_best_effort(
        event_name=payload.event_name,
        user_id=user.id if user else None,
        properties=payload.properties,
        request_id=request.headers.get("x-request-id") or str(uuid_lib.uuid4()),
        session_id=payload.session_id,
    )
    return None


@router.get("/recent", response_model=List[EventResponse])
def recent_events(
    limit: int = Query(20, ge=1, le=200),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The caller's most recent events (dev only)."""
    if settings.ENVIRONMENT == "production":
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

    return (
        db.query(AnalyticsEvent)
        .filter(AnalyticsEvent.user_id == user.id)
        .order_by(AnalyticsEvent.created_at.desc())
        .limit(limit)
        .all()
    )
