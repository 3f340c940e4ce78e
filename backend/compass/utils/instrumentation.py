"""
Server-side analytics event logging.

Events go to the analytics_events table (for dashboards and queries) and to
structured logs (for immediate visibility).
"""
import logging
from typing import Optional, Dict, Any
from uuid import UUID
from sqlalchemy.orm import Session
from sqlalchemy.exc import OperationalError, ProgrammingError, SQLAlchemyError
from compass.models import AnalyticsEvent
from compass.database import SessionLocal

logger = logging.getLogger(__name__)


def _emit(event_name: str, user_id: Optional[UUID], properties, request_id, session_id) -> None:
    logger.info(
        "event_logged",
        extra={
            "event_name": event_name,
            "user_id": str(user_id) if user_id else None,
            "request_id": request_id,
            "session_id": session_id,
            "properties": properties,
        },
    )


def log_event(
    db: Session,
    event_name: str,
    user_id: Optional[UUID] = None,
    properties: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
    session_id: Optional[str] = None,
) -> None:
    """
    Record an event inside the caller's transaction.

    Does NOT commit; flushes so the row is visible to the caller's session.
    Failures are logged and swallowed so the request path never breaks.
    """
    try:
        db.add(
            AnalyticsEvent(
                event_name=event_name,
                user_id=user_id,
                properties=properties,
                request_id=request_id,
                session_id=session_id,
            )
        )
        db.flush()
        _emit(event_name, user_id, properties, request_id, session_id)
    except SQLAlchemyError as e:
        logger.warning(
            "Failed to log event: event_name=%s, user_id=%s, error=%s",
            event_name,
            user_id,
            str(e),
            exc_info=True,
        )


def log_event_best_effort(
    event_name: str,
    user_id: Optional[UUID] = None,
    properties: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
    session_id: Optional[str] = None,
) -> None:
    """
    Record an event using a separate session that commits independently.

    Never raises; failures are logged as warnings.
    """
    db = None
    try:
        db = SessionLocal()
        db.add(
            AnalyticsEvent(
                event_name=event_name,
                user_id=user_id,
                properties=properties,
                request_id=request_id,
                session_id=session_id,
            )
        )
        db.commit()
        _emit(event_name, user_id, properties, request_id, session_id)
    except (OperationalError, ProgrammingError) as e:
        error_str = str(e).lower()
        if "does not exist" in error_str or "no such table" in error_str:
            logger.warning(
                "analytics_events table missing; run alembic upgrade head. "
                "Event logging disabled until migration is applied."
            )
        else:
            logger.warning(
                "Failed to log event (database error): event_name=%s, user_id=%s, error=%s",
                event_name,
                user_id,
                str(e),
                exc_info=True,
            )
        if db:
            db.rollback()
    except Exception as e:
        logger.warning(
            "Failed to log event: event_name=%s, user_id=%s, error=%s",
            event_name,
            user_id,
            str(e),
            exc_info=True,
        )
        if db:
            db.rollback()
    finally:
        if db:
            db.close()
