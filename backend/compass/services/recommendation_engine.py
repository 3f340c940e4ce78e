"""
Recommendation store: score the active catalog for a user and cache the top N.

Recommendations are a disposable derived cache. Every run replaces the user's
rows wholesale (delete-then-insert in one transaction); there is no history.
Concurrent runs for the same user race and the last commit wins.
"""
from typing import List, Optional
from uuid import UUID
from dataclasses import dataclass
import logging

from sqlalchemy.orm import Session, joinedload

from compass.core.config import settings
from compass.models import Tool, ToolRecommendationRecord, ToolStatus
from compass.services.scoring import (
    UserProfile,
    calculate_relevance_score,
    generate_recommendation_reason,
)
from compass.utils.timing import now_ms, log_elapsed

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"
ACTIVE = "active"


@dataclass
class ToolRecommendation:
    tool: Tool
    score: float
    reason: str
    category: str


def _category_name(tool: Tool) -> str:
    return tool.category.name if tool.category else UNCATEGORIZED


def _load_active_tools(db: Session) -> List[Tool]:
    # Stable ordering so equal scores always rank the same way
    return (
        db.query(Tool)
        .options(joinedload(Tool.category))
        .filter(Tool.status == ToolStatus.ACTIVE.value)
        .order_by(Tool.name.asc(), Tool.id.asc())
        .all()
    )


def rank_tools(
    tools: List[Tool],
    profile: UserProfile,
    limit: Optional[int] = None,
    min_score: Optional[float] = None,
) -> List[ToolRecommendation]:
    """Score, filter (strictly above min_score), sort descending and take the top `limit`."""
    limit = settings.RECOMMENDATION_LIMIT if limit is None else limit
    min_score = settings.MIN_RELEVANCE_SCORE if min_score is None else min_score

    scored = []
    for tool in tools:
        score = calculate_relevance_score(tool, profile)
        scored.append(
            ToolRecommendation(
                tool=tool,
                score=score,
                reason=generate_recommendation_reason(tool, profile, score),
                category=_category_name(tool),
            )
        )

    relevant = [rec for rec in scored if rec.score > min_score]
    relevant.sort(key=lambda rec: rec.score, reverse=True)
    return relevant[:limit]


def replace_user_recommendations(
    db: Session,
    user_id: UUID,
    recommendations: List[ToolRecommendation],
) -> None:
    """
    Replace all of the user's cached recommendations with `recommendations`.

    Deletes then inserts inside a single commit; the caller handles rollback.
    """
    db.query(ToolRecommendationRecord).filter(
        ToolRecommendationRecord.user_id == user_id
    ).delete(synchronize_session=False)

    db.add_all(
        ToolRecommendationRecord(
            user_id=user_id,
            tool_id=rec.tool.id,
            recommendation_score=rec.score,
            reason=rec.reason,
            status=ACTIVE,
        )
        for rec in recommendations
    )
    db.commit()


def generate_recommendations(
    db: Session,
    user_id: UUID,
    profile: UserProfile,
    limit: Optional[int] = None,
) -> List[ToolRecommendation]:
    """
    Score every active tool for `profile`, persist the top N for `user_id`, return them.

    Fail-open: any error is logged and an empty list is returned.
    """
    t0 = now_ms()
    try:
        tools = _load_active_tools(db)
        logger.info("Generating recommendations for user %s over %d active tools", user_id, len(tools))

        recommendations = rank_tools(tools, profile, limit=limit)
        replace_user_recommendations(db, user_id, recommendations)

        logger.info(
            "Stored %d recommendations for user %s: %s",
            len(recommendations),
            user_id,
            [(rec.tool.name, round(rec.score, 2)) for rec in recommendations],
        )
        if settings.DEBUG:
            log_elapsed(t0, f"user={user_id} generate_recommendations", logger.debug)
        return recommendations
    except Exception:
        db.rollback()
        logger.exception("Error generating recommendations for user %s", user_id)
        return []


def get_user_recommendations(db: Session, user_id: UUID) -> List[ToolRecommendation]:
    """Read the user's current cached recommendations, best first. Fail-open to []."""
    try:
        rows = (
            db.query(ToolRecommendationRecord)
            .join(Tool, ToolRecommendationRecord.tool_id == Tool.id)
            .options(joinedload(ToolRecommendationRecord.tool).joinedload(Tool.category))
            .filter(
                ToolRecommendationRecord.user_id == user_id,
                ToolRecommendationRecord.status == ACTIVE,
            )
            .order_by(ToolRecommendationRecord.recommendation_score.desc(), Tool.name.asc())
            .all()
        )
        return [
            ToolRecommendation(
                tool=row.tool,
                score=row.recommendation_score,
                reason=row.reason or "",
                category=_category_name(row.tool),
            )
            for row in rows
        ]
    except Exception:
        logger.exception("Error fetching recommendations for user %s", user_id)
        return []
