"""
Assessment-aware recommendations.

Builds an EnhancedUserProfile from the stored profile plus the latest
assessments, then layers assessment-specific adjustments on top of the
persisted base recommendations.
"""
from typing import List, Optional, Dict, Any
from uuid import UUID
from dataclasses import dataclass
import logging

from sqlalchemy.orm import Session

from compass.models import Profile, Assessment, AssessmentType
from compass.services.recommendation_engine import (
    ToolRecommendation,
    generate_recommendations,
    get_user_recommendations,
)
from compass.services.scoring import (
    EnhancedUserProfile,
    adjust_score,
    generate_enhanced_reason,
)
from compass.utils.instrumentation import log_event

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "individual"
DEFAULT_INDUSTRY = "technology"
DEFAULT_COMPANY_SIZE = "medium"
DEFAULT_AI_EXPERIENCE = "never"
DEFAULT_TIME_AVAILABILITY = "3-5 hours/week"
DEFAULT_TIMELINE = "2-3 months"
DEFAULT_READINESS = 3


@dataclass
class EnhancedRecommendation:
    tool: Any
    score: float
    base_score: float
    reason: str
    category: str


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = (data or {}).get(name)
    return value if isinstance(value, dict) else {}


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v not in (None, "")]


def _int_or(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def latest_assessment(db: Session, user_id: UUID, assessment_type: AssessmentType) -> Optional[Assessment]:
    return (
        db.query(Assessment)
        .filter(
            Assessment.user_id == user_id,
            Assessment.assessment_type == assessment_type,
        )
        .order_by(Assessment.created_at.desc())
        .first()
    )


def _apply_personal(profile: EnhancedUserProfile, data: Dict[str, Any]) -> None:
    implementation = _section(data, "implementation")
    profile.pain_points = _str_list(_section(data, "productivity_challenges").get("insight_needs"))
    profile.current_tools = _str_list(_section(data, "current_ai_usage").get("tools_used"))
    profile.budget_range = implementation.get("budget") or ""
    profile.implementation_readiness = _int_or(implementation.get("comfort_level"), DEFAULT_READINESS)


def _apply_business(profile: EnhancedUserProfile, data: Dict[str, Any]) -> None:
    readiness = _section(data, "organizational_readiness")
    profile.pain_points = _str_list(_section(data, "process_analysis").get("manual_effort_areas"))
    profile.current_tools = _str_list(_section(data, "current_state").get("ai_tools_in_use"))
    profile.budget_range = readiness.get("budget_allocation") or ""
    profile.implementation_readiness = _int_or(readiness.get("change_management"), DEFAULT_READINESS)


def _apply_cfo(profile: EnhancedUserProfile, data: Dict[str, Any]) -> None:
    company = _section(data, "company_profile")
    stack = _section(data, "current_stack")
    profile.industry = company.get("industry") or profile.industry
    profile.company_size = company.get("employees") or profile.company_size
    profile.pain_points = _str_list(_section(data, "pain_points").get("manual_processes"))
    profile.current_tools = [
        str(stack[key]) for key in ("erp", "bi", "spreadsheets") if stack.get(key)
    ]


def load_enhanced_profile(db: Session, user_id: UUID) -> Optional[EnhancedUserProfile]:
    """
    Stored profile merged with the user's latest assessments.

    The newer of the personal/business assessments fills in the assessment
    fields; a CFO assessment, when present, takes over.
    """
    profile_row = db.query(Profile).filter(Profile.user_id == user_id).first()
    if not profile_row:
        return None

    profile = EnhancedUserProfile(
        role=profile_row.role or DEFAULT_ROLE,
        industry=profile_row.industry or DEFAULT_INDUSTRY,
        company_size=profile_row.company_size or DEFAULT_COMPANY_SIZE,
        ai_experience=profile_row.ai_experience or DEFAULT_AI_EXPERIENCE,
        goals=list(profile_row.goals or []),
        time_availability=profile_row.time_availability or DEFAULT_TIME_AVAILABILITY,
        implementation_timeline=profile_row.implementation_timeline or DEFAULT_TIMELINE,
    )

    candidates = [
        a for a in (
            latest_assessment(db, user_id, AssessmentType.PERSONAL_PRODUCTIVITY),
            latest_assessment(db, user_id, AssessmentType.BUSINESS_TRANSFORMATION),
        )
        if a is not None
    ]
    if candidates:
        latest = max(candidates, key=lambda a: a.created_at)
        profile.assessment_type = latest.assessment_type
        profile.assessment_data = latest.assessment_data
        profile.implementation_readiness = DEFAULT_READINESS
        if latest.assessment_type == AssessmentType.PERSONAL_PRODUCTIVITY:
            _apply_personal(profile, latest.assessment_data or {})
        else:
            _apply_business(profile, latest.assessment_data or {})

    cfo = latest_assessment(db, user_id, AssessmentType.CFO)
    if cfo is not None:
        profile.assessment_type = AssessmentType.CFO
        profile.assessment_data = cfo.assessment_data
        _apply_cfo(profile, cfo.assessment_data or {})

    return profile


def refresh_recommendations(
    db: Session,
    user_id: UUID,
    profile: Optional[EnhancedUserProfile] = None,
) -> List[ToolRecommendation]:
    """
    Rebuild the user's cached recommendations from their enhanced profile.

    The only path that rewrites the cache. Fail-open like generate_recommendations.
    """
    if profile is None:
        try:
            profile = load_enhanced_profile(db, user_id)
        except Exception:
            logger.exception("Error loading enhanced profile for user %s", user_id)
            return []
    if profile is None:
        logger.info("No profile for user %s; skipping recommendation refresh", user_id)
        return []
    return generate_recommendations(db, user_id, profile)


def enhance(recommendations: List[ToolRecommendation], profile: EnhancedUserProfile) -> List[EnhancedRecommendation]:
    """Re-score base recommendations for the profile's assessments, best first."""
    enhanced = [
        EnhancedRecommendation(
            tool=rec.tool,
            score=adjust_score(rec.score, rec.tool, rec.category, profile),
            base_score=rec.score,
            reason=generate_enhanced_reason(rec.reason, rec.tool, profile),
            category=rec.category,
        )
        for rec in recommendations
    ]
    enhanced.sort(key=lambda rec: rec.score, reverse=True)
    return enhanced


def generate_enhanced_recommendations(
    db: Session,
    user_id: UUID,
    profile: Optional[EnhancedUserProfile] = None,
) -> List[EnhancedRecommendation]:
    """
    Refresh the user's base recommendations, then return them re-scored for
    their assessments. The adjusted scores are not stored.
    """
    try:
        if profile is None:
            profile = load_enhanced_profile(db, user_id)
        if profile is None:
            logger.info("No profile for user %s; skipping enhanced recommendations", user_id)
            return []

        enhanced = enhance(refresh_recommendations(db, user_id, profile), profile)
        logger.info(
            "Enhanced %d recommendations for user %s (assessment_type=%s)",
            len(enhanced),
            user_id,
            profile.assessment_type.value if profile.assessment_type else None,
        )
        return enhanced
    except Exception:
        logger.exception("Error generating enhanced recommendations for user %s", user_id)
        return []


def enhanced_from_cache(db: Session, user_id: UUID, profile: EnhancedUserProfile) -> List[EnhancedRecommendation]:
    """
    Adjust the user's cached recommendations without rewriting them.

    An empty cache is filled first through refresh_recommendations.
    """
    try:
        cached = get_user_recommendations(db, user_id)
        if not cached:
            cached = refresh_recommendations(db, user_id, profile)
        return enhance(cached, profile)
    except Exception:
        logger.exception("Error reading enhanced recommendations for user %s", user_id)
        return []


def calculate_data_quality(data: Optional[Dict[str, Any]]) -> int:
    """Percentage of answered fields, counting keys at any depth."""
    total = 0
    answered = 0

    def walk(node: Dict[str, Any]) -> None:
        nonlocal total, answered
        for value in node.values():
            total += 1
            if value not in ("", [], None):
                answered += 1
            if isinstance(value, dict):
                walk(value)

    walk(data or {})
    if total == 0:
        return 0
    return round(answered / total * 100)


def track_assessment_completion(
    db: Session,
    user_id: UUID,
    assessment_type: AssessmentType,
    data: Dict[str, Any],
) -> None:
    """Record the completion event and refresh recommendations. Never raises."""
    try:
        log_event(
            db,
            "assessment_completed",
            user_id=user_id,
            properties={
                "assessment_type": assessment_type.value,
                "data_quality": calculate_data_quality(data),
            },
        )
        db.commit()
        refresh_recommendations(db, user_id)
    except Exception:
        db.rollback()
        logger.exception("Error tracking %s assessment completion for user %s", assessment_type.value, user_id)
