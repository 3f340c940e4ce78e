from pydantic import BaseModel
from typing import Optional, List
from uuid import UUID


class RecommendationItem(BaseModel):
    tool_id: UUID
    name: str
    description: str
    category: str
    score: float
    base_score: Optional[float] = None  # Score before assessment adjustments (enhanced only)
    reason: str
    setup_difficulty: Optional[str] = None
    time_to_value: Optional[str] = None
    pricing_model: Optional[str] = None
    website_url: Optional[str] = None
    logo_url: Optional[str] = None


class RecommendationsResponse(BaseModel):
    items: List[RecommendationItem]
    assessment_type: Optional[str] = None


def to_item(rec) -> RecommendationItem:
    """Serialize a ToolRecommendation or EnhancedRecommendation."""
    tool = rec.tool
    return RecommendationItem(
        tool_id=tool.id,
        name=tool.name,
        description=tool.description,
        category=rec.category,
        score=round(rec.score, 2),
        base_score=round(rec.base_score, 2) if getattr(rec, "base_score", None) is not None else None,
        reason=rec.reason,
        setup_difficulty=tool.setup_difficulty,
        time_to_value=tool.time_to_value,
        pricing_model=tool.pricing_model,
        website_url=tool.website_url,
        logo_url=tool.logo_url,
    )
