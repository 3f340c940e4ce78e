from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any
from datetime import datetime
from uuid import UUID
from compass.models import AIAnalysisType


class AIProfileInput(BaseModel):
    role: str = ""
    industry: str = ""
    company_size: str = ""
    ai_experience: str = ""
    goals: List[str] = Field(default_factory=list)
    time_availability: str = ""
    implementation_timeline: str = ""


class AIAssessmentRequest(BaseModel):
    analysis_type: AIAnalysisType
    # Falls back to the stored profile when omitted
    user_profile: Optional[AIProfileInput] = None
    specific_context: Optional[Dict[str, Any]] = None


class AIAssessmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    analysis_type: AIAnalysisType
    input_profile: Dict[str, Any]
    specific_context: Optional[Dict[str, Any]] = None
    recommendations: Optional[Dict[str, Any]] = None
    related_questions: Optional[List[Any]] = None
    confidence_score: Optional[float] = None
    raw_response: Optional[str] = None
    created_at: datetime
