from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import datetime
from uuid import UUID
from compass.models import ProgressStatus
from compass.schemas.recommendation import RecommendationItem


class ProgressSummary(BaseModel):
    tools_tracked: int
    completed: int
    started: int
    total_hours: int
    productivity_gain: int


class ProgressUpsert(BaseModel):
    tool_id: UUID
    status: ProgressStatus = ProgressStatus.INTERESTED
    time_invested_minutes: int = Field(0, ge=0)
    notes: Optional[str] = None


class ProgressResponse(BaseModel):
    id: UUID
    tool_id: UUID
    tool_name: Optional[str] = None
    status: str
    time_invested_minutes: int
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProgressDashboard(BaseModel):
    summary: ProgressSummary
    items: List[ProgressResponse]


class ROIRequest(BaseModel):
    hourly_rate: float = Field(..., ge=0)
    reporting_hours_per_week: float = Field(..., ge=0)
    board_prep_hours_per_month: float = Field(0, ge=0)
    time_savings_percentage: float = Field(..., ge=0, le=100)
    team_size: int = Field(1, ge=1)
    monthly_tool_cost: float = Field(0, ge=0)
    implementation_hours: float = Field(0, ge=0)


class ROIResponse(BaseModel):
    weekly_hours_saved: float
    monthly_board_hours_saved: float
    monthly_savings: float
    annual_savings: float
    annual_tool_cost: float
    implementation_cost: float
    net_annual_savings: float
    roi_percentage: Optional[float]
    payback_months: Optional[float]


class AssessmentSummary(BaseModel):
    id: UUID
    assessment_score: Optional[float]
    created_at: datetime


class DashboardOverview(BaseModel):
    assessments: Dict[str, Optional[AssessmentSummary]]
    recommendations: List[RecommendationItem]
    progress: ProgressSummary
