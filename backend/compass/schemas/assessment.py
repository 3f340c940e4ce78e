from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any
from datetime import datetime
from uuid import UUID
from compass.models import AssessmentType


# ----------------------------
# Personal productivity wizard (5 steps)
# ----------------------------
class WorkProfile(BaseModel):
    daily_activities: Dict[str, float] = Field(default_factory=dict)
    communication_patterns: List[str] = Field(default_factory=list)
    content_creation: List[str] = Field(default_factory=list)
    decision_making: str = ""
    learning_goals: str = ""


class CurrentAIUsage(BaseModel):
    tools_used: List[str] = Field(default_factory=list)
    satisfaction: int = Field(3, ge=1, le=5)
    pain_points: str = ""
    time_on_repetitive: float = Field(0, ge=0)
    overwhelm_areas: List[str] = Field(default_factory=list)


class ProductivityChallenges(BaseModel):
    time_wasters: str = ""
    automation_wishes: str = ""
    insight_needs: List[str] = Field(default_factory=list)
    collaboration_pains: str = ""
    skill_development: List[str] = Field(default_factory=list)


class ImplementationPreferences(BaseModel):
    learning_style: str = ""
    time_available: str = ""
    comfort_level: int = Field(3, ge=1, le=5)
    budget: str = ""
    integration_needs: List[str] = Field(default_factory=list)


class SuccessMetrics(BaseModel):
    measurement_methods: List[str] = Field(default_factory=list)
    desired_outcomes: str = ""
    timeline: str = ""
    kpis: List[str] = Field(default_factory=list)


class PersonalProductivityPayload(BaseModel):
    work_profile: WorkProfile = Field(default_factory=WorkProfile)
    current_ai_usage: CurrentAIUsage = Field(default_factory=CurrentAIUsage)
    productivity_challenges: ProductivityChallenges = Field(default_factory=ProductivityChallenges)
    implementation: ImplementationPreferences = Field(default_factory=ImplementationPreferences)
    success_metrics: SuccessMetrics = Field(default_factory=SuccessMetrics)


# ----------------------------
# Business transformation wizard (5 steps)
# ----------------------------
class BusinessContext(BaseModel):
    industry: str = ""
    company_size: str = ""
    revenue_model: str = ""
    tech_infrastructure: str = ""
    digital_maturity: int = Field(3, ge=1, le=5)


class ProcessAnalysis(BaseModel):
    core_processes: str = ""
    operational_challenges: str = ""
    manual_effort_areas: List[str] = Field(default_factory=list)
    data_quality: int = Field(3, ge=1, le=5)
    integration_complexity: int = Field(3, ge=1, le=5)


class OrganizationalReadiness(BaseModel):
    leadership_buy_in: int = Field(3, ge=1, le=5)
    team_capabilities: List[str] = Field(default_factory=list)
    change_management: int = Field(3, ge=1, le=5)
    budget_allocation: str = ""
    implementation_timeline: str = ""


class StrategicObjectives(BaseModel):
    business_outcomes: str = ""
    roi_expectations: str = ""
    risk_tolerance: int = Field(3, ge=1, le=5)
    competitive_advantages: List[str] = Field(default_factory=list)
    scalability_needs: str = ""


class CurrentState(BaseModel):
    existing_stack: List[str] = Field(default_factory=list)
    ai_tools_in_use: List[str] = Field(default_factory=list)
    data_infrastructure: str = ""
    skills_gaps: List[str] = Field(default_factory=list)
    transformation_experience: str = ""


class BusinessTransformationPayload(BaseModel):
    business_context: BusinessContext = Field(default_factory=BusinessContext)
    process_analysis: ProcessAnalysis = Field(default_factory=ProcessAnalysis)
    organizational_readiness: OrganizationalReadiness = Field(default_factory=OrganizationalReadiness)
    strategic_objectives: StrategicObjectives = Field(default_factory=StrategicObjectives)
    current_state: CurrentState = Field(default_factory=CurrentState)


# ----------------------------
# CFO readiness wizard (4 steps)
# ----------------------------
class CompanyProfile(BaseModel):
    industry: str = ""
    revenue: str = ""  # "$10M-$100M" | "$100M-$1B" | "$1B+" | ...
    employees: str = ""
    public_private: str = ""


class FinanceStack(BaseModel):
    erp: str = ""
    bi: str = ""
    spreadsheets: str = ""
    automation_level: str = ""  # low | medium | high


class FinancePainPoints(BaseModel):
    reporting_time: str = ""
    board_prep_time: str = ""
    manual_processes: List[str] = Field(default_factory=list)
    biggest_frustration: str = ""


class CFOGoals(BaseModel):
    time_savings: str = ""
    accuracy: bool = False
    team_productivity: bool = False
    strategic_focus: bool = False
    compliance_improvement: bool = False


class CFOAssessmentPayload(BaseModel):
    company_profile: CompanyProfile = Field(default_factory=CompanyProfile)
    current_stack: FinanceStack = Field(default_factory=FinanceStack)
    pain_points: FinancePainPoints = Field(default_factory=FinancePainPoints)
    goals: CFOGoals = Field(default_factory=CFOGoals)


# ----------------------------
# Records and step validation
# ----------------------------
class AssessmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    assessment_type: AssessmentType
    assessment_data: Dict[str, Any]
    assessment_score: Optional[float] = None
    status: str
    created_at: datetime


class StepValidationRequest(BaseModel):
    answers: Dict[str, Any] = Field(default_factory=dict)


class StepValidationResponse(BaseModel):
    valid: bool
    step: int
    total_steps: int
    section: str
    missing_fields: List[str]
    progress: float
