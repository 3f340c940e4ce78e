"""
Assessment wizard definitions and the pure logic around them.

Each wizard is a fixed sequence of steps; a step owns one payload section and
lists the fields that must be answered before the user can advance.
"""
from typing import List, Optional, Dict, Any, NamedTuple
import logging

from compass.models import AssessmentType, Profile
from compass.schemas.assessment import (
    PersonalProductivityPayload,
    BusinessTransformationPayload,
    CFOAssessmentPayload,
)

logger = logging.getLogger(__name__)


class WizardStep(NamedTuple):
    section: str
    title: str
    required: List[str]


WIZARD_STEPS: Dict[AssessmentType, List[WizardStep]] = {
    AssessmentType.PERSONAL_PRODUCTIVITY: [
        WizardStep("work_profile", "Work Profile", ["communication_patterns"]),
        WizardStep("current_ai_usage", "Current AI Usage", ["tools_used"]),
        WizardStep("productivity_challenges", "Productivity Challenges", ["insight_needs"]),
        WizardStep("implementation", "Implementation Preferences", ["time_available", "budget"]),
        WizardStep("success_metrics", "Success Metrics", ["timeline"]),
    ],
    AssessmentType.BUSINESS_TRANSFORMATION: [
        WizardStep("business_context", "Business Context", ["industry", "company_size"]),
        WizardStep("process_analysis", "Process Analysis", ["manual_effort_areas"]),
        WizardStep("organizational_readiness", "Organizational Readiness", ["budget_allocation", "implementation_timeline"]),
        WizardStep("strategic_objectives", "Strategic Objectives", ["competitive_advantages"]),
        WizardStep("current_state", "Current State", []),
    ],
    AssessmentType.CFO: [
        WizardStep("company_profile", "Company Profile", ["industry", "revenue", "employees"]),
        WizardStep("current_stack", "Current Finance Stack", ["automation_level"]),
        WizardStep("pain_points", "Pain Points", ["manual_processes"]),
        WizardStep("goals", "Goals", ["time_savings"]),
    ],
}

# CFO readiness score inputs
CFO_REVENUE_POINTS = {
    "$1B+": 40,
    "$100M-$1B": 30,
    "$10M-$100M": 20,
}
CFO_POINTS_PER_MANUAL_PROCESS = 5
CFO_POINTS_PER_GOAL = 10
CFO_AUTOMATION_POINTS = {
    "low": 25,
    "medium": 15,
}
CFO_MAX_SCORE = 100

NO_AI_TOOLS_ANSWER = "None"


def get_step(assessment_type: AssessmentType, step: int) -> WizardStep:
    steps = WIZARD_STEPS.get(assessment_type)
    if not steps:
        raise ValueError(f"Unknown assessment type: {assessment_type}")
    if step < 1 or step > len(steps):
        raise ValueError(f"Invalid step {step} for {assessment_type.value}. Allowed: 1-{len(steps)}")
    return steps[step - 1]


def total_steps(assessment_type: AssessmentType) -> int:
    return len(WIZARD_STEPS[assessment_type])


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict, tuple, set)):
        return len(value) == 0
    return False


def missing_fields(assessment_type: AssessmentType, step: int, answers: Dict[str, Any]) -> List[str]:
    """Required fields of `step` that are absent or blank in `answers`."""
    wizard_step = get_step(assessment_type, step)
    return [name for name in wizard_step.required if _is_blank(answers.get(name))]


def progress_percent(step: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round(min(max(step, 0), total) / total * 100, 2)


def calculate_cfo_readiness_score(payload: CFOAssessmentPayload) -> int:
    """
    CFO AI readiness, 0-100. Bigger companies, more manual pain, more ambitious
    goals and lower automation all mean more room for impact.
    """
    score = CFO_REVENUE_POINTS.get(payload.company_profile.revenue, 0)
    score += len(payload.pain_points.manual_processes) * CFO_POINTS_PER_MANUAL_PROCESS
    # Any truthy goal answer counts, including a non-empty time_savings target
    score += sum(1 for value in payload.goals.model_dump().values() if value) * CFO_POINTS_PER_GOAL
    score += CFO_AUTOMATION_POINTS.get(payload.current_stack.automation_level.lower(), 0)
    return min(score, CFO_MAX_SCORE)


def profile_from_personal(payload: PersonalProductivityPayload, existing: Optional[Profile] = None) -> Dict[str, Any]:
    """Profile fields derived from the personal productivity wizard."""
    tools_used = payload.current_ai_usage.tools_used
    never_used = not tools_used or NO_AI_TOOLS_ANSWER in tools_used
    return {
        "display_name": (existing.display_name if existing and existing.display_name else "Personal Productivity User"),
        "role": "individual",
        "industry": (existing.industry if existing and existing.industry else "technology"),
        "company_size": (existing.company_size if existing and existing.company_size else "medium"),
        "ai_experience": "never" if never_used else "intermediate",
        "goals": list(payload.productivity_challenges.insight_needs),
        "time_availability": payload.implementation.time_available,
        "implementation_timeline": payload.success_metrics.timeline,
        "primary_focus_areas": list(payload.work_profile.communication_patterns),
    }


def profile_from_business(payload: BusinessTransformationPayload, existing: Optional[Profile] = None) -> Dict[str, Any]:
    """Profile fields derived from the business transformation wizard."""
    timeline = payload.organizational_readiness.implementation_timeline
    return {
        "display_name": (existing.display_name if existing and existing.display_name else "Business Transformation Lead"),
        "role": (existing.role if existing and existing.role else "director"),
        "industry": payload.business_context.industry,
        "company_size": payload.business_context.company_size,
        "ai_experience": "intermediate" if payload.current_state.ai_tools_in_use else "never",
        "goals": list(payload.strategic_objectives.competitive_advantages),
        "time_availability": timeline,
        "implementation_timeline": timeline,
        "primary_focus_areas": list(payload.process_analysis.manual_effort_areas),
    }
