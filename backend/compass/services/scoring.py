"""
Relevance scoring for catalog tools.

Two composable pure passes:
  - base score: weighted rule contributions for (tool, profile), clamped to [0, 100]
  - adjust_score: assessment-specific boosts/penalties applied on top, re-clamped

Nothing here touches the database or the network.
"""
from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field, asdict
import logging

from compass.models import Tool, AssessmentType

logger = logging.getLogger(__name__)

MIN_SCORE = 0.0
MAX_SCORE = 100.0

# Factor weights
W_ROLE = 40.0
W_ROLE_GENERIC = 20.0
W_INDUSTRY = 25.0
W_INDUSTRY_GENERIC = 12.0
W_SIZE = 15.0
W_SIZE_UNRESTRICTED = 7.0
W_GOALS = 10.0
URGENT_MINUTES_BONUS = 5.0
URGENT_HOURS_BONUS = 3.0
BEGINNER_HARD_PENALTY = -10.0

URGENT_TIMELINE = "this week"
GENERIC_TARGET = "all"

# Second-pass adjustments
CFO_CATEGORY_BOOST = 15.0
PAIN_POINT_BOOST = 10.0
PRODUCTIVITY_CATEGORY_BOOST = 10.0
ALREADY_USED_PENALTY = -20.0
LOW_READINESS_HARD_PENALTY = -15.0
LOW_READINESS_THRESHOLD = 3

# Ordinal AI experience levels. Legacy wizard answers are mapped onto them.
EXPERIENCE_ALIASES = {
    "chatgpt": "basic",
    "multiple": "intermediate",
}

# (experience level, setup difficulty) -> fit points (0-10)
EXPERIENCE_FIT: Dict[str, Dict[str, float]] = {
    "never": {"easy": 10.0, "medium": 5.0, "hard": 0.0},
    "basic": {"easy": 8.0, "medium": 10.0, "hard": 3.0},
    "intermediate": {"easy": 6.0, "medium": 10.0, "hard": 8.0},
    "advanced": {"easy": 6.0, "medium": 8.0, "hard": 10.0},
    "expert": {"easy": 6.0, "medium": 8.0, "hard": 10.0},
}
EXPERIENCE_FIT_DEFAULT = 5.0

# Goal -> keywords looked for in the tool's description and features.
# TODO: move to a table editable from the admin screens once goal copy settles.
GOAL_KEYWORDS: Dict[str, List[str]] = {
    "Increase personal productivity": ["productivity", "automation", "efficiency", "time"],
    "Improve team efficiency": ["collaboration", "team", "communication", "project"],
    "Reduce operational costs": ["automation", "efficiency", "cost", "optimize"],
    "Enhance customer experience": ["customer", "service", "experience", "support"],
    "Drive innovation": ["innovation", "creative", "design", "development"],
    "Stay competitive": ["analytics", "insights", "data", "intelligence"],
    "Automate repetitive tasks": ["automation", "workflow", "process", "task"],
    "Improve decision making": ["analytics", "data", "insights", "intelligence"],
    "Scale operations": ["scalability", "growth", "enterprise", "team"],
    "Learn new technologies": ["learning", "education", "tutorial", "guide"],
}

ROLE_DISPLAY_NAMES = {
    "ceo": "CEOs",
    "cto": "CTOs",
    "cmo": "CMOs",
    "coo": "COOs",
    "cfo": "CFOs",
    "vp": "VPs",
    "director": "Directors",
    "manager": "Managers",
    "individual": "Individual Contributors",
}


@dataclass
class UserProfile:
    """Immutable-by-convention snapshot of the answers used as scoring input."""
    role: str = ""
    industry: str = ""
    company_size: str = ""
    ai_experience: str = ""
    goals: List[str] = field(default_factory=list)
    time_availability: str = ""
    implementation_timeline: str = ""


@dataclass
class EnhancedUserProfile(UserProfile):
    """UserProfile plus what the latest assessment told us."""
    assessment_type: Optional[AssessmentType] = None
    assessment_data: Optional[Dict[str, Any]] = None
    pain_points: List[str] = field(default_factory=list)
    current_tools: List[str] = field(default_factory=list)
    implementation_readiness: Optional[int] = None
    budget_range: str = ""


@dataclass
class ScoreFactors:
    """Per-factor contributions to a tool's base relevance score."""
    role_fit: float = 0.0
    industry_fit: float = 0.0
    size_fit: float = 0.0
    experience_fit: float = 0.0
    goal_alignment: float = 0.0
    urgency_bonus: float = 0.0
    beginner_penalty: float = 0.0

    @property
    def total(self) -> float:
        """Unclamped sum of all contributions."""
        return (
            self.role_fit
            + self.industry_fit
            + self.size_fit
            + self.experience_fit
            + self.goal_alignment
            + self.urgency_bonus
            + self.beginner_penalty
        )

    def as_dict(self) -> Dict[str, float]:
        data = asdict(self)
        data["total"] = self.total
        return data


def clamp_score(score: float) -> float:
    return min(MAX_SCORE, max(MIN_SCORE, score))


def _lower(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def _targets(values: Optional[List[str]]) -> List[str]:
    return [str(v) for v in (values or [])]


def _is_generic(targets: List[str]) -> bool:
    return not targets or GENERIC_TARGET in targets


def normalize_experience(level: Optional[str]) -> str:
    value = _lower(level)
    return EXPERIENCE_ALIASES.get(value, value)


def role_fit(tool: Tool, profile: UserProfile) -> float:
    targets = _targets(tool.target_roles)
    role = _lower(profile.role)
    if role and role in targets:
        return W_ROLE
    if _is_generic(targets):
        return W_ROLE_GENERIC
    return 0.0


def industry_fit(tool: Tool, profile: UserProfile) -> float:
    targets = _targets(tool.target_industries)
    industry = _lower(profile.industry)
    if industry and any(industry in t.lower() for t in targets):
        return W_INDUSTRY
    if _is_generic(targets):
        return W_INDUSTRY_GENERIC
    return 0.0


def size_fit(tool: Tool, profile: UserProfile) -> float:
    targets = _targets(tool.target_company_sizes)
    if profile.company_size and profile.company_size in targets:
        return W_SIZE
    if not targets:
        return W_SIZE_UNRESTRICTED
    return 0.0


def experience_fit(tool: Tool, experience: Optional[str]) -> float:
    """Reward matching tool complexity to user sophistication."""
    fit = EXPERIENCE_FIT.get(normalize_experience(experience))
    if fit is None:
        return EXPERIENCE_FIT_DEFAULT
    return fit.get(_lower(tool.setup_difficulty), EXPERIENCE_FIT_DEFAULT)


def goal_alignment(tool: Tool, goals: List[str]) -> float:
    """
    Keyword overlap between selected goals and the tool's description + features.

    Each goal contributes (matched / len(keywords)) * (10 / len(goals)).
    Goals without a keyword set contribute nothing but still count toward len(goals).
    """
    if not goals:
        return 0.0

    haystack = " ".join([tool.description or ""] + _targets(tool.features)).lower()
    per_goal = W_GOALS / len(goals)

    score = 0.0
    for goal in goals:
        keywords = GOAL_KEYWORDS.get(goal)
        if not keywords:
            continue
        matches = sum(1 for keyword in keywords if keyword in haystack)
        score += (matches / len(keywords)) * per_goal
    return score


def urgency_bonus(tool: Tool, profile: UserProfile) -> float:
    if _lower(profile.implementation_timeline) != URGENT_TIMELINE:
        return 0.0
    time_to_value = _lower(tool.time_to_value)
    if time_to_value == "minutes":
        return URGENT_MINUTES_BONUS
    if time_to_value == "hours":
        return URGENT_HOURS_BONUS
    return 0.0


def beginner_penalty(tool: Tool, profile: UserProfile) -> float:
    if normalize_experience(profile.ai_experience) == "never" and _lower(tool.setup_difficulty) == "hard":
        return BEGINNER_HARD_PENALTY
    return 0.0


def score_breakdown(tool: Tool, profile: UserProfile) -> ScoreFactors:
    return ScoreFactors(
        role_fit=role_fit(tool, profile),
        industry_fit=industry_fit(tool, profile),
        size_fit=size_fit(tool, profile),
        experience_fit=experience_fit(tool, profile.ai_experience),
        goal_alignment=goal_alignment(tool, profile.goals),
        urgency_bonus=urgency_bonus(tool, profile),
        beginner_penalty=beginner_penalty(tool, profile),
    )


def calculate_relevance_score(tool: Tool, profile: UserProfile) -> float:
    """Base relevance score in [0, 100]."""
    factors = score_breakdown(tool, profile)
    score = clamp_score(factors.total)
    logger.debug("score tool=%s role=%s factors=%s final=%.2f", tool.name, profile.role, factors.as_dict(), score)
    return score


def generate_recommendation_reason(tool: Tool, profile: UserProfile, score: float) -> str:
    reasons = []

    role = _lower(profile.role)
    if role and role in _targets(tool.target_roles):
        reasons.append(f"Specifically designed for {ROLE_DISPLAY_NAMES.get(role, profile.role)}")

    if profile.industry and profile.industry in _targets(tool.target_industries):
        reasons.append(f"Proven success in {profile.industry}")

    experience = normalize_experience(profile.ai_experience)
    if _lower(tool.setup_difficulty) == "easy" and experience == "never":
        reasons.append("Easy setup perfect for AI beginners")

    if _lower(tool.time_to_value) == "minutes" and _lower(profile.implementation_timeline) == URGENT_TIMELINE:
        reasons.append("Immediate value for quick implementation")

    if score >= 80:
        reasons.append("Highly recommended match")
    elif score >= 60:
        reasons.append("Good fit for your needs")

    return ". ".join(reasons) + "." if reasons else "Recommended based on your profile."


def _mentions_any(text: str, needles: List[str]) -> bool:
    text = (text or "").lower()
    return any(n.strip() and n.strip().lower() in text for n in needles)


def _is_low_readiness(profile: EnhancedUserProfile) -> bool:
    readiness = profile.implementation_readiness
    # 0 counts as unanswered, like None
    return bool(readiness) and readiness < LOW_READINESS_THRESHOLD


def adjust_score(score: float, tool: Tool, category_name: str, profile: EnhancedUserProfile) -> float:
    """Second pass: assessment-specific boosts and penalties, re-clamped to [0, 100]."""
    adjusted = score
    category = (category_name or "").lower()

    if profile.assessment_type == AssessmentType.CFO:
        if "finance" in category or "analytics" in category:
            adjusted += CFO_CATEGORY_BOOST
        if _mentions_any(tool.description, profile.pain_points):
            adjusted += PAIN_POINT_BOOST

    elif profile.assessment_type == AssessmentType.BUSINESS_TRANSFORMATION:
        if "automation" in category or "productivity" in category:
            adjusted += PRODUCTIVITY_CATEGORY_BOOST

    elif profile.assessment_type == AssessmentType.PERSONAL_PRODUCTIVITY:
        if "individual" in _targets(tool.target_roles) or "productivity" in category:
            adjusted += PRODUCTIVITY_CATEGORY_BOOST

    if _mentions_any(tool.name, profile.current_tools):
        adjusted += ALREADY_USED_PENALTY

    if _is_low_readiness(profile) and _lower(tool.setup_difficulty) == "hard":
        adjusted += LOW_READINESS_HARD_PENALTY

    return clamp_score(adjusted)


def generate_enhanced_reason(base_reason: str, tool: Tool, profile: EnhancedUserProfile) -> str:
    reasons = [base_reason.rstrip(".")]
    features = [f.lower() for f in _targets(tool.features)]

    if profile.assessment_type == AssessmentType.CFO:
        if _mentions_any(tool.description, profile.pain_points):
            reasons.append("Addresses your specific CFO pain points")
        if any("cfo" in r.lower() for r in _targets(tool.target_roles)):
            reasons.append("Designed specifically for CFO workflows")

    elif profile.assessment_type == AssessmentType.BUSINESS_TRANSFORMATION:
        if "Data collection from multiple systems" in profile.pain_points and any("integration" in f for f in features):
            reasons.append("Solves your data integration challenges")

    elif profile.assessment_type == AssessmentType.PERSONAL_PRODUCTIVITY:
        if "Time tracking" in profile.pain_points and any("time" in f for f in features):
            reasons.append("Helps with time management goals")

    if _is_low_readiness(profile) and _lower(tool.setup_difficulty) == "easy":
        reasons.append("Easy setup matches your comfort level")

    return ". ".join(reasons) + "."
