"""
AI-assisted assessment text via the Perplexity chat-completions API.

The HTTP call lives in PerplexityClient; prompt building, response parsing and
confidence scoring are pure helpers so they can be tested without a network.
"""
from typing import List, Optional, Dict, Any
from uuid import UUID
from dataclasses import dataclass, field
import json
import logging
import re

import requests
from sqlalchemy.orm import Session

from compass.core.config import settings
from compass.models import AIAnalysis, AIAnalysisType
from compass.services.scoring import UserProfile

logger = logging.getLogger(__name__)

TEMPERATURE = 0.3
TOP_P = 0.9
MAX_TOKENS = 2000
SEARCH_DOMAINS = ["harvard.edu", "mit.edu", "mckinsey.com", "deloitte.com", "pwc.com"]

MAX_STEPS = 5
MAX_TOOL_MENTIONS = 3
MAX_KEY_RECOMMENDATIONS = 5

STEP_PATTERN = re.compile(r"(\d+\.\s+[^\n]+)")
TOOL_PATTERN = re.compile(r"(?:tool|platform|software|solution):\s*[^\n,]+", re.IGNORECASE)
BULLET_PATTERN = re.compile(r"^\s*[-•*]\s*(.+)$", re.MULTILINE)

CONFIDENCE_INDUSTRIES = ["finance", "technology", "healthcare", "manufacturing"]


class AIServiceError(Exception):
    """The AI provider could not produce a usable answer."""


class AIConfigurationError(AIServiceError):
    """No API key configured."""


@dataclass
class AICompletion:
    content: str
    related_questions: List[str] = field(default_factory=list)


class PerplexityClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.PERPLEXITY_API_KEY
        self.api_url = api_url or settings.PERPLEXITY_API_URL
        self.model = model or settings.PERPLEXITY_MODEL
        self.timeout = timeout or settings.AI_REQUEST_TIMEOUT_SECONDS

    def complete(self, system_prompt: str, user_prompt: str) -> AICompletion:
        if not self.api_key:
            raise AIConfigurationError("PERPLEXITY_API_KEY is not configured")

        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": TEMPERATURE,
            "top_p": TOP_P,
            "max_tokens": MAX_TOKENS,
            "return_images": False,
            "return_related_questions": True,
            "search_domain_filter": SEARCH_DOMAINS,
            "search_recency_filter": "month",
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            resp = requests.post(self.api_url, json=body, headers=headers, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as e:
            logger.warning("Perplexity request failed: %s", e)
            raise AIServiceError(f"AI provider request failed: {e}") from e
        except ValueError as e:
            raise AIServiceError("AI provider returned a non-JSON body") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise AIServiceError("AI provider response missing choices[0].message.content") from e

        if not isinstance(content, str):
            raise AIServiceError("AI provider returned no text content")

        return AICompletion(content=content, related_questions=list(data.get("related_questions") or []))


def build_system_prompt(analysis_type: AIAnalysisType, profile: UserProfile) -> str:
    base = (
        f"You are an expert AI consultant specializing in helping {profile.role}s "
        f"in the {profile.industry} industry implement AI solutions effectively."
    )

    if analysis_type == AIAnalysisType.CONSULTING:
        return f"""{base}

Your task is to provide a comprehensive consulting assessment that includes:
1. Current AI readiness analysis
2. Specific challenges and opportunities for their role and industry
3. Recommended implementation roadmap with timelines
4. ROI projections and success metrics
5. Risk assessment and mitigation strategies
6. Vendor/tool recommendations with rationale
7. Change management considerations

Focus on actionable, data-driven recommendations that align with their stated goals and timeline. Use current industry best practices and cite relevant case studies when possible."""

    if analysis_type == AIAnalysisType.ORGANIZATION:
        return f"""{base}

Your task is to assess their organization's AI transformation potential, including:
1. Organizational readiness for AI adoption
2. Cultural and structural changes needed
3. Skills gaps and training requirements
4. Technology infrastructure assessment
5. Budget and resource allocation recommendations
6. Governance and compliance considerations
7. Competitive positioning analysis

Provide strategic recommendations that consider their company size, industry dynamics, and current AI maturity level."""

    if analysis_type == AIAnalysisType.STRATEGY:
        return f"""{base}

Your task is to develop a strategic AI vision and roadmap, including:
1. AI strategy alignment with business objectives
2. Priority use cases and quick wins
3. Long-term transformation vision
4. Innovation opportunities and competitive advantages
5. Partnership and acquisition strategies
6. Technology stack recommendations
7. Success measurement framework

Focus on strategic planning and high-level direction that positions them for long-term success in AI adoption."""

    return base


def build_user_prompt(
    analysis_type: AIAnalysisType,
    profile: UserProfile,
    specific_context: Optional[Dict[str, Any]] = None,
) -> str:
    context = f"Additional Context: {json.dumps(specific_context, indent=2)}" if specific_context else ""
    return f"""Please provide a detailed AI assessment for the following profile:

Role: {profile.role}
Industry: {profile.industry}
Company Size: {profile.company_size}
AI Experience: {profile.ai_experience}
Primary Goals: {', '.join(profile.goals)}
Time Availability: {profile.time_availability}
Implementation Timeline: {profile.implementation_timeline}

{context}

Assessment Type: {analysis_type.value}

Please provide a structured response with specific, actionable recommendations tailored to their profile. Include concrete steps, timelines, and expected outcomes. Focus on practical implementation advice that considers their constraints and objectives."""


def parse_ai_recommendations(text: str) -> Dict[str, Any]:
    """Pull a loose structure out of free-form model output."""
    sections = text.split("\n\n")
    return {
        "summary": sections[0] if sections else "",
        "implementation_steps": STEP_PATTERN.findall(text)[:MAX_STEPS],
        "tool_recommendations": TOOL_PATTERN.findall(text)[:MAX_TOOL_MENTIONS],
        "key_recommendations": [m.strip() for m in BULLET_PATTERN.findall(text)][:MAX_KEY_RECOMMENDATIONS],
        "raw_analysis": text,
    }


def calculate_confidence_score(profile: UserProfile, text: str) -> float:
    score = 0.5

    fields = [profile.role, profile.industry, profile.company_size, profile.ai_experience]
    completed = sum(1 for value in fields if value and value.strip())
    score += completed / len(fields) * 0.3

    if profile.goals:
        score += 0.2

    if len(text) > 1000:
        score += 0.1
    if len(text) > 2000:
        score += 0.1
    if "recommendation" in text:
        score += 0.05
    if "timeline" in text:
        score += 0.05

    industry = (profile.industry or "").lower()
    if any(keyword in industry for keyword in CONFIDENCE_INDUSTRIES):
        score += 0.2

    return min(1.0, max(0.1, score))


def run_assessment(
    db: Session,
    user_id: UUID,
    analysis_type: AIAnalysisType,
    profile: UserProfile,
    specific_context: Optional[Dict[str, Any]] = None,
    client: Optional[PerplexityClient] = None,
) -> AIAnalysis:
    """
    Ask the provider for an assessment, structure it and persist an ai_analyses row.

    Raises AIServiceError (or AIConfigurationError); the caller owns the transaction.
    """
    client = client or PerplexityClient()
    completion = client.complete(
        build_system_prompt(analysis_type, profile),
        build_user_prompt(analysis_type, profile, specific_context),
    )

    analysis = AIAnalysis(
        user_id=user_id,
        analysis_type=analysis_type,
        input_profile={
            "role": profile.role,
            "industry": profile.industry,
            "company_size": profile.company_size,
            "ai_experience": profile.ai_experience,
            "goals": list(profile.goals),
            "time_availability": profile.time_availability,
            "implementation_timeline": profile.implementation_timeline,
        },
        specific_context=specific_context,
        recommendations=parse_ai_recommendations(completion.content),
        related_questions=completion.related_questions,
        confidence_score=calculate_confidence_score(profile, completion.content),
        raw_response=completion.content,
    )
    db.add(analysis)
    db.commit()
    db.refresh(analysis)

    logger.info(
        "AI %s analysis stored for user %s (confidence=%.2f)",
        analysis_type.value,
        user_id,
        analysis.confidence_score,
    )
    return analysis
