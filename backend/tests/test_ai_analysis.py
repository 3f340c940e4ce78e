"""Tests for AI-assisted assessments (provider calls are monkeypatched)."""
import pytest
import requests
from sqlalchemy.orm import Session
from compass.models import AIAnalysis, AIAnalysisType, User
from compass.services import ai_analysis
from compass.services.ai_analysis import (
    AIConfigurationError,
    AIServiceError,
    PerplexityClient,
    build_system_prompt,
    build_user_prompt,
    calculate_confidence_score,
    parse_ai_recommendations,
    run_assessment,
)
from compass.services.scoring import UserProfile


SAMPLE_RESPONSE = """Your finance team is well placed to adopt AI for reporting.

1. Automate the monthly close
2. Pilot a forecasting assistant
3. Train analysts on prompt design

Key points:
- Start with reconciliations
* Measure hours saved each month

Recommended tool: Datarails for FP&A, with a 90 day timeline.
Platform: Microsoft Copilot
"""


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile(
        role="cfo",
        industry="Finance",
        company_size="201-1000",
        ai_experience="basic",
        goals=["Reduce operational costs"],
        time_availability="1-2 hours/week",
        implementation_timeline="2-3 months",
    )


@pytest.fixture
def fake_post(monkeypatch):
    calls = []

    def _install(response):
        def _post(url, json=None, headers=None, timeout=None):
            calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
            if isinstance(response, Exception):
                raise response
            return response
        monkeypatch.setattr(ai_analysis.requests, "post", _post)
        return calls

    return _install


def test_system_prompt_variants(profile):
    consulting = build_system_prompt(AIAnalysisType.CONSULTING, profile)
    assert consulting.startswith("You are an expert AI consultant specializing in helping cfos in the Finance industry")
    assert "consulting assessment" in consulting
    assert "organization's AI transformation potential" in build_system_prompt(AIAnalysisType.ORGANIZATION, profile)
    assert "strategic AI vision" in build_system_prompt(AIAnalysisType.STRATEGY, profile)


def test_user_prompt_includes_profile_and_context(profile):
    prompt = build_user_prompt(AIAnalysisType.STRATEGY, profile, {"erp": "NetSuite"})
    assert "Role: cfo" in prompt
    assert "Primary Goals: Reduce operational costs" in prompt
    assert '"erp": "NetSuite"' in prompt
    assert "Assessment Type: strategy" in prompt
    assert "Additional Context" not in build_user_prompt(AIAnalysisType.STRATEGY, profile)


def test_parse_ai_recommendations():
    parsed = parse_ai_recommendations(SAMPLE_RESPONSE)
    assert parsed["summary"] == "Your finance team is well placed to adopt AI for reporting."
    assert parsed["implementation_steps"] == [
        "1. Automate the monthly close",
        "2. Pilot a forecasting assistant",
        "3. Train analysts on prompt design",
    ]
    assert parsed["tool_recommendations"] == ["tool: Datarails for FP&A", "Platform: Microsoft Copilot"]
    assert parsed["key_recommendations"] == ["Start with reconciliations", "Measure hours saved each month"]
    assert parsed["raw_analysis"] == SAMPLE_RESPONSE


def test_parse_caps_list_lengths():
    text = "\n".join(f"{i}. step {i}" for i in range(1, 10))
    assert len(parse_ai_recommendations(text)["implementation_steps"]) == 5


def test_confidence_score(profile):
    # 0.5 + 0.3 complete profile + 0.2 goals + 0.2 finance, clamped
    assert calculate_confidence_score(profile, "short") == 1.0

    sparse = UserProfile(role="cfo", industry="Retail")
    # 0.5 + 0.3 * 2/4
    assert calculate_confidence_score(sparse, "short") == pytest.approx(0.65)
    long_text = "recommendation timeline " + "x" * 2100
    assert calculate_confidence_score(sparse, long_text) == pytest.approx(0.95)


def test_client_posts_chat_completion(fake_post):
    calls = fake_post(FakeResponse({
        "choices": [{"message": {"content": "Do this."}}],
        "related_questions": ["What next?"],
    }))
    client = PerplexityClient(api_key="k", api_url="https://ai.example/chat", model="m", timeout=5)

    completion = client.complete("system", "user")

    assert completion.content == "Do this."
    assert completion.related_questions == ["What next?"]
    body = calls[0]["json"]
    assert calls[0]["url"] == "https://ai.example/chat"
    assert calls[0]["headers"]["Authorization"] == "Bearer k"
    assert calls[0]["timeout"] == 5
    assert body["model"] == "m"
    assert body["temperature"] == 0.3
    assert body["top_p"] == 0.9
    assert body["max_tokens"] == 2000
    assert [m["role"] for m in body["messages"]] == ["system", "user"]


def test_client_without_key_raises_configuration_error(fake_post):
    calls = fake_post(FakeResponse({}))
    with pytest.raises(AIConfigurationError):
        PerplexityClient(api_key="").complete("s", "u")
    assert calls == []


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse({}, status_code=500),
        FakeResponse(None),
        FakeResponse({"choices": []}),
        FakeResponse({"choices": [{"message": {"content": None}}]}),
        requests.ConnectionError("unreachable"),
    ],
)
def test_client_failures_raise_service_error(fake_post, response):
    fake_post(response)
    with pytest.raises(AIServiceError):
        PerplexityClient(api_key="k").complete("s", "u")


def test_run_assessment_persists_analysis(db: Session, test_user: User, profile, fake_post):
    fake_post(FakeResponse({"choices": [{"message": {"content": SAMPLE_RESPONSE}}], "related_questions": []}))

    analysis = run_assessment(db, test_user.id, AIAnalysisType.CONSULTING, profile, {"team": 4})

    stored = db.query(AIAnalysis).filter(AIAnalysis.id == analysis.id).one()
    assert stored.analysis_type == AIAnalysisType.CONSULTING
    assert stored.input_profile["role"] == "cfo"
    assert stored.specific_context == {"team": 4}
    assert stored.recommendations["implementation_steps"][0] == "1. Automate the monthly close"
    assert stored.raw_response == SAMPLE_RESPONSE
    assert 0.1 <= stored.confidence_score <= 1.0


def test_ai_endpoint_maps_errors(client, make_profile, test_user, fake_post, monkeypatch):
    make_profile(test_user)
    fake_post(FakeResponse({}, status_code=502))
    response = client.post("/api/ai/assessment", json={"analysis_type": "strategy"})
    assert response.status_code == 502

    monkeypatch.setattr(ai_analysis.settings, "PERPLEXITY_API_KEY", None)
    response = client.post("/api/ai/assessment", json={"analysis_type": "strategy"})
    assert response.status_code == 503


def test_ai_endpoint_returns_stored_analysis(client, fake_post):
    fake_post(FakeResponse({"choices": [{"message": {"content": SAMPLE_RESPONSE}}]}))
    response = client.post(
        "/api/ai/assessment",
        json={
            "analysis_type": "organization",
            "user_profile": {"role": "coo", "industry": "Healthcare", "goals": ["Scale operations"]},
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["analysis_type"] == "organization"
    assert body["input_profile"]["industry"] == "Healthcare"
    assert body["recommendations"]["summary"].startswith("Your finance team")


def test_ai_endpoint_requires_profile(client):
    response = client.post("/api/ai/assessment", json={"analysis_type": "consulting"})
    assert response.status_code == 404


def test_ai_endpoint_rejects_null_content(client, db: Session, make_profile, test_user, fake_post):
    make_profile(test_user)
    fake_post(FakeResponse({"choices": [{"message": {"content": None}}]}))

    response = client.post("/api/ai/assessment", json={"analysis_type": "strategy"})

    assert response.status_code == 502
    assert db.query(AIAnalysis).count() == 0
