"""
Endpoint tests for assessment submission, step validation and retrieval.
"""
from sqlalchemy.orm import Session
from compass.models import Assessment, AnalyticsEvent, Profile, ToolRecommendationRecord, User


PERSONAL_PAYLOAD = {
    "work_profile": {"communication_patterns": ["Email", "Slack"]},
    "current_ai_usage": {"tools_used": ["ChatGPT"], "satisfaction": 4},
    "productivity_challenges": {"insight_needs": ["Automate repetitive tasks"]},
    "implementation": {"time_available": "1-2 hours/week", "budget": "$0-$50/month", "comfort_level": 4},
    "success_metrics": {"timeline": "This month"},
}

BUSINESS_PAYLOAD = {
    "business_context": {"industry": "Healthcare", "company_size": "51-200"},
    "process_analysis": {"manual_effort_areas": ["Patient intake"]},
    "organizational_readiness": {"budget_allocation": "$10k-$50k", "implementation_timeline": "3-6 months"},
    "strategic_objectives": {"competitive_advantages": ["Improve customer service"]},
    "current_state": {"ai_tools_in_use": []},
}

CFO_PAYLOAD = {
    "company_profile": {"industry": "Manufacturing", "revenue": "$100M-$1B", "employees": "1000+"},
    "current_stack": {"erp": "NetSuite", "automation_level": "Low"},
    "pain_points": {"manual_processes": ["Variance analysis", "Board deck", "Reconciliations"]},
    "goals": {"time_savings": "20%", "accuracy": True},
}


def test_personal_assessment_creates_profile_and_recommendations(
    client, db: Session, test_user: User, make_tool
):
    make_tool("Solo Assistant", target_roles=["individual"], target_industries=["technology"])

    response = client.post("/api/assessments/personal_productivity", json=PERSONAL_PAYLOAD)

    assert response.status_code == 201
    body = response.json()
    assert body["assessment_type"] == "personal_productivity"
    assert body["status"] == "completed"
    assert body["assessment_score"] is None

    profile = db.query(Profile).filter(Profile.user_id == test_user.id).one()
    assert profile.role == "individual"
    assert profile.ai_experience == "intermediate"
    assert profile.goals == ["Automate repetitive tasks"]
    assert profile.implementation_timeline == "This month"

    recs = db.query(ToolRecommendationRecord).filter(ToolRecommendationRecord.user_id == test_user.id).all()
    assert [rec.tool.name for rec in recs] == ["Solo Assistant"]

    event = db.query(AnalyticsEvent).filter(AnalyticsEvent.event_name == "assessment_completed").one()
    assert event.properties["assessment_type"] == "personal_productivity"


def test_business_assessment_keeps_existing_role(client, db: Session, test_user: User, make_profile):
    make_profile(test_user, role="coo")

    response = client.post("/api/assessments/business_transformation", json=BUSINESS_PAYLOAD)

    assert response.status_code == 201
    db.expire_all()
    profile = db.query(Profile).filter(Profile.user_id == test_user.id).one()
    assert profile.role == "coo"
    assert profile.industry == "Healthcare"
    assert profile.company_size == "51-200"
    assert profile.ai_experience == "never"
    assert profile.goals == ["Improve customer service"]


def test_cfo_assessment_is_scored_and_leaves_profile_alone(client, db: Session, test_user: User):
    response = client.post("/api/assessments/cfo", json=CFO_PAYLOAD)

    assert response.status_code == 201
    # revenue 30 + 3 processes * 5 + 2 goals * 10 + low automation 25
    assert response.json()["assessment_score"] == 90
    assert response.json()["assessment_data"]["company_profile"]["employees"] == "1000+"
    assert db.query(Profile).filter(Profile.user_id == test_user.id).first() is None


def test_invalid_payload_is_rejected(client, db: Session):
    bad = {"current_ai_usage": {"satisfaction": 9}}
    response = client.post("/api/assessments/personal_productivity", json=bad)
    assert response.status_code == 422
    assert db.query(Assessment).count() == 0


def test_validate_step_reports_missing_fields(client):
    response = client.post(
        "/api/assessments/cfo/steps/1/validate",
        json={"answers": {"industry": "Retail", "revenue": "  "}},
    )

    assert response.status_code == 200
    body = response.json()
    assert body == {
        "valid": False,
        "step": 1,
        "total_steps": 4,
        "section": "company_profile",
        "missing_fields": ["revenue", "employees"],
        "progress": 25.0,
    }


def test_validate_step_accepts_complete_answers(client):
    response = client.post(
        "/api/assessments/personal_productivity/steps/5/validate",
        json={"answers": {"timeline": "This week"}},
    )
    assert response.status_code == 200
    assert response.json()["valid"] is True
    assert response.json()["progress"] == 100.0


def test_validate_step_out_of_range_or_unknown_type(client):
    assert client.post("/api/assessments/cfo/steps/5/validate", json={"answers": {}}).status_code == 400
    assert client.post("/api/assessments/cfo/steps/0/validate", json={"answers": {}}).status_code == 400
    assert client.post("/api/assessments/quiz/steps/1/validate", json={"answers": {}}).status_code == 400


def test_latest_returns_newest_of_requested_type(client, db: Session, test_user: User):
    from datetime import datetime, timedelta
    from compass.models import AssessmentType

    db.add(Assessment(
        user_id=test_user.id,
        assessment_type=AssessmentType.CFO,
        assessment_data={},
        created_at=datetime.utcnow() - timedelta(days=7),
    ))
    db.commit()
    newest = client.post("/api/assessments/cfo", json=CFO_PAYLOAD).json()
    client.post("/api/assessments/personal_productivity", json=PERSONAL_PAYLOAD)

    response = client.get("/api/assessments/latest", params={"assessment_type": "cfo"})

    assert response.status_code == 200
    assert response.json()["id"] == newest["id"]


def test_latest_missing_and_unknown_type(client):
    assert client.get("/api/assessments/latest", params={"assessment_type": "cfo"}).status_code == 404
    assert client.get("/api/assessments/latest", params={"assessment_type": "quiz"}).status_code == 400


def test_list_assessments_only_returns_callers_rows(client, db: Session):
    from compass.core.user_helpers import get_or_create_user_by_auth_id
    from compass.models import AssessmentType

    other = get_or_create_user_by_auth_id(db=db, auth_user_id="other-auth", email="other@example.com")
    db.add(Assessment(user_id=other.id, assessment_type=AssessmentType.CFO, assessment_data={}))
    db.commit()

    client.post("/api/assessments/cfo", json=CFO_PAYLOAD)
    client.post("/api/assessments/business_transformation", json=BUSINESS_PAYLOAD)

    response = client.get("/api/assessments")
    assert response.status_code == 200
    assert sorted(row["assessment_type"] for row in response.json()) == ["business_transformation", "cfo"]
