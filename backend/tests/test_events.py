"""
Tests for analytics event logging and the /events endpoints.
"""
import time

import pytest
from jose import jwt
from sqlalchemy.orm import Session

from compass.core.config import settings
from compass.models import AnalyticsEvent, User
from compass.utils import instrumentation
from compass.utils.instrumentation import log_event, log_event_best_effort


@pytest.fixture
def events_to_test_db(monkeypatch, session_factory):
    """Point the independent event session at the test database."""
    monkeypatch.setattr(instrumentation, "SessionLocal", session_factory)


def test_log_event_flushes_without_committing(db: Session, test_user: User):
    log_event(db, "tool_viewed", user_id=test_user.id, properties={"tool": "Zapier"})

    event = db.query(AnalyticsEvent).filter(AnalyticsEvent.event_name == "tool_viewed").one()
    assert event.properties == {"tool": "Zapier"}

    db.rollback()
    assert db.query(AnalyticsEvent).count() == 0


def test_best_effort_commits_in_its_own_session(db: Session, test_user: User, events_to_test_db):
    log_event_best_effort("dashboard_opened", user_id=test_user.id, session_id="s-1")

    event = db.query(AnalyticsEvent).filter(AnalyticsEvent.event_name == "dashboard_opened").one()
    assert event.user_id == test_user.id
    assert event.session_id == "s-1"


def test_best_effort_never_raises_without_table(monkeypatch):
    class Broken:
        def __call__(self):
            raise RuntimeError("database unreachable")

    monkeypatch.setattr(instrumentation, "SessionLocal", Broken())
    log_event_best_effort("anything")


def test_track_records_anonymous_events(client, db: Session, events_to_test_db):
    response = client.post(
        "/api/events/track",
        json={"event_name": "wizard_step_viewed", "properties": {"step": 2}, "session_id": "abc"},
        headers={"x-request-id": "req-123"},
    )
    assert response.status_code == 204

    event = db.query(AnalyticsEvent).filter(AnalyticsEvent.event_name == "wizard_step_viewed").one()
    assert event.user_id is None
    assert event.request_id == "req-123"
    assert event.session_id == "abc"
    assert event.properties == {"step": 2}


def test_track_attributes_bearer_token_callers(client, db: Session, events_to_test_db):
    now = int(time.time())
    token = jwt.encode(
        {
            "sub": "tracked-auth-id",
            "email": "tracked@example.com",
            "aud": settings.SUPABASE_JWT_AUD,
            "iss": settings.SUPABASE_JWT_ISS,
            "exp": now + 3600,
        },
        settings.SUPABASE_JWT_SECRET,
        algorithm="HS256",
    )

    response = client.post(
        "/api/events/track",
        json={"event_name": "recommendation_clicked"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 204

    user = db.query(User).filter(User.auth_user_id == "tracked-auth-id").one()
    event = db.query(AnalyticsEvent).filter(AnalyticsEvent.event_name == "recommendation_clicked").one()
    assert event.user_id == user.id
    assert event.request_id


def test_track_ignores_invalid_tokens(client, db: Session, events_to_test_db):
    response = client.post(
        "/api/events/track",
        json={"event_name": "page_viewed"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == 204
    assert db.query(AnalyticsEvent).filter(AnalyticsEvent.event_name == "page_viewed").one().user_id is None


def test_track_rejects_empty_event_name(client):
    assert client.post("/api/events/track", json={"event_name": ""}).status_code == 422


def test_recent_events_lists_callers_events(client, db: Session, test_user: User):
    log_event(db, "assessment_completed", user_id=test_user.id, properties={"assessment_type": "cfo"})
    log_event(db, "someone_elses", user_id=None)
    db.commit()

    response = client.get("/api/events/recent")

    assert response.status_code == 200
    assert [row["event_name"] for row in response.json()] == ["assessment_completed"]


def test_recent_events_hidden_in_production(client, monkeypatch):
    monkeypatch.setattr(settings, "ENVIRONMENT", "production")
    assert client.get("/api/events/recent").status_code == 404
