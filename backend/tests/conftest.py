"""Pytest configuration for backend tests."""
import sys
import os
from pathlib import Path
from typing import Callable
from uuid import uuid4
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Settings are read at import time; give the app a throwaway configuration.
# An in-memory SQLite URL keeps the app's own engine away from any real database.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SUPABASE_URL", "https://testproject.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ADMIN_EMAIL_ALLOWLIST", "admin@example.com")
os.environ.setdefault("PERPLEXITY_API_KEY", "test-perplexity-key")

from fastapi.testclient import TestClient

from compass.database import Base, get_db
from compass.core.auth import get_current_user
from compass.core.supabase_auth import get_admin_user
from compass.core.user_helpers import get_or_create_user_by_auth_id

# Import the entire models module to ensure all models are registered with Base.metadata
import compass.models  # noqa: F401
from compass.models import User, Category, Tool, Profile


TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")


@pytest.fixture(scope="function")
def engine():
    """
    Fresh schema per test.

    Uses TEST_DATABASE_URL (Postgres) when set; otherwise a single shared
    in-memory SQLite connection. Models only use portable column types.
    """
    if TEST_DATABASE_URL:
        test_engine = create_engine(TEST_DATABASE_URL, pool_pre_ping=True, echo=False)
    else:
        test_engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    if not Base.metadata.tables:
        raise RuntimeError(
            "No tables registered in Base.metadata. "
            "Did you import compass.models? All model classes must be imported before create_all()."
        )

    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture(scope="function")
def db(session_factory) -> Session:
    """Database session for each test; matches production session settings."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def test_user(db: Session) -> User:
    """A local user linked to a Supabase-style auth id."""
    return get_or_create_user_by_auth_id(
        db=db,
        auth_user_id=str(uuid4()),
        email="test@example.com",
    )


@pytest.fixture
def make_category(db: Session) -> Callable[..., Category]:
    def _make(name: str, **fields) -> Category:
        category = Category(name=name, **fields)
        db.add(category)
        db.commit()
        db.refresh(category)
        return category
    return _make


@pytest.fixture
def make_tool(db: Session) -> Callable[..., Tool]:
    """Factory for catalog tools with neutral defaults (no targets, medium setup)."""
    def _make(name: str, **fields) -> Tool:
        values = {
            "description": f"{name} description",
            "setup_difficulty": "medium",
            "time_to_value": "days",
            "target_roles": [],
            "target_industries": [],
            "target_company_sizes": [],
            "features": [],
        }
        values.update(fields)
        tool = Tool(name=name, **values)
        db.add(tool)
        db.commit()
        db.refresh(tool)
        return tool
    return _make


@pytest.fixture
def make_profile(db: Session) -> Callable[..., Profile]:
    def _make(user: User, **fields) -> Profile:
        values = {
            "role": "cfo",
            "industry": "Finance",
            "company_size": "201-1000",
            "ai_experience": "never",
            "goals": ["Reduce operational costs"],
            "time_availability": "1-2 hours/week",
            "implementation_timeline": "This week",
        }
        values.update(fields)
        profile = Profile(user_id=user.id, **values)
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile
    return _make


@pytest.fixture
def client(db: Session, test_user: User):
    """TestClient authenticated as test_user and sharing the test session."""
    from compass.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: test_user
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin_client(db: Session):
    """TestClient passing the admin gate."""
    from compass.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_admin_user] = lambda: {
        "id": "admin-auth-id",
        "email": "admin@example.com",
        "auth_user_id": "admin-auth-id",
        "claims": {},
    }
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
