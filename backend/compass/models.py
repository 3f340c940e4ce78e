from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, Enum as SQLEnum, JSON, Float, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime
import enum
import sqlalchemy as sa
from compass.database import Base


class AssessmentType(str, enum.Enum):
    PERSONAL_PRODUCTIVITY = "personal_productivity"
    BUSINESS_TRANSFORMATION = "business_transformation"
    CFO = "cfo"


class AIAnalysisType(str, enum.Enum):
    CONSULTING = "consulting"
    ORGANIZATION = "organization"
    STRATEGY = "strategy"


class SetupDifficulty(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ToolStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ProgressStatus(str, enum.Enum):
    INTERESTED = "interested"
    PLANNING = "planning"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    auth_user_id = Column(String, unique=True, index=True, nullable=True)  # Supabase user UUID
    email = Column(String, index=True, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    profile = relationship("Profile", back_populates="user", uselist=False)
    assessments = relationship("Assessment", back_populates="user")


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), unique=True, nullable=False)
    display_name = Column(String, nullable=True)
    role = Column(String, nullable=True)
    industry = Column(String, nullable=True)
    company_size = Column(String, nullable=True)
    ai_experience = Column(String, nullable=True)
    goals = Column(JSON, nullable=True)
    primary_focus_areas = Column(JSON, nullable=True)
    time_availability = Column(String, nullable=True)
    implementation_timeline = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="profile")


class Category(Base):
    __tablename__ = "categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, unique=True, nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String, nullable=True)
    icon = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    tools = relationship("Tool", back_populates="category")


class Tool(Base):
    __tablename__ = "tools"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)
    category_id = Column(Uuid, ForeignKey("categories.id"), nullable=True)
    pricing_model = Column(String, nullable=True)
    pricing_amount = Column(Float, nullable=True)
    website_url = Column(String, nullable=True)
    logo_url = Column(String, nullable=True)
    setup_difficulty = Column(String, nullable=True)  # easy | medium | hard
    time_to_value = Column(String, nullable=True)  # minutes | hours | days | weeks
    target_roles = Column(JSON, nullable=True)
    target_industries = Column(JSON, nullable=True)
    target_company_sizes = Column(JSON, nullable=True)
    features = Column(JSON, nullable=True)
    integrations = Column(JSON, nullable=True)
    pros = Column(JSON, nullable=True)
    cons = Column(JSON, nullable=True)
    user_rating = Column(Float, nullable=True)
    expert_rating = Column(Float, nullable=True)
    popularity_score = Column(Float, nullable=True)
    implementation_guide = Column(Text, nullable=True)
    video_tutorial_url = Column(String, nullable=True)
    status = Column(String, nullable=False, default=ToolStatus.ACTIVE.value, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    category = relationship("Category", back_populates="tools")

    @property
    def category_name(self):
        return self.category.name if self.category else None


class ToolRecommendationRecord(Base):
    """
    Derived cache of scored tools for a user.
    Replaced wholesale (delete-then-insert) on every scoring run; no history kept.
    """
    __tablename__ = "tool_recommendations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    tool_id = Column(Uuid, ForeignKey("tools.id"), nullable=False)
    recommendation_score = Column(Float, nullable=False)
    reason = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="active")
    created_at = Column(DateTime, default=datetime.utcnow)

    tool = relationship("Tool")


class Assessment(Base):
    """Append-only record of a completed wizard. Latest-of-type wins."""
    __tablename__ = "assessments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    assessment_type = Column(
        SQLEnum(
            AssessmentType,
            name="assessmenttype",
            values_callable=lambda enum: [e.value for e in enum],
        ),
        nullable=False,
        index=True,
    )
    assessment_data = Column(JSON, nullable=False)
    assessment_score = Column(Float, nullable=True)
    status = Column(String, nullable=False, default="completed")
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    user = relationship("User", back_populates="assessments")


class AIAnalysis(Base):
    __tablename__ = "ai_analyses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    analysis_type = Column(
        SQLEnum(
            AIAnalysisType,
            name="aianalysistype",
            values_callable=lambda enum: [e.value for e in enum],
        ),
        nullable=False,
    )
    input_profile = Column(JSON, nullable=False)
    specific_context = Column(JSON, nullable=True)
    recommendations = Column(JSON, nullable=True)
    related_questions = Column(JSON, nullable=True)
    confidence_score = Column(Float, nullable=True)
    raw_response = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class ImplementationProgress(Base):
    __tablename__ = "implementation_progress"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    tool_id = Column(Uuid, ForeignKey("tools.id"), nullable=False)
    status = Column(String, nullable=False, default=ProgressStatus.INTERESTED.value)
    time_invested_minutes = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    tool = relationship("Tool")

    __table_args__ = (
        UniqueConstraint('user_id', 'tool_id', name='uq_implementation_progress_user_tool'),
    )


class AnalyticsEvent(Base):
    __tablename__ = "analytics_events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime(timezone=True), server_default=sa.func.now(), nullable=False, index=True)
    user_id = Column(Uuid, nullable=True, index=True)
    event_name = Column(String, nullable=False, index=True)
    properties = Column(JSON, nullable=True)
    request_id = Column(String, nullable=True)
    session_id = Column(String, nullable=True)
