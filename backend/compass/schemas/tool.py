from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from compass.models import SetupDifficulty, ToolStatus


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("name cannot be null")
        return v


class CategoryResponse(CategoryBase):
    id: UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ToolBase(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(..., min_length=1)
    description: str
    category_id: Optional[UUID] = None
    pricing_model: Optional[str] = None
    pricing_amount: Optional[float] = None
    website_url: Optional[str] = None
    logo_url: Optional[str] = None
    setup_difficulty: Optional[SetupDifficulty] = None
    time_to_value: Optional[str] = None  # minutes | hours | days | weeks
    target_roles: List[str] = Field(default_factory=list)
    target_industries: List[str] = Field(default_factory=list)
    target_company_sizes: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    integrations: List[str] = Field(default_factory=list)
    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)
    user_rating: Optional[float] = Field(None, ge=0, le=5)
    expert_rating: Optional[float] = Field(None, ge=0, le=5)
    popularity_score: Optional[float] = None
    implementation_guide: Optional[str] = None
    video_tutorial_url: Optional[str] = None
    status: ToolStatus = Field(ToolStatus.ACTIVE, validate_default=True)


class ToolCreate(ToolBase):
    pass


class ToolUpdate(BaseModel):
    """Partial update; only fields present in the request are applied."""
    model_config = ConfigDict(use_enum_values=True)

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category_id: Optional[UUID] = None
    pricing_model: Optional[str] = None
    pricing_amount: Optional[float] = None
    website_url: Optional[str] = None
    logo_url: Optional[str] = None
    setup_difficulty: Optional[SetupDifficulty] = None
    time_to_value: Optional[str] = None
    target_roles: Optional[List[str]] = None
    target_industries: Optional[List[str]] = None
    target_company_sizes: Optional[List[str]] = None
    features: Optional[List[str]] = None
    integrations: Optional[List[str]] = None
    pros: Optional[List[str]] = None
    cons: Optional[List[str]] = None
    user_rating: Optional[float] = Field(None, ge=0, le=5)
    expert_rating: Optional[float] = Field(None, ge=0, le=5)
    popularity_score: Optional[float] = None
    implementation_guide: Optional[str] = None
    video_tutorial_url: Optional[str] = None
    status: Optional[ToolStatus] = None

    @field_validator(
        "name",
        "description",
        "status",
        "target_roles",
        "target_industries",
        "target_company_sizes",
        "features",
        "integrations",
        "pros",
        "cons",
    )
    @classmethod
    def required_columns_not_null(cls, v, info):
        # Omit a field to leave it unchanged; null would blank a required column
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class ToolResponse(BaseModel):
    id: UUID
    name: str
    description: str
    category_id: Optional[UUID]
    category_name: Optional[str] = None
    pricing_model: Optional[str]
    pricing_amount: Optional[float]
    website_url: Optional[str]
    logo_url: Optional[str]
    setup_difficulty: Optional[str]
    time_to_value: Optional[str]
    target_roles: Optional[List[str]]
    target_industries: Optional[List[str]]
    target_company_sizes: Optional[List[str]]
    features: Optional[List[str]]
    integrations: Optional[List[str]]
    pros: Optional[List[str]]
    cons: Optional[List[str]]
    user_rating: Optional[float]
    expert_rating: Optional[float]
    popularity_score: Optional[float]
    implementation_guide: Optional[str]
    video_tutorial_url: Optional[str]
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
