from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID


class ProfilePayload(BaseModel):
    display_name: Optional[str] = None
    role: str
    industry: str
    company_size: str
    ai_experience: str
    goals: List[str] = Field(default_factory=list)
    primary_focus_areas: List[str] = Field(default_factory=list)
    time_availability: Optional[str] = None
    implementation_timeline: Optional[str] = None


class ProfileResponse(BaseModel):
    id: UUID
    user_id: UUID
    display_name: Optional[str]
    role: Optional[str]
    industry: Optional[str]
    company_size: Optional[str]
    ai_experience: Optional[str]
    goals: Optional[List[str]]
    primary_focus_areas: Optional[List[str]]
    time_availability: Optional[str]
    implementation_timeline: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
