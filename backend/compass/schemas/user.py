from pydantic import BaseModel
from typing import Optional, Dict, List
from datetime import datetime
from uuid import UUID


class MeResponse(BaseModel):
    id: UUID
    auth_user_id: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminUserItem(BaseModel):
    id: UUID
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    display_name: Optional[str] = None
    role: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[str] = None
    ai_experience: Optional[str] = None
    assessment_count: int = 0


class AdminUsersResponse(BaseModel):
    items: List[AdminUserItem]
    total: int


class AdminStatsResponse(BaseModel):
    total_users: int
    users_with_profile: int
    active_users: int  # users tracking at least one tool
    total_tools: int
    active_tools: int
    total_categories: int
    assessments: Dict[str, int]
    recommendations: int
    ai_analyses: int
