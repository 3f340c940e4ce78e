from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from datetime import datetime
from uuid import UUID


class TrackEventRequest(BaseModel):
    event_name: str = Field(..., min_length=1, max_length=100)
    properties: Optional[Dict[str, Any]] = None
    session_id: Optional[str] = None


class EventResponse(BaseModel):
    id: UUID
    event_name: str
    properties: Optional[Dict[str, Any]]
    request_id: Optional[str]
    session_id: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True
