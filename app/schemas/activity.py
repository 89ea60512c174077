from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.activity import ActivityType


class ActivityCreate(BaseModel):
    type: ActivityType
    description: str = Field(..., min_length=1)
    entity_id: Optional[int] = None
    entity_type: Optional[str] = None


class Activity(BaseModel):
    id: int
    type: str
    description: str
    entity_id: Optional[int] = None
    entity_type: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
