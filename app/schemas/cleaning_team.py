from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from app.models.cleaning_team import CleaningTeamStatus


class CleaningTeamBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    manager: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    rating: int = Field(5, ge=1, le=5)
    status: CleaningTeamStatus = CleaningTeamStatus.ACTIVE


class CleaningTeamCreate(CleaningTeamBase):
    pass


class CleaningTeamUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    manager: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    status: Optional[CleaningTeamStatus] = None


class CleaningTeam(CleaningTeamBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True
