from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from app.schemas.cleaning_team import CleaningTeam
from app.schemas.owner import Owner


class PropertyBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    aliases: List[str] = Field(
        default_factory=list,
        description="Alternative names used when matching OCR documents",
    )
    owner_id: int
    cleaning_team_id: Optional[int] = None
    cleaning_cost: Decimal = Field(Decimal("0"), ge=0)
    check_in_fee: Decimal = Field(Decimal("0"), ge=0)
    commission: Decimal = Field(
        Decimal("0"), ge=0, le=100, description="Commission percentage"
    )
    team_payment: Decimal = Field(Decimal("0"), ge=0)
    monthly_fixed_cost: Decimal = Field(Decimal("0"), ge=0)
    active: bool = True


class PropertyCreate(PropertyBase):
    pass


class PropertyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    aliases: Optional[List[str]] = None
    owner_id: Optional[int] = None
    cleaning_team_id: Optional[int] = None
    cleaning_cost: Optional[Decimal] = Field(None, ge=0)
    check_in_fee: Optional[Decimal] = Field(None, ge=0)
    commission: Optional[Decimal] = Field(None, ge=0, le=100)
    team_payment: Optional[Decimal] = Field(None, ge=0)
    monthly_fixed_cost: Optional[Decimal] = Field(None, ge=0)
    active: Optional[bool] = None


class Property(PropertyBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True


class PropertyWithDetails(Property):
    owner: Owner
    cleaning_team: Optional[CleaningTeam] = None
