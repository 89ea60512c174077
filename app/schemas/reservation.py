from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, model_validator

from app.models.reservation import (
    ReservationPlatform,
    ReservationSource,
    ReservationStatus,
)


class ReservationBase(BaseModel):
    property_id: int
    guest_name: str = Field(..., min_length=1, max_length=255)
    guest_email: Optional[EmailStr] = None
    guest_phone: Optional[str] = None
    check_in_date: date
    check_out_date: date
    num_guests: int = Field(1, ge=1, description="Number of guests, at least 1")
    total_amount: Decimal = Field(Decimal("0"), ge=0)
    platform_fee: Decimal = Field(Decimal("0"), ge=0)
    status: ReservationStatus = ReservationStatus.PENDING
    platform: ReservationPlatform = ReservationPlatform.DIRECT
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.check_out_date <= self.check_in_date:
            raise ValueError("Check-out date must be after check-in date")
        return self


class ReservationCreate(ReservationBase):
    source: ReservationSource = ReservationSource.MANUAL


class ReservationUpdate(BaseModel):
    property_id: Optional[int] = None
    guest_name: Optional[str] = Field(None, min_length=1, max_length=255)
    guest_email: Optional[EmailStr] = None
    guest_phone: Optional[str] = None
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    num_guests: Optional[int] = Field(None, ge=1)
    total_amount: Optional[Decimal] = Field(None, ge=0)
    platform_fee: Optional[Decimal] = Field(None, ge=0)
    status: Optional[ReservationStatus] = None
    platform: Optional[ReservationPlatform] = None
    notes: Optional[str] = None


class Reservation(ReservationBase):
    id: int
    source: ReservationSource
    cleaning_fee: Decimal
    check_in_fee: Decimal
    commission_fee: Decimal
    team_payment: Decimal
    net_amount: Decimal
    created_at: datetime

    class Config:
        from_attributes = True


class ReservationAvailability(BaseModel):
    """Overlapping active reservations for a property and date range."""

    property_id: int
    check_in_date: date
    check_out_date: date
    is_available: bool
    conflicting_reservation_ids: List[int] = []
