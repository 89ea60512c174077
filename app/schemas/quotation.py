from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from app.models.quotation import QuotationStatus


class QuotationPricingInput(BaseModel):
    """Property characteristics that drive the quoted price."""

    base_price: Decimal = Field(..., ge=0)
    has_exterior_space: bool = False
    exterior_area: int = Field(0, ge=0, description="Exterior area in m²")
    is_duplex: bool = False
    has_bbq: bool = False
    has_garden: bool = False
    has_glass_surfaces: bool = False


class QuotationPrice(BaseModel):
    base_price: Decimal
    additional_price: Decimal
    total_price: Decimal


class QuotationBase(QuotationPricingInput):
    client_name: str = Field(..., min_length=1, max_length=255)
    client_email: Optional[EmailStr] = None
    client_phone: Optional[str] = None
    property_type: str = Field(..., min_length=1, max_length=50)
    property_address: Optional[str] = None
    total_area: int = Field(..., gt=0, description="Total area in m²")
    bedrooms: int = Field(0, ge=0)
    bathrooms: int = Field(0, ge=0)
    notes: Optional[str] = None


class QuotationCreate(QuotationBase):
    status: QuotationStatus = QuotationStatus.DRAFT
    valid_until: Optional[date] = None


class QuotationUpdate(BaseModel):
    client_name: Optional[str] = Field(None, min_length=1, max_length=255)
    client_email: Optional[EmailStr] = None
    client_phone: Optional[str] = None
    status: Optional[QuotationStatus] = None
    property_type: Optional[str] = Field(None, min_length=1, max_length=50)
    property_address: Optional[str] = None
    total_area: Optional[int] = Field(None, gt=0)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    has_exterior_space: Optional[bool] = None
    exterior_area: Optional[int] = Field(None, ge=0)
    is_duplex: Optional[bool] = None
    has_bbq: Optional[bool] = None
    has_garden: Optional[bool] = None
    has_glass_surfaces: Optional[bool] = None
    base_price: Optional[Decimal] = Field(None, ge=0)
    valid_until: Optional[date] = None
    notes: Optional[str] = None


class Quotation(QuotationBase):
    id: int
    status: QuotationStatus
    additional_price: Decimal
    total_price: Decimal
    valid_until: date
    created_at: datetime

    class Config:
        from_attributes = True
