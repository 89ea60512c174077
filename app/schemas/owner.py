from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, EmailStr, Field


class OwnerBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    company: Optional[str] = None
    address: Optional[str] = None
    tax_id: Optional[str] = None
    email: Optional[Union[EmailStr, Literal[""]]] = None
    phone: Optional[str] = None


class OwnerCreate(OwnerBase):
    pass


class OwnerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    company: Optional[str] = None
    address: Optional[str] = None
    tax_id: Optional[str] = None
    email: Optional[Union[EmailStr, Literal[""]]] = None
    phone: Optional[str] = None


class Owner(OwnerBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True


class OwnerPropertySummary(BaseModel):
    id: int
    name: str
    active: bool

    class Config:
        from_attributes = True


class OwnerWithProperties(Owner):
    properties: List[OwnerPropertySummary] = []
