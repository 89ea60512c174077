import datetime as dt
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.financial import (
    DocumentStatus,
    DocumentType,
    EntityType,
    PaymentMethod,
)


class DocumentItemBase(BaseModel):
    description: str = Field(..., min_length=1, max_length=255)
    quantity: Decimal = Field(Decimal("1"), gt=0)
    unit_price: Decimal = Field(Decimal("0"), ge=0)


class DocumentItemCreate(DocumentItemBase):
    pass


class DocumentItemUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    quantity: Optional[Decimal] = Field(None, gt=0)
    unit_price: Optional[Decimal] = Field(None, ge=0)


class DocumentItem(DocumentItemBase):
    id: int
    document_id: int
    amount: Decimal

    class Config:
        from_attributes = True


class PaymentBase(BaseModel):
    amount: Decimal = Field(..., gt=0, description="Payment amount must be greater than 0")
    payment_date: dt.date = Field(default_factory=dt.date.today)
    method: PaymentMethod = PaymentMethod.TRANSFER
    reference: Optional[str] = None
    notes: Optional[str] = None


class PaymentCreate(PaymentBase):
    pass


class PaymentUpdate(BaseModel):
    amount: Optional[Decimal] = Field(None, gt=0)
    payment_date: Optional[dt.date] = None
    method: Optional[PaymentMethod] = None
    reference: Optional[str] = None
    notes: Optional[str] = None


class Payment(PaymentBase):
    id: int
    document_id: int
    created_at: dt.datetime

    class Config:
        from_attributes = True


class FinancialDocumentBase(BaseModel):
    reference: str = Field(..., min_length=1, max_length=100)
    type: DocumentType
    date: dt.date
    due_date: Optional[dt.date] = None
    description: Optional[str] = None
    entity_type: EntityType
    entity_id: Optional[int] = None
    entity_name: Optional[str] = None
    invoice_number: Optional[str] = None
    notes: Optional[str] = None


class FinancialDocumentCreate(FinancialDocumentBase):
    status: DocumentStatus = DocumentStatus.PENDING
    total_amount: Decimal = Field(
        Decimal("0"), ge=0, description="Ignored when items are given"
    )
    items: List[DocumentItemCreate] = []


class FinancialDocumentUpdate(BaseModel):
    reference: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[DocumentType] = None
    status: Optional[DocumentStatus] = None
    date: Optional[dt.date] = None
    due_date: Optional[dt.date] = None
    description: Optional[str] = None
    entity_type: Optional[EntityType] = None
    entity_id: Optional[int] = None
    entity_name: Optional[str] = None
    total_amount: Optional[Decimal] = Field(None, ge=0)
    invoice_number: Optional[str] = None
    notes: Optional[str] = None


class FinancialDocument(FinancialDocumentBase):
    id: int
    status: DocumentStatus
    total_amount: Decimal
    paid_amount: Decimal
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True


class FinancialDocumentWithDetails(FinancialDocument):
    items: List[DocumentItem] = []
    payments: List[Payment] = []
