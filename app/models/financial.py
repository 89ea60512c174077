import enum

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from app.models.base import Base, utcnow


class DocumentType(enum.Enum):
    INCOMING = "incoming"
    OUTGOING = "outgoing"


class DocumentStatus(enum.Enum):
    PENDING = "pending"
    INVOICED = "invoiced"
    PARTIAL = "partial"
    PAID = "paid"
    CANCELLED = "cancelled"


class EntityType(enum.Enum):
    OWNER = "owner"
    SUPPLIER = "supplier"


class PaymentMethod(enum.Enum):
    TRANSFER = "transfer"
    CASH = "cash"
    CARD = "card"
    CHECK = "check"
    OTHER = "other"


class FinancialDocument(Base):
    __tablename__ = "financial_documents"

    id = Column(Integer, primary_key=True, index=True)
    reference = Column(String(100), nullable=False, index=True)
    type = Column(Enum(DocumentType), nullable=False)
    status = Column(Enum(DocumentStatus), default=DocumentStatus.PENDING, nullable=False)
    date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=True)
    description = Column(Text, nullable=True)

    entity_type = Column(Enum(EntityType), nullable=False)
    entity_id = Column(Integer, nullable=True)
    entity_name = Column(String(255), nullable=True)

    total_amount = Column(Numeric(10, 2), default=0, nullable=False)
    paid_amount = Column(Numeric(10, 2), default=0, nullable=False)
    invoice_number = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    items = relationship(
        "FinancialDocumentItem",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="FinancialDocumentItem.id",
    )
    payments = relationship(
        "PaymentRecord",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="PaymentRecord.id",
    )


class FinancialDocumentItem(Base):
    __tablename__ = "financial_document_items"

    id = Column(Integer, primary_key=True, index=True)
    document_id = Column(
        Integer, ForeignKey("financial_documents.id"), nullable=False, index=True
    )
    description = Column(String(255), nullable=False)
    quantity = Column(Numeric(10, 2), default=1, nullable=False)
    unit_price = Column(Numeric(10, 2), default=0, nullable=False)
    amount = Column(Numeric(10, 2), default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    document = relationship("FinancialDocument", back_populates="items")


class PaymentRecord(Base):
    __tablename__ = "payment_records"

    id = Column(Integer, primary_key=True, index=True)
    document_id = Column(
        Integer, ForeignKey("financial_documents.id"), nullable=False, index=True
    )
    amount = Column(Numeric(10, 2), nullable=False)
    payment_date = Column(Date, nullable=False)
    method = Column(Enum(PaymentMethod), default=PaymentMethod.TRANSFER, nullable=False)
    reference = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    document = relationship("FinancialDocument", back_populates="payments")
