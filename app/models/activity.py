import enum

from sqlalchemy import Column, DateTime, Integer, String, Text

from app.models.base import Base, utcnow


class ActivityType(str, enum.Enum):
    RESERVATION_CREATED = "reservation_created"
    RESERVATION_UPDATED = "reservation_updated"
    RESERVATION_DELETED = "reservation_deleted"
    PROPERTY_CREATED = "property_created"
    PROPERTY_UPDATED = "property_updated"
    PROPERTY_DELETED = "property_deleted"
    OWNER_CREATED = "owner_created"
    OWNER_UPDATED = "owner_updated"
    OWNER_DELETED = "owner_deleted"
    PDF_PROCESSED = "pdf_processed"
    CLEANING_COMPLETED = "cleaning_completed"
    MAINTENANCE_REQUESTED = "maintenance_requested"
    QUOTATION_CREATED = "quotation_created"
    QUOTATION_UPDATED = "quotation_updated"
    QUOTATION_DELETED = "quotation_deleted"
    FINANCIAL_DOCUMENT_CREATED = "financial_document_created"
    FINANCIAL_DOCUMENT_UPDATED = "financial_document_updated"
    FINANCIAL_DOCUMENT_DELETED = "financial_document_deleted"
    PAYMENT_RECORDED = "payment_recorded"
    PAYMENT_DELETED = "payment_deleted"
    REPORT_SENT = "report_sent"
    DEMO_DATA_MARKER = "demo_data_marker"


class Activity(Base):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=False)
    entity_id = Column(Integer, nullable=True)
    entity_type = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
