import enum

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    Integer,
    Numeric,
    String,
    Text,
)

from app.models.base import Base, utcnow


class QuotationStatus(enum.Enum):
    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"


class Quotation(Base):
    __tablename__ = "quotations"

    id = Column(Integer, primary_key=True, index=True)
    client_name = Column(String(255), nullable=False)
    client_email = Column(String(255), nullable=True)
    client_phone = Column(String(50), nullable=True)
    status = Column(Enum(QuotationStatus), default=QuotationStatus.DRAFT, nullable=False)

    # Property being quoted
    property_type = Column(String(50), nullable=False)  # apartment, house, villa...
    property_address = Column(Text, nullable=True)
    total_area = Column(Integer, nullable=False)
    bedrooms = Column(Integer, default=0, nullable=False)
    bathrooms = Column(Integer, default=0, nullable=False)
    has_exterior_space = Column(Boolean, default=False, nullable=False)
    exterior_area = Column(Integer, default=0, nullable=False)
    is_duplex = Column(Boolean, default=False, nullable=False)
    has_bbq = Column(Boolean, default=False, nullable=False)
    has_garden = Column(Boolean, default=False, nullable=False)
    has_glass_surfaces = Column(Boolean, default=False, nullable=False)

    base_price = Column(Numeric(10, 2), nullable=False)
    additional_price = Column(Numeric(10, 2), default=0, nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)

    valid_until = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
