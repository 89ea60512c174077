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


class ReservationStatus(enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class ReservationPlatform(enum.Enum):
    DIRECT = "direct"
    AIRBNB = "airbnb"
    BOOKING = "booking"
    EXPEDIA = "expedia"
    OTHER = "other"


class ReservationSource(enum.Enum):
    MANUAL = "manual"
    OCR = "ocr"
    DEMO = "demo"


class Reservation(Base):
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False)

    guest_name = Column(String(255), nullable=False)
    guest_email = Column(String(255), nullable=True)
    guest_phone = Column(String(50), nullable=True)

    check_in_date = Column(Date, nullable=False)
    check_out_date = Column(Date, nullable=False)
    num_guests = Column(Integer, default=1, nullable=False)

    status = Column(
        Enum(ReservationStatus), default=ReservationStatus.PENDING, nullable=False
    )
    platform = Column(
        Enum(ReservationPlatform), default=ReservationPlatform.DIRECT, nullable=False
    )
    source = Column(
        Enum(ReservationSource), default=ReservationSource.MANUAL, nullable=False
    )

    # Money: fees are copied from the property when the reservation is priced
    total_amount = Column(Numeric(10, 2), default=0, nullable=False)
    platform_fee = Column(Numeric(10, 2), default=0, nullable=False)
    cleaning_fee = Column(Numeric(10, 2), default=0, nullable=False)
    check_in_fee = Column(Numeric(10, 2), default=0, nullable=False)
    commission_fee = Column(Numeric(10, 2), default=0, nullable=False)
    team_payment = Column(Numeric(10, 2), default=0, nullable=False)
    net_amount = Column(Numeric(10, 2), default=0, nullable=False)

    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    property = relationship("Property", back_populates="reservations")
