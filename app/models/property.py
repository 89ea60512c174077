from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import relationship

from app.models.base import Base, utcnow


class Property(Base):
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    aliases = Column(JSON, nullable=False, default=list)  # ["Apt. Sé", "Sé T1"]
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=False, index=True)
    cleaning_team_id = Column(Integer, ForeignKey("cleaning_teams.id"), nullable=True)

    # Per-reservation costs
    cleaning_cost = Column(Numeric(10, 2), default=0, nullable=False)
    check_in_fee = Column(Numeric(10, 2), default=0, nullable=False)
    commission = Column(Numeric(5, 2), default=0, nullable=False)  # percent
    team_payment = Column(Numeric(10, 2), default=0, nullable=False)
    monthly_fixed_cost = Column(Numeric(10, 2), default=0, nullable=False)

    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    owner = relationship("Owner", back_populates="properties")
    cleaning_team = relationship("CleaningTeam", back_populates="properties")
    reservations = relationship(
        "Reservation", back_populates="property", cascade="all, delete-orphan"
    )
    maintenance_tasks = relationship(
        "MaintenanceTask", back_populates="property", cascade="all, delete-orphan"
    )
