import enum

from sqlalchemy import Column, DateTime, Enum, Integer, String
from sqlalchemy.orm import relationship

from app.models.base import Base, utcnow


class CleaningTeamStatus(enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class CleaningTeam(Base):
    __tablename__ = "cleaning_teams"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    manager = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    rating = Column(Integer, default=5, nullable=False)
    status = Column(
        Enum(CleaningTeamStatus), default=CleaningTeamStatus.ACTIVE, nullable=False
    )
    created_at = Column(DateTime, default=utcnow, nullable=False)

    properties = relationship("Property", back_populates="cleaning_team")
