from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from app.models.maintenance import MaintenancePriority, MaintenanceStatus


class MaintenanceTaskBase(BaseModel):
    property_id: int
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    priority: MaintenancePriority = MaintenancePriority.MEDIUM
    due_date: Optional[date] = None
    assigned_to: Optional[str] = None
    cost: Optional[Decimal] = Field(None, ge=0)


class MaintenanceTaskCreate(MaintenanceTaskBase):
    pass


class MaintenanceTaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    priority: Optional[MaintenancePriority] = None
    status: Optional[MaintenanceStatus] = None
    due_date: Optional[date] = None
    assigned_to: Optional[str] = None
    cost: Optional[Decimal] = Field(None, ge=0)


class MaintenanceTask(MaintenanceTaskBase):
    id: int
    status: MaintenanceStatus
    completed_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
