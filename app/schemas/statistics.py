"""
Response schemas for dashboard statistics and owner/financial reports.
"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from app.schemas.financial import FinancialDocument


class PropertyOccupancy(BaseModel):
    property_id: int = Field(..., description="Property ID", example=3)
    name: str = Field(..., description="Property name", example="Apartamento Sé")
    occupancy_rate: float = Field(
        ..., description="Occupancy rate as a percentage (0-100)", example=72.5
    )
    revenue: Decimal = Field(..., description="Revenue in the period", example=2300.00)


class DashboardStatistics(BaseModel):
    """Headline numbers for the dashboard."""

    period_start: date
    period_end: date
    total_revenue: Decimal = Field(
        ..., description="Sum of reservation totals with check-in in the period"
    )
    net_profit: Decimal = Field(
        ..., description="Sum of reservation net amounts with check-in in the period"
    )
    occupancy_rate: float = Field(
        ..., description="Occupancy across active properties (0-100)", example=64.0
    )
    active_properties: int = Field(..., example=12)
    reservations_count: int = Field(..., example=48)
    top_properties: List[PropertyOccupancy] = Field(
        ..., description="Up to five properties with the highest occupancy"
    )


class PropertyStatistics(BaseModel):
    property_id: int
    period_start: date
    period_end: date
    total_revenue: Decimal
    total_costs: Decimal = Field(
        ..., description="Cleaning, check-in, commission and team payments"
    )
    net_profit: Decimal
    occupancy_rate: float
    reservations_count: int


class ReservationSummary(BaseModel):
    id: int
    guest_name: str
    check_in_date: date
    check_out_date: date
    total_amount: Decimal
    net_amount: Decimal
    platform: str


class OwnerPropertyReport(BaseModel):
    property_id: int
    property_name: str
    revenue: Decimal
    cleaning_costs: Decimal
    check_in_fees: Decimal
    commission: Decimal
    team_payments: Decimal
    net_profit: Decimal
    occupancy_rate: float
    available_days: int
    occupied_days: int
    reservations: List[ReservationSummary]


class OwnerReportTotals(BaseModel):
    total_revenue: Decimal
    total_cleaning_costs: Decimal
    total_check_in_fees: Decimal
    total_commission: Decimal
    total_team_payments: Decimal
    total_net_profit: Decimal
    average_occupancy: float
    total_properties: int
    total_reservations: int


class OwnerReport(BaseModel):
    owner_id: int
    owner_name: str
    month: int = Field(..., ge=1, le=12)
    year: int
    period_start: date
    period_end: date
    properties: List[OwnerPropertyReport]
    totals: OwnerReportTotals


class EntityBalance(BaseModel):
    entity_id: Optional[int] = None
    entity_name: str
    total: Decimal
    paid: Decimal
    pending: Decimal


class FinancialTotals(BaseModel):
    incoming: Decimal
    outgoing: Decimal
    net_income: Decimal
    pending_incoming: Decimal
    pending_outgoing: Decimal
    paid_incoming: Decimal
    paid_outgoing: Decimal


class FinancialSummary(BaseModel):
    period_start: date
    period_end: date
    totals: FinancialTotals
    document_counts: Dict[str, int] = Field(
        ..., description="Number of documents per status", example={"pending": 3}
    )
    owner_balances: List[EntityBalance]
    supplier_balances: List[EntityBalance]
    recent_documents: List[FinancialDocument]
