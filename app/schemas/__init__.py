from .user import User, UserCreate, LoginRequest, RefreshRequest, TokenPair, SessionInfo
from .owner import Owner, OwnerCreate, OwnerUpdate, OwnerWithProperties
from .cleaning_team import CleaningTeam, CleaningTeamCreate, CleaningTeamUpdate
from .property import Property, PropertyCreate, PropertyUpdate, PropertyWithDetails
from .reservation import (
    Reservation,
    ReservationCreate,
    ReservationUpdate,
    ReservationAvailability,
)
from .activity import Activity, ActivityCreate
from .maintenance import MaintenanceTask, MaintenanceTaskCreate, MaintenanceTaskUpdate
from .financial import (
    FinancialDocument,
    FinancialDocumentCreate,
    FinancialDocumentUpdate,
    FinancialDocumentWithDetails,
    DocumentItem,
    DocumentItemCreate,
    DocumentItemUpdate,
    Payment,
    PaymentCreate,
    PaymentUpdate,
)
from .quotation import (
    Quotation,
    QuotationCreate,
    QuotationUpdate,
    QuotationPricingInput,
    QuotationPrice,
)
from .statistics import DashboardStatistics, PropertyStatistics, OwnerReport, FinancialSummary
from .email import ReportEmailRequest, ReportEmailResult, EmailStatus

__all__ = [
    # User schemas
    "User", "UserCreate", "LoginRequest", "RefreshRequest", "TokenPair", "SessionInfo",
    # Owner and property schemas
    "Owner", "OwnerCreate", "OwnerUpdate", "OwnerWithProperties",
    "CleaningTeam", "CleaningTeamCreate", "CleaningTeamUpdate",
    "Property", "PropertyCreate", "PropertyUpdate", "PropertyWithDetails",
    # Reservation schemas
    "Reservation", "ReservationCreate", "ReservationUpdate", "ReservationAvailability",
    "Activity", "ActivityCreate",
    "MaintenanceTask", "MaintenanceTaskCreate", "MaintenanceTaskUpdate",
    # Financial schemas
    "FinancialDocument", "FinancialDocumentCreate", "FinancialDocumentUpdate",
    "FinancialDocumentWithDetails", "DocumentItem", "DocumentItemCreate",
    "DocumentItemUpdate", "Payment", "PaymentCreate", "PaymentUpdate",
    "Quotation", "QuotationCreate", "QuotationUpdate", "QuotationPricingInput",
    "QuotationPrice",
    # Reporting schemas
    "DashboardStatistics", "PropertyStatistics", "OwnerReport", "FinancialSummary",
    "ReportEmailRequest", "ReportEmailResult", "EmailStatus",
]
