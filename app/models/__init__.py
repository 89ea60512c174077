from app.models.activity import Activity, ActivityType
from app.models.cleaning_team import CleaningTeam, CleaningTeamStatus
from app.models.financial import (
    DocumentStatus,
    DocumentType,
    EntityType,
    FinancialDocument,
    FinancialDocumentItem,
    PaymentMethod,
    PaymentRecord,
)
from app.models.maintenance import (
    MaintenancePriority,
    MaintenanceStatus,
    MaintenanceTask,
)
from app.models.owner import Owner
from app.models.property import Property
from app.models.quotation import Quotation, QuotationStatus
from app.models.reservation import (
    Reservation,
    ReservationPlatform,
    ReservationSource,
    ReservationStatus,
)
from app.models.user import User, UserRole, UserSession

__all__ = [
    "Activity",
    "ActivityType",
    "CleaningTeam",
    "CleaningTeamStatus",
    "FinancialDocument",
    "FinancialDocumentItem",
    "PaymentRecord",
    "DocumentType",
    "DocumentStatus",
    "EntityType",
    "PaymentMethod",
    "MaintenanceTask",
    "MaintenancePriority",
    "MaintenanceStatus",
    "Owner",
    "Property",
    "Quotation",
    "QuotationStatus",
    "Reservation",
    "ReservationStatus",
    "ReservationPlatform",
    "ReservationSource",
    "User",
    "UserRole",
    "UserSession",
]
