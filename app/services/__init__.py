from .activity_service import ActivityService
from .auth_service import AuthService
from .cleaning_team_service import CleaningTeamService
from .demo_data_service import DemoDataService
from .email_service import EmailService
from .financial_service import FinancialService
from .maintenance_service import MaintenanceService
from .ocr_service import OCRService
from .owner_service import OwnerService
from .property_service import PropertyService
from .quotation_service import QuotationService
from .reservation_service import ReservationService
from .statistics_service import StatisticsService

__all__ = [
    "ActivityService",
    "AuthService",
    "CleaningTeamService",
    "DemoDataService",
    "EmailService",
    "FinancialService",
    "MaintenanceService",
    "OCRService",
    "OwnerService",
    "PropertyService",
    "QuotationService",
    "ReservationService",
    "StatisticsService",
]
