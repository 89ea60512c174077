"""
Service dependency injection utilities.

Every service takes the request's database session as its first argument,
so a single factory builds the dependency for any of them.
"""

from typing import Annotated, Callable, Type, TypeVar

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.services.activity_service import ActivityService
from app.services.auth_service import AuthService
from app.services.cleaning_team_service import CleaningTeamService
from app.services.demo_data_service import DemoDataService
from app.services.email_service import EmailService
from app.services.financial_service import FinancialService
from app.services.maintenance_service import MaintenanceService
from app.services.ocr_service import OCRService
from app.services.owner_service import OwnerService
from app.services.property_service import PropertyService
from app.services.quotation_service import QuotationService
from app.services.reservation_service import ReservationService
from app.services.statistics_service import StatisticsService

T = TypeVar("T")


def get_service(service_class: Type[T]) -> Callable[[AsyncSession], T]:
    """
    Generic service dependency factory.

    Args:
        service_class: The service class to instantiate

    Returns:
        A dependency function that creates service instances
    """

    def dependency(db: AsyncSession = Depends(get_db)) -> T:
        return service_class(db)

    return dependency


GetActivityService = Annotated[ActivityService, Depends(get_service(ActivityService))]
GetAuthService = Annotated[AuthService, Depends(get_service(AuthService))]
GetCleaningTeamService = Annotated[
    CleaningTeamService, Depends(get_service(CleaningTeamService))
]
GetDemoDataService = Annotated[DemoDataService, Depends(get_service(DemoDataService))]
GetEmailService = Annotated[EmailService, Depends(get_service(EmailService))]
GetFinancialService = Annotated[
    FinancialService, Depends(get_service(FinancialService))
]
GetMaintenanceService = Annotated[
    MaintenanceService, Depends(get_service(MaintenanceService))
]
GetOCRService = Annotated[OCRService, Depends(get_service(OCRService))]
GetOwnerService = Annotated[OwnerService, Depends(get_service(OwnerService))]
GetPropertyService = Annotated[PropertyService, Depends(get_service(PropertyService))]
GetQuotationService = Annotated[
    QuotationService, Depends(get_service(QuotationService))
]
GetReservationService = Annotated[
    ReservationService, Depends(get_service(ReservationService))
]
GetStatisticsService = Annotated[
    StatisticsService, Depends(get_service(StatisticsService))
]
