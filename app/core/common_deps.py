"""
Common dependencies for the back-office API.

Short aliases for endpoint signatures.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth_deps import RequireAdminRole, RequireStaffRole
from app.core.database import get_db
from app.core.security import get_active_user
from app.core.service_deps import (
    GetActivityService,
    GetAuthService,
    GetCleaningTeamService,
    GetDemoDataService,
    GetEmailService,
    GetFinancialService,
    GetMaintenanceService,
    GetOCRService,
    GetOwnerService,
    GetPropertyService,
    GetQuotationService,
    GetReservationService,
    GetStatisticsService,
)
from app.models.user import User

# Database dependencies
DatabaseDep = Annotated[AsyncSession, Depends(get_db)]

# User dependencies
CurrentUserDep = Annotated[User, Depends(get_active_user)]
StaffUserDep = RequireStaffRole
AdminUserDep = RequireAdminRole

# Service type aliases for cleaner endpoint signatures
ActivityServiceDep = GetActivityService
AuthServiceDep = GetAuthService
CleaningTeamServiceDep = GetCleaningTeamService
DemoDataServiceDep = GetDemoDataService
EmailServiceDep = GetEmailService
FinancialServiceDep = GetFinancialService
MaintenanceServiceDep = GetMaintenanceService
OCRServiceDep = GetOCRService
OwnerServiceDep = GetOwnerService
PropertyServiceDep = GetPropertyService
QuotationServiceDep = GetQuotationService
ReservationServiceDep = GetReservationService
StatisticsServiceDep = GetStatisticsService
