from datetime import date
from typing import Optional

from fastapi import APIRouter, Body, Query, Response

from app.core.common_deps import (
    CurrentUserDep,
    EmailServiceDep,
    StaffUserDep,
    StatisticsServiceDep,
)
from app.schemas.email import EmailStatus, ReportEmailRequest, ReportEmailResult
from app.schemas.statistics import FinancialSummary, OwnerReport
from app.services.pdf_service import owner_report_filename, render_owner_report_pdf

router = APIRouter()


@router.get("/owner/{owner_id}", response_model=OwnerReport)
async def get_owner_report(
    owner_id: int,
    service: StatisticsServiceDep,
    current_user: CurrentUserDep,
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=2100),
):
    """Monthly revenue and costs of every property of an owner."""
    return await service.get_owner_report(owner_id, month, year)


@router.get("/owner/{owner_id}/pdf")
async def download_owner_report_pdf(
    owner_id: int,
    service: StatisticsServiceDep,
    current_user: CurrentUserDep,
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=2100),
):
    report = await service.get_owner_report(owner_id, month, year)
    filename = owner_report_filename(owner_id, year, month)
    return Response(
        content=render_owner_report_pdf(report),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/owner/{owner_id}/email", response_model=ReportEmailResult)
async def email_owner_report(
    owner_id: int,
    service: EmailServiceDep,
    current_user: StaffUserDep,
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=2100),
    request: Optional[ReportEmailRequest] = Body(None),
):
    """Send the monthly report PDF to the owner, or to another address."""
    to = request.to if request else None
    return await service.send_owner_report(owner_id, month, year, to)


@router.get("/email-status", response_model=EmailStatus)
async def get_email_status(service: EmailServiceDep, current_user: CurrentUserDep):
    return service.status()


@router.get("/financial-summary", response_model=FinancialSummary)
async def get_financial_summary(
    service: StatisticsServiceDep,
    current_user: CurrentUserDep,
    start_date: Optional[date] = Query(None, description="Defaults to the current month"),
    end_date: Optional[date] = None,
):
    return await service.get_financial_summary(start_date, end_date)
