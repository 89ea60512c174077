from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Query, Response

from app.core.common_deps import CurrentUserDep, QuotationServiceDep, StaffUserDep
from app.core.exceptions import EntityNotFoundError
from app.models.quotation import QuotationStatus
from app.schemas.quotation import (
    Quotation,
    QuotationCreate,
    QuotationPrice,
    QuotationPricingInput,
    QuotationUpdate,
)
from app.schemas.responses import MessageResponse
from app.services.quotation_service import calculate_quotation_price

router = APIRouter()


@router.get("/", response_model=List[Quotation])
async def get_quotations(
    service: QuotationServiceDep,
    current_user: CurrentUserDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    status: Optional[QuotationStatus] = None,
    start_date: Optional[date] = Query(None, description="Created on or after"),
    end_date: Optional[date] = Query(None, description="Created on or before"),
):
    return await service.get_all(skip, limit, status, start_date, end_date)


@router.post("/calculate", response_model=QuotationPrice)
async def calculate_price(
    pricing: QuotationPricingInput,
    current_user: CurrentUserDep,
):
    """Price a quotation without saving it."""
    return calculate_quotation_price(pricing)


@router.post("/", response_model=Quotation)
async def create_quotation(
    quotation_data: QuotationCreate,
    service: QuotationServiceDep,
    current_user: StaffUserDep,
):
    return await service.create(quotation_data)


@router.get("/{quotation_id}", response_model=Quotation)
async def get_quotation(
    quotation_id: int,
    service: QuotationServiceDep,
    current_user: CurrentUserDep,
):
    quotation = await service.get_by_id(quotation_id)
    if not quotation:
        raise EntityNotFoundError("Quotation", quotation_id)
    return quotation


@router.put("/{quotation_id}", response_model=Quotation)
async def update_quotation(
    quotation_id: int,
    quotation_data: QuotationUpdate,
    service: QuotationServiceDep,
    current_user: StaffUserDep,
):
    return await service.update(quotation_id, quotation_data)


@router.delete("/{quotation_id}", response_model=MessageResponse)
async def delete_quotation(
    quotation_id: int,
    service: QuotationServiceDep,
    current_user: StaffUserDep,
):
    await service.delete(quotation_id)
    return MessageResponse(message="Quotation deleted successfully")


@router.get("/{quotation_id}/pdf")
async def download_quotation_pdf(
    quotation_id: int,
    service: QuotationServiceDep,
    current_user: CurrentUserDep,
):
    content, filename = await service.generate_pdf(quotation_id)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
