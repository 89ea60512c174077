from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Query

from app.core.common_deps import CurrentUserDep, FinancialServiceDep, StaffUserDep
from app.core.exceptions import EntityNotFoundError
from app.models.financial import DocumentStatus, DocumentType, EntityType
from app.schemas.financial import (
    DocumentItem,
    DocumentItemCreate,
    DocumentItemUpdate,
    FinancialDocument,
    FinancialDocumentCreate,
    FinancialDocumentUpdate,
    FinancialDocumentWithDetails,
    Payment,
    PaymentCreate,
    PaymentUpdate,
)
from app.schemas.responses import MessageResponse

router = APIRouter()


# Document endpoints
@router.get("/", response_model=List[FinancialDocument])
async def get_financial_documents(
    service: FinancialServiceDep,
    current_user: CurrentUserDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    type: Optional[DocumentType] = None,
    status: Optional[DocumentStatus] = None,
    entity_type: Optional[EntityType] = None,
    entity_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
):
    return await service.get_documents(
        skip, limit, type, status, entity_type, entity_id, start_date, end_date
    )


@router.post("/", response_model=FinancialDocumentWithDetails)
async def create_financial_document(
    document_data: FinancialDocumentCreate,
    service: FinancialServiceDep,
    current_user: StaffUserDep,
):
    return await service.create_document(document_data)


@router.get("/{document_id}", response_model=FinancialDocumentWithDetails)
async def get_financial_document(
    document_id: int,
    service: FinancialServiceDep,
    current_user: CurrentUserDep,
):
    document = await service.get_document(document_id)
    if not document:
        raise EntityNotFoundError("Financial document", document_id)
    return document


@router.put("/{document_id}", response_model=FinancialDocumentWithDetails)
async def update_financial_document(
    document_id: int,
    document_data: FinancialDocumentUpdate,
    service: FinancialServiceDep,
    current_user: StaffUserDep,
):
    return await service.update_document(document_id, document_data)


@router.delete("/{document_id}", response_model=MessageResponse)
async def delete_financial_document(
    document_id: int,
    service: FinancialServiceDep,
    current_user: StaffUserDep,
):
    await service.delete_document(document_id)
    return MessageResponse(message="Financial document deleted successfully")


# Item endpoints
@router.post("/{document_id}/items", response_model=DocumentItem)
async def add_document_item(
    document_id: int,
    item_data: DocumentItemCreate,
    service: FinancialServiceDep,
    current_user: StaffUserDep,
):
    """Add a line item; the document total follows the items."""
    return await service.add_item(document_id, item_data)


@router.put("/{document_id}/items/{item_id}", response_model=DocumentItem)
async def update_document_item(
    document_id: int,
    item_id: int,
    item_data: DocumentItemUpdate,
    service: FinancialServiceDep,
    current_user: StaffUserDep,
):
    return await service.update_item(document_id, item_id, item_data)


@router.delete("/{document_id}/items/{item_id}", response_model=MessageResponse)
async def delete_document_item(
    document_id: int,
    item_id: int,
    service: FinancialServiceDep,
    current_user: StaffUserDep,
):
    await service.delete_item(document_id, item_id)
    return MessageResponse(message="Document item deleted successfully")


# Payment endpoints
@router.post("/{document_id}/payments", response_model=Payment)
async def add_document_payment(
    document_id: int,
    payment_data: PaymentCreate,
    service: FinancialServiceDep,
    current_user: StaffUserDep,
):
    """Record a payment and update the paid amount and status of the document."""
    return await service.add_payment(document_id, payment_data)


@router.put("/{document_id}/payments/{payment_id}", response_model=Payment)
async def update_document_payment(
    document_id: int,
    payment_id: int,
    payment_data: PaymentUpdate,
    service: FinancialServiceDep,
    current_user: StaffUserDep,
):
    return await service.update_payment(document_id, payment_id, payment_data)


@router.delete("/{document_id}/payments/{payment_id}", response_model=MessageResponse)
async def delete_document_payment(
    document_id: int,
    payment_id: int,
    service: FinancialServiceDep,
    current_user: StaffUserDep,
):
    await service.delete_payment(document_id, payment_id)
    return MessageResponse(message="Payment deleted successfully")
