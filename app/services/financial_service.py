"""
Financial documents with their line items and payments.

A document's ``total_amount`` follows its items whenever it has any, and its
``paid_amount`` always follows its payments. Status moves between pending,
partial and paid as payments come in; cancelled documents keep their status.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import BusinessRuleViolationError, EntityNotFoundError
from app.core.query_builders import FinancialDocumentQueryBuilder
from app.core.service_utils import ensure_exists, to_money
from app.models.activity import ActivityType
from app.models.financial import (
    DocumentStatus,
    DocumentType,
    EntityType,
    FinancialDocument,
    FinancialDocumentItem,
    PaymentRecord,
)
from app.schemas.financial import (
    DocumentItemCreate,
    DocumentItemUpdate,
    FinancialDocumentCreate,
    FinancialDocumentUpdate,
    PaymentCreate,
    PaymentUpdate,
)
from app.services.activity_service import ActivityService

logger = logging.getLogger(__name__)

PAYMENT_STATUSES = (DocumentStatus.PARTIAL, DocumentStatus.PAID)


def resolve_document_status(
    current: DocumentStatus,
    total_amount: Decimal,
    paid_amount: Decimal,
    invoiced: bool = False,
) -> DocumentStatus:
    """Status implied by the amounts paid against a document.

    Without payments a document falls back to invoiced when it carries an
    invoice number, otherwise to pending.
    """
    if current == DocumentStatus.CANCELLED:
        return current
    if paid_amount > 0 and paid_amount >= total_amount > 0:
        return DocumentStatus.PAID
    if paid_amount > 0:
        return DocumentStatus.PARTIAL
    if current in PAYMENT_STATUSES:
        return DocumentStatus.INVOICED if invoiced else DocumentStatus.PENDING
    return current


class FinancialService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.activities = ActivityService(db)

    # Documents
    async def get_documents(
        self,
        skip: int = 0,
        limit: int = 100,
        document_type: Optional[DocumentType] = None,
        status: Optional[DocumentStatus] = None,
        entity_type: Optional[EntityType] = None,
        entity_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[FinancialDocument]:
        stmt = (
            FinancialDocumentQueryBuilder(FinancialDocument)
            .filter_by_type(document_type)
            .filter_by_status(status)
            .filter_by_entity(entity_type, entity_id)
            .filter_by_dates(start_date, end_date)
            .order_by(FinancialDocument.date, "desc")
            .order_by(FinancialDocument.id, "desc")
            .paginate(skip, limit)
            .build()
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_document(self, document_id: int) -> Optional[FinancialDocument]:
        stmt = (
            select(FinancialDocument)
            .options(
                selectinload(FinancialDocument.items),
                selectinload(FinancialDocument.payments),
            )
            .where(FinancialDocument.id == document_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_document_or_404(self, document_id: int) -> FinancialDocument:
        return ensure_exists(
            await self.get_document(document_id), "Financial document", document_id
        )

    async def create_document(
        self, document_data: FinancialDocumentCreate
    ) -> FinancialDocument:
        data = document_data.model_dump(exclude={"items"})
        db_document = FinancialDocument(**data, paid_amount=Decimal("0"))
        db_document.total_amount = to_money(db_document.total_amount)

        for item_data in document_data.items:
            db_document.items.append(self._build_item(item_data))
        if db_document.items:
            db_document.total_amount = to_money(
                sum((item.amount for item in db_document.items), Decimal("0"))
            )

        self.db.add(db_document)
        await self.db.flush()

        self.activities.log(
            ActivityType.FINANCIAL_DOCUMENT_CREATED,
            f"Financial document {db_document.reference} created",
            db_document.id,
            "financial_document",
        )
        await self.db.commit()
        return await self._get_document_or_404(db_document.id)

    async def update_document(
        self, document_id: int, document_data: FinancialDocumentUpdate
    ) -> FinancialDocument:
        db_document = await self._get_document_or_404(document_id)
        update_data = document_data.model_dump(exclude_unset=True)

        # The total of an itemised document is owned by its items
        if db_document.items:
            update_data.pop("total_amount", None)

        for field, value in update_data.items():
            setattr(db_document, field, value)

        if "total_amount" in update_data and "status" not in update_data:
            db_document.status = resolve_document_status(
                db_document.status,
                to_money(db_document.total_amount),
                to_money(db_document.paid_amount),
                bool(db_document.invoice_number),
            )

        self.activities.log(
            ActivityType.FINANCIAL_DOCUMENT_UPDATED,
            f"Financial document {db_document.reference} updated",
            db_document.id,
            "financial_document",
        )
        await self.db.commit()
        return await self._get_document_or_404(document_id)

    async def delete_document(self, document_id: int) -> bool:
        db_document = await self._get_document_or_404(document_id)
        self.activities.log(
            ActivityType.FINANCIAL_DOCUMENT_DELETED,
            f"Financial document {db_document.reference} deleted",
            document_id,
            "financial_document",
        )
        await self.db.delete(db_document)
        await self.db.commit()
        return True

    # Items
    @staticmethod
    def _build_item(item_data: DocumentItemCreate) -> FinancialDocumentItem:
        return FinancialDocumentItem(
            description=item_data.description,
            quantity=item_data.quantity,
            unit_price=item_data.unit_price,
            amount=to_money(item_data.quantity * item_data.unit_price),
        )

    async def _get_item(self, document_id: int, item_id: int) -> FinancialDocumentItem:
        item = await self.db.get(FinancialDocumentItem, item_id)
        if item is None or item.document_id != document_id:
            raise EntityNotFoundError("Document item", item_id)
        return item

    async def add_item(
        self, document_id: int, item_data: DocumentItemCreate
    ) -> FinancialDocumentItem:
        await self._get_document_or_404(document_id)
        item = self._build_item(item_data)
        item.document_id = document_id
        self.db.add(item)
        await self.db.flush()

        await self._recalculate_total(document_id)
        await self.db.commit()
        await self.db.refresh(item)
        return item

    async def update_item(
        self, document_id: int, item_id: int, item_data: DocumentItemUpdate
    ) -> FinancialDocumentItem:
        item = await self._get_item(document_id, item_id)
        for field, value in item_data.model_dump(exclude_unset=True).items():
            setattr(item, field, value)
        item.amount = to_money(Decimal(str(item.quantity)) * Decimal(str(item.unit_price)))
        await self.db.flush()

        await self._recalculate_total(document_id)
        await self.db.commit()
        await self.db.refresh(item)
        return item

    async def delete_item(self, document_id: int, item_id: int) -> bool:
        item = await self._get_item(document_id, item_id)
        await self.db.delete(item)
        await self.db.flush()

        await self._recalculate_total(document_id)
        await self.db.commit()
        return True

    # Payments
    async def _get_payment(self, document_id: int, payment_id: int) -> PaymentRecord:
        payment = await self.db.get(PaymentRecord, payment_id)
        if payment is None or payment.document_id != document_id:
            raise EntityNotFoundError("Payment", payment_id)
        return payment

    async def add_payment(
        self, document_id: int, payment_data: PaymentCreate
    ) -> PaymentRecord:
        db_document = await self._get_document_or_404(document_id)
        if db_document.status == DocumentStatus.CANCELLED:
            raise BusinessRuleViolationError(
                "payment_on_cancelled_document",
                "Payments cannot be recorded on a cancelled document",
                {"document_id": document_id},
            )

        payment = PaymentRecord(document_id=document_id, **payment_data.model_dump())
        self.db.add(payment)
        await self.db.flush()

        await self._recalculate_payments(document_id)
        self.activities.log(
            ActivityType.PAYMENT_RECORDED,
            f"Payment of {to_money(payment.amount)} recorded on {db_document.reference}",
            document_id,
            "financial_document",
        )
        await self.db.commit()
        await self.db.refresh(payment)
        return payment

    async def update_payment(
        self, document_id: int, payment_id: int, payment_data: PaymentUpdate
    ) -> PaymentRecord:
        payment = await self._get_payment(document_id, payment_id)
        for field, value in payment_data.model_dump(exclude_unset=True).items():
            setattr(payment, field, value)
        await self.db.flush()

        await self._recalculate_payments(document_id)
        await self.db.commit()
        await self.db.refresh(payment)
        return payment

    async def delete_payment(self, document_id: int, payment_id: int) -> bool:
        payment = await self._get_payment(document_id, payment_id)
        amount = to_money(payment.amount)
        await self.db.delete(payment)
        await self.db.flush()

        await self._recalculate_payments(document_id)
        self.activities.log(
            ActivityType.PAYMENT_DELETED,
            f"Payment of {amount} removed",
            document_id,
            "financial_document",
        )
        await self.db.commit()
        return True

    # Recalculation
    async def _recalculate_total(self, document_id: int) -> None:
        """Set the document total to the sum of its items, if it has any."""
        item_count, item_sum = (
            await self.db.execute(
                select(
                    func.count(FinancialDocumentItem.id),
                    func.coalesce(func.sum(FinancialDocumentItem.amount), 0),
                ).where(FinancialDocumentItem.document_id == document_id)
            )
        ).one()

        db_document = await self.db.get(FinancialDocument, document_id)
        if item_count:
            db_document.total_amount = to_money(item_sum)
        db_document.status = resolve_document_status(
            db_document.status,
            to_money(db_document.total_amount),
            to_money(db_document.paid_amount),
            bool(db_document.invoice_number),
        )

    async def _recalculate_payments(self, document_id: int) -> None:
        """Set paid_amount to the sum of payments and move the status along."""
        paid = await self.db.scalar(
            select(func.coalesce(func.sum(PaymentRecord.amount), 0)).where(
                PaymentRecord.document_id == document_id
            )
        )

        db_document = await self.db.get(FinancialDocument, document_id)
        db_document.paid_amount = to_money(paid)
        db_document.status = resolve_document_status(
            db_document.status,
            to_money(db_document.total_amount),
            db_document.paid_amount,
            bool(db_document.invoice_number),
        )
        logger.debug(
            f"Document {document_id}: paid {db_document.paid_amount} of "
            f"{db_document.total_amount} ({db_document.status.value})"
        )
