import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.service_utils import ensure_exists, to_money
from app.models.activity import ActivityType
from app.models.quotation import Quotation, QuotationStatus
from app.schemas.quotation import (
    QuotationCreate,
    QuotationPrice,
    QuotationPricingInput,
    QuotationUpdate,
)
from app.services.activity_service import ActivityService
from app.services.pdf_service import render_quotation_pdf, save_pdf

logger = logging.getLogger(__name__)

SURCHARGE = Decimal("10.00")
MIN_EXTERIOR_AREA = 15

PRICING_FIELDS = set(QuotationPricingInput.model_fields)


def calculate_quotation_price(pricing: QuotationPricingInput) -> QuotationPrice:
    """
    Price a quotation from the property's characteristics.

    Each of these adds a fixed surcharge to the base price:
    an exterior space larger than 15 m², a duplex, a barbecue,
    and a garden when the property also has glass surfaces.
    """
    additional = Decimal("0")
    if pricing.has_exterior_space and pricing.exterior_area > MIN_EXTERIOR_AREA:
        additional += SURCHARGE
    if pricing.is_duplex:
        additional += SURCHARGE
    if pricing.has_bbq:
        additional += SURCHARGE
    if pricing.has_garden and pricing.has_glass_surfaces:
        additional += SURCHARGE

    base_price = to_money(pricing.base_price)
    additional_price = to_money(additional)
    return QuotationPrice(
        base_price=base_price,
        additional_price=additional_price,
        total_price=to_money(base_price + additional_price),
    )


class QuotationService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.activities = ActivityService(db)

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        status: Optional[QuotationStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Quotation]:
        stmt = select(Quotation).order_by(
            Quotation.created_at.desc(), Quotation.id.desc()
        )
        if status:
            stmt = stmt.where(Quotation.status == status)
        if start_date:
            stmt = stmt.where(Quotation.created_at >= datetime.combine(start_date, time.min))
        if end_date:
            stmt = stmt.where(Quotation.created_at <= datetime.combine(end_date, time.max))
        result = await self.db.execute(stmt.offset(skip).limit(limit))
        return list(result.scalars().all())

    async def get_by_id(self, quotation_id: int) -> Optional[Quotation]:
        return await self.db.get(Quotation, quotation_id)

    async def create(self, quotation_data: QuotationCreate) -> Quotation:
        data = quotation_data.model_dump()
        price = calculate_quotation_price(quotation_data)
        data.update(price.model_dump())
        if data.get("valid_until") is None:
            data["valid_until"] = date.today() + timedelta(
                days=settings.QUOTATION_VALIDITY_DAYS
            )

        db_quotation = Quotation(**data)
        self.db.add(db_quotation)
        await self.db.flush()

        self.activities.log(
            ActivityType.QUOTATION_CREATED,
            f"Quotation for {db_quotation.client_name} created "
            f"({db_quotation.total_price})",
            db_quotation.id,
            "quotation",
        )
        await self.db.commit()
        await self.db.refresh(db_quotation)
        return db_quotation

    async def update(
        self, quotation_id: int, quotation_data: QuotationUpdate
    ) -> Quotation:
        db_quotation = ensure_exists(
            await self.get_by_id(quotation_id), "Quotation", quotation_id
        )
        update_data = quotation_data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(db_quotation, field, value)

        if PRICING_FIELDS & update_data.keys():
            pricing = QuotationPricingInput(
                **{field: getattr(db_quotation, field) for field in PRICING_FIELDS}
            )
            for field, value in calculate_quotation_price(pricing).model_dump().items():
                setattr(db_quotation, field, value)

        self.activities.log(
            ActivityType.QUOTATION_UPDATED,
            f"Quotation for {db_quotation.client_name} updated",
            db_quotation.id,
            "quotation",
        )
        await self.db.commit()
        await self.db.refresh(db_quotation)
        return db_quotation

    async def delete(self, quotation_id: int) -> bool:
        db_quotation = ensure_exists(
            await self.get_by_id(quotation_id), "Quotation", quotation_id
        )
        self.activities.log(
            ActivityType.QUOTATION_DELETED,
            f"Quotation for {db_quotation.client_name} deleted",
            quotation_id,
            "quotation",
        )
        await self.db.delete(db_quotation)
        await self.db.commit()
        return True

    async def generate_pdf(self, quotation_id: int) -> Tuple[bytes, str]:
        """Render a quotation and keep a copy on disk. Returns (content, filename)."""
        db_quotation = ensure_exists(
            await self.get_by_id(quotation_id), "Quotation", quotation_id
        )
        content = render_quotation_pdf(db_quotation)
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
        filename = f"orcamento_{quotation_id}_{timestamp}.pdf"
        save_pdf(content, filename)
        return content, filename
