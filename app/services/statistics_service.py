"""
Dashboard statistics and owner/financial reports.

Periods are inclusive on both ends: a period from the 1st to the 31st has 31
days, and a night counts as occupied when it starts inside the period.
"""

import calendar
import logging
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.service_utils import ensure_exists, to_money, validate_date_range
from app.models.financial import (
    DocumentStatus,
    DocumentType,
    EntityType,
    FinancialDocument,
)
from app.models.owner import Owner
from app.models.property import Property
from app.models.reservation import Reservation, ReservationStatus
from app.schemas.financial import FinancialDocument as FinancialDocumentSchema
from app.schemas.statistics import (
    DashboardStatistics,
    EntityBalance,
    FinancialSummary,
    FinancialTotals,
    OwnerPropertyReport,
    OwnerReport,
    OwnerReportTotals,
    PropertyOccupancy,
    PropertyStatistics,
    ReservationSummary,
)

logger = logging.getLogger(__name__)

OCCUPYING_STATUSES = (ReservationStatus.CONFIRMED, ReservationStatus.COMPLETED)
TOP_PROPERTIES = 5
RECENT_DOCUMENTS = 10

ZERO = Decimal("0.00")


def current_month_range(today: Optional[date] = None) -> Tuple[date, date]:
    today = today or date.today()
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def month_range(year: int, month: int) -> Tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def days_in_period(start: date, end: date) -> int:
    return (end - start).days + 1


def occupied_nights(
    reservations: Iterable[Reservation], start: date, end: date
) -> int:
    """Nights of the given stays that fall inside ``[start, end]``."""
    period_end = end + timedelta(days=1)
    nights = 0
    for reservation in reservations:
        first = max(reservation.check_in_date, start)
        last = min(reservation.check_out_date, period_end)
        if last > first:
            nights += (last - first).days
    return nights


def occupancy_percentage(nights: int, days: int, properties: int = 1) -> float:
    capacity = days * properties
    if capacity <= 0:
        return 0.0
    return round(min(100.0, nights / capacity * 100), 2)


def _sum(values: Iterable) -> Decimal:
    return to_money(sum((Decimal(str(v or 0)) for v in values), Decimal("0")))


class StatisticsService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _occupying_reservations(
        self, start: date, end: date, property_ids: Optional[List[int]] = None
    ) -> List[Reservation]:
        """Confirmed or completed reservations with at least one night in the period."""
        stmt = select(Reservation).where(
            Reservation.status.in_(OCCUPYING_STATUSES),
            Reservation.check_in_date <= end,
            Reservation.check_out_date > start,
        )
        if property_ids is not None:
            stmt = stmt.where(Reservation.property_id.in_(property_ids))
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def _active_properties(self) -> List[Property]:
        result = await self.db.execute(
            select(Property).where(Property.active.is_(True)).order_by(Property.id)
        )
        return list(result.scalars().all())

    async def occupancy_rate(
        self,
        property_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> float:
        """Occupancy percentage of one property, or of all active properties."""
        default_start, default_end = current_month_range()
        start = start or default_start
        end = end or default_end

        if property_id is not None:
            reservations = await self._occupying_reservations(start, end, [property_id])
            return occupancy_percentage(
                occupied_nights(reservations, start, end), days_in_period(start, end)
            )

        properties = await self._active_properties()
        if not properties:
            return 0.0
        reservations = await self._occupying_reservations(
            start, end, [p.id for p in properties]
        )
        return occupancy_percentage(
            occupied_nights(reservations, start, end),
            days_in_period(start, end),
            len(properties),
        )

    async def _revenue_reservations(
        self, start: date, end: date, property_id: Optional[int] = None
    ) -> List[Reservation]:
        """Non-cancelled reservations with check-in inside the period."""
        stmt = select(Reservation).where(
            Reservation.status != ReservationStatus.CANCELLED,
            Reservation.check_in_date >= start,
            Reservation.check_in_date <= end,
        )
        if property_id is not None:
            stmt = stmt.where(Reservation.property_id == property_id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_dashboard(
        self, start: Optional[date] = None, end: Optional[date] = None
    ) -> DashboardStatistics:
        default_start, default_end = current_month_range()
        start = start or default_start
        end = end or default_end
        validate_date_range(start, end + timedelta(days=1))

        reservations = await self._revenue_reservations(start, end)
        properties = await self._active_properties()
        days = days_in_period(start, end)

        occupying = await self._occupying_reservations(
            start, end, [p.id for p in properties]
        )
        by_property: Dict[int, List[Reservation]] = defaultdict(list)
        for reservation in occupying:
            by_property[reservation.property_id].append(reservation)

        revenue_by_property: Dict[int, Decimal] = defaultdict(lambda: ZERO)
        for reservation in reservations:
            revenue_by_property[reservation.property_id] += to_money(
                reservation.total_amount
            )

        per_property = [
            PropertyOccupancy(
                property_id=p.id,
                name=p.name,
                occupancy_rate=occupancy_percentage(
                    occupied_nights(by_property[p.id], start, end), days
                ),
                revenue=revenue_by_property[p.id],
            )
            for p in properties
        ]
        per_property.sort(key=lambda item: item.occupancy_rate, reverse=True)

        overall = (
            occupancy_percentage(
                occupied_nights(occupying, start, end), days, len(properties)
            )
            if properties
            else 0.0
        )

        return DashboardStatistics(
            period_start=start,
            period_end=end,
            total_revenue=_sum(r.total_amount for r in reservations),
            net_profit=_sum(r.net_amount for r in reservations),
            occupancy_rate=overall,
            active_properties=len(properties),
            reservations_count=len(reservations),
            top_properties=per_property[:TOP_PROPERTIES],
        )

    async def get_property_statistics(
        self,
        property_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> PropertyStatistics:
        ensure_exists(await self.db.get(Property, property_id), "Property", property_id)
        default_start, default_end = current_month_range()
        start = start or default_start
        end = end or default_end
        validate_date_range(start, end + timedelta(days=1))

        reservations = await self._revenue_reservations(start, end, property_id)
        total_revenue = _sum(r.total_amount for r in reservations)
        total_costs = _sum(
            to_money(r.cleaning_fee)
            + to_money(r.check_in_fee)
            + to_money(r.commission_fee)
            + to_money(r.team_payment)
            for r in reservations
        )

        return PropertyStatistics(
            property_id=property_id,
            period_start=start,
            period_end=end,
            total_revenue=total_revenue,
            total_costs=total_costs,
            net_profit=_sum(r.net_amount for r in reservations),
            occupancy_rate=await self.occupancy_rate(property_id, start, end),
            reservations_count=len(reservations),
        )

    async def get_owner_report(self, owner_id: int, month: int, year: int) -> OwnerReport:
        """Monthly report of every property of an owner.

        A reservation belongs to the month when any of its nights falls inside it.
        """
        result = await self.db.execute(
            select(Owner).where(Owner.id == owner_id)
        )
        owner = ensure_exists(result.scalar_one_or_none(), "Owner", owner_id)
        start, end = month_range(year, month)
        days = days_in_period(start, end)

        result = await self.db.execute(
            select(Property).where(Property.owner_id == owner_id).order_by(Property.name)
        )
        properties = list(result.scalars().all())

        property_reports: List[OwnerPropertyReport] = []
        for db_property in properties:
            result = await self.db.execute(
                select(Reservation)
                .where(
                    Reservation.property_id == db_property.id,
                    Reservation.status != ReservationStatus.CANCELLED,
                    Reservation.check_in_date <= end,
                    Reservation.check_out_date > start,
                )
                .order_by(Reservation.check_in_date)
            )
            reservations = list(result.scalars().all())
            nights = occupied_nights(
                [r for r in reservations if r.status in OCCUPYING_STATUSES], start, end
            )

            property_reports.append(
                OwnerPropertyReport(
                    property_id=db_property.id,
                    property_name=db_property.name,
                    revenue=_sum(r.total_amount for r in reservations),
                    cleaning_costs=_sum(r.cleaning_fee for r in reservations),
                    check_in_fees=_sum(r.check_in_fee for r in reservations),
                    commission=_sum(r.commission_fee for r in reservations),
                    team_payments=_sum(r.team_payment for r in reservations),
                    net_profit=_sum(r.net_amount for r in reservations),
                    occupancy_rate=occupancy_percentage(nights, days),
                    available_days=days,
                    occupied_days=min(nights, days),
                    reservations=[
                        ReservationSummary(
                            id=r.id,
                            guest_name=r.guest_name,
                            check_in_date=r.check_in_date,
                            check_out_date=r.check_out_date,
                            total_amount=to_money(r.total_amount),
                            net_amount=to_money(r.net_amount),
                            platform=r.platform.value,
                        )
                        for r in reservations
                    ],
                )
            )

        average_occupancy = (
            round(
                sum(p.occupancy_rate for p in property_reports) / len(property_reports), 2
            )
            if property_reports
            else 0.0
        )
        totals = OwnerReportTotals(
            total_revenue=_sum(p.revenue for p in property_reports),
            total_cleaning_costs=_sum(p.cleaning_costs for p in property_reports),
            total_check_in_fees=_sum(p.check_in_fees for p in property_reports),
            total_commission=_sum(p.commission for p in property_reports),
            total_team_payments=_sum(p.team_payments for p in property_reports),
            total_net_profit=_sum(p.net_profit for p in property_reports),
            average_occupancy=average_occupancy,
            total_properties=len(property_reports),
            total_reservations=sum(len(p.reservations) for p in property_reports),
        )

        logger.info(
            f"Owner report {owner_id} {month:02d}/{year}: "
            f"{totals.total_properties} properties, {totals.total_reservations} reservations"
        )
        return OwnerReport(
            owner_id=owner.id,
            owner_name=owner.name,
            month=month,
            year=year,
            period_start=start,
            period_end=end,
            properties=property_reports,
            totals=totals,
        )

    async def get_financial_summary(
        self, start: Optional[date] = None, end: Optional[date] = None
    ) -> FinancialSummary:
        default_start, default_end = current_month_range()
        start = start or default_start
        end = end or default_end
        validate_date_range(start, end + timedelta(days=1))

        result = await self.db.execute(
            select(FinancialDocument)
            .where(FinancialDocument.date >= start, FinancialDocument.date <= end)
            .order_by(FinancialDocument.date.desc(), FinancialDocument.id.desc())
        )
        documents = list(result.scalars().all())
        billable = [d for d in documents if d.status != DocumentStatus.CANCELLED]

        def totals_for(document_type: DocumentType) -> Tuple[Decimal, Decimal]:
            selected = [d for d in billable if d.type == document_type]
            return (
                _sum(d.total_amount for d in selected),
                _sum(d.paid_amount for d in selected),
            )

        incoming, paid_incoming = totals_for(DocumentType.INCOMING)
        outgoing, paid_outgoing = totals_for(DocumentType.OUTGOING)

        document_counts: Dict[str, int] = {status.value: 0 for status in DocumentStatus}
        for document in documents:
            document_counts[document.status.value] += 1

        return FinancialSummary(
            period_start=start,
            period_end=end,
            totals=FinancialTotals(
                incoming=incoming,
                outgoing=outgoing,
                net_income=to_money(incoming - outgoing),
                pending_incoming=to_money(incoming - paid_incoming),
                pending_outgoing=to_money(outgoing - paid_outgoing),
                paid_incoming=paid_incoming,
                paid_outgoing=paid_outgoing,
            ),
            document_counts=document_counts,
            owner_balances=self._balances(billable, EntityType.OWNER),
            supplier_balances=self._balances(billable, EntityType.SUPPLIER),
            recent_documents=[
                FinancialDocumentSchema.model_validate(d)
                for d in documents[:RECENT_DOCUMENTS]
            ],
        )

    @staticmethod
    def _balances(
        documents: List[FinancialDocument], entity_type: EntityType
    ) -> List[EntityBalance]:
        grouped: Dict[Tuple[Optional[int], str], List[FinancialDocument]] = defaultdict(
            list
        )
        for document in documents:
            if document.entity_type != entity_type:
                continue
            name = document.entity_name or f"#{document.entity_id}"
            grouped[(document.entity_id, name)].append(document)

        balances = []
        for (entity_id, name), entity_documents in grouped.items():
            total = _sum(d.total_amount for d in entity_documents)
            paid = _sum(d.paid_amount for d in entity_documents)
            balances.append(
                EntityBalance(
                    entity_id=entity_id,
                    entity_name=name,
                    total=total,
                    paid=paid,
                    pending=to_money(total - paid),
                )
            )
        balances.sort(key=lambda b: b.pending, reverse=True)
        return balances
