"""
Demonstration data.

Every generated entity gets a ``demo_data_marker`` activity naming its type and
id, so that a reset removes exactly what was generated and nothing else.
"""

import logging
import random
from collections import Counter
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.service_utils import to_money
from app.models.activity import Activity, ActivityType
from app.models.financial import (
    DocumentStatus,
    DocumentType,
    EntityType,
    FinancialDocument,
    FinancialDocumentItem,
)
from app.models.owner import Owner
from app.models.property import Property
from app.models.reservation import (
    Reservation,
    ReservationPlatform,
    ReservationSource,
    ReservationStatus,
)
from app.schemas.demo import DemoDataCounts, DemoDataStatus
from app.services.activity_service import ActivityService
from app.services.reservation_service import calculate_reservation_fees

logger = logging.getLogger(__name__)

OWNER_FIRST_NAMES = ["João", "Ana", "Carlos", "Maria", "António", "Sofia", "Miguel", "Luísa"]
OWNER_LAST_NAMES = ["Silva", "Santos", "Ferreira", "Costa", "Oliveira", "Martins", "Pereira"]
PROPERTY_NAMES = [
    "Casa da Praia",
    "Apartamento no Centro",
    "Villa Aroeira",
    "Loft Moderno",
    "Casa de Campo",
    "Apartamento Vista Mar",
    "Quinta do Lago",
]
GUEST_FIRST_NAMES = ["John", "Emma", "Michael", "Sophie", "David", "Julia", "Robert", "Laura"]
GUEST_LAST_NAMES = ["Smith", "Johnson", "Brown", "Davis", "Miller", "Wilson", "Moore"]
DEMO_SUFFIX = "[DEMO]"

ENTITY_MODELS = {
    "reservation": Reservation,
    "financial_document": FinancialDocument,
    "property": Property,
    "owner": Owner,
    "activity": Activity,
}
# Children before parents
RESET_ORDER = ["reservation", "financial_document", "property", "owner", "activity"]
EAGER_LOADS = {
    "financial_document": [
        selectinload(FinancialDocument.items),
        selectinload(FinancialDocument.payments),
    ],
    "property": [
        selectinload(Property.reservations),
        selectinload(Property.maintenance_tasks),
    ],
    "owner": [selectinload(Owner.properties)],
}


class DemoDataService:
    def __init__(self, db: AsyncSession, seed: Optional[int] = None):
        self.db = db
        self.random = random.Random(seed)
        self.activities = ActivityService(db)

    def _mark(self, entity_type: str, entity_id: int) -> None:
        self.activities.log(
            ActivityType.DEMO_DATA_MARKER,
            f"{entity_type}:{entity_id}",
            entity_id,
            entity_type,
        )

    async def _markers(self) -> List[Activity]:
        result = await self.db.execute(
            select(Activity).where(Activity.type == ActivityType.DEMO_DATA_MARKER.value)
        )
        return list(result.scalars().all())

    async def generate(
        self,
        owners: int = 3,
        properties: int = 5,
        reservations: int = 15,
        documents: int = 5,
    ) -> DemoDataCounts:
        counts = DemoDataCounts()
        today = date.today()

        created_owners: List[Owner] = []
        for _ in range(owners):
            first = self.random.choice(OWNER_FIRST_NAMES)
            last = self.random.choice(OWNER_LAST_NAMES)
            owner = Owner(
                name=f"{first} {last} {DEMO_SUFFIX}",
                email=f"{first.lower()}.{last.lower()}@example.com",
                phone=f"+351 9{self.random.randint(10000000, 99999999)}",
                address=f"Av. da República, {self.random.randint(1, 100)}, Lisboa",
                tax_id=str(self.random.randint(100000000, 999999999)),
            )
            self.db.add(owner)
            created_owners.append(owner)
        await self.db.flush()
        for owner in created_owners:
            self._mark("owner", owner.id)
        counts.owners = len(created_owners)

        existing_names = set((await self.db.execute(select(Property.name))).scalars().all())
        created_properties: List[Property] = []
        for _ in range(properties if created_owners else 0):
            name = f"{self.random.choice(PROPERTY_NAMES)} {DEMO_SUFFIX}"
            suffix = 2
            while name in existing_names:
                name = f"{self.random.choice(PROPERTY_NAMES)} {DEMO_SUFFIX} {suffix}"
                suffix += 1
            existing_names.add(name)

            db_property = Property(
                name=name,
                aliases=[name.replace(f" {DEMO_SUFFIX}", "")],
                owner_id=self.random.choice(created_owners).id,
                cleaning_cost=Decimal(self.random.randint(30, 80)),
                check_in_fee=Decimal(self.random.randint(15, 35)),
                commission=Decimal(self.random.randint(5, 15)),
                team_payment=Decimal(self.random.randint(20, 40)),
                monthly_fixed_cost=Decimal(self.random.choice([0, 50, 100])),
                active=True,
            )
            self.db.add(db_property)
            created_properties.append(db_property)
        await self.db.flush()
        for db_property in created_properties:
            self._mark("property", db_property.id)
        counts.properties = len(created_properties)

        created_reservations: List[Reservation] = []
        for index in range(reservations if created_properties else 0):
            db_property = self.random.choice(created_properties)
            if index % 2 == 0:
                check_in = today + timedelta(days=self.random.randint(0, 13))
            else:
                check_in = today + timedelta(days=self.random.randint(15, 90))
            check_out = check_in + timedelta(days=self.random.randint(2, 9))
            total = to_money(self.random.randint(200, 1500))
            platform = self.random.choice(list(ReservationPlatform))
            platform_fee = (
                to_money(total * Decimal("0.15"))
                if platform in (ReservationPlatform.AIRBNB, ReservationPlatform.BOOKING)
                else Decimal("0.00")
            )

            reservation = Reservation(
                property_id=db_property.id,
                guest_name=(
                    f"{self.random.choice(GUEST_FIRST_NAMES)} "
                    f"{self.random.choice(GUEST_LAST_NAMES)}"
                ),
                guest_email=f"guest{index + 1}@example.com",
                check_in_date=check_in,
                check_out_date=check_out,
                num_guests=self.random.randint(1, 6),
                status=self.random.choice(
                    [ReservationStatus.CONFIRMED, ReservationStatus.PENDING]
                ),
                platform=platform,
                source=ReservationSource.DEMO,
                total_amount=total,
                platform_fee=platform_fee,
                **calculate_reservation_fees(total, platform_fee, db_property),
            )
            self.db.add(reservation)
            created_reservations.append(reservation)
        await self.db.flush()
        for reservation in created_reservations:
            self._mark("reservation", reservation.id)
        counts.reservations = len(created_reservations)

        created_documents: List[FinancialDocument] = []
        for index in range(documents if created_owners else 0):
            owner = self.random.choice(created_owners)
            amount = to_money(self.random.randint(100, 900))
            document = FinancialDocument(
                reference=f"DEMO-{today:%Y%m}-{index + 1:03d}",
                type=self.random.choice(list(DocumentType)),
                status=DocumentStatus.PENDING,
                date=today - timedelta(days=self.random.randint(0, 20)),
                due_date=today + timedelta(days=30),
                entity_type=EntityType.OWNER,
                entity_id=owner.id,
                entity_name=owner.name,
                total_amount=amount,
                paid_amount=Decimal("0.00"),
                description="Documento de demonstração",
                items=[
                    FinancialDocumentItem(
                        description="Serviços de gestão",
                        quantity=Decimal("1"),
                        unit_price=amount,
                        amount=amount,
                    )
                ],
            )
            self.db.add(document)
            created_documents.append(document)
        await self.db.flush()
        for document in created_documents:
            self._mark("financial_document", document.id)
        counts.financial_documents = len(created_documents)

        created_activities: List[Activity] = []
        for db_property in created_properties[:2]:
            created_activities.append(
                self.activities.log(
                    ActivityType.CLEANING_COMPLETED,
                    f"Limpeza de {db_property.name} concluída",
                    db_property.id,
                    "property",
                )
            )
        await self.db.flush()
        for activity in created_activities:
            self._mark("activity", activity.id)
        counts.activities = len(created_activities)

        await self.db.commit()
        logger.info(f"Demo data generated: {counts.model_dump()}")
        return counts

    async def reset(self) -> DemoDataCounts:
        markers = await self._markers()
        ids_by_type: Dict[str, List[int]] = {}
        for marker in markers:
            if marker.entity_id is not None:
                ids_by_type.setdefault(marker.entity_type, []).append(marker.entity_id)

        removed: Dict[str, int] = {}
        for entity_type in RESET_ORDER:
            ids = ids_by_type.get(entity_type)
            if not ids:
                continue
            model = ENTITY_MODELS[entity_type]
            stmt = select(model).where(model.id.in_(ids))
            if entity_type in EAGER_LOADS:
                stmt = stmt.options(*EAGER_LOADS[entity_type])
            entities = (await self.db.execute(stmt)).scalars().all()

            count = 0
            for entity in entities:
                if entity_type == "owner" and entity.properties:
                    logger.warning(
                        f"Demo owner {entity.id} kept: it still has properties"
                    )
                    continue
                await self.db.delete(entity)
                count += 1
            removed[entity_type] = count
            # Flush so parents are deleted after their children
            await self.db.flush()

        for marker in markers:
            await self.db.delete(marker)
        await self.db.commit()

        counts = DemoDataCounts(
            owners=removed.get("owner", 0),
            properties=removed.get("property", 0),
            reservations=removed.get("reservation", 0),
            financial_documents=removed.get("financial_document", 0),
            activities=removed.get("activity", 0),
        )
        logger.info(f"Demo data removed: {counts.model_dump()}")
        return counts

    async def status(self) -> DemoDataStatus:
        markers = await self._markers()
        counts = Counter(marker.entity_type for marker in markers)
        return DemoDataStatus(has_demo_data=bool(markers), counts=dict(counts))
