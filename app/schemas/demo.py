from typing import Dict

from pydantic import BaseModel, Field


class DemoDataCounts(BaseModel):
    owners: int = 0
    properties: int = 0
    reservations: int = 0
    financial_documents: int = 0
    activities: int = 0


class DemoDataStatus(BaseModel):
    has_demo_data: bool
    counts: Dict[str, int] = Field(
        ..., description="Demo entities per entity type", example={"property": 5}
    )
