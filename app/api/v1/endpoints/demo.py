from fastapi import APIRouter, Query

from app.core.common_deps import DemoDataServiceDep, StaffUserDep
from app.schemas.demo import DemoDataCounts, DemoDataStatus

router = APIRouter()


@router.post("/generate", response_model=DemoDataCounts)
async def generate_demo_data(
    service: DemoDataServiceDep,
    current_user: StaffUserDep,
    owners: int = Query(3, ge=1, le=20),
    properties: int = Query(5, ge=0, le=50),
    reservations: int = Query(15, ge=0, le=500),
    documents: int = Query(5, ge=0, le=100),
):
    """Create demonstration records, each tracked by a marker activity."""
    return await service.generate(owners, properties, reservations, documents)


@router.post("/reset", response_model=DemoDataCounts)
async def reset_demo_data(service: DemoDataServiceDep, current_user: StaffUserDep):
    """Delete everything created by /demo/generate."""
    return await service.reset()


@router.get("/status", response_model=DemoDataStatus)
async def get_demo_data_status(service: DemoDataServiceDep, current_user: StaffUserDep):
    return await service.status()
