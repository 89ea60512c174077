from fastapi import APIRouter

from app.api.v1.endpoints import (
    activities,
    auth,
    cleaning_teams,
    demo,
    financial_documents,
    maintenance_tasks,
    owners,
    properties,
    quotations,
    reports,
    reservations,
    simple_ocr,
    statistics,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(owners.router, prefix="/owners", tags=["owners"])
api_router.include_router(
    cleaning_teams.router, prefix="/cleaning-teams", tags=["cleaning-teams"]
)
api_router.include_router(properties.router, prefix="/properties", tags=["properties"])
api_router.include_router(
    reservations.router, prefix="/reservations", tags=["reservations"]
)
api_router.include_router(activities.router, prefix="/activities", tags=["activities"])
api_router.include_router(
    maintenance_tasks.router, prefix="/maintenance-tasks", tags=["maintenance-tasks"]
)
api_router.include_router(
    financial_documents.router,
    prefix="/financial-documents",
    tags=["financial-documents"],
)
api_router.include_router(quotations.router, prefix="/quotations", tags=["quotations"])
api_router.include_router(statistics.router, prefix="/statistics", tags=["statistics"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(simple_ocr.router, prefix="/simple-ocr", tags=["simple-ocr"])
api_router.include_router(demo.router, prefix="/demo", tags=["demo-data"])
