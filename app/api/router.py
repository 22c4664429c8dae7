from fastapi import APIRouter

from .catalog import router as catalog_router
from .clients import router as clients_router
from .projects import router as projects_router
from .reports import router as reports_router

router = APIRouter()
router.include_router(clients_router)
router.include_router(catalog_router)
router.include_router(reports_router)
router.include_router(projects_router)

@router.get("/status")
def status():
    return {"status": "ok"}
