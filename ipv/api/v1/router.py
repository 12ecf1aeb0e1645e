# ipv/api/v1/router.py
from fastapi import APIRouter

from ipv.api.v1.auth import router as auth_router
from ipv.modules.admin import admin_router
from ipv.modules.sales import router as sales_router
from ipv.modules.bills import router as bills_router
from ipv.modules.reports import router as reports_router
from ipv.modules.guest import router as guest_router

# Crear router principal de la API v1
api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["authentication"])

api_router.include_router(
    admin_router,
    prefix="/admin",
    tags=["Admin - Administrador"]
)

api_router.include_router(
    sales_router,
    prefix="/sales",
    tags=["Sales"]
)

api_router.include_router(
    bills_router,
    prefix="/bills",
    tags=["Bills - Arqueo"]
)

api_router.include_router(
    reports_router,
    prefix="/reports",
    tags=["Reports"]
)

api_router.include_router(
    guest_router,
    prefix="/guest",
    tags=["Guest - Invitado"]
)

@api_router.get("/")
async def api_root():
    return {
        "message": "IPV API v1",
        "modules": ["auth", "admin", "sales", "bills", "reports", "guest"]
    }
