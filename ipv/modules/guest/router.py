# ipv/modules/guest/router.py
from fastapi import APIRouter, Depends, Request, Response, status
import logging
import uuid

from ipv.config.settings import settings
from ipv.core.sessions import get_guest_stores
from ipv.shared.schemas.checkout import (
    QuantityRequest, PaymentMethodRequest, CheckoutRequest, BillCountsRequest,
    BillsResponse, CheckoutResponse, ReconciliationResponse, TicketActionResponse
)
from ipv.modules.reports.schemas import ReportResponse
from .schemas import GuestProductCreate, GuestProductResponse, GuestSessionResponse, GuestStatsResponse
from .service import GuestService
from .store import GuestStoreRegistry

router = APIRouter()
logger = logging.getLogger(__name__)

def get_guest_id(request: Request, response: Response) -> str:
    """Leer el id de invitado de la cookie o generar uno nuevo"""
    guest_id = request.cookies.get(settings.guest_cookie_name)
    if not guest_id:
        guest_id = uuid.uuid4().hex
        logger.info(f"Nuevo invitado: {guest_id}")

    response.set_cookie(
        key=settings.guest_cookie_name,
        value=guest_id,
        max_age=settings.guest_cookie_max_age,
        httponly=True,
        samesite="lax"
    )
    return guest_id

def get_guest_service(
    guest_id: str = Depends(get_guest_id),
    stores: GuestStoreRegistry = Depends(get_guest_stores)
) -> GuestService:
    return GuestService(stores.open(guest_id))

def get_guest_reader(
    guest_id: str = Depends(get_guest_id),
    stores: GuestStoreRegistry = Depends(get_guest_stores)
) -> GuestService:
    """Para consultas: un invitado nuevo no se registra hasta que modifica algo"""
    return GuestService(stores.view(guest_id))

# ==================== SESIÓN ====================

@router.get("/session", response_model=GuestSessionResponse)
async def get_session(service: GuestService = Depends(get_guest_reader)):
    """
    Estado del modo invitado

    Sin cuenta ni base de datos: productos, pagos y billetes se guardan
    en memoria asociados a la cookie del invitado.
    """
    return await service.get_session()

@router.delete("/session", response_model=GuestSessionResponse)
async def reset_guest(
    guest_id: str = Depends(get_guest_id),
    stores: GuestStoreRegistry = Depends(get_guest_stores)
):
    """Borrar productos, ventas y billetes del invitado"""
    service = GuestService(stores.reset(guest_id))
    return await service.get_session(message="Datos reiniciados")

# ==================== PRODUCTOS ====================

@router.post("/products", response_model=GuestProductResponse, status_code=status.HTTP_201_CREATED)
async def add_product(
    product_data: GuestProductCreate,
    service: GuestService = Depends(get_guest_service)
):
    return await service.add_product(product_data)

@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_product(
    product_id: str,
    service: GuestService = Depends(get_guest_service)
):
    await service.remove_product(product_id)

# ==================== SELECCIÓN Y COBRO ====================

@router.post("/basket/{item_id}/toggle", response_model=GuestSessionResponse)
async def toggle_item(item_id: str, service: GuestService = Depends(get_guest_service)):
    return await service.toggle_item(item_id)

@router.put("/basket/payment-method", response_model=GuestSessionResponse)
async def choose_payment_method(
    request: PaymentMethodRequest,
    service: GuestService = Depends(get_guest_service)
):
    return await service.choose_payment_method(request.payment_method)

@router.put("/basket/{item_id}", response_model=GuestSessionResponse)
async def set_quantity(
    item_id: str,
    request: QuantityRequest,
    service: GuestService = Depends(get_guest_service)
):
    return await service.set_quantity(item_id, request.quantity)

@router.delete("/basket", response_model=GuestSessionResponse)
async def clear_basket(service: GuestService = Depends(get_guest_service)):
    return await service.clear_basket()

@router.post("/checkout", response_model=CheckoutResponse)
async def checkout(
    request: CheckoutRequest,
    service: GuestService = Depends(get_guest_service)
):
    return await service.checkout(request.payment_method)

@router.post("/tickets/{ticket_id}/confirm", response_model=TicketActionResponse)
async def confirm_ticket(ticket_id: str, service: GuestService = Depends(get_guest_service)):
    return await service.confirm_ticket(ticket_id)

@router.post("/tickets/{ticket_id}/cancel", response_model=TicketActionResponse)
async def cancel_ticket(ticket_id: str, service: GuestService = Depends(get_guest_service)):
    return await service.cancel_ticket(ticket_id)

# ==================== BILLETES ====================

@router.get("/bills", response_model=BillsResponse)
async def get_bills(service: GuestService = Depends(get_guest_reader)):
    return await service.get_bills()

@router.put("/bills", response_model=BillsResponse)
async def update_bills(
    request: BillCountsRequest,
    service: GuestService = Depends(get_guest_service)
):
    return await service.update_bills(request)

@router.delete("/bills", response_model=BillsResponse)
async def reset_bills(service: GuestService = Depends(get_guest_service)):
    return await service.reset_bills()

@router.get("/reconciliation", response_model=ReconciliationResponse)
async def get_reconciliation(service: GuestService = Depends(get_guest_reader)):
    return await service.get_reconciliation()

# ==================== ESTADÍSTICAS ====================

@router.get("/stats", response_model=GuestStatsResponse)
async def get_stats(service: GuestService = Depends(get_guest_reader)):
    """Totales calculados con el precio actual de cada producto"""
    return await service.get_stats()

@router.get("/report", response_model=ReportResponse)
async def get_report(service: GuestService = Depends(get_guest_reader)):
    return await service.get_report()
