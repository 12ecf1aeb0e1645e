# ipv/modules/sales/router.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
import logging

from ipv.config.database import get_db
from ipv.core.auth.dependencies import get_current_user
from ipv.core.sessions import get_checkout_sessions
from ipv.shared.checkout import CheckoutSessionRegistry
from ipv.shared.database.models import User
from ipv.shared.schemas.checkout import (
    QuantityRequest, PaymentMethodRequest, CheckoutRequest,
    CheckoutSessionResponse, CheckoutResponse, TicketActionResponse
)
from .service import SalesService
from .schemas import AssignedIPVResponse, SalesHistoryResponse, SalesSummaryResponse

router = APIRouter()
logger = logging.getLogger(__name__)

def get_sales_service(
    db: Session = Depends(get_db),
    sessions: CheckoutSessionRegistry = Depends(get_checkout_sessions)
) -> SalesService:
    return SalesService(db, sessions)

# ==================== IPVs ASIGNADOS ====================

@router.get("/ipvs", response_model=List[AssignedIPVResponse])
async def list_my_ipvs(
    current_user: User = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service)
):
    """IPVs asignados al usuario actual"""
    return await service.list_assigned_ipvs(current_user)

# ==================== SESIÓN DE COBRO ====================

@router.get("/{ipv_id}/session", response_model=CheckoutSessionResponse)
async def get_session(
    ipv_id: int,
    current_user: User = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service)
):
    """
    Estado de la pantalla de ventas

    **Incluye:**
    - Productos con stock disponible (descontando pagos pendientes)
    - Selección en curso y su total
    - Pagos pendientes y recién confirmados
    """
    return await service.get_session(ipv_id, current_user)

@router.delete("/{ipv_id}/session", response_model=CheckoutSessionResponse)
async def reset_session(
    ipv_id: int,
    current_user: User = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service)
):
    """Reiniciar la sesión recargando el stock guardado"""
    return await service.reset_session(ipv_id, current_user)

@router.post("/{ipv_id}/basket/{item_id}/toggle", response_model=CheckoutSessionResponse)
async def toggle_item(
    ipv_id: int,
    item_id: int,
    current_user: User = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service)
):
    return await service.toggle_item(ipv_id, item_id, current_user)

@router.put("/{ipv_id}/basket/payment-method", response_model=CheckoutSessionResponse)
async def choose_payment_method(
    ipv_id: int,
    request: PaymentMethodRequest,
    current_user: User = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service)
):
    return await service.choose_payment_method(ipv_id, request.payment_method, current_user)

@router.put("/{ipv_id}/basket/{item_id}", response_model=CheckoutSessionResponse)
async def set_quantity(
    ipv_id: int,
    item_id: int,
    request: QuantityRequest,
    current_user: User = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service)
):
    """Fijar la cantidad seleccionada (se limita al stock disponible)"""
    return await service.set_quantity(ipv_id, item_id, request.quantity, current_user)

@router.delete("/{ipv_id}/basket", response_model=CheckoutSessionResponse)
async def clear_basket(
    ipv_id: int,
    current_user: User = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service)
):
    return await service.clear_basket(ipv_id, current_user)

@router.post("/{ipv_id}/checkout", response_model=CheckoutResponse)
async def checkout(
    ipv_id: int,
    request: CheckoutRequest,
    current_user: User = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service)
):
    """
    Pasar la selección a pagos pendientes

    Reserva el stock de inmediato. Sin selección o sin método de pago
    no se crea nada y `success` es false.
    """
    return await service.checkout(ipv_id, request.payment_method, current_user)

@router.post("/{ipv_id}/tickets/{ticket_id}/confirm", response_model=TicketActionResponse)
async def confirm_ticket(
    ipv_id: int,
    ticket_id: str,
    current_user: User = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service)
):
    """
    Confirmar un pago pendiente registrando sus ventas

    Si el registro falla responde 502 y el pago sigue pendiente.
    """
    try:
        return await service.confirm_ticket(ipv_id, ticket_id, current_user)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error inesperado confirmando pago {ticket_id}")
        raise HTTPException(status_code=500, detail=f"Error confirmando pago: {str(e)}")

@router.post("/{ipv_id}/tickets/{ticket_id}/cancel", response_model=TicketActionResponse)
async def cancel_ticket(
    ipv_id: int,
    ticket_id: str,
    current_user: User = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service)
):
    """Cancelar un pago pendiente devolviendo su stock"""
    return await service.cancel_ticket(ipv_id, ticket_id, current_user)

# ==================== HISTORIAL Y RESUMEN ====================

@router.get("/{ipv_id}/history", response_model=SalesHistoryResponse)
async def get_history(
    ipv_id: int,
    current_user: User = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service)
):
    return await service.get_history(ipv_id, current_user)

@router.get("/{ipv_id}/summary", response_model=SalesSummaryResponse)
async def get_summary(
    ipv_id: int,
    current_user: User = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service)
):
    """Totales de efectivo, transferencia y general"""
    return await service.get_summary(ipv_id, current_user)
