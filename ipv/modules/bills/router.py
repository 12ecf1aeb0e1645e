# ipv/modules/bills/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ipv.config.database import get_db
from ipv.core.auth.dependencies import get_current_user
from ipv.core.sessions import get_checkout_sessions
from ipv.shared.checkout import CheckoutSessionRegistry
from ipv.shared.database.models import User
from ipv.shared.schemas.checkout import BillCountsRequest, BillsResponse, ReconciliationResponse
from .service import BillsService

router = APIRouter()

def get_bills_service(
    db: Session = Depends(get_db),
    sessions: CheckoutSessionRegistry = Depends(get_checkout_sessions)
) -> BillsService:
    return BillsService(db, sessions)

@router.get("/{ipv_id}", response_model=BillsResponse)
async def get_bills(
    ipv_id: int,
    current_user: User = Depends(get_current_user),
    service: BillsService = Depends(get_bills_service)
):
    """Conteo de billetes del usuario actual con su arqueo"""
    return await service.get_bills(ipv_id, current_user)

@router.put("/{ipv_id}", response_model=BillsResponse)
async def update_bills(
    ipv_id: int,
    request: BillCountsRequest,
    current_user: User = Depends(get_current_user),
    service: BillsService = Depends(get_bills_service)
):
    """
    Declarar billetes por denominación

    **Denominaciones:** 1000, 500, 200, 100, 50, 20, 10, 5, 1

    Solo se actualizan las denominaciones enviadas.
    """
    return await service.update_bills(ipv_id, request, current_user)

@router.delete("/{ipv_id}", response_model=BillsResponse)
async def reset_bills(
    ipv_id: int,
    current_user: User = Depends(get_current_user),
    service: BillsService = Depends(get_bills_service)
):
    return await service.reset_bills(ipv_id, current_user)

@router.get("/{ipv_id}/reconciliation", response_model=ReconciliationResponse)
async def get_reconciliation(
    ipv_id: int,
    current_user: User = Depends(get_current_user),
    service: BillsService = Depends(get_bills_service)
):
    """Diferencia entre lo declarado y las ventas en efectivo (declarado - ventas)"""
    return await service.get_reconciliation(ipv_id, current_user)
