# ipv/modules/reports/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ipv.config.database import get_db
from ipv.core.auth.dependencies import get_current_user
from ipv.core.sessions import get_checkout_sessions
from ipv.shared.checkout import CheckoutSessionRegistry
from ipv.shared.database.models import User
from .service import ReportsService
from .schemas import ReportResponse

router = APIRouter()

@router.get("/{ipv_id}", response_model=ReportResponse)
async def get_ipv_report(
    ipv_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    sessions: CheckoutSessionRegistry = Depends(get_checkout_sessions)
):
    """
    Reporte del IPV

    **Incluye:**
    - Totales por método de pago
    - Estadísticas por producto
    - Historial de ventas
    - Conteo de billetes y arqueo del usuario actual
    """
    service = ReportsService(db, sessions)
    return await service.get_ipv_report(ipv_id, current_user)
