# ipv/modules/bills/service.py
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
import logging

from ipv.config.settings import settings
from ipv.shared.checkout import CheckoutSessionRegistry, DenominationLedger
from ipv.shared.database.models import User
from ipv.shared.schemas.checkout import (
    BillCountsRequest, BillsResponse, ReconciliationResponse,
    bills_view, reconciliation_view
)
from ipv.modules.sales.repository import SalesRepository
from ipv.modules.sales.service import SalesService
from .repository import BillsRepository

logger = logging.getLogger(__name__)

class BillsService:
    """Arqueo de caja: conteo de billetes contra ventas en efectivo"""

    def __init__(self, db: Session, sessions: CheckoutSessionRegistry):
        self.db = db
        self.repository = BillsRepository(db)
        self.sales_repository = SalesRepository(db)
        self.sales = SalesService(db, sessions)

    def load_ledger(self, ipv_id: int, user: User) -> DenominationLedger:
        return DenominationLedger(
            settings.bill_denominations,
            self.repository.get_counts(ipv_id, user.id)
        )

    async def get_bills(self, ipv_id: int, user: User) -> BillsResponse:
        self.sales.get_ipv_for_actor(ipv_id, user)
        ledger = self.load_ledger(ipv_id, user)
        return bills_view(ledger, ledger.reconcile(self.sales_repository.get_cash_sales_total(ipv_id)))

    async def update_bills(self, ipv_id: int, request: BillCountsRequest, user: User) -> BillsResponse:
        """
        Guardar el conteo declarado

        Denominaciones fuera de la lista configurada se rechazan con 422;
        conteos negativos se guardan como 0.
        """
        self.sales.get_ipv_for_actor(ipv_id, user)
        ledger = self.load_ledger(ipv_id, user)

        try:
            for bill in request.bills:
                ledger.set_count(bill.denomination, bill.count)
        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=str(e)
            )

        self.repository.save_counts(ipv_id, user.id, dict(ledger.counts()))
        result = ledger.reconcile(self.sales_repository.get_cash_sales_total(ipv_id))

        logger.info(
            f"Arqueo IPV {ipv_id} por {user.email}: declarado {result.declared}, "
            f"efectivo {result.cash_sales} ({result.status.value})"
        )
        return bills_view(ledger, result, message="Conteo guardado")

    async def reset_bills(self, ipv_id: int, user: User) -> BillsResponse:
        self.sales.get_ipv_for_actor(ipv_id, user)
        self.repository.clear_counts(ipv_id, user.id)
        ledger = self.load_ledger(ipv_id, user)
        return bills_view(
            ledger,
            ledger.reconcile(self.sales_repository.get_cash_sales_total(ipv_id)),
            message="Conteo reiniciado"
        )

    async def get_reconciliation(self, ipv_id: int, user: User) -> ReconciliationResponse:
        self.sales.get_ipv_for_actor(ipv_id, user)
        ledger = self.load_ledger(ipv_id, user)
        return reconciliation_view(ledger.reconcile(self.sales_repository.get_cash_sales_total(ipv_id)))
