# ipv/modules/reports/service.py
from sqlalchemy.orm import Session
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List
import logging

from ipv.shared.checkout import CheckoutSessionRegistry, DenominationLedger, PaymentMethod
from ipv.shared.database.models import User
from ipv.shared.schemas.checkout import BillCountResponse, reconciliation_view
from ipv.modules.bills.service import BillsService
from ipv.modules.sales.repository import SalesRepository
from ipv.modules.sales.service import SalesService
from .repository import ReportsRepository
from .schemas import ItemStats, SaleHistoryEntry, ReportResponse

logger = logging.getLogger(__name__)

def build_report(
    title: str,
    stats: List[ItemStats],
    history: Iterable[SaleHistoryEntry],
    ledger: DenominationLedger,
    cash_total: Decimal,
    transfer_total: Decimal
) -> ReportResponse:
    """Armar el reporte a partir de estadísticas ya calculadas"""
    return ReportResponse(
        success=True,
        title=title,
        generated_at=datetime.now(timezone.utc),
        cash_total=float(cash_total),
        transfer_total=float(transfer_total),
        grand_total=float(cash_total + transfer_total),
        per_item_stats=stats,
        sale_history=list(history),
        denomination_counts=[
            BillCountResponse(denomination=d, count=c, subtotal=float(d * c))
            for d, c in ledger.counts()
        ],
        declared_total=float(ledger.total_declared()),
        reconciliation=reconciliation_view(ledger.reconcile(cash_total))
    )

class ReportsService:
    def __init__(self, db: Session, sessions: CheckoutSessionRegistry):
        self.db = db
        self.repository = ReportsRepository(db)
        self.sales_repository = SalesRepository(db)
        self.sales = SalesService(db, sessions)
        self.bills = BillsService(db, sessions)

    async def get_ipv_report(self, ipv_id: int, user: User) -> ReportResponse:
        ipv = self.sales.get_ipv_for_actor(ipv_id, user)

        totals = self.repository.get_item_totals(ipv_id)
        stats = []
        for product in self.repository.get_products(ipv_id):
            cash_qty, cash_amount = totals.get((product.id, PaymentMethod.cash.value), (0, Decimal("0")))
            transfer_qty, transfer_amount = totals.get((product.id, PaymentMethod.transfer.value), (0, Decimal("0")))
            stats.append(ItemStats(
                item_id=product.id,
                name=product.name,
                price=float(product.price),
                initial_stock=product.initial_stock,
                current_stock=product.current_stock,
                total_sold=cash_qty + transfer_qty,
                cash_quantity=cash_qty,
                cash_amount=float(cash_amount),
                transfer_quantity=transfer_qty,
                transfer_amount=float(transfer_amount),
                total_amount=float(cash_amount + transfer_amount)
            ))

        history = [
            SaleHistoryEntry(
                item_id=sale.product_id,
                name=sale.product.name if sale.product else "",
                quantity=sale.quantity,
                payment_method=sale.payment_method,
                unit_price=float(sale.unit_price),
                total_amount=float(sale.total_amount),
                created_at=sale.created_at
            )
            for sale in self.sales_repository.get_sales(ipv_id)
        ]

        by_method = self.sales_repository.get_totals_by_method(ipv_id)
        logger.info(f"Reporte del IPV {ipv_id} generado para {user.email}")

        return build_report(
            title=ipv.name,
            stats=stats,
            history=history,
            ledger=self.bills.load_ledger(ipv_id, user),
            cash_total=by_method[PaymentMethod.cash.value],
            transfer_total=by_method[PaymentMethod.transfer.value]
        )
