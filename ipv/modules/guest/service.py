# ipv/modules/guest/service.py
from fastapi import HTTPException, status
from decimal import Decimal
from typing import Optional
import logging

from ipv.shared.checkout import CommitError, PaymentMethod
from ipv.shared.schemas.checkout import (
    BillCountsRequest, BillsResponse, CheckoutResponse, ReconciliationResponse,
    TicketActionResponse, bills_view, reconciliation_view, session_view, ticket_view
)
from ipv.modules.reports.schemas import ItemStats, ReportResponse
from ipv.modules.reports.service import build_report
from .schemas import GuestProductCreate, GuestProductResponse, GuestSessionResponse, GuestStatsResponse
from .store import GuestCommitSink, GuestProduct, GuestStore

logger = logging.getLogger(__name__)

class GuestService:
    """
    Pantalla de ventas sin cuenta

    Mismo flujo de pagos pendientes que un IPV pero sin control de stock;
    las ventas confirmadas suman a los contadores de cada producto.
    """

    def __init__(self, store: GuestStore):
        self.store = store
        self.session = store.session

    # ==================== SESIÓN ====================

    async def get_session(self, message: str = "") -> GuestSessionResponse:
        view = session_view(self.session, message=message)
        return GuestSessionResponse(
            **view.model_dump(),
            guest_id=self.store.guest_id,
            guest_products=[self._product_view(p) for p in self.store.products.values()]
        )

    # ==================== PRODUCTOS ====================

    async def add_product(self, data: GuestProductCreate) -> GuestProductResponse:
        product = self.store.add_product(data.name, Decimal(str(data.price)))
        logger.info(f"Invitado {self.store.guest_id}: producto '{product.name}' agregado")
        return self._product_view(product)

    async def remove_product(self, product_id: str) -> None:
        try:
            removed = self.store.remove_product(product_id)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

        if not removed:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Producto no encontrado"
            )

    # ==================== SELECCIÓN Y COBRO ====================

    async def toggle_item(self, item_id: str) -> GuestSessionResponse:
        self.session.toggle(item_id)
        return await self.get_session()

    async def set_quantity(self, item_id: str, quantity: int) -> GuestSessionResponse:
        self.session.set_quantity(item_id, quantity)
        return await self.get_session()

    async def choose_payment_method(self, payment_method: Optional[PaymentMethod]) -> GuestSessionResponse:
        self.session.choose_payment_method(payment_method)
        return await self.get_session()

    async def clear_basket(self) -> GuestSessionResponse:
        self.session.clear_selection()
        return await self.get_session()

    async def checkout(self, payment_method: Optional[PaymentMethod]) -> CheckoutResponse:
        ticket = self.session.checkout(payment_method)
        if ticket is None:
            return CheckoutResponse(
                success=False,
                message="Selecciona al menos un producto y un método de pago"
            )
        return CheckoutResponse(success=True, message="Pago agregado a pendientes", ticket=ticket_view(ticket))

    async def confirm_ticket(self, ticket_id: str) -> TicketActionResponse:
        self._ticket_or_404(ticket_id)

        try:
            confirmed = await self.session.confirm(ticket_id, GuestCommitSink(self.store))
        except CommitError as e:
            logger.error(f"Invitado {self.store.guest_id}: confirmación fallida de {ticket_id}: {e.cause}")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="No se pudo confirmar el pago. El pago sigue pendiente."
            )

        ticket = self.session.ledger.get(ticket_id)
        return TicketActionResponse(
            success=confirmed,
            message="Pago confirmado" if confirmed else "El pago ya fue confirmado o se está confirmando",
            ticket_id=ticket_id,
            status=ticket.status if ticket else None
        )

    async def cancel_ticket(self, ticket_id: str) -> TicketActionResponse:
        ticket = self._ticket_or_404(ticket_id)
        cancelled = self.session.cancel(ticket_id)
        return TicketActionResponse(
            success=cancelled,
            message="Pago cancelado" if cancelled else "Solo se pueden cancelar pagos pendientes",
            ticket_id=ticket_id,
            status=None if cancelled else ticket.status
        )

    # ==================== BILLETES ====================

    async def get_bills(self, message: str = "") -> BillsResponse:
        ledger = self.store.bills
        return bills_view(ledger, ledger.reconcile(self.store.cash_total()), message=message)

    async def update_bills(self, request: BillCountsRequest) -> BillsResponse:
        try:
            for bill in request.bills:
                self.store.bills.set_count(bill.denomination, bill.count)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
        return await self.get_bills(message="Conteo guardado")

    async def reset_bills(self) -> BillsResponse:
        self.store.bills.reset()
        return await self.get_bills(message="Conteo reiniciado")

    async def get_reconciliation(self) -> ReconciliationResponse:
        return reconciliation_view(self.store.bills.reconcile(self.store.cash_total()))

    # ==================== ESTADÍSTICAS ====================

    async def get_stats(self) -> GuestStatsResponse:
        cash = self.store.cash_total()
        transfer = self.store.transfer_total()
        return GuestStatsResponse(
            success=True,
            products=self._item_stats(),
            cash_total=float(cash),
            transfer_total=float(transfer),
            grand_total=float(cash + transfer)
        )

    async def get_report(self) -> ReportResponse:
        """Los invitados no guardan historial: solo contadores por producto"""
        return build_report(
            title="Modo invitado",
            stats=self._item_stats(),
            history=[],
            ledger=self.store.bills,
            cash_total=self.store.cash_total(),
            transfer_total=self.store.transfer_total()
        )

    # ==================== UTILIDADES ====================

    def _item_stats(self):
        return [
            ItemStats(
                item_id=p.id,
                name=p.name,
                price=float(p.price),
                total_sold=p.total_sold,
                cash_quantity=p.sold_cash,
                cash_amount=float(p.cash_amount),
                transfer_quantity=p.sold_transfer,
                transfer_amount=float(p.transfer_amount),
                total_amount=float(p.cash_amount + p.transfer_amount)
            )
            for p in self.store.products.values()
        ]

    def _ticket_or_404(self, ticket_id: str):
        ticket = self.session.ledger.get(ticket_id)
        if ticket is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pago no encontrado")
        return ticket

    @staticmethod
    def _product_view(product: GuestProduct) -> GuestProductResponse:
        return GuestProductResponse(
            id=product.id,
            name=product.name,
            price=float(product.price),
            sold_cash=product.sold_cash,
            sold_transfer=product.sold_transfer
        )
