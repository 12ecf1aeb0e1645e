# ipv/modules/sales/service.py
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from ipv.core.auth.dependencies import can_access_ipv
from ipv.shared.checkout import CheckoutSession, CheckoutSessionRegistry, CommitError, PaymentMethod
from ipv.shared.database.models import IPV, Sale, User
from ipv.shared.schemas.checkout import (
    CheckoutSessionResponse, CheckoutResponse, TicketActionResponse,
    session_view, ticket_view
)
from ipv.shared.services.inventory_service import InventoryService
from .repository import SalesRepository, DatabaseCommitSink
from .schemas import AssignedIPVResponse, SaleResponse, SalesHistoryResponse, SalesSummaryResponse

logger = logging.getLogger(__name__)

class SalesService:
    """
    Pantalla de ventas de un IPV para su usuario asignado o un administrador
    """

    def __init__(self, db: Session, sessions: CheckoutSessionRegistry):
        self.db = db
        self.sessions = sessions
        self.repository = SalesRepository(db)

    # ==================== IPVs ASIGNADOS ====================

    async def list_assigned_ipvs(self, user: User) -> List[AssignedIPVResponse]:
        return [
            AssignedIPVResponse(
                id=ipv.id,
                name=ipv.name,
                description=ipv.description or "",
                status=ipv.status,
                products_count=len(ipv.products)
            )
            for ipv in self.repository.get_assigned_ipvs(user.id)
        ]

    def get_ipv_for_actor(self, ipv_id: int, user: User) -> IPV:
        ipv = self.repository.get_ipv(ipv_id)
        if not ipv:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"IPV {ipv_id} no encontrado"
            )
        if not can_access_ipv(user, ipv):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="No tienes acceso a este IPV"
            )
        return ipv

    # ==================== SESIÓN DE COBRO ====================

    def open_session(self, ipv: IPV, user: User) -> CheckoutSession:
        return self.sessions.open(
            (ipv.id, user.id),
            loader=lambda: InventoryService.load_items(self.db, ipv.id),
            inventory_id=ipv.id,
            actor_id=user.id
        )

    async def get_session(self, ipv_id: int, user: User) -> CheckoutSessionResponse:
        ipv = self.get_ipv_for_actor(ipv_id, user)
        return session_view(self.open_session(ipv, user))

    async def reset_session(self, ipv_id: int, user: User) -> CheckoutSessionResponse:
        """Descartar la sesión; las reservas sin confirmar se pierden"""
        ipv = self.get_ipv_for_actor(ipv_id, user)
        self.sessions.discard((ipv.id, user.id))
        return session_view(self.open_session(ipv, user), message="Sesión reiniciada")

    async def toggle_item(self, ipv_id: int, item_id: int, user: User) -> CheckoutSessionResponse:
        session = self._session_for(ipv_id, user)
        session.toggle(item_id)
        return session_view(session)

    async def set_quantity(self, ipv_id: int, item_id: int, quantity: int, user: User) -> CheckoutSessionResponse:
        session = self._session_for(ipv_id, user)
        session.set_quantity(item_id, quantity)
        return session_view(session)

    async def choose_payment_method(
        self,
        ipv_id: int,
        payment_method: Optional[PaymentMethod],
        user: User
    ) -> CheckoutSessionResponse:
        session = self._session_for(ipv_id, user)
        session.choose_payment_method(payment_method)
        return session_view(session)

    async def clear_basket(self, ipv_id: int, user: User) -> CheckoutSessionResponse:
        session = self._session_for(ipv_id, user)
        session.clear_selection()
        return session_view(session)

    async def checkout(
        self,
        ipv_id: int,
        payment_method: Optional[PaymentMethod],
        user: User
    ) -> CheckoutResponse:
        ipv = self.get_ipv_for_actor(ipv_id, user)
        if not ipv.is_open:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="El IPV está cerrado y no acepta ventas"
            )

        session = self.open_session(ipv, user)
        ticket = session.checkout(payment_method)
        if ticket is None:
            return CheckoutResponse(
                success=False,
                message="Selecciona al menos un producto y un método de pago"
            )

        return CheckoutResponse(
            success=True,
            message="Pago agregado a pendientes",
            ticket=ticket_view(ticket)
        )

    async def confirm_ticket(self, ipv_id: int, ticket_id: str, user: User) -> TicketActionResponse:
        session = self._session_for(ipv_id, user)
        self._ticket_or_404(session, ticket_id)

        try:
            confirmed = await session.confirm(ticket_id, DatabaseCommitSink(self.db))
        except CommitError as e:
            logger.error(f"Confirmación fallida - IPV {ipv_id}, pago {ticket_id}: {e.cause}")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Error al confirmar el pago. El pago sigue pendiente, intenta de nuevo."
            )

        ticket = session.ledger.get(ticket_id)
        return TicketActionResponse(
            success=confirmed,
            message="Pago confirmado" if confirmed else "El pago ya fue confirmado o se está confirmando",
            ticket_id=ticket_id,
            status=ticket.status if ticket else None
        )

    async def cancel_ticket(self, ipv_id: int, ticket_id: str, user: User) -> TicketActionResponse:
        session = self._session_for(ipv_id, user)
        ticket = self._ticket_or_404(session, ticket_id)

        cancelled = session.cancel(ticket_id)
        return TicketActionResponse(
            success=cancelled,
            message="Pago cancelado" if cancelled else "Solo se pueden cancelar pagos pendientes",
            ticket_id=ticket_id,
            status=None if cancelled else ticket.status
        )

    # ==================== HISTORIAL Y RESUMEN ====================

    async def get_history(self, ipv_id: int, user: User) -> SalesHistoryResponse:
        self.get_ipv_for_actor(ipv_id, user)
        return SalesHistoryResponse(
            success=True,
            ipv_id=ipv_id,
            sales=[self._sale_view(s) for s in self.repository.get_sales(ipv_id)]
        )

    async def get_summary(self, ipv_id: int, user: User) -> SalesSummaryResponse:
        ipv = self.get_ipv_for_actor(ipv_id, user)
        totals = self.repository.get_totals_by_method(ipv_id)
        session = self.sessions.get((ipv.id, user.id))

        cash = totals[PaymentMethod.cash.value]
        transfer = totals[PaymentMethod.transfer.value]
        return SalesSummaryResponse(
            success=True,
            ipv_id=ipv_id,
            cash_total=float(cash),
            transfer_total=float(transfer),
            grand_total=float(cash + transfer),
            sales_count=self.repository.count_sales(ipv_id),
            pending_tickets=len(session.ledger.pending()) if session else 0
        )

    # ==================== UTILIDADES ====================

    def _session_for(self, ipv_id: int, user: User) -> CheckoutSession:
        ipv = self.get_ipv_for_actor(ipv_id, user)
        return self.open_session(ipv, user)

    @staticmethod
    def _ticket_or_404(session: CheckoutSession, ticket_id: str):
        ticket = session.ledger.get(ticket_id)
        if ticket is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Pago no encontrado"
            )
        return ticket

    @staticmethod
    def _sale_view(sale: Sale) -> SaleResponse:
        return SaleResponse(
            id=sale.id,
            product_id=sale.product_id,
            product_name=sale.product.name if sale.product else None,
            quantity=sale.quantity,
            payment_method=sale.payment_method,
            unit_price=float(sale.unit_price),
            total_amount=float(sale.total_amount),
            created_at=sale.created_at
        )
