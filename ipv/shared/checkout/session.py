# ipv/shared/checkout/session.py
import asyncio
import logging
import uuid
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Set, Union

from .basket import Item, ItemId, SelectionBasket
from .ledger import PaymentMethod, PendingPayment, PendingPaymentLedger, TicketStatus
from .sinks import CommitSink, SaleRecord

logger = logging.getLogger(__name__)

class CommitError(Exception):
    """La confirmación de un pago no pudo persistirse; el pago sigue pendiente"""

    def __init__(self, ticket_id: str, cause: Exception):
        self.ticket_id = ticket_id
        self.cause = cause
        super().__init__(f"No se pudo confirmar el pago {ticket_id}: {cause}")

class CheckoutSession:
    """
    Estado de cobro de un actor sobre un inventario.

    Contiene los productos con su stock disponible, la selección en curso
    y los pagos pendientes. Cada transición es una actualización síncrona;
    el único punto de espera es la confirmación contra el destino durable.

    Las reservas viven solo en esta sesión. Dos sesiones sobre el mismo
    inventario no se ven entre sí y pueden reservar las mismas unidades.
    """

    def __init__(
        self,
        items: Iterable[Item],
        inventory_id: Optional[Hashable] = None,
        actor_id: Optional[Hashable] = None,
        display_seconds: float = 1.5,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex
    ):
        self.inventory_id = inventory_id
        self.actor_id = actor_id
        self.display_seconds = display_seconds
        self.items: Dict[ItemId, Item] = {item.id: item for item in items}
        self.basket = SelectionBasket(self.items)
        self.ledger = PendingPaymentLedger()
        self.payment_method: Optional[PaymentMethod] = None
        self._id_factory = id_factory
        self._confirming: Set[str] = set()
        self._removals: Dict[str, asyncio.TimerHandle] = {}

    # ==================== PRODUCTOS ====================

    def add_item(self, item: Item) -> None:
        self.items[item.id] = item

    def remove_item(self, item_id: ItemId) -> Optional[Item]:
        self.basket.discard(item_id)
        return self.items.pop(item_id, None)

    def products(self) -> List[Item]:
        return list(self.items.values())

    # ==================== SELECCIÓN ====================

    def toggle(self, item_id: ItemId) -> None:
        self.basket.toggle(item_id)

    def set_quantity(self, item_id: ItemId, quantity: int) -> None:
        self.basket.set_quantity(item_id, quantity)

    def choose_payment_method(self, method: Optional[Union[PaymentMethod, str]]) -> None:
        self.payment_method = PaymentMethod(method) if method is not None else None

    def clear_selection(self) -> None:
        self.basket.clear()
        self.payment_method = None

    # ==================== COBRO ====================

    def checkout(
        self,
        payment_method: Optional[Union[PaymentMethod, str]] = None
    ) -> Optional[PendingPayment]:
        """
        Convertir la selección en un pago pendiente y reservar su stock.

        Sin selección o sin método de pago no hace nada y retorna None.
        """
        method = PaymentMethod(payment_method) if payment_method is not None else self.payment_method

        lines = []
        for item, quantity in self.basket.lines():
            if item.tracks_stock:
                quantity = min(quantity, item.current_stock)
            if quantity > 0:
                lines.append((item, quantity))

        # Un cobro rechazado no modifica la selección ni el método elegido
        if not lines or method is None:
            logger.debug(f"Cobro ignorado en inventario {self.inventory_id}: selección o método vacío")
            return None

        ticket = PendingPayment.create(self._id_factory(), lines, method)
        self.ledger.add(ticket)

        for item, quantity in lines:
            item.reserve(quantity)

        self.clear_selection()

        logger.info(
            f"Pago {ticket.id} pendiente - Inventario: {self.inventory_id}, "
            f"Método: {ticket.payment_method.value}, Total: {ticket.total}"
        )
        return ticket

    def cancel(self, ticket_id: str) -> bool:
        """Anular un pago pendiente devolviendo su stock reservado"""
        ticket = self.ledger.get(ticket_id)
        if ticket is None or not ticket.is_pending:
            logger.warning(f"Cancelación rechazada para pago {ticket_id}: no existe o ya fue confirmado")
            return False

        if ticket_id in self._confirming:
            logger.warning(f"Cancelación rechazada para pago {ticket_id}: confirmación en curso")
            return False

        for line in ticket.lines:
            item = self.items.get(line.item.id)
            if item is not None:
                item.release(line.quantity)

        self.ledger.remove(ticket_id)
        logger.info(f"Pago {ticket_id} cancelado - stock restaurado")
        return True

    def is_confirming(self, ticket_id: str) -> bool:
        return ticket_id in self._confirming

    async def confirm(self, ticket_id: str, sink: CommitSink) -> bool:
        """
        Registrar cada línea del pago en `sink` y marcarlo confirmado.

        Retorna False si el pago no existe, ya está confirmado o tiene una
        confirmación en curso. Lanza CommitError si el destino falla; en ese
        caso el pago sigue pendiente con su stock reservado.
        """
        ticket = self.ledger.get(ticket_id)
        if ticket is None or not ticket.is_pending:
            logger.warning(f"Confirmación rechazada para pago {ticket_id}: no existe o ya fue confirmado")
            return False

        if ticket_id in self._confirming:
            logger.warning(f"Confirmación duplicada ignorada para pago {ticket_id}")
            return False

        self._confirming.add(ticket_id)
        try:
            try:
                for line in ticket.lines:
                    await sink.record(SaleRecord(
                        item_id=line.item.id,
                        inventory_id=self.inventory_id,
                        actor_id=self.actor_id,
                        quantity=line.quantity,
                        payment_method=ticket.payment_method,
                        unit_price=line.item.price,
                        total_amount=line.line_total
                    ))
                await sink.commit()
            except Exception as e:
                logger.error(f"Error confirmando pago {ticket_id}: {e}")
                await sink.rollback()
                raise CommitError(ticket_id, e) from e

            ticket.status = TicketStatus.confirmed
            self._schedule_removal(ticket_id)
            logger.info(f"Pago {ticket_id} confirmado - {len(ticket.lines)} ventas registradas")
            return True
        finally:
            self._confirming.discard(ticket_id)

    # ==================== LIMPIEZA ====================

    def _schedule_removal(self, ticket_id: str) -> None:
        loop = asyncio.get_running_loop()
        self._removals[ticket_id] = loop.call_later(
            self.display_seconds, self._remove_confirmed, ticket_id
        )

    def _remove_confirmed(self, ticket_id: str) -> None:
        self._removals.pop(ticket_id, None)
        ticket = self.ledger.get(ticket_id)
        if ticket is not None and ticket.status is TicketStatus.confirmed:
            self.ledger.remove(ticket_id)

    def dismiss(self, ticket_id: str) -> bool:
        """Quitar ya un pago confirmado sin esperar su retiro programado"""
        ticket = self.ledger.get(ticket_id)
        if ticket is None or ticket.is_pending:
            return False
        handle = self._removals.pop(ticket_id, None)
        if handle is not None:
            handle.cancel()
        self.ledger.remove(ticket_id)
        return True

    def close(self) -> None:
        """Cancelar retiros programados; la sesión deja de usarse"""
        for handle in self._removals.values():
            handle.cancel()
        self._removals.clear()
