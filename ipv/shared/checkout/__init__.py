# ipv/shared/checkout/__init__.py
"""
Flujo de cobro con pagos pendientes y reserva de stock

Compartido por la vista de administrador, la de usuario y el modo invitado;
cada contexto aporta su propio destino de persistencia (CommitSink).

- basket.py: Productos y selección previa al cobro
- ledger.py: Pagos pendientes y sus líneas congeladas
- session.py: Transiciones cobrar / confirmar / cancelar
- sinks.py: Contrato del destino durable de ventas
- registry.py: Sesiones activas por inventario y actor
- reconciliation.py: Arqueo por denominaciones
"""

from .basket import Item, SelectionBasket
from .ledger import PaymentMethod, TicketStatus, ItemSnapshot, TicketLine, PendingPayment, PendingPaymentLedger
from .sinks import SaleRecord, CommitSink
from .session import CheckoutSession, CommitError
from .registry import CheckoutSessionRegistry
from .reconciliation import DenominationLedger, Reconciliation, ReconciliationStatus, reconcile

__all__ = [
    "Item",
    "SelectionBasket",
    "PaymentMethod",
    "TicketStatus",
    "ItemSnapshot",
    "TicketLine",
    "PendingPayment",
    "PendingPaymentLedger",
    "SaleRecord",
    "CommitSink",
    "CheckoutSession",
    "CommitError",
    "CheckoutSessionRegistry",
    "DenominationLedger",
    "Reconciliation",
    "ReconciliationStatus",
    "reconcile"
]
