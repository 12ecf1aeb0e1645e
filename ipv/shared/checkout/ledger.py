# ipv/shared/checkout/ledger.py
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from .basket import Item, ItemId

# ==================== ENUMS ====================

class PaymentMethod(str, Enum):
    cash = "cash"
    transfer = "transfer"

class TicketStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"

# ==================== TICKETS ====================

@dataclass(frozen=True)
class ItemSnapshot:
    """Copia inmutable de un producto en el momento del cobro"""
    id: ItemId
    name: str
    price: Decimal

    @classmethod
    def of(cls, item: Item) -> "ItemSnapshot":
        return cls(id=item.id, name=item.name, price=Decimal(item.price))

@dataclass(frozen=True)
class TicketLine:
    item: ItemSnapshot
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.item.price * self.quantity

@dataclass
class PendingPayment:
    id: str
    lines: Tuple[TicketLine, ...]
    payment_method: PaymentMethod
    total: Decimal
    status: TicketStatus = TicketStatus.pending
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_pending(self) -> bool:
        return self.status is TicketStatus.pending

    @classmethod
    def create(
        cls,
        ticket_id: str,
        lines: List[Tuple[Item, int]],
        payment_method: PaymentMethod
    ) -> "PendingPayment":
        snapshot = tuple(
            TicketLine(item=ItemSnapshot.of(item), quantity=quantity)
            for item, quantity in lines
        )
        total = sum((line.line_total for line in snapshot), Decimal("0"))
        return cls(
            id=ticket_id,
            lines=snapshot,
            payment_method=PaymentMethod(payment_method),
            total=total
        )

class PendingPaymentLedger:
    """Pagos en curso, en orden de creación"""

    def __init__(self):
        self._tickets: Dict[str, PendingPayment] = {}

    def add(self, ticket: PendingPayment) -> None:
        self._tickets[ticket.id] = ticket

    def get(self, ticket_id: str) -> Optional[PendingPayment]:
        return self._tickets.get(ticket_id)

    def remove(self, ticket_id: str) -> Optional[PendingPayment]:
        return self._tickets.pop(ticket_id, None)

    def pending(self) -> List[PendingPayment]:
        return [t for t in self._tickets.values() if t.is_pending]

    def reserved_quantity(self, item_id: ItemId) -> int:
        return sum(
            line.quantity
            for ticket in self.pending()
            for line in ticket.lines
            if line.item.id == item_id
        )

    def __contains__(self, ticket_id: str) -> bool:
        return ticket_id in self._tickets

    def __iter__(self) -> Iterator[PendingPayment]:
        return iter(list(self._tickets.values()))

    def __len__(self) -> int:
        return len(self._tickets)
