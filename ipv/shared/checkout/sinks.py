# ipv/shared/checkout/sinks.py
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Hashable, Optional

from .basket import ItemId
from .ledger import PaymentMethod

@dataclass(frozen=True)
class SaleRecord:
    """Línea de venta confirmada que se entrega al destino de persistencia"""
    item_id: ItemId
    inventory_id: Optional[Hashable]
    actor_id: Optional[Hashable]
    quantity: int
    payment_method: PaymentMethod
    unit_price: Decimal
    total_amount: Decimal

class CommitSink(ABC):
    """
    Destino durable de las ventas confirmadas.

    Una confirmación llama `record` una vez por línea y luego `commit`.
    Si algo falla se llama `rollback` y ninguna línea queda aplicada.
    """

    @abstractmethod
    async def record(self, sale: SaleRecord) -> None:
        ...

    @abstractmethod
    async def commit(self) -> None:
        ...

    @abstractmethod
    async def rollback(self) -> None:
        ...
