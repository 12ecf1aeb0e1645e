# ipv/modules/guest/store.py
from collections import OrderedDict
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Sequence, Tuple
import logging
import time
import uuid

from ipv.shared.checkout import (
    CheckoutSession, CommitSink, DenominationLedger, Item, PaymentMethod, SaleRecord
)

logger = logging.getLogger(__name__)

@dataclass
class GuestProduct:
    """Producto del modo invitado; las ventas se acumulan en contadores"""
    id: str
    name: str
    price: Decimal
    sold_cash: int = 0
    sold_transfer: int = 0

    @property
    def total_sold(self) -> int:
        return self.sold_cash + self.sold_transfer

    @property
    def cash_amount(self) -> Decimal:
        return self.price * self.sold_cash

    @property
    def transfer_amount(self) -> Decimal:
        return self.price * self.sold_transfer

    def to_item(self) -> Item:
        # Sin stock: el invitado vende sin límite
        return Item(id=self.id, name=self.name, price=self.price)

class GuestStore:
    """
    Estado completo de un invitado: productos, sesión de cobro y billetes.

    Vive solo en memoria del proceso y se pierde al reiniciarlo.
    """

    def __init__(
        self,
        guest_id: str,
        denominations: Sequence[int],
        display_seconds: float = 1.5,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex
    ):
        self.guest_id = guest_id
        self.products: Dict[str, GuestProduct] = {}
        self.bills = DenominationLedger(denominations)
        self.session = CheckoutSession([], inventory_id=guest_id, display_seconds=display_seconds)
        self._id_factory = id_factory

    def add_product(self, name: str, price: Decimal) -> GuestProduct:
        product = GuestProduct(id=self._id_factory(), name=name.strip(), price=Decimal(price))
        self.products[product.id] = product
        self.session.add_item(product.to_item())
        return product

    def remove_product(self, product_id: str) -> bool:
        """Quitar un producto; no se permite si tiene pagos pendientes"""
        if product_id not in self.products:
            return False
        if self.session.ledger.reserved_quantity(product_id):
            raise ValueError("El producto tiene pagos pendientes")

        del self.products[product_id]
        self.session.remove_item(product_id)
        return True

    def record_sales(self, sales: List[Tuple[str, PaymentMethod, int]]) -> None:
        for product_id, method, quantity in sales:
            product = self.products[product_id]
            if method is PaymentMethod.cash:
                product.sold_cash += quantity
            else:
                product.sold_transfer += quantity

    def cash_total(self) -> Decimal:
        return sum((p.cash_amount for p in self.products.values()), Decimal("0"))

    def transfer_total(self) -> Decimal:
        return sum((p.transfer_amount for p in self.products.values()), Decimal("0"))

    def close(self) -> None:
        self.session.close()

class GuestCommitSink(CommitSink):
    """Acumula las líneas de un pago y las suma a los contadores al confirmar"""

    def __init__(self, store: GuestStore):
        self.store = store
        self._staged: List[Tuple[str, PaymentMethod, int]] = []

    async def record(self, sale: SaleRecord) -> None:
        if sale.item_id not in self.store.products:
            raise LookupError(f"Producto {sale.item_id} no existe")
        self._staged.append((sale.item_id, PaymentMethod(sale.payment_method), sale.quantity))

    async def commit(self) -> None:
        self.store.record_sales(self._staged)
        self._staged = []

    async def rollback(self) -> None:
        self._staged = []

class GuestStoreRegistry:
    """
    Un GuestStore por id de invitado (cookie)

    Los invitados inactivos más de `max_idle_seconds` se descartan, y si se
    supera `max_stores` se descarta el usado hace más tiempo.
    """

    def __init__(
        self,
        denominations: Sequence[int],
        display_seconds: float = 1.5,
        max_idle_seconds: float = 60 * 60 * 24 * 30,
        max_stores: int = 1000,
        clock: Callable[[], float] = time.monotonic
    ):
        self.denominations = list(denominations)
        self.display_seconds = display_seconds
        self.max_idle_seconds = max_idle_seconds
        self.max_stores = max_stores
        self._clock = clock
        self._stores: "OrderedDict[str, GuestStore]" = OrderedDict()
        self._last_seen: Dict[str, float] = {}

    def get(self, guest_id: str) -> Optional[GuestStore]:
        self.prune()
        store = self._stores.get(guest_id)
        if store is not None:
            self._touch(guest_id)
        return store

    def view(self, guest_id: str) -> GuestStore:
        """Store existente o uno vacío sin registrar (solo lectura)"""
        store = self.get(guest_id)
        if store is None:
            return GuestStore(guest_id, self.denominations, self.display_seconds)
        return store

    def open(self, guest_id: str) -> GuestStore:
        store = self.get(guest_id)
        if store is None:
            store = GuestStore(guest_id, self.denominations, self.display_seconds)
            self._stores[guest_id] = store
            self._touch(guest_id)
            logger.info(f"Invitado {guest_id} iniciado")

            while len(self._stores) > self.max_stores:
                oldest = next(iter(self._stores))
                logger.info(f"Invitado {oldest} descartado por límite de {self.max_stores}")
                self._discard(oldest)
        return store

    def reset(self, guest_id: str) -> GuestStore:
        """Borrar todo el estado del invitado y empezar de cero"""
        self._discard(guest_id)
        return self.open(guest_id)

    def prune(self) -> int:
        """Descartar invitados inactivos; retorna cuántos se descartaron"""
        limit = self._clock() - self.max_idle_seconds
        expired = [gid for gid in self._stores if self._last_seen[gid] < limit]
        for guest_id in expired:
            self._discard(guest_id)
        if expired:
            logger.info(f"{len(expired)} invitados inactivos descartados")
        return len(expired)

    def _touch(self, guest_id: str) -> None:
        self._last_seen[guest_id] = self._clock()
        self._stores.move_to_end(guest_id)

    def _discard(self, guest_id: str) -> None:
        store = self._stores.pop(guest_id, None)
        self._last_seen.pop(guest_id, None)
        if store is not None:
            store.close()

    def __contains__(self, guest_id: str) -> bool:
        return guest_id in self._stores

    def __len__(self) -> int:
        return len(self._stores)
