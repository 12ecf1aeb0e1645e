# ipv/shared/checkout/basket.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Hashable, List, Optional, Tuple

ItemId = Hashable

@dataclass
class Item:
    """
    Producto vendible dentro de una sesión de cobro.

    `current_stock` en None indica un producto sin control de stock
    (modo invitado).
    """
    id: ItemId
    name: str
    price: Decimal
    initial_stock: Optional[int] = None
    current_stock: Optional[int] = None

    @property
    def tracks_stock(self) -> bool:
        return self.current_stock is not None

    @property
    def is_sold_out(self) -> bool:
        return self.tracks_stock and self.current_stock <= 0

    def reserve(self, quantity: int) -> None:
        if self.tracks_stock:
            self.current_stock = max(0, self.current_stock - quantity)

    def release(self, quantity: int) -> None:
        if self.tracks_stock:
            restored = self.current_stock + quantity
            if self.initial_stock is not None:
                restored = min(restored, self.initial_stock)
            self.current_stock = restored

class SelectionBasket:
    """Selección de productos y cantidades previa al cobro"""

    def __init__(self, items: Dict[ItemId, Item]):
        self._items = items
        self._quantities: Dict[ItemId, int] = {}

    def toggle(self, item_id: ItemId) -> None:
        if item_id in self._quantities:
            del self._quantities[item_id]
            return

        item = self._items.get(item_id)
        if item is None or item.is_sold_out:
            return

        self._quantities[item_id] = 1

    def set_quantity(self, item_id: ItemId, quantity: int) -> None:
        item = self._items.get(item_id)
        if item is None:
            self._quantities.pop(item_id, None)
            return

        if item.tracks_stock:
            quantity = min(quantity, item.current_stock)

        if quantity <= 0:
            self._quantities.pop(item_id, None)
        else:
            self._quantities[item_id] = quantity

    def quantity(self, item_id: ItemId) -> int:
        return self._quantities.get(item_id, 0)

    def lines(self) -> List[Tuple[Item, int]]:
        """Pares (producto vivo, cantidad) en orden de selección"""
        return [
            (self._items[item_id], quantity)
            for item_id, quantity in self._quantities.items()
            if item_id in self._items
        ]

    def total(self) -> Decimal:
        return sum(
            (item.price * quantity for item, quantity in self.lines()),
            Decimal("0")
        )

    def discard(self, item_id: ItemId) -> None:
        self._quantities.pop(item_id, None)

    def clear(self) -> None:
        self._quantities.clear()

    def is_empty(self) -> bool:
        return not self.lines()

    def __contains__(self, item_id: ItemId) -> bool:
        return item_id in self._quantities

    def __len__(self) -> int:
        return len(self._quantities)
