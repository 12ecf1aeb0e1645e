from typing import List, Optional
from decimal import Decimal
from sqlalchemy.orm import Session
import logging

from ipv.shared.checkout import Item, CheckoutSessionRegistry
from ipv.shared.database.models import Product

logger = logging.getLogger(__name__)

class InventoryService:
    """Puente entre el stock persistido de un IPV y las sesiones de cobro"""

    @staticmethod
    def to_item(product: Product) -> Item:
        return Item(
            id=product.id,
            name=product.name,
            price=Decimal(str(product.price)),
            initial_stock=product.initial_stock,
            current_stock=max(0, min(product.current_stock, product.initial_stock))
        )

    @staticmethod
    def load_items(db: Session, ipv_id: int) -> List[Item]:
        """
        Snapshot de los productos de un IPV para abrir una sesión de cobro.

        El stock se lee sin bloqueo: las reservas posteriores viven solo
        en la sesión que lo cargó.
        """
        products = db.query(Product).filter(
            Product.ipv_id == ipv_id
        ).order_by(Product.name, Product.id).all()
        return [InventoryService.to_item(p) for p in products]

    @staticmethod
    def apply_sale(db: Session, product_id: int, quantity: int) -> Optional[Product]:
        """
        Descontar del stock persistido una venta confirmada (sin commit).

        No hay verificación de stock: dos sesiones sobre el mismo IPV pueden
        vender más de lo disponible y el stock persistido queda en cero.
        """
        product = db.query(Product).filter(Product.id == product_id).first()
        if product is None:
            return None

        quantity_before = product.current_stock
        product.current_stock = quantity_before - quantity

        if product.current_stock < 0:
            logger.warning(
                f"Stock de producto {product_id} sobrevendido: "
                f"{quantity_before} disponibles, {quantity} vendidos"
            )
            product.current_stock = 0

        return product

    @staticmethod
    def publish_product(sessions: Optional[CheckoutSessionRegistry], product: Product) -> None:
        """Agregar un producto nuevo a las sesiones abiertas de su IPV"""
        if sessions is None:
            return
        for session in sessions.sessions_for(product.ipv_id):
            session.add_item(InventoryService.to_item(product))

    @staticmethod
    def withdraw_product(sessions: Optional[CheckoutSessionRegistry], ipv_id: int, product_id: int) -> None:
        if sessions is None:
            return
        for session in sessions.sessions_for(ipv_id):
            session.remove_item(product_id)
