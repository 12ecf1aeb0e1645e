# ipv/modules/sales/repository.py
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func
from typing import Dict, List, Optional
from decimal import Decimal
import logging

from ipv.shared.checkout import CommitSink, SaleRecord, PaymentMethod
from ipv.shared.database.models import Sale, Product, IPV
from ipv.shared.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

class SalesRepository:
    def __init__(self, db: Session):
        self.db = db

    # ==================== IPVs ====================

    def get_ipv(self, ipv_id: int) -> Optional[IPV]:
        return self.db.query(IPV).filter(IPV.id == ipv_id).first()

    def get_assigned_ipvs(self, user_id: int) -> List[IPV]:
        return self.db.query(IPV).filter(
            IPV.user_id == user_id
        ).order_by(IPV.created_at.desc(), IPV.id.desc()).all()

    # ==================== VENTAS ====================

    def get_sales(self, ipv_id: int) -> List[Sale]:
        """Ventas del IPV, más recientes primero"""
        return self.db.query(Sale).options(
            joinedload(Sale.product)
        ).filter(
            Sale.ipv_id == ipv_id
        ).order_by(Sale.created_at.desc(), Sale.id.desc()).all()

    def get_totals_by_method(self, ipv_id: int) -> Dict[str, Decimal]:
        rows = self.db.query(
            Sale.payment_method,
            func.coalesce(func.sum(Sale.total_amount), 0)
        ).filter(
            Sale.ipv_id == ipv_id
        ).group_by(Sale.payment_method).all()

        totals = {method.value: Decimal("0") for method in PaymentMethod}
        for method, amount in rows:
            totals[method] = Decimal(str(amount)).quantize(CENTS)
        return totals

    def get_cash_sales_total(self, ipv_id: int) -> Decimal:
        return self.get_totals_by_method(ipv_id)[PaymentMethod.cash.value]

    def count_sales(self, ipv_id: int) -> int:
        return self.db.query(func.count(Sale.id)).filter(Sale.ipv_id == ipv_id).scalar() or 0

    def insert_sale(self, sale: SaleRecord) -> Sale:
        """Insertar una línea de venta y descontar su stock (sin commit)"""
        db_sale = Sale(
            product_id=sale.item_id,
            ipv_id=sale.inventory_id,
            user_id=sale.actor_id,
            quantity=sale.quantity,
            payment_method=PaymentMethod(sale.payment_method).value,
            unit_price=sale.unit_price,
            total_amount=sale.total_amount
        )
        self.db.add(db_sale)

        if InventoryService.apply_sale(self.db, sale.item_id, sale.quantity) is None:
            raise LookupError(f"Producto {sale.item_id} no existe")

        self.db.flush()
        return db_sale

class DatabaseCommitSink(CommitSink):
    """
    Registra las ventas confirmadas en la base de datos.

    Todas las líneas de un pago van en una sola transacción.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = SalesRepository(db)
        self.inserted: List[Sale] = []

    async def record(self, sale: SaleRecord) -> None:
        self.inserted.append(self.repository.insert_sale(sale))

    async def commit(self) -> None:
        self.db.commit()
        logger.info(f"{len(self.inserted)} ventas registradas")

    async def rollback(self) -> None:
        self.db.rollback()
        self.inserted.clear()
