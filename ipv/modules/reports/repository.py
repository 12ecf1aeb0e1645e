# ipv/modules/reports/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import Dict, List, Tuple
from decimal import Decimal

from ipv.shared.database.models import Product, Sale

class ReportsRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_products(self, ipv_id: int) -> List[Product]:
        return self.db.query(Product).filter(
            Product.ipv_id == ipv_id
        ).order_by(Product.name, Product.id).all()

    def get_item_totals(self, ipv_id: int) -> Dict[Tuple[int, str], Tuple[int, Decimal]]:
        """(producto, método) -> (unidades, monto)"""
        rows = self.db.query(
            Sale.product_id,
            Sale.payment_method,
            func.coalesce(func.sum(Sale.quantity), 0),
            func.coalesce(func.sum(Sale.total_amount), 0)
        ).filter(
            Sale.ipv_id == ipv_id
        ).group_by(Sale.product_id, Sale.payment_method).all()

        return {
            (product_id, method): (int(quantity), Decimal(str(amount)))
            for product_id, method, quantity, amount in rows
        }
