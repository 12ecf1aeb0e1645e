# ipv/modules/admin/repository.py
from typing import List, Optional, Dict, Any
from sqlalchemy.orm import Session, joinedload
import logging

from ipv.shared.database.models import User, IPV, CatalogProduct, Product

logger = logging.getLogger(__name__)

class AdminRepository:
    """
    Repositorio para las operaciones de datos del administrador
    """

    def __init__(self, db: Session):
        self.db = db

    # ==================== USUARIOS ====================

    def get_users(self) -> List[User]:
        return self.db.query(User).order_by(User.email).all()

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    # ==================== IPVs ====================

    def get_ipvs(self) -> List[IPV]:
        return self.db.query(IPV).options(
            joinedload(IPV.user), joinedload(IPV.creator)
        ).order_by(IPV.created_at.desc(), IPV.id.desc()).all()

    def get_ipv(self, ipv_id: int) -> Optional[IPV]:
        return self.db.query(IPV).options(
            joinedload(IPV.user), joinedload(IPV.creator)
        ).filter(IPV.id == ipv_id).first()

    def create_ipv(self, ipv_data: Dict[str, Any]) -> IPV:
        ipv = IPV(**ipv_data)
        self.db.add(ipv)
        self._commit()
        self.db.refresh(ipv)
        return ipv

    def update_ipv(self, ipv: IPV, update_data: Dict[str, Any]) -> IPV:
        for key, value in update_data.items():
            if hasattr(ipv, key) and value is not None:
                setattr(ipv, key, value)
        self._commit()
        self.db.refresh(ipv)
        return ipv

    def delete_ipv(self, ipv: IPV) -> None:
        """Los productos, ventas y conteos del IPV se eliminan en cascada"""
        self.db.delete(ipv)
        self._commit()

    # ==================== CATÁLOGO ====================

    def get_catalog(self, admin_id: int) -> List[CatalogProduct]:
        return self.db.query(CatalogProduct).filter(
            CatalogProduct.admin_id == admin_id
        ).order_by(CatalogProduct.name).all()

    def get_catalog_product(self, product_id: int, admin_id: int) -> Optional[CatalogProduct]:
        return self.db.query(CatalogProduct).filter(
            CatalogProduct.id == product_id,
            CatalogProduct.admin_id == admin_id
        ).first()

    def create_catalog_product(self, data: Dict[str, Any]) -> CatalogProduct:
        product = CatalogProduct(**data)
        self.db.add(product)
        self._commit()
        self.db.refresh(product)
        return product

    def update_catalog_product(self, product: CatalogProduct, update_data: Dict[str, Any]) -> CatalogProduct:
        for key, value in update_data.items():
            if value is not None:
                setattr(product, key, value)
        self._commit()
        self.db.refresh(product)
        return product

    def delete_catalog_product(self, product: CatalogProduct) -> None:
        self.db.delete(product)
        self._commit()

    # ==================== PRODUCTOS DEL IPV ====================

    def get_ipv_products(self, ipv_id: int) -> List[Product]:
        return self.db.query(Product).filter(
            Product.ipv_id == ipv_id
        ).order_by(Product.name, Product.id).all()

    def get_ipv_product(self, ipv_id: int, product_id: int) -> Optional[Product]:
        return self.db.query(Product).filter(
            Product.ipv_id == ipv_id,
            Product.id == product_id
        ).first()

    def create_product(self, data: Dict[str, Any]) -> Product:
        product = Product(**data)
        self.db.add(product)
        self._commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: Product) -> None:
        self.db.delete(product)
        self._commit()

    # ==================== UTILIDADES ====================

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            logger.exception("Error en transacción de administración")
            self.db.rollback()
            raise
