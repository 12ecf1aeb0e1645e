# ipv/modules/admin/service.py
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from ipv.shared.checkout import CheckoutSessionRegistry
from ipv.shared.database.models import User, IPV, CatalogProduct
from ipv.shared.services.inventory_service import InventoryService
from .repository import AdminRepository
from .schemas import (
    IPVCreate, IPVUpdate, IPVStatus, IPVResponse, IPVDetailResponse,
    CatalogProductCreate, CatalogProductUpdate, CatalogProductResponse,
    ProductCreate, ProductFromCatalog, ProductResponse, UserSummary
)

logger = logging.getLogger(__name__)

class AdminService:
    """
    Servicio principal para las operaciones del administrador
    """

    def __init__(self, db: Session, sessions: Optional[CheckoutSessionRegistry] = None):
        self.db = db
        self.repository = AdminRepository(db)
        self.sessions = sessions

    # ==================== USUARIOS ====================

    async def list_users(self) -> List[UserSummary]:
        return [UserSummary.model_validate(u) for u in self.repository.get_users()]

    # ==================== IPVs ====================

    async def list_ipvs(self) -> List[IPVResponse]:
        return [self._ipv_response(ipv) for ipv in self.repository.get_ipvs()]

    async def get_ipv_detail(self, ipv_id: int) -> IPVDetailResponse:
        ipv = self._get_ipv_or_404(ipv_id)
        products = self.repository.get_ipv_products(ipv_id)
        return IPVDetailResponse(
            **self._ipv_response(ipv).model_dump(),
            products=[ProductResponse.model_validate(p) for p in products]
        )

    async def create_ipv(self, ipv_data: IPVCreate, admin: User) -> IPVResponse:
        self._get_user_or_404(ipv_data.user_id)

        ipv = self.repository.create_ipv({
            "name": ipv_data.name.strip(),
            "description": ipv_data.description,
            "user_id": ipv_data.user_id,
            "created_by": admin.id,
            "status": IPVStatus.open.value
        })

        logger.info(f"IPV {ipv.id} creado por {admin.email} para usuario {ipv.user_id}")
        return self._ipv_response(ipv)

    async def update_ipv(self, ipv_id: int, update_data: IPVUpdate) -> IPVResponse:
        ipv = self._get_ipv_or_404(ipv_id)

        if update_data.user_id is not None:
            self._get_user_or_404(update_data.user_id)

        ipv = self.repository.update_ipv(ipv, update_data.model_dump(exclude_unset=True))
        return self._ipv_response(ipv)

    async def set_ipv_status(self, ipv_id: int, new_status: IPVStatus) -> IPVResponse:
        ipv = self._get_ipv_or_404(ipv_id)
        ipv = self.repository.update_ipv(ipv, {"status": new_status.value})
        logger.info(f"IPV {ipv_id} ahora está '{new_status.value}'")
        return self._ipv_response(ipv)

    async def delete_ipv(self, ipv_id: int) -> None:
        ipv = self._get_ipv_or_404(ipv_id)
        self.repository.delete_ipv(ipv)

        if self.sessions is not None:
            self.sessions.discard_inventory(ipv_id)

        logger.info(f"IPV {ipv_id} eliminado con sus productos y ventas")

    # ==================== CATÁLOGO ====================

    async def list_catalog(self, admin: User) -> List[CatalogProductResponse]:
        return [
            CatalogProductResponse.model_validate(p)
            for p in self.repository.get_catalog(admin.id)
        ]

    async def create_catalog_product(
        self,
        product_data: CatalogProductCreate,
        admin: User
    ) -> CatalogProductResponse:
        product = self.repository.create_catalog_product({
            "name": product_data.name.strip(),
            "price": product_data.price,
            "description": product_data.description,
            "admin_id": admin.id
        })
        return CatalogProductResponse.model_validate(product)

    async def update_catalog_product(
        self,
        product_id: int,
        update_data: CatalogProductUpdate,
        admin: User
    ) -> CatalogProductResponse:
        product = self._get_catalog_product_or_404(product_id, admin)
        product = self.repository.update_catalog_product(
            product, update_data.model_dump(exclude_unset=True)
        )
        return CatalogProductResponse.model_validate(product)

    async def delete_catalog_product(self, product_id: int, admin: User) -> None:
        product = self._get_catalog_product_or_404(product_id, admin)
        self.repository.delete_catalog_product(product)

    # ==================== PRODUCTOS DEL IPV ====================

    async def list_ipv_products(self, ipv_id: int) -> List[ProductResponse]:
        self._get_ipv_or_404(ipv_id)
        return [
            ProductResponse.model_validate(p)
            for p in self.repository.get_ipv_products(ipv_id)
        ]

    async def add_product(self, ipv_id: int, product_data: ProductCreate) -> ProductResponse:
        self._get_ipv_or_404(ipv_id)

        product = self.repository.create_product({
            "ipv_id": ipv_id,
            "name": product_data.name.strip(),
            "price": product_data.price,
            "initial_stock": product_data.initial_stock,
            "current_stock": product_data.initial_stock
        })

        InventoryService.publish_product(self.sessions, product)
        return ProductResponse.model_validate(product)

    async def add_product_from_catalog(
        self,
        ipv_id: int,
        data: ProductFromCatalog,
        admin: User
    ) -> ProductResponse:
        """Copiar nombre y precio del catálogo al IPV con un stock inicial"""
        self._get_ipv_or_404(ipv_id)
        catalog_product = self._get_catalog_product_or_404(data.catalog_product_id, admin)

        product = self.repository.create_product({
            "ipv_id": ipv_id,
            "catalog_product_id": catalog_product.id,
            "name": catalog_product.name,
            "price": catalog_product.price,
            "initial_stock": data.initial_stock,
            "current_stock": data.initial_stock
        })

        InventoryService.publish_product(self.sessions, product)
        return ProductResponse.model_validate(product)

    async def delete_product(self, ipv_id: int, product_id: int) -> None:
        product = self.repository.get_ipv_product(ipv_id, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Producto no encontrado en este IPV"
            )

        if product.sales:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="El producto tiene ventas registradas y no puede eliminarse"
            )

        if self.sessions is not None and any(
            s.ledger.reserved_quantity(product_id) for s in self.sessions.sessions_for(ipv_id)
        ):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="El producto tiene pagos pendientes"
            )

        self.repository.delete_product(product)
        InventoryService.withdraw_product(self.sessions, ipv_id, product_id)

    # ==================== UTILIDADES ====================

    def _get_ipv_or_404(self, ipv_id: int) -> IPV:
        ipv = self.repository.get_ipv(ipv_id)
        if not ipv:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"IPV {ipv_id} no encontrado"
            )
        return ipv

    def _get_user_or_404(self, user_id: int) -> User:
        user = self.repository.get_user(user_id)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Usuario {user_id} no encontrado"
            )
        return user

    def _get_catalog_product_or_404(self, product_id: int, admin: User) -> CatalogProduct:
        product = self.repository.get_catalog_product(product_id, admin.id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Producto de catálogo no encontrado"
            )
        return product

    @staticmethod
    def _ipv_response(ipv: IPV) -> IPVResponse:
        return IPVResponse(
            id=ipv.id,
            name=ipv.name,
            description=ipv.description or "",
            status=ipv.status,
            user_id=ipv.user_id,
            created_by=ipv.created_by,
            user_email=ipv.user.email if ipv.user else None,
            created_by_email=ipv.creator.email if ipv.creator else None,
            created_at=ipv.created_at
        )
