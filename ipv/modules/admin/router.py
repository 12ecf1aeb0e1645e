# ipv/modules/admin/router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ipv.config.database import get_db
from ipv.core.auth.dependencies import get_admin_user
from ipv.core.sessions import get_checkout_sessions
from ipv.shared.checkout import CheckoutSessionRegistry
from ipv.shared.database.models import User
from .service import AdminService
from .schemas import (
    UserSummary, IPVCreate, IPVUpdate, IPVStatusUpdate, IPVResponse, IPVDetailResponse,
    CatalogProductCreate, CatalogProductUpdate, CatalogProductResponse,
    ProductCreate, ProductFromCatalog, ProductResponse
)

router = APIRouter()

def get_admin_service(
    db: Session = Depends(get_db),
    sessions: CheckoutSessionRegistry = Depends(get_checkout_sessions)
) -> AdminService:
    return AdminService(db, sessions)

# ==================== USUARIOS ====================

@router.get("/users", response_model=List[UserSummary])
async def list_users(
    current_user: User = Depends(get_admin_user),
    service: AdminService = Depends(get_admin_service)
):
    """Listar usuarios para asignarles IPVs"""
    return await service.list_users()

# ==================== IPVs ====================

@router.get("/ipvs", response_model=List[IPVResponse])
async def list_ipvs(
    current_user: User = Depends(get_admin_user),
    service: AdminService = Depends(get_admin_service)
):
    return await service.list_ipvs()

@router.post("/ipvs", response_model=IPVResponse, status_code=status.HTTP_201_CREATED)
async def create_ipv(
    ipv_data: IPVCreate,
    current_user: User = Depends(get_admin_user),
    service: AdminService = Depends(get_admin_service)
):
    """
    Crear un IPV y asignarlo a un usuario

    El IPV nace abierto y sin productos.
    """
    return await service.create_ipv(ipv_data, current_user)

@router.get("/ipvs/{ipv_id}", response_model=IPVDetailResponse)
async def get_ipv(
    ipv_id: int,
    current_user: User = Depends(get_admin_user),
    service: AdminService = Depends(get_admin_service)
):
    return await service.get_ipv_detail(ipv_id)

@router.patch("/ipvs/{ipv_id}", response_model=IPVResponse)
async def update_ipv(
    ipv_id: int,
    update_data: IPVUpdate,
    current_user: User = Depends(get_admin_user),
    service: AdminService = Depends(get_admin_service)
):
    return await service.update_ipv(ipv_id, update_data)

@router.patch("/ipvs/{ipv_id}/status", response_model=IPVResponse)
async def set_ipv_status(
    ipv_id: int,
    status_data: IPVStatusUpdate,
    current_user: User = Depends(get_admin_user),
    service: AdminService = Depends(get_admin_service)
):
    """Abrir o cerrar un IPV. Un IPV cerrado no acepta cobros nuevos."""
    return await service.set_ipv_status(ipv_id, status_data.status)

@router.delete("/ipvs/{ipv_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ipv(
    ipv_id: int,
    current_user: User = Depends(get_admin_user),
    service: AdminService = Depends(get_admin_service)
):
    """Eliminar un IPV con sus productos, ventas y conteos de billetes"""
    await service.delete_ipv(ipv_id)

# ==================== PRODUCTOS DEL IPV ====================

@router.get("/ipvs/{ipv_id}/products", response_model=List[ProductResponse])
async def list_ipv_products(
    ipv_id: int,
    current_user: User = Depends(get_admin_user),
    service: AdminService = Depends(get_admin_service)
):
    return await service.list_ipv_products(ipv_id)

@router.post("/ipvs/{ipv_id}/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def add_product(
    ipv_id: int,
    product_data: ProductCreate,
    current_user: User = Depends(get_admin_user),
    service: AdminService = Depends(get_admin_service)
):
    return await service.add_product(ipv_id, product_data)

@router.post("/ipvs/{ipv_id}/products/from-catalog", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def add_product_from_catalog(
    ipv_id: int,
    data: ProductFromCatalog,
    current_user: User = Depends(get_admin_user),
    service: AdminService = Depends(get_admin_service)
):
    """Agregar al IPV un producto del catálogo con su stock inicial"""
    return await service.add_product_from_catalog(ipv_id, data, current_user)

@router.delete("/ipvs/{ipv_id}/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    ipv_id: int,
    product_id: int,
    current_user: User = Depends(get_admin_user),
    service: AdminService = Depends(get_admin_service)
):
    await service.delete_product(ipv_id, product_id)

# ==================== CATÁLOGO ====================

@router.get("/catalog", response_model=List[CatalogProductResponse])
async def list_catalog(
    current_user: User = Depends(get_admin_user),
    service: AdminService = Depends(get_admin_service)
):
    return await service.list_catalog(current_user)

@router.post("/catalog", response_model=CatalogProductResponse, status_code=status.HTTP_201_CREATED)
async def create_catalog_product(
    product_data: CatalogProductCreate,
    current_user: User = Depends(get_admin_user),
    service: AdminService = Depends(get_admin_service)
):
    return await service.create_catalog_product(product_data, current_user)

@router.patch("/catalog/{product_id}", response_model=CatalogProductResponse)
async def update_catalog_product(
    product_id: int,
    update_data: CatalogProductUpdate,
    current_user: User = Depends(get_admin_user),
    service: AdminService = Depends(get_admin_service)
):
    return await service.update_catalog_product(product_id, update_data, current_user)

@router.delete("/catalog/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_catalog_product(
    product_id: int,
    current_user: User = Depends(get_admin_user),
    service: AdminService = Depends(get_admin_service)
):
    await service.delete_catalog_product(product_id, current_user)
