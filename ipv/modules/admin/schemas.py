# ipv/modules/admin/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from enum import Enum

# ==================== ENUMS ====================

class IPVStatus(str, Enum):
    open = "open"
    closed = "closed"

# ==================== CLASE BASE ====================

class AdminBaseModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

# ==================== USUARIOS ====================

class UserSummary(AdminBaseModel):
    id: int
    email: str
    role: str
    is_active: bool

# ==================== IPVs ====================

class IPVCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Nombre del IPV")
    description: str = Field("", description="Descripción")
    user_id: int = Field(..., description="Usuario asignado")

class IPVUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    user_id: Optional[int] = None

class IPVStatusUpdate(BaseModel):
    status: IPVStatus

class IPVResponse(AdminBaseModel):
    id: int
    name: str
    description: Optional[str] = ""
    status: IPVStatus
    user_id: Optional[int] = None
    created_by: Optional[int] = None
    user_email: Optional[str] = None
    created_by_email: Optional[str] = None
    created_at: Optional[datetime] = None

# ==================== CATÁLOGO ====================

class CatalogProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    price: Decimal = Field(..., ge=0, decimal_places=2, description="Precio unitario")
    description: Optional[str] = None

class CatalogProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    description: Optional[str] = None

class CatalogProductResponse(AdminBaseModel):
    id: int
    name: str
    price: float
    description: Optional[str] = None
    admin_id: int
    created_at: Optional[datetime] = None

# ==================== PRODUCTOS DEL IPV ====================

class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    price: Decimal = Field(..., ge=0, decimal_places=2)
    initial_stock: int = Field(..., ge=0, description="Stock inicial")

class ProductFromCatalog(BaseModel):
    catalog_product_id: int
    initial_stock: int = Field(..., ge=0)

class ProductResponse(AdminBaseModel):
    id: int
    ipv_id: int
    name: str
    price: float
    initial_stock: int
    current_stock: int
    catalog_product_id: Optional[int] = None

class IPVDetailResponse(IPVResponse):
    products: List[ProductResponse] = []
