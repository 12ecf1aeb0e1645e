# ipv/modules/sales/__init__.py
"""
Módulo de Ventas - Pantalla de ventas de un IPV

Usada por el usuario asignado y por los administradores:
- Selección de productos y cantidades
- Pagos pendientes con reserva de stock
- Confirmación (registro de ventas) y cancelación (devolución de stock)
- Historial y totales por método de pago

Arquitectura:
- router.py: Endpoints de ventas
- service.py: Lógica de negocio de ventas
- repository.py: Acceso a datos y registro de ventas confirmadas
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import SalesService
from .repository import SalesRepository, DatabaseCommitSink

__all__ = [
    "router",
    "SalesService",
    "SalesRepository",
    "DatabaseCommitSink"
]
