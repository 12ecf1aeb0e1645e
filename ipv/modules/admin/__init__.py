# ipv/modules/admin/__init__.py
"""
Módulo Admin - Gestión de IPVs y catálogo

- Crear, editar, abrir/cerrar y eliminar IPVs asignados a usuarios
- Catálogo reutilizable de productos por administrador
- Surtir un IPV con productos del catálogo o productos sueltos

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Lógica de negocio
- repository.py: Acceso a datos
- schemas.py: Modelos Pydantic de request/response
"""

from .router import router as admin_router
from .service import AdminService
from .repository import AdminRepository

__all__ = [
    "admin_router",
    "AdminService",
    "AdminRepository"
]
