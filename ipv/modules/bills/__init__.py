# ipv/modules/bills/__init__.py
"""
Módulo de Arqueo - Conteo de billetes por IPV y usuario
"""

from .router import router
from .service import BillsService

__all__ = ["router", "BillsService"]
