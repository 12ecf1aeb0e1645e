# ipv/modules/guest/__init__.py
"""
Módulo de Invitado - Ventas sin cuenta

- store.py: Estado en memoria por invitado (productos, sesión, billetes)
- service.py: Flujo de cobro y estadísticas del invitado
- router.py: Endpoints con cookie de invitado
"""

from .router import router
from .service import GuestService
from .store import GuestStore, GuestStoreRegistry, GuestCommitSink, GuestProduct

__all__ = [
    "router",
    "GuestService",
    "GuestStore",
    "GuestStoreRegistry",
    "GuestCommitSink",
    "GuestProduct"
]
