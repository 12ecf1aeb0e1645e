# ipv/shared/checkout/registry.py
import logging
from typing import Callable, Dict, Hashable, Iterable, List, Optional

from .basket import Item
from .session import CheckoutSession

logger = logging.getLogger(__name__)

class CheckoutSessionRegistry:
    """Una sesión de cobro por clave (inventario, actor) mientras la app vive"""

    def __init__(self, display_seconds: float = 1.5):
        self.display_seconds = display_seconds
        self._sessions: Dict[Hashable, CheckoutSession] = {}

    def get(self, key: Hashable) -> Optional[CheckoutSession]:
        return self._sessions.get(key)

    def open(
        self,
        key: Hashable,
        loader: Callable[[], Iterable[Item]],
        inventory_id: Optional[Hashable] = None,
        actor_id: Optional[Hashable] = None
    ) -> CheckoutSession:
        """Obtener la sesión existente o crearla con los productos de `loader`"""
        session = self._sessions.get(key)
        if session is None:
            session = CheckoutSession(
                loader(),
                inventory_id=inventory_id,
                actor_id=actor_id,
                display_seconds=self.display_seconds
            )
            self._sessions[key] = session
            logger.info(f"Sesión de cobro abierta: {key}")
        return session

    def discard(self, key: Hashable) -> bool:
        session = self._sessions.pop(key, None)
        if session is None:
            return False
        pending = len(session.ledger.pending())
        if pending:
            logger.warning(f"Sesión {key} descartada con {pending} pagos pendientes")
        session.close()
        return True

    def discard_inventory(self, inventory_id: Hashable) -> int:
        """Descartar todas las sesiones de un inventario (p. ej. al eliminarlo)"""
        keys = [k for k, s in self._sessions.items() if s.inventory_id == inventory_id]
        for key in keys:
            self.discard(key)
        return len(keys)

    def sessions(self) -> List[CheckoutSession]:
        return list(self._sessions.values())

    def sessions_for(self, inventory_id: Hashable) -> List[CheckoutSession]:
        return [s for s in self._sessions.values() if s.inventory_id == inventory_id]

    def __len__(self) -> int:
        return len(self._sessions)
