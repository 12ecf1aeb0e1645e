# ipv/main.py
import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from ipv.config.settings import settings
from ipv.config.database import init_db
from ipv.core.middleware import setup_middleware
from ipv.api.v1.router import api_router
from ipv.shared.checkout import CheckoutSessionRegistry
from ipv.modules.guest.store import GuestStoreRegistry

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"{settings.app_name} iniciando - versión {settings.version}")
    logger.info(f"Entorno: {'Development' if settings.debug else 'Production'}")
    logger.info(f"Base de datos: {settings.database_url.split('@')[1] if '@' in settings.database_url else settings.database_url}")
    init_db()

    yield

    # Shutdown
    pending = sum(len(s.ledger.pending()) for s in app.state.checkout_sessions.sessions())
    if pending:
        logger.warning(f"Apagando con {pending} pagos pendientes sin confirmar")
    logger.info(f"{settings.app_name} detenida")

def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        description="Inventario de productos de venta (IPV) con pagos pendientes y arqueo de caja",
        docs_url="/docs",
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan
    )

    # Estado en memoria por proceso
    app.state.checkout_sessions = CheckoutSessionRegistry(settings.confirmed_display_seconds)
    app.state.guest_stores = GuestStoreRegistry(
        settings.bill_denominations,
        settings.confirmed_display_seconds,
        max_idle_seconds=settings.guest_cookie_max_age,
        max_stores=settings.guest_max_stores
    )

    setup_middleware(app)
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {
            "message": "IPV API - Inventario y ventas",
            "version": settings.version,
            "status": "running",
            "environment": "production" if not settings.debug else "development",
            "docs": "/docs",
            "api": "/api/v1"
        }

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "version": settings.version,
            "app": settings.app_name,
            "active_sessions": len(app.state.checkout_sessions),
            "guests": len(app.state.guest_stores)
        }

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "ipv.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
