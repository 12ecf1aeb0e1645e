# ipv/modules/reports/__init__.py
from .router import router
from .service import ReportsService, build_report

__all__ = ["router", "ReportsService", "build_report"]
