# ipv/modules/reports/schemas.py
from pydantic import BaseModel
from typing import Any, List, Optional
from datetime import datetime

from ipv.shared.schemas.checkout import BillCountResponse, ReconciliationResponse
from ipv.shared.schemas.common import BaseResponse

class ItemStats(BaseModel):
    """Ventas acumuladas de un producto separadas por método de pago"""
    item_id: Any
    name: str
    price: float
    initial_stock: Optional[int] = None
    current_stock: Optional[int] = None
    total_sold: int = 0
    cash_quantity: int = 0
    cash_amount: float = 0.0
    transfer_quantity: int = 0
    transfer_amount: float = 0.0
    total_amount: float = 0.0

class SaleHistoryEntry(BaseModel):
    item_id: Any
    name: str
    quantity: int
    payment_method: str
    unit_price: float
    total_amount: float
    created_at: Optional[datetime] = None

class ReportResponse(BaseResponse):
    """Datos para exportar el reporte de un IPV o de un invitado"""
    title: str
    generated_at: datetime
    cash_total: float
    transfer_total: float
    grand_total: float
    per_item_stats: List[ItemStats]
    sale_history: List[SaleHistoryEntry] = []
    denomination_counts: List[BillCountResponse]
    declared_total: float
    reconciliation: ReconciliationResponse
