# ipv/modules/sales/schemas.py
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from ipv.shared.checkout import PaymentMethod
from ipv.shared.schemas.common import BaseResponse

class AssignedIPVResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = ""
    status: str
    products_count: int = 0

class SaleResponse(BaseModel):
    id: int
    product_id: int
    product_name: Optional[str] = None
    quantity: int
    payment_method: PaymentMethod
    unit_price: float
    total_amount: float
    created_at: Optional[datetime] = None

class SalesHistoryResponse(BaseResponse):
    ipv_id: int
    sales: List[SaleResponse]

class SalesSummaryResponse(BaseResponse):
    ipv_id: int
    cash_total: float
    transfer_total: float
    grand_total: float
    sales_count: int
    pending_tickets: int = 0
