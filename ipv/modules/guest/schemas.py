# ipv/modules/guest/schemas.py
from pydantic import BaseModel, Field
from typing import List

from ipv.shared.schemas.checkout import CheckoutSessionResponse
from ipv.shared.schemas.common import BaseResponse
from ipv.modules.reports.schemas import ItemStats

class GuestProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., ge=0)

class GuestProductResponse(BaseModel):
    id: str
    name: str
    price: float
    sold_cash: int
    sold_transfer: int

class GuestSessionResponse(CheckoutSessionResponse):
    guest_id: str
    guest_products: List[GuestProductResponse]

class GuestStatsResponse(BaseResponse):
    products: List[ItemStats]
    cash_total: float
    transfer_total: float
    grand_total: float
