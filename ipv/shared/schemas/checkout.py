# ipv/shared/schemas/checkout.py
from pydantic import BaseModel, Field
from typing import Any, List, Optional
from datetime import datetime

from ipv.shared.checkout import (
    CheckoutSession, PendingPayment, PaymentMethod, TicketStatus,
    DenominationLedger, Reconciliation, ReconciliationStatus
)
from .common import BaseResponse

# ==================== REQUEST SCHEMAS ====================

class QuantityRequest(BaseModel):
    quantity: int = Field(..., description="Cantidad deseada; 0 o menos quita el producto")

class PaymentMethodRequest(BaseModel):
    payment_method: Optional[PaymentMethod] = Field(None, description="cash o transfer; null para limpiar")

class CheckoutRequest(BaseModel):
    payment_method: Optional[PaymentMethod] = Field(None, description="Si se omite se usa el método elegido antes")

class BillCountItem(BaseModel):
    denomination: int
    count: int = Field(..., description="Cantidad de billetes; negativos cuentan como 0")

class BillCountsRequest(BaseModel):
    bills: List[BillCountItem]

# ==================== RESPONSE SCHEMAS ====================

class SessionItemResponse(BaseModel):
    id: Any
    name: str
    price: float
    initial_stock: Optional[int] = None
    current_stock: Optional[int] = None
    selected_quantity: int = 0

class BasketLineResponse(BaseModel):
    item_id: Any
    name: str
    unit_price: float
    quantity: int
    subtotal: float

class BasketResponse(BaseModel):
    lines: List[BasketLineResponse]
    total: float
    payment_method: Optional[PaymentMethod] = None

class TicketLineResponse(BaseModel):
    item_id: Any
    name: str
    unit_price: float
    quantity: int
    line_total: float

class TicketResponse(BaseModel):
    id: str
    payment_method: PaymentMethod
    total: float
    status: TicketStatus
    confirming: bool = False
    created_at: datetime
    lines: List[TicketLineResponse]

class CheckoutSessionResponse(BaseResponse):
    inventory_id: Any = None
    products: List[SessionItemResponse]
    basket: BasketResponse
    tickets: List[TicketResponse]

class CheckoutResponse(BaseResponse):
    ticket: Optional[TicketResponse] = None

class TicketActionResponse(BaseResponse):
    ticket_id: str
    status: Optional[TicketStatus] = None

class BillCountResponse(BaseModel):
    denomination: int
    count: int
    subtotal: float

class ReconciliationResponse(BaseModel):
    declared_total: float
    cash_sales_total: float
    difference: float
    absolute_difference: float
    status: ReconciliationStatus
    is_match: bool

class BillsResponse(BaseResponse):
    bills: List[BillCountResponse]
    declared_total: float
    reconciliation: ReconciliationResponse

# ==================== CONSTRUCTORES ====================

def ticket_view(ticket: PendingPayment, confirming: bool = False) -> TicketResponse:
    return TicketResponse(
        id=ticket.id,
        payment_method=ticket.payment_method,
        total=float(ticket.total),
        status=ticket.status,
        confirming=confirming,
        created_at=ticket.created_at,
        lines=[
            TicketLineResponse(
                item_id=line.item.id,
                name=line.item.name,
                unit_price=float(line.item.price),
                quantity=line.quantity,
                line_total=float(line.line_total)
            )
            for line in ticket.lines
        ]
    )

def session_view(session: CheckoutSession, message: str = "") -> CheckoutSessionResponse:
    basket = session.basket
    return CheckoutSessionResponse(
        success=True,
        message=message,
        inventory_id=session.inventory_id,
        products=[
            SessionItemResponse(
                id=item.id,
                name=item.name,
                price=float(item.price),
                initial_stock=item.initial_stock,
                current_stock=item.current_stock,
                selected_quantity=basket.quantity(item.id)
            )
            for item in session.products()
        ],
        basket=BasketResponse(
            lines=[
                BasketLineResponse(
                    item_id=item.id,
                    name=item.name,
                    unit_price=float(item.price),
                    quantity=quantity,
                    subtotal=float(item.price * quantity)
                )
                for item, quantity in basket.lines()
            ],
            total=float(basket.total()),
            payment_method=session.payment_method
        ),
        tickets=[
            ticket_view(ticket, session.is_confirming(ticket.id))
            for ticket in session.ledger
        ]
    )

def reconciliation_view(result: Reconciliation) -> ReconciliationResponse:
    return ReconciliationResponse(
        declared_total=float(result.declared),
        cash_sales_total=float(result.cash_sales),
        difference=float(result.difference),
        absolute_difference=float(result.absolute_difference),
        status=result.status,
        is_match=result.status is ReconciliationStatus.match
    )

def bills_view(ledger: DenominationLedger, result: Reconciliation, message: str = "") -> BillsResponse:
    return BillsResponse(
        success=True,
        message=message,
        bills=[
            BillCountResponse(denomination=d, count=c, subtotal=float(d * c))
            for d, c in ledger.counts()
        ],
        declared_total=float(ledger.total_declared()),
        reconciliation=reconciliation_view(result)
    )
