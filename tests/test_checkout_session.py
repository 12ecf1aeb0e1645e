import asyncio
from decimal import Decimal

import pytest

from ipv.shared.checkout import (
    CheckoutSession, CommitError, CommitSink, Item, PaymentMethod, TicketStatus
)

class RecordingSink(CommitSink):
    """Destino en memoria que solo publica las líneas al hacer commit"""

    def __init__(self, fail_on_line=None, delay=0):
        self.fail_on_line = fail_on_line
        self.delay = delay
        self.staged = []
        self.records = []
        self.rollbacks = 0

    async def record(self, sale):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_on_line is not None and len(self.staged) == self.fail_on_line:
            raise RuntimeError("destino no disponible")
        self.staged.append(sale)

    async def commit(self):
        self.records.extend(self.staged)
        self.staged = []

    async def rollback(self):
        self.staged = []
        self.rollbacks += 1

@pytest.fixture
def item_a():
    return Item(id="A", name="Refresco", price=Decimal("85.00"), initial_stock=10, current_stock=10)

@pytest.fixture
def item_b():
    return Item(id="B", name="Galletas", price=Decimal("40.00"), initial_stock=5, current_stock=5)

@pytest.fixture
def session(item_a, item_b):
    return CheckoutSession([item_a, item_b], inventory_id=1, actor_id=7, display_seconds=0.01)

def _reserve(session, item_id, quantity, method):
    session.set_quantity(item_id, quantity)
    return session.checkout(method)

def test_checkout_reserves_stock_and_clears_selection(session, item_a):
    session.set_quantity("A", 3)
    assert session.basket.total() == Decimal("255.00")

    ticket = session.checkout(PaymentMethod.cash)

    assert ticket is not None
    assert ticket.total == Decimal("255.00")
    assert ticket.status is TicketStatus.pending
    assert item_a.current_stock == 7
    assert session.basket.is_empty()
    assert session.payment_method is None
    assert ticket.id in session.ledger

def test_cancel_restores_stock_and_removes_ticket(session, item_a):
    ticket = _reserve(session, "A", 3, "cash")

    assert session.cancel(ticket.id) is True

    assert item_a.current_stock == 10
    assert ticket.id not in session.ledger

def test_checkout_without_selection_or_method_is_a_no_op(session, item_a):
    assert session.checkout(PaymentMethod.cash) is None
    assert session.payment_method is None

    session.set_quantity("A", 2)
    assert session.checkout() is None

    assert item_a.current_stock == 10
    assert len(session.ledger) == 0
    assert session.basket.quantity("A") == 2

def test_reserve_then_cancel_in_any_order_conserves_stock(session, item_a, item_b):
    t1 = _reserve(session, "A", 4, "cash")
    session.set_quantity("A", 2)
    session.set_quantity("B", 5)
    t2 = session.checkout("transfer")
    t3 = _reserve(session, "B", 0, "cash")

    assert t3 is None
    assert item_a.current_stock == 4
    assert item_b.current_stock == 0

    session.cancel(t2.id)
    session.cancel(t1.id)

    assert item_a.current_stock == 10
    assert item_b.current_stock == 5

def test_confirm_records_sales_without_touching_stock(session, item_a):
    t2 = _reserve(session, "A", 4, "cash")
    t3 = _reserve(session, "A", 4, "transfer")
    assert item_a.current_stock == 2
    sink = RecordingSink()

    async def run():
        return await session.confirm(t2.id, sink)

    assert asyncio.run(run()) is True

    assert len(sink.records) == 1
    record = sink.records[0]
    assert record.item_id == "A"
    assert record.quantity == 4
    assert record.payment_method is PaymentMethod.cash
    assert record.total_amount == Decimal("340.00")
    assert record.inventory_id == 1
    assert record.actor_id == 7
    assert item_a.current_stock == 2
    assert session.ledger.get(t3.id).is_pending

def test_concurrent_double_confirm_records_once(session):
    ticket = _reserve(session, "A", 2, "cash")
    sink = RecordingSink(delay=0.01)

    async def run():
        return await asyncio.gather(
            session.confirm(ticket.id, sink),
            session.confirm(ticket.id, sink)
        )

    results = asyncio.run(run())

    assert sorted(results) == [False, True]
    assert len(sink.records) == 1

def test_failed_confirm_keeps_ticket_pending_and_retryable(session, item_a, item_b):
    session.set_quantity("A", 1)
    session.set_quantity("B", 1)
    ticket = session.checkout("cash")
    failing = RecordingSink(fail_on_line=1)

    with pytest.raises(CommitError):
        asyncio.run(session.confirm(ticket.id, failing))

    assert failing.records == []
    assert failing.rollbacks == 1
    assert session.ledger.get(ticket.id).is_pending
    assert not session.is_confirming(ticket.id)
    assert item_a.current_stock == 9
    assert item_b.current_stock == 4

    retry = RecordingSink()
    assert asyncio.run(session.confirm(ticket.id, retry)) is True
    assert len(retry.records) == 2

def test_confirmed_ticket_cannot_be_cancelled_or_confirmed_again(session, item_a):
    ticket = _reserve(session, "A", 3, "cash")
    sink = RecordingSink()

    async def run():
        first = await session.confirm(ticket.id, sink)
        second = await session.confirm(ticket.id, sink)
        cancelled = session.cancel(ticket.id)
        session.close()
        return first, second, cancelled

    assert asyncio.run(run()) == (True, False, False)
    assert item_a.current_stock == 7
    assert len(sink.records) == 1

def test_confirmed_ticket_is_removed_after_display_delay(session):
    ticket = _reserve(session, "A", 1, "transfer")

    async def run():
        await session.confirm(ticket.id, RecordingSink())
        assert session.ledger.get(ticket.id).status is TicketStatus.confirmed
        await asyncio.sleep(0.05)

    asyncio.run(run())

    assert ticket.id not in session.ledger

def test_dismiss_removes_confirmed_ticket_immediately(session):
    ticket = _reserve(session, "A", 1, "cash")

    async def run():
        await session.confirm(ticket.id, RecordingSink())
        return session.dismiss(ticket.id)

    assert asyncio.run(run()) is True
    assert ticket.id not in session.ledger

def test_ticket_snapshot_ignores_later_price_changes(session, item_a):
    ticket = _reserve(session, "A", 2, "cash")

    item_a.price = Decimal("100.00")
    item_a.name = "Refresco grande"

    assert ticket.total == Decimal("170.00")
    assert ticket.lines[0].item.price == Decimal("85.00")
    assert ticket.lines[0].item.name == "Refresco"

    sink = RecordingSink()
    asyncio.run(session.confirm(ticket.id, sink))
    assert sink.records[0].unit_price == Decimal("85.00")

def test_checkout_reclamps_lines_to_current_stock(session, item_a):
    session.set_quantity("A", 8)
    item_a.current_stock = 5

    ticket = session.checkout("cash")

    assert ticket.lines[0].quantity == 5
    assert item_a.current_stock == 0

def test_removed_item_drops_out_of_selection(session):
    session.set_quantity("B", 2)

    session.remove_item("B")

    assert session.basket.is_empty()
    assert session.checkout("cash") is None
