import asyncio
from decimal import Decimal

from fastapi.testclient import TestClient

from ipv.modules.guest.store import GuestCommitSink, GuestStore, GuestStoreRegistry

API = "/api/v1/guest"

def _add_product(client, name, price):
    response = client.post(f"{API}/products", json={"name": name, "price": price})
    assert response.status_code == 201
    return response.json()

def _checkout(client, product_id, quantity, method):
    client.put(f"{API}/basket/{product_id}", json={"quantity": quantity})
    return client.post(f"{API}/checkout", json={"payment_method": method}).json()

def test_guest_gets_cookie_and_empty_session(client):
    response = client.get(f"{API}/session")

    assert response.status_code == 200
    assert "ipv_guest_id" in response.cookies
    assert response.json()["guest_products"] == []
    assert response.json()["guest_id"] == response.cookies["ipv_guest_id"]

def test_guest_sale_flow_updates_counters(client):
    pan = _add_product(client, "Pan", 10)

    data = _checkout(client, pan["id"], 500, "cash")
    assert data["success"] is True
    assert data["ticket"]["total"] == 5000.0

    confirm = client.post(f"{API}/tickets/{data['ticket']['id']}/confirm")
    assert confirm.json()["success"] is True

    stats = client.get(f"{API}/stats").json()
    assert stats["cash_total"] == 5000.0
    assert stats["transfer_total"] == 0.0
    assert stats["products"][0]["cash_quantity"] == 500

def test_guest_cancel_only_removes_ticket(client):
    pan = _add_product(client, "Pan", 10)
    data = _checkout(client, pan["id"], 2, "transfer")

    cancel = client.post(f"{API}/tickets/{data['ticket']['id']}/cancel")

    assert cancel.json()["success"] is True
    session = client.get(f"{API}/session").json()
    assert session["tickets"] == []
    assert session["guest_products"][0]["sold_transfer"] == 0
    assert session["products"][0]["current_stock"] is None

def test_guest_product_with_pending_ticket_cannot_be_removed(client):
    pan = _add_product(client, "Pan", 10)
    _checkout(client, pan["id"], 1, "cash")

    assert client.delete(f"{API}/products/{pan['id']}").status_code == 409

def test_guest_remove_product(client):
    pan = _add_product(client, "Pan", 10)

    assert client.delete(f"{API}/products/{pan['id']}").status_code == 204
    assert client.delete(f"{API}/products/{pan['id']}").status_code == 404

def test_guest_bills_and_report(client):
    cafe = _add_product(client, "Café", 25)
    ticket = _checkout(client, cafe["id"], 4, "cash")["ticket"]
    client.post(f"{API}/tickets/{ticket['id']}/confirm")

    bills = client.put(f"{API}/bills", json={"bills": [{"denomination": 100, "count": 1}]}).json()
    assert bills["reconciliation"]["status"] == "match"

    report = client.get(f"{API}/report").json()
    assert report["grand_total"] == 100.0
    assert report["sale_history"] == []
    assert report["per_item_stats"][0]["total_amount"] == 100.0

def test_guest_reset_clears_everything(client):
    _add_product(client, "Pan", 10)
    client.put(f"{API}/bills", json={"bills": [{"denomination": 5, "count": 2}]})

    data = client.delete(f"{API}/session").json()

    assert data["guest_products"] == []
    assert client.get(f"{API}/bills").json()["declared_total"] == 0.0

def test_guests_are_isolated_by_cookie(app, client):
    _add_product(client, "Pan", 10)

    other = TestClient(app)
    assert other.get(f"{API}/session").json()["guest_products"] == []

def test_guest_stats_use_current_price():
    store = GuestStore("g1", [100, 10, 1])
    pan = store.add_product("Pan", Decimal("10"))
    store.session.set_quantity(pan.id, 3)
    ticket = store.session.checkout("cash")

    asyncio.run(store.session.confirm(ticket.id, GuestCommitSink(store)))
    pan.price = Decimal("12")

    assert pan.sold_cash == 3
    assert store.cash_total() == Decimal("36")

class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

def test_reading_as_new_guest_does_not_register_a_store(app):
    for _ in range(20):
        fresh = TestClient(app)
        assert fresh.get(f"{API}/session").status_code == 200
        assert fresh.get(f"{API}/stats").status_code == 200

    assert len(app.state.guest_stores) == 0

def test_guest_store_is_registered_on_first_change(app, client):
    _add_product(client, "Pan", 10)

    assert len(app.state.guest_stores) == 1
    assert client.get(f"{API}/session").json()["guest_products"][0]["name"] == "Pan"

def test_idle_guests_are_pruned():
    clock = FakeClock()
    registry = GuestStoreRegistry([100, 1], max_idle_seconds=60, clock=clock)
    registry.open("viejo")
    clock.now = 50
    registry.open("activo")

    clock.now = 100
    registry.get("activo")

    assert "viejo" not in registry
    assert "activo" in registry

def test_registry_evicts_least_recently_used_over_capacity():
    clock = FakeClock()
    registry = GuestStoreRegistry([100, 1], max_stores=2, clock=clock)
    registry.open("a")
    registry.open("b")
    registry.open("a")

    registry.open("c")

    assert len(registry) == 2
    assert "b" not in registry
    assert "a" in registry and "c" in registry
