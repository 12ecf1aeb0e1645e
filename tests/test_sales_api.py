from ipv.shared.database.models import Product, Sale

API = "/api/v1"

def _session(client, ipv_id, headers):
    response = client.get(f"{API}/sales/{ipv_id}/session", headers=headers)
    assert response.status_code == 200
    return response.json()

def _stock(view, name):
    return next(p["current_stock"] for p in view["products"] if p["name"] == name)

def _checkout(client, ipv_id, headers, product_id, quantity, method):
    client.put(
        f"{API}/sales/{ipv_id}/basket/{product_id}",
        json={"quantity": quantity},
        headers=headers
    )
    response = client.post(
        f"{API}/sales/{ipv_id}/checkout",
        json={"payment_method": method},
        headers=headers
    )
    assert response.status_code == 200
    return response.json()

def test_session_lists_ipv_products(client, ipv, seller_headers):
    view = _session(client, ipv.id, seller_headers)

    assert view["inventory_id"] == ipv.id
    assert {p["name"] for p in view["products"]} == {"Refresco", "Galletas"}
    assert _stock(view, "Refresco") == 10
    assert view["basket"]["lines"] == []
    assert view["tickets"] == []

def test_select_and_checkout_reserves_stock(client, ipv, products, seller_headers):
    refresco = products["Refresco"]

    response = client.put(
        f"{API}/sales/{ipv.id}/basket/{refresco.id}",
        json={"quantity": 3},
        headers=seller_headers
    )
    assert response.json()["basket"]["total"] == 255.0

    response = client.post(
        f"{API}/sales/{ipv.id}/checkout",
        json={"payment_method": "cash"},
        headers=seller_headers
    )
    data = response.json()

    assert data["success"] is True
    assert data["ticket"]["total"] == 255.0
    assert data["ticket"]["status"] == "pending"

    view = _session(client, ipv.id, seller_headers)
    assert _stock(view, "Refresco") == 7
    assert view["basket"]["lines"] == []
    assert len(view["tickets"]) == 1

def test_quantity_is_clamped_to_available_stock(client, ipv, products, seller_headers):
    galletas = products["Galletas"]

    response = client.put(
        f"{API}/sales/{ipv.id}/basket/{galletas.id}",
        json={"quantity": 99},
        headers=seller_headers
    )

    line = response.json()["basket"]["lines"][0]
    assert line["quantity"] == 5

def test_payment_method_can_be_chosen_before_checkout(client, ipv, products, seller_headers):
    client.post(f"{API}/sales/{ipv.id}/basket/{products['Galletas'].id}/toggle", headers=seller_headers)
    response = client.put(
        f"{API}/sales/{ipv.id}/basket/payment-method",
        json={"payment_method": "transfer"},
        headers=seller_headers
    )
    assert response.json()["basket"]["payment_method"] == "transfer"

    data = client.post(f"{API}/sales/{ipv.id}/checkout", json={}, headers=seller_headers).json()

    assert data["success"] is True
    assert data["ticket"]["payment_method"] == "transfer"
    assert data["ticket"]["total"] == 40.0

def test_checkout_without_selection_is_rejected_quietly(client, ipv, seller_headers):
    response = client.post(
        f"{API}/sales/{ipv.id}/checkout",
        json={"payment_method": "cash"},
        headers=seller_headers
    )

    assert response.status_code == 200
    assert response.json()["success"] is False
    assert response.json()["ticket"] is None

    view = _session(client, ipv.id, seller_headers)
    assert view["basket"]["payment_method"] is None

def test_rejected_checkout_does_not_leave_payment_method(client, ipv, products, seller_headers):
    client.post(f"{API}/sales/{ipv.id}/checkout", json={"payment_method": "transfer"}, headers=seller_headers)
    client.post(f"{API}/sales/{ipv.id}/basket/{products['Galletas'].id}/toggle", headers=seller_headers)

    data = client.post(f"{API}/sales/{ipv.id}/checkout", json={}, headers=seller_headers).json()

    assert data["success"] is False
    assert _stock(_session(client, ipv.id, seller_headers), "Galletas") == 5

def test_cancel_restores_stock(client, ipv, products, seller_headers):
    ticket = _checkout(client, ipv.id, seller_headers, products["Refresco"].id, 3, "cash")["ticket"]

    response = client.post(f"{API}/sales/{ipv.id}/tickets/{ticket['id']}/cancel", headers=seller_headers)

    assert response.json()["success"] is True
    view = _session(client, ipv.id, seller_headers)
    assert _stock(view, "Refresco") == 10
    assert view["tickets"] == []

def test_confirm_records_sale_and_persists_stock(client, db, ipv, products, seller, seller_headers):
    refresco = products["Refresco"]
    t2 = _checkout(client, ipv.id, seller_headers, refresco.id, 4, "cash")["ticket"]
    _checkout(client, ipv.id, seller_headers, refresco.id, 4, "transfer")

    response = client.post(f"{API}/sales/{ipv.id}/tickets/{t2['id']}/confirm", headers=seller_headers)

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["status"] == "confirmed"

    sales = db.query(Sale).all()
    assert len(sales) == 1
    assert sales[0].quantity == 4
    assert sales[0].payment_method == "cash"
    assert float(sales[0].total_amount) == 340.0
    assert sales[0].user_id == seller.id

    db.expire_all()
    assert db.get(Product, refresco.id).current_stock == 6

    view = _session(client, ipv.id, seller_headers)
    assert _stock(view, "Refresco") == 2

def test_confirm_twice_is_rejected(client, db, ipv, products, seller_headers):
    ticket = _checkout(client, ipv.id, seller_headers, products["Refresco"].id, 1, "cash")["ticket"]
    url = f"{API}/sales/{ipv.id}/tickets/{ticket['id']}/confirm"

    client.post(url, headers=seller_headers)
    second = client.post(url, headers=seller_headers)

    assert second.json()["success"] is False
    assert db.query(Sale).count() == 1

    cancel = client.post(f"{API}/sales/{ipv.id}/tickets/{ticket['id']}/cancel", headers=seller_headers)
    assert cancel.json()["success"] is False

def test_failed_confirm_keeps_ticket_pending(client, db, ipv, products, seller_headers, monkeypatch):
    ticket = _checkout(client, ipv.id, seller_headers, products["Refresco"].id, 2, "cash")["ticket"]

    def broken_insert(self, sale):
        raise RuntimeError("base de datos no disponible")

    monkeypatch.setattr("ipv.modules.sales.repository.SalesRepository.insert_sale", broken_insert)
    response = client.post(f"{API}/sales/{ipv.id}/tickets/{ticket['id']}/confirm", headers=seller_headers)

    assert response.status_code == 502
    assert db.query(Sale).count() == 0

    view = _session(client, ipv.id, seller_headers)
    assert view["tickets"][0]["status"] == "pending"
    assert _stock(view, "Refresco") == 8

    monkeypatch.undo()
    retry = client.post(f"{API}/sales/{ipv.id}/tickets/{ticket['id']}/confirm", headers=seller_headers)
    assert retry.json()["success"] is True
    assert db.query(Sale).count() == 1

def test_unknown_ticket_is_404(client, ipv, seller_headers):
    response = client.post(f"{API}/sales/{ipv.id}/tickets/nope/confirm", headers=seller_headers)
    assert response.status_code == 404

def test_history_and_summary(client, ipv, products, seller_headers):
    for product, quantity, method in (
        (products["Refresco"], 3, "cash"),
        (products["Galletas"], 2, "transfer"),
    ):
        ticket = _checkout(client, ipv.id, seller_headers, product.id, quantity, method)["ticket"]
        client.post(f"{API}/sales/{ipv.id}/tickets/{ticket['id']}/confirm", headers=seller_headers)
    _checkout(client, ipv.id, seller_headers, products["Refresco"].id, 1, "cash")

    history = client.get(f"{API}/sales/{ipv.id}/history", headers=seller_headers).json()
    assert len(history["sales"]) == 2
    assert {s["product_name"] for s in history["sales"]} == {"Refresco", "Galletas"}

    summary = client.get(f"{API}/sales/{ipv.id}/summary", headers=seller_headers).json()
    assert summary["cash_total"] == 255.0
    assert summary["transfer_total"] == 80.0
    assert summary["grand_total"] == 335.0
    assert summary["sales_count"] == 2
    assert summary["pending_tickets"] == 1

def test_reset_session_drops_reservations(client, ipv, products, seller_headers):
    _checkout(client, ipv.id, seller_headers, products["Refresco"].id, 3, "cash")

    response = client.delete(f"{API}/sales/{ipv.id}/session", headers=seller_headers)

    assert response.json()["tickets"] == []
    assert _stock(response.json(), "Refresco") == 10

def test_closed_ipv_rejects_checkout(client, ipv, products, admin_headers, seller_headers):
    client.patch(f"{API}/admin/ipvs/{ipv.id}/status", json={"status": "closed"}, headers=admin_headers)
    client.put(
        f"{API}/sales/{ipv.id}/basket/{products['Refresco'].id}",
        json={"quantity": 1},
        headers=seller_headers
    )

    response = client.post(
        f"{API}/sales/{ipv.id}/checkout",
        json={"payment_method": "cash"},
        headers=seller_headers
    )

    assert response.status_code == 409
    assert client.get(f"{API}/sales/{ipv.id}/session", headers=seller_headers).status_code == 200

def test_other_user_cannot_access_ipv(client, ipv, other_headers):
    assert client.get(f"{API}/sales/{ipv.id}/session", headers=other_headers).status_code == 403

def test_unknown_ipv_is_404(client, seller_headers):
    assert client.get(f"{API}/sales/999/session", headers=seller_headers).status_code == 404

def test_requests_without_token_are_rejected(client, ipv):
    assert client.get(f"{API}/sales/{ipv.id}/session").status_code in (401, 403)

def test_admin_and_user_sessions_are_independent(client, ipv, products, admin_headers, seller_headers):
    _checkout(client, ipv.id, seller_headers, products["Refresco"].id, 4, "cash")

    admin_view = _session(client, ipv.id, admin_headers)

    assert _stock(admin_view, "Refresco") == 10
    assert admin_view["tickets"] == []

def test_my_ipvs_lists_assigned_only(client, ipv, seller_headers, other_headers):
    mine = client.get(f"{API}/sales/ipvs", headers=seller_headers).json()
    assert [i["id"] for i in mine] == [ipv.id]
    assert mine[0]["products_count"] == 2

    assert client.get(f"{API}/sales/ipvs", headers=other_headers).json() == []
