from tests.conftest import open_session


def test_root_and_health(client):
    assert client.get("/").status_code == 200

    res = client.get("/health")
    assert res.status_code == 200
    body = res.json()
    assert body["storage"] == "healthy"
    assert body["active_sessions"] == 0


def test_roles(client):
    res = client.get("/api/roles")
    assert res.status_code == 200
    assert {r["role"] for r in res.json()} == {"CUSTOMER", "ADMIN", "MANAGER", "KITCHEN"}


def test_session_views_per_role(client):
    res = client.post("/api/session", json={"role": "CUSTOMER"})
    assert res.json()["views"] == ["MENU", "CART"]
    assert res.json()["default_view"] == "MENU"

    res = client.post("/api/session", json={"role": "ADMIN"})
    assert res.json()["views"] == ["DASHBOARD", "ORDERS", "MENU_MANAGEMENT"]

    res = client.post("/api/session", json={"role": "KITCHEN"})
    assert res.json()["default_view"] == "ORDERS"


def test_requests_without_session_are_rejected(client):
    assert client.get("/api/menu").status_code == 401
    assert client.get("/api/menu", headers={"X-Session-Id": "nope"}).status_code == 401


def test_view_gating(client):
    customer = open_session(client, "CUSTOMER")
    kitchen = open_session(client, "KITCHEN")

    assert client.get("/api/orders", headers=customer).status_code == 403
    assert client.get("/api/dashboard", headers=kitchen).status_code == 403
    assert client.get("/api/cart", headers=kitchen).status_code == 403
    assert client.post("/api/menu", json={"name": "x", "price": 1}, headers=kitchen).status_code == 403


def test_cart_flow(client):
    headers = open_session(client, "CUSTOMER")

    client.post("/api/cart/items", json={"product_id": "1"}, headers=headers)
    client.post("/api/cart/items", json={"product_id": "1"}, headers=headers)
    res = client.post("/api/cart/items", json={"product_id": "4"}, headers=headers)
    assert res.json()["count"] == 3
    assert res.json()["total"] == 85 * 2 + 15

    res = client.patch("/api/cart/items/1", json={"delta": -5, "notes": "حار"}, headers=headers)
    item = res.json()["items"][0]
    assert item["quantity"] == 2
    assert item["notes"] == "حار"

    res = client.delete("/api/cart/items/4", headers=headers)
    assert [i["id"] for i in res.json()["items"]] == ["1"]

    assert client.post("/api/cart/items", json={"product_id": "zzz"}, headers=headers).status_code == 404
    assert client.patch("/api/cart/items/4", json={"delta": 1}, headers=headers).status_code == 404

    res = client.delete("/api/cart", headers=headers)
    assert res.json()["count"] == 0


def test_checkout_and_order_board(client):
    kitchen = open_session(client, "KITCHEN")
    customer = open_session(client, "CUSTOMER")

    client.post("/api/cart/items", json={"product_id": "1"}, headers=customer)
    res = client.post(
        "/api/checkout",
        json={"name": "Ali", "phone": "0500", "address": "X", "payment": "CASH"},
        headers=customer,
    )
    assert res.status_code == 201
    order = res.json()["order"]
    assert order["totalAmount"] == 85
    assert order["status"] == "PENDING"
    assert order["isNew"] is True
    assert client.get("/api/cart", headers=customer).json()["count"] == 0

    res = client.post("/api/orders/sync", headers=kitchen)
    assert res.json() == {"replaced": True, "total": 1}

    board = client.get("/api/orders", headers=kitchen).json()
    assert board["unseen_pending"] == 1
    entry = board["orders"][0]
    assert entry["number"] == order["id"][-4:]
    assert entry["status_label"] == "انتظار"
    assert entry["payment_label"] == "كاش"
    assert entry["next_statuses"] == ["PREPARING", "CANCELLED"]


def test_empty_cart_checkout_is_rejected(client):
    customer = open_session(client, "CUSTOMER")
    res = client.post("/api/checkout", json={"name": "Ali", "phone": "0500", "address": "X"}, headers=customer)
    assert res.status_code == 400


def test_checkout_requires_customer_details(client):
    customer = open_session(client, "CUSTOMER")
    client.post("/api/cart/items", json={"product_id": "1"}, headers=customer)
    res = client.post("/api/checkout", json={"name": "", "phone": "0500", "address": "X"}, headers=customer)
    assert res.status_code == 422


def test_status_updates(client):
    customer = open_session(client, "CUSTOMER")
    client.post("/api/cart/items", json={"product_id": "2"}, headers=customer)
    order_id = client.post(
        "/api/checkout", json={"name": "A", "phone": "1", "address": "B"}, headers=customer
    ).json()["order"]["id"]

    manager = open_session(client, "MANAGER")
    url = f"/api/orders/{order_id}/status"

    res = client.post(url, json={"status": "PREPARING"}, headers=manager)
    assert res.status_code == 200
    assert res.json()["updated"] is True
    assert res.json()["order"]["status"] == "PREPARING"

    assert client.post(url, json={"status": "PENDING"}, headers=manager).status_code == 409

    res = client.post("/api/orders/unknown/status", json={"status": "READY"}, headers=manager)
    assert res.status_code == 200
    assert res.json()["updated"] is False

    res = client.post(f"/api/orders/{order_id}/seen", headers=manager)
    assert res.json()["order"]["isNew"] is False

    res = client.get("/api/orders", params={"status": "preparing"}, headers=manager)
    assert res.json()["total"] == 1
    assert client.get("/api/orders", params={"status": "LOST"}, headers=manager).status_code == 400


def test_menu_management(client):
    admin = open_session(client, "ADMIN")

    res = client.post("/api/menu", json={"name": "شاورما", "price": 25}, headers=admin)
    assert res.status_code == 201
    product = res.json()
    assert product["category"] == "عام"
    assert product["image"]

    customer = open_session(client, "CUSTOMER")
    menu = client.get("/api/menu", headers=customer).json()
    assert menu[-1]["name"] == "شاورما"

    assert client.post("/api/menu", json={"name": "x", "price": 0}, headers=admin).status_code == 422

    res = client.post("/api/menu/describe", json={"name": "شاورما"}, headers=admin)
    assert res.status_code == 200
    assert res.json()["provider"] == "mock"

    assert "برجر" in client.get("/api/menu/categories").json()


def test_dashboard(client):
    customer = open_session(client, "CUSTOMER")
    client.post("/api/cart/items", json={"product_id": "1"}, headers=customer)
    client.post("/api/cart/items", json={"product_id": "4"}, headers=customer)
    client.post("/api/checkout", json={"name": "A", "phone": "1", "address": "B"}, headers=customer)

    admin = open_session(client, "ADMIN")
    stats = client.get("/api/dashboard", headers=admin).json()
    assert stats["total_orders"] == 1
    assert stats["total_revenue"] == 100
    assert stats["pending_orders"] == 1
    assert stats["sales_by_category"] == [
        {"name": "برجر", "sales": 1},
        {"name": "مشروبات", "sales": 1},
    ]

    res = client.post("/api/dashboard/analysis", headers=admin)
    assert res.status_code == 200
    assert res.json()["text"]

    res = client.post("/api/dashboard/export", headers=admin)
    assert res.status_code == 202
    assert res.json()["orders"] == 1


def test_role_switch_and_logout(client):
    headers = open_session(client, "CUSTOMER")
    client.post("/api/cart/items", json={"product_id": "1"}, headers=headers)

    res = client.put("/api/session/role", json={"role": "KITCHEN"}, headers=headers)
    assert res.json()["role"] == "KITCHEN"
    assert client.get("/api/session/notifications", headers=headers).json() == {"events": []}

    client.put("/api/session/role", json={"role": "CUSTOMER"}, headers=headers)
    assert client.get("/api/cart", headers=headers).json()["count"] == 0

    assert client.delete("/api/session", headers=headers).status_code == 204
    assert client.get("/api/session", headers=headers).status_code == 401


def test_checkout_when_storage_is_down(failing_client, failing_store):
    headers = open_session(failing_client, "CUSTOMER")
    failing_client.post("/api/cart/items", json={"product_id": "1"}, headers=headers)
    details = {"name": "Ali", "phone": "0500", "address": "X", "payment": "CASH"}

    failing_store.fail_writes = True
    res = failing_client.post("/api/checkout", json=details, headers=headers)
    assert res.status_code == 503
    assert res.json()["error"] == "Storage Unavailable"
    assert failing_client.get("/api/cart", headers=headers).json()["count"] == 1

    failing_store.fail_writes = False
    res = failing_client.post("/api/checkout", json=details, headers=headers)
    assert res.status_code == 201
    assert failing_client.get("/api/cart", headers=headers).json()["count"] == 0
