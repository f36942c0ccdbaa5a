import pytest
from sqlalchemy.exc import OperationalError

API = "/api/v1"

SHIPPING = {
    "name": "Jane Doe",
    "email": "jane@example.com",
    "address": "1 Main St",
    "city": "Springfield",
}


def _select(client, product_id="nfc-business-card"):
    client.put(f"{API}/workspace/product", json={"product_id": product_id})


def _set(client, field, value):
    client.post(
        f"{API}/workspace/commands",
        json={"command": {"type": "set_field", "field": field, "value": value}},
    )


def _add(client, **payload):
    res = client.post(f"{API}/cart", json=payload)
    assert res.status_code == 200, res.text
    return res.json()


# -------- Cart --------


def test_empty_cart(client):
    body = client.get(f"{API}/cart").json()

    assert body["items"] == []
    assert body["is_empty"] is True
    assert body["total"] == 0


def test_add_workspace_design_to_cart(client):
    _select(client)
    _set(client, "name", "Ada")

    body = _add(client)

    (item,) = body["items"]
    assert item["index"] == 0
    assert item["product_id"] == "nfc-business-card"
    assert item["quantity"] == 1
    assert item["customization"]["front"]["name"] == "Ada"
    assert body["subtotal"] == 24.99
    assert body["shipping"] == 5.99
    assert body["total"] == 30.98
    assert body["is_empty"] is False


def test_cart_keeps_a_snapshot_of_the_design(client):
    _select(client)
    _set(client, "name", "Ada")
    _add(client)

    _set(client, "name", "Changed later")

    item = client.get(f"{API}/cart").json()["items"][0]
    assert item["customization"]["front"]["name"] == "Ada"


def test_add_explicit_design(client):
    body = _add(
        client,
        product_id="nfc-review-card",
        customization={"front": {"name": "Cafe"}},
        quantity=2,
    )

    assert body["items"][0]["line_total"] == 59.98
    assert body["shipping"] == 0
    assert body["total"] == 59.98


def test_add_without_product(client):
    res = client.post(f"{API}/cart", json={})

    assert res.status_code == 400


def test_add_unknown_product(client):
    res = client.post(f"{API}/cart", json={"product_id": "nope"})

    assert res.status_code == 404


def test_add_rejects_non_positive_quantity(client):
    _select(client)

    res = client.post(f"{API}/cart", json={"quantity": 0})

    assert res.status_code == 422


def test_same_product_can_appear_twice(client):
    _select(client)
    _add(client)
    _add(client, product_id="nfc-sticker")
    body = _add(client)

    assert [i["product_id"] for i in body["items"]] == [
        "nfc-business-card",
        "nfc-sticker",
        "nfc-business-card",
    ]
    assert [i["index"] for i in body["items"]] == [0, 1, 2]


@pytest.mark.parametrize("given, stored", [(5, 5), (0, 1), (-2, 1)])
def test_update_quantity_clamps(client, given, stored):
    _select(client)
    _add(client)

    body = client.patch(f"{API}/cart/0", json={"quantity": given}).json()

    assert body["items"][0]["quantity"] == stored
    assert body["total_quantity"] == stored


def test_update_out_of_range_index(client):
    res = client.patch(f"{API}/cart/3", json={"quantity": 2})

    assert res.status_code == 404


def test_remove_item_reindexes(client):
    _select(client)
    _add(client)
    _add(client, product_id="nfc-sticker")

    body = client.delete(f"{API}/cart/0").json()

    (item,) = body["items"]
    assert item["index"] == 0
    assert item["product_id"] == "nfc-sticker"


def test_removing_last_item_empties_cart(client):
    _select(client)
    _add(client)

    body = client.delete(f"{API}/cart/0").json()

    assert body["is_empty"] is True


def test_clear_cart(client):
    _select(client)
    _add(client)
    _add(client)

    body = client.delete(f"{API}/cart").json()

    assert body["items"] == []


def test_carts_are_per_user(client, auth_as, admin):
    _select(client)
    _add(client)

    auth_as(admin)

    assert client.get(f"{API}/cart").json()["is_empty"] is True


# -------- Checkout --------


def test_checkout_empty_cart(client, sent_emails):
    res = client.post(f"{API}/orders/checkout", json=SHIPPING)

    assert res.status_code == 400
    assert res.json()["detail"] == "Cart is empty"
    assert sent_emails == []
    assert client.get(f"{API}/orders/me").json() == []


def test_checkout_places_order_and_resets_state(client, sent_emails):
    _select(client)
    _set(client, "name", "Ada")
    _add(client, quantity=2)

    res = client.post(f"{API}/orders/checkout", json=SHIPPING)

    assert res.status_code == 200
    order = res.json()
    assert order["order_number"].startswith("NFC-")
    assert order["status"] == "processing"
    assert order["subtotal"] == 49.98
    assert order["shipping_cost"] == 5.99
    assert order["total"] == 55.97
    assert order["items"] == [
        {
            "productId": "nfc-business-card",
            "name": "NFC Business Card",
            "basePrice": 24.99,
            "category": "card",
            "quantity": 2,
            "customizationName": "Ada",
            "linkedUsername": None,
        }
    ]
    assert order["shipping_info"]["email"] == "jane@example.com"

    assert client.get(f"{API}/cart").json()["is_empty"] is True
    workspace = client.get(f"{API}/workspace").json()
    assert workspace["product"]["id"] == "nfc-business-card"
    assert workspace["customization"]["front"]["name"] == ""

    assert sent_emails == [
        {
            "to_email": "jane@example.com",
            "order_number": order["order_number"],
            "status": "processing",
            "customer_name": "Jane Doe",
        }
    ]


@pytest.mark.parametrize(
    "override",
    [{"name": " "}, {"address": ""}, {"email": "nope"}],
)
def test_checkout_validates_shipping_info(client, override):
    _select(client)
    _add(client)

    res = client.post(f"{API}/orders/checkout", json={**SHIPPING, **override})

    assert res.status_code == 422
    assert client.get(f"{API}/cart").json()["is_empty"] is False


def test_email_failure_does_not_fail_checkout(client, monkeypatch):
    def _smtp_down(**kwargs):
        raise ConnectionError("smtp down")

    monkeypatch.setattr("app.services.order_service.send_order_status_email", _smtp_down)
    _select(client)
    _add(client)

    res = client.post(f"{API}/orders/checkout", json=SHIPPING)

    assert res.status_code == 200
    assert client.get(f"{API}/cart").json()["is_empty"] is True


def test_store_failure_keeps_cart(client, session, monkeypatch, sent_emails):
    _select(client)
    _add(client)

    def _fail():
        raise OperationalError("INSERT", {}, Exception("connection lost"))

    with monkeypatch.context() as m:
        m.setattr(session, "commit", _fail)
        res = client.post(f"{API}/orders/checkout", json=SHIPPING)

    assert res.status_code == 503
    assert sent_emails == []
    assert len(client.get(f"{API}/cart").json()["items"]) == 1
    assert client.get(f"{API}/orders/me").json() == []


def test_order_history(client, sent_emails):
    _select(client)
    _add(client)
    placed = client.post(f"{API}/orders/checkout", json=SHIPPING).json()

    history = client.get(f"{API}/orders/me").json()
    single = client.get(f"{API}/orders/me/{placed['id']}")

    assert [o["id"] for o in history] == [placed["id"]]
    assert single.status_code == 200
    assert single.json()["order_number"] == placed["order_number"]


# -------- Admin fulfilment --------


@pytest.fixture
def placed_order(client, sent_emails):
    _select(client)
    _add(client)
    order = client.post(f"{API}/orders/checkout", json=SHIPPING).json()
    sent_emails.clear()
    return order


def test_admin_routes_require_admin(client, placed_order):
    assert client.get(f"{API}/orders").status_code == 403
    res = client.patch(f"{API}/orders/{placed_order['id']}/status", json={"status": "shipped"})
    assert res.status_code == 403


def test_other_users_cannot_see_order(client, auth_as, admin, placed_order):
    auth_as(admin)

    assert client.get(f"{API}/orders/me/{placed_order['id']}").status_code == 404


def test_admin_lists_and_filters_orders(client, auth_as, admin, placed_order):
    auth_as(admin)

    assert [o["id"] for o in client.get(f"{API}/orders").json()] == [placed_order["id"]]
    assert client.get(f"{API}/orders", params={"status": "shipped"}).json() == []
    assert client.get(f"{API}/orders/{placed_order['id']}").status_code == 200


def test_status_walks_the_state_machine(client, auth_as, admin, placed_order, sent_emails):
    auth_as(admin)
    url = f"{API}/orders/{placed_order['id']}/status"

    shipped = client.patch(url, json={"status": "shipped"})
    delivered = client.patch(url, json={"status": "delivered"})

    assert shipped.json()["status"] == "shipped"
    assert delivered.json()["status"] == "delivered"
    assert [e["status"] for e in sent_emails] == ["shipped", "delivered"]


@pytest.mark.parametrize("target", ["pending", "confirmed", "delivered"])
def test_invalid_transitions_are_rejected(client, auth_as, admin, placed_order, sent_emails, target):
    auth_as(admin)

    res = client.patch(f"{API}/orders/{placed_order['id']}/status", json={"status": target})

    assert res.status_code == 400
    assert sent_emails == []


def test_cancelled_orders_are_final_and_not_emailed(client, auth_as, admin, placed_order, sent_emails):
    auth_as(admin)
    url = f"{API}/orders/{placed_order['id']}/status"

    assert client.patch(url, json={"status": "cancelled"}).status_code == 200
    assert client.patch(url, json={"status": "shipped"}).status_code == 400
    assert sent_emails == []


def test_unknown_status_value(client, auth_as, admin, placed_order):
    auth_as(admin)

    res = client.patch(f"{API}/orders/{placed_order['id']}/status", json={"status": "lost"})

    assert res.status_code == 422
