from decimal import Decimal

from storefront.data.models import OrderModel


def _fill(client, product, quantity, size="M"):
    response = client.post("/cart/items", json={"product_id": product.id, "size": size, "color": "red", "quantity": quantity})
    assert response.status_code == 200, response.text


def test_checkout_creates_order(db, user_client, make_product, make_shipping):
    product = make_product(base_price="1000.00", discount_percent="20", available_quantity=5)
    method = make_shipping(cost="300.00")
    _fill(user_client, product, 1, size="M")
    _fill(user_client, product, 2, size="L")

    response = user_client.post("/checkout/", json={"shipping_method_id": method.id})

    assert response.status_code == 201, response.text
    order = response.json()
    assert order["status"] == "PENDING"
    assert Decimal(order["subtotal"]) == Decimal("2400")
    assert Decimal(order["total"]) == Decimal("2700")
    assert user_client.get("/cart/").json()["items"] == []

    db.refresh(product)
    assert product.available_quantity == 2

    assert user_client.get(f"/orders/{order['id']}").json()["order_number"] == order["order_number"]
    assert user_client.get("/orders/").json()["pagination"]["total"] == 1


def test_stock_conflict_body(db, user_client, make_product, make_shipping):
    product = make_product(available_quantity=2)
    method = make_shipping()
    _fill(user_client, product, 2)

    product.available_quantity = 1
    db.commit()

    response = user_client.post("/checkout/", json={"shipping_method_id": method.id})

    assert response.status_code == 409
    assert response.json() == {
        "error": response.json()["error"],
        "code": "STOCK_CONFLICT",
        "product_id": product.id,
        "available": 1,
    }
    assert db.query(OrderModel).count() == 0


def test_empty_cart_checkout(user_client, make_shipping):
    method = make_shipping()

    response = user_client.post("/checkout/", json={"shipping_method_id": method.id})

    assert response.status_code == 400
    assert response.json()["field"] == "cart"


def test_checkout_needs_login(client):
    assert client.post("/checkout/", json={}).status_code == 401


def test_admin_moves_order_and_payment(user_client, admin_client, make_product, make_shipping):
    product = make_product(base_price="500.00")
    method = make_shipping(cost="0.00")
    _fill(user_client, product, 1)
    order = user_client.post("/checkout/", json={"shipping_method_id": method.id}).json()

    assert user_client.patch(f"/orders/{order['id']}/status", json={"status": "PROCESSING"}).status_code == 403

    response = admin_client.patch(f"/orders/{order['id']}/status", json={"status": "DELIVERED"})
    assert response.status_code == 409
    assert response.json()["code"] == "INVALID_STATUS_TRANSITION"

    assert admin_client.patch(f"/orders/{order['id']}/status", json={"status": "PROCESSING"}).json()["status"] == "PROCESSING"

    payment = user_client.post("/payments/", json={"order_id": order["id"]}).json()
    assert Decimal(payment["amount"]) == Decimal("500")

    paid = admin_client.patch(f"/payments/{payment['id']}/status", json={"status": "COMPLETED", "transaction_id": "tx-9"})
    assert paid.json()["status"] == "COMPLETED"
    assert len(user_client.get("/payments/", params={"order_id": order["id"]}).json()) == 1
