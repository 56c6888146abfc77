from decimal import Decimal

USER_EMAIL = "buyer@example.com"
USER_PASSWORD = "buyer-pass-123"


def test_anonymous_cart_lives_in_session(client, make_product):
    product = make_product(available_quantity=3)

    response = client.post("/cart/items", json={"product_id": product.id, "size": "M", "color": "red", "quantity": 2})

    assert response.status_code == 200
    cart = client.get("/cart/").json()
    assert cart["owner"].startswith("session:")
    assert cart["item_count"] == 2
    assert Decimal(cart["total"]) == Decimal("2000")


def test_over_stock_add_is_a_conflict(client, make_product):
    product = make_product(available_quantity=3)
    line = {"product_id": product.id, "size": "M", "color": "red", "quantity": 2}
    client.post("/cart/items", json=line)

    response = client.post("/cart/items", json=line)

    assert response.status_code == 409
    assert response.json()["code"] == "INSUFFICIENT_STOCK"
    assert response.json()["available"] == 3
    assert client.get("/cart/").json()["item_count"] == 2


def test_set_quantity_and_remove(client, make_product):
    product = make_product(available_quantity=5)
    client.post("/cart/items", json={"product_id": product.id, "size": "M", "color": "red"})

    cart = client.put("/cart/items", json={"product_id": product.id, "size": "M", "color": "red", "quantity": 4}).json()
    assert cart["items"][0]["quantity"] == 4

    cart = client.put("/cart/items", json={"product_id": product.id, "size": "M", "color": "red", "quantity": 0}).json()
    assert cart["items"] == []

    response = client.delete("/cart/items", params={"product_id": product.id, "size": "M", "color": "red"})
    assert response.status_code == 200


def test_invalid_variant_is_a_bad_request(client, make_product):
    product = make_product()

    response = client.post("/cart/items", json={"product_id": product.id, "size": "XXL", "color": "red"})

    assert response.status_code == 400
    assert response.json()["field"] == "size"


def test_zero_quantity_add_is_invalid(client, make_product):
    product = make_product()
    response = client.post("/cart/items", json={"product_id": product.id, "size": "M", "color": "red", "quantity": 0})
    assert response.status_code == 422


def test_shipping_selection_adds_to_grand_total(client, make_product, make_shipping):
    product = make_product()
    method = make_shipping(cost="250.00")
    client.post("/cart/items", json={"product_id": product.id, "size": "M", "color": "red"})

    cart = client.put("/cart/shipping-method", json={"shipping_method_id": method.id}).json()

    assert cart["shipping_method_id"] == method.id
    assert Decimal(cart["grand_total"]) == Decimal("1250")

    cart = client.delete("/cart/").json()
    assert cart["items"] == []
    assert cart["shipping_method_id"] is None


def test_login_adopts_anonymous_cart(client, user, make_product):
    product = make_product()
    client.post("/cart/items", json={"product_id": product.id, "size": "M", "color": "red", "quantity": 2})

    client.post("/auth/login", json={"email": USER_EMAIL, "password": USER_PASSWORD})

    cart = client.get("/cart/").json()
    assert cart["owner"] == f"user:{user.id}"
    assert cart["item_count"] == 2


def test_favorites_toggle(client, make_product):
    product = make_product()

    first = client.post(f"/favorites/{product.id}/toggle").json()
    assert first["favorite"] is True
    assert client.get("/favorites/").json() == {"product_ids": [product.id]}

    assert client.delete(f"/favorites/{product.id}").json() == {"product_ids": []}
    assert client.post("/favorites/999/toggle").status_code == 404
