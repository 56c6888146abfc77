from decimal import Decimal


def _create(admin_client, **overrides):
    body = {
        "name": "Linen Shirt",
        "base_price": "1000.00",
        "discount_percent": "20",
        "available_quantity": 3,
        "sizes": ["M", "L"],
        "colors": ["red"],
    }
    body.update(overrides)
    response = admin_client.post("/products/", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def test_admin_creates_product_with_effective_price(admin_client):
    product = _create(admin_client)

    assert product["slug"] == "linen-shirt"
    assert Decimal(product["effective_price"]) == Decimal("800")
    assert product["in_stock"] is True


def test_duplicate_slug_is_rejected(admin_client):
    _create(admin_client)
    response = admin_client.post("/products/", json={"name": "Linen Shirt", "base_price": "10"})

    assert response.status_code == 400
    assert response.json()["field"] == "slug"


def test_discount_outside_range_is_rejected(admin_client):
    response = admin_client.post("/products/", json={"name": "X", "base_price": "10", "discount_percent": "150"})
    assert response.status_code == 422


def test_patch_only_touches_sent_fields(admin_client):
    product = _create(admin_client)

    response = admin_client.patch(f"/products/{product['id']}", json={"discount_percent": None})

    assert response.status_code == 200
    patched = response.json()
    assert patched["discount_percent"] is None
    assert patched["name"] == "Linen Shirt"
    assert patched["available_quantity"] == 3
    assert Decimal(patched["effective_price"]) == Decimal("1000")


def test_patch_rejects_null_for_required_field(admin_client):
    product = _create(admin_client)

    response = admin_client.patch(f"/products/{product['id']}", json={"name": None})

    assert response.status_code == 422


def test_soft_deleted_product_disappears(admin_client, client):
    product = _create(admin_client)

    assert admin_client.delete(f"/products/{product['id']}").status_code == 204

    assert client.get(f"/products/{product['id']}").status_code == 404
    assert client.get("/products/").json()["pagination"]["total"] == 0


def test_listing_filters(admin_client, client):
    _create(admin_client, name="Sale Shirt")
    _create(admin_client, name="Plain Shirt", discount_percent=None)
    _create(admin_client, name="Sold Out", discount_percent=None, available_quantity=0)
    _create(admin_client, name="Hidden", active=False)

    def names(params):
        products = client.get("/products/", params=params).json()["products"]
        return sorted(p["name"] for p in products)

    assert names({}) == ["Plain Shirt", "Sale Shirt", "Sold Out"]
    assert names({"on_sale": "true"}) == ["Sale Shirt"]
    assert names({"in_stock": "true"}) == ["Plain Shirt", "Sale Shirt"]
    assert names({"q": "plain"}) == ["Plain Shirt"]

    page = client.get("/products/", params={"limit": 2}).json()["pagination"]
    assert page == {"page": 1, "limit": 2, "total": 3, "total_pages": 2}


def test_writes_need_admin(client, user_client):
    body = {"name": "X", "base_price": "10"}
    assert client.post("/products/", json=body).status_code == 401
    assert user_client.post("/products/", json=body).status_code == 403


def test_shipping_method_lifecycle(admin_client, client):
    created = admin_client.post("/shipping-methods/", json={"name": "Courier", "cost": "300.00"}).json()

    patched = admin_client.patch(f"/shipping-methods/{created['id']}", json={"estimated_days": 3}).json()
    assert patched["estimated_days"] == 3
    assert patched["name"] == "Courier"

    admin_client.delete(f"/shipping-methods/{created['id']}")
    assert client.get("/shipping-methods/").json() == []
    assert len(client.get("/shipping-methods/", params={"active_only": "false"}).json()) == 1
