from datetime import datetime, timedelta, timezone

import pytest

from storefront.domain.exceptions import ConcurrentUpdateError, InsufficientStock, NotFoundError
from storefront.repos.cart_repo import SqlCartStorage
from storefront.services.cart_service import CartService, cart_key, session_owner, user_owner
from storefront.tasks.cleanup import purge_stale_carts
from storefront.utils.settings import CART_TTL_SECONDS


def test_cart_persists_between_requests(db, make_product):
    product = make_product()
    owner = session_owner("t1")

    CartService(db).add_item(owner, product.id, "M", "red", 2)
    view = CartService(db).get_cart(owner)

    assert view["item_count"] == 2
    assert view["items"][0]["quantity"] == 2
    assert view["total"] == view["items"][0]["line_total"]


def test_rejected_add_leaves_stored_cart_alone(db, make_product):
    product = make_product(available_quantity=2)
    owner = session_owner("t1")
    CartService(db).add_item(owner, product.id, "M", "red", 2)

    with pytest.raises(InsufficientStock):
        CartService(db).add_item(owner, product.id, "M", "red", 1)

    assert SqlCartStorage(db).get(cart_key(owner))["lines"][0]["quantity"] == 2


def test_unknown_product_is_not_found(db):
    with pytest.raises(NotFoundError):
        CartService(db).add_item(session_owner("t1"), 404, "", "", 1)


def test_deleted_products_are_dropped_on_load(db, make_product):
    kept, gone = make_product(name="Kept"), make_product(name="Gone")
    owner = session_owner("t1")
    service = CartService(db)
    service.add_item(owner, kept.id, "M", "red", 1)
    service.add_item(owner, gone.id, "M", "red", 1)

    gone.mark_deleted()
    db.commit()

    view = CartService(db).get_cart(owner)

    assert view["removed_product_ids"] == [gone.id]
    assert [item["product_id"] for item in view["items"]] == [kept.id]
    assert len(SqlCartStorage(db).get(cart_key(owner))["lines"]) == 1


def test_clear_forgets_shipping_method(db, make_product, make_shipping):
    product = make_product()
    method = make_shipping()
    owner = session_owner("t1")
    service = CartService(db)
    service.add_item(owner, product.id, "M", "red", 1)
    service.select_shipping_method(owner, method.id)

    view = service.clear(owner)

    assert view["items"] == []
    assert view["shipping_method_id"] is None


def test_adopt_moves_session_cart_into_empty_user_cart(db, user, make_product):
    product = make_product()
    anonymous = session_owner("t1")
    CartService(db).add_item(anonymous, product.id, "M", "red", 2)

    assert CartService(db).adopt(anonymous, user_owner(user.id)) is True

    cart, _ = CartService(db).load_cart(user_owner(user.id))
    assert cart.get_line(product.id, "M", "red").quantity == 2
    assert SqlCartStorage(db).get(cart_key(anonymous)) is None


def test_adopt_keeps_existing_user_cart(db, user, make_product):
    product = make_product()
    anonymous = session_owner("t1")
    CartService(db).add_item(anonymous, product.id, "M", "red", 2)
    CartService(db).add_item(user_owner(user.id), product.id, "L", "blue", 1)

    assert CartService(db).adopt(anonymous, user_owner(user.id)) is False

    cart, _ = CartService(db).load_cart(user_owner(user.id))
    assert [line.key for line in cart.lines] == [(product.id, "L", "blue")]


def test_stale_version_is_rejected(db):
    key = cart_key(session_owner("t1"))
    SqlCartStorage(db).set(key, {"lines": []})
    db.commit()

    first, second = SqlCartStorage(db), SqlCartStorage(db)
    first.get(key)
    second.get(key)

    first.set(key, {"lines": [{"product_id": 1, "size": "", "color": "", "quantity": 1}]})
    db.commit()

    with pytest.raises(ConcurrentUpdateError):
        second.set(key, {"lines": []})


def test_purge_removes_state_past_ttl(db):
    SqlCartStorage(db).set(cart_key(session_owner("t1")), {"lines": []})
    db.commit()

    assert purge_stale_carts(db) == 0

    later = datetime.now(timezone.utc) + timedelta(seconds=CART_TTL_SECONDS + 60)
    assert purge_stale_carts(db, now=later) == 1
    assert SqlCartStorage(db).get(cart_key(session_owner("t1"))) is None
