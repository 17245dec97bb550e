# tests/test_cart.py
from concurrent.futures import ThreadPoolExecutor

import pytest

from storefront.core.errors import CartQuantityLimitError
from storefront.db.base import Base
from storefront.db.session import make_engine, make_session_factory
from storefront.models.cart import CartItem, MAX_CART_QUANTITY
from storefront.models.product import Product
from storefront.repos.cart_repo import CartRepo


def test_empty_cart(client):
    resp = client.get("/api/cart/nobody")
    assert resp.status_code == 200
    assert resp.json() == []


def test_add_to_cart_returns_expanded_item(client, create_product):
    product = create_product("Widget", "9.99")
    resp = client.post("/api/cart", json={"userId": "u1", "productId": product["id"], "quantity": 2})

    assert resp.status_code == 201
    item = resp.json()
    assert item["userId"] == "u1"
    assert item["productId"] == product["id"]
    assert item["quantity"] == 2
    assert item["product"] == {
        "id": product["id"],
        "name": "Widget",
        "price": 9.99,
        "imageUrl": "http://x/y.png",
    }


def test_quantity_defaults_to_one(client, create_product):
    product = create_product()
    resp = client.post("/api/cart", json={"userId": "u1", "productId": product["id"]})
    assert resp.status_code == 201
    assert resp.json()["quantity"] == 1


def test_adding_same_product_merges_quantity(client, create_product):
    product = create_product()
    first = client.post("/api/cart", json={"userId": "u1", "productId": product["id"], "quantity": 1})
    second = client.post("/api/cart", json={"userId": "u1", "productId": product["id"], "quantity": 2})

    assert first.json()["id"] == second.json()["id"]
    cart = client.get("/api/cart/u1").json()
    assert len(cart) == 1
    assert cart[0]["quantity"] == 3


def test_carts_are_per_user(client, create_product):
    product = create_product()
    client.post("/api/cart", json={"userId": "u1", "productId": product["id"], "quantity": 1})
    client.post("/api/cart", json={"userId": "u2", "productId": product["id"], "quantity": 5})

    assert client.get("/api/cart/u1").json()[0]["quantity"] == 1
    assert client.get("/api/cart/u2").json()[0]["quantity"] == 5


def test_add_unknown_product(client):
    resp = client.post("/api/cart", json={"userId": "u1", "productId": "missing", "quantity": 1})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Product not found"}


def test_add_to_cart_validation(client, create_product):
    product = create_product()
    no_user = client.post("/api/cart", json={"productId": product["id"], "quantity": 1})
    assert no_user.status_code == 400

    zero = client.post("/api/cart", json={"userId": "u1", "productId": product["id"], "quantity": 0})
    assert zero.status_code == 400
    assert zero.json()["message"].startswith("quantity")


def test_add_to_cart_rejects_oversized_quantity(client, create_product):
    product = create_product()
    for quantity in (MAX_CART_QUANTITY + 1, 10**20):
        resp = client.post(
            "/api/cart", json={"userId": "u1", "productId": product["id"], "quantity": quantity}
        )
        assert resp.status_code == 400
        assert resp.json()["message"].startswith("quantity")

    assert client.get("/api/cart/u1").json() == []


def test_increment_past_limit_keeps_previous_quantity(client, create_product):
    product = create_product()
    first = client.post(
        "/api/cart",
        json={"userId": "u1", "productId": product["id"], "quantity": MAX_CART_QUANTITY - 1},
    )
    assert first.status_code == 201

    resp = client.post("/api/cart", json={"userId": "u1", "productId": product["id"], "quantity": 5})
    assert resp.status_code == 400
    assert resp.json() == {"message": f"Cart quantity cannot exceed {MAX_CART_QUANTITY}"}

    cart = client.get("/api/cart/u1")
    assert cart.status_code == 200
    assert [i["quantity"] for i in cart.json()] == [MAX_CART_QUANTITY - 1]

    # ровно до предела — разрешено
    last = client.post("/api/cart", json={"userId": "u1", "productId": product["id"], "quantity": 1})
    assert last.status_code == 201
    assert last.json()["quantity"] == MAX_CART_QUANTITY


def test_repo_rejects_quantity_over_limit(app, create_product):
    product = create_product()
    db = app.state.session_factory()
    try:
        repo = CartRepo(db)
        with pytest.raises(CartQuantityLimitError):
            repo.add_or_increment("u1", product["id"], MAX_CART_QUANTITY + 1)
        repo.add_or_increment("u1", product["id"], MAX_CART_QUANTITY)
        with pytest.raises(CartQuantityLimitError):
            repo.add_or_increment("u1", product["id"], 1)
        assert repo.get_item_with_product("u1", product["id"]).quantity == MAX_CART_QUANTITY
    finally:
        db.close()


def test_exhausted_upsert_retries_are_client_errors(client, create_product, monkeypatch):
    product = create_product()
    monkeypatch.setattr(CartRepo, "UPSERT_ATTEMPTS", 0)

    resp = client.post("/api/cart", json={"userId": "u1", "productId": product["id"]})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Could not add item to cart, please retry"}


def test_remove_cart_item_only_removes_that_item(client, create_product):
    a = create_product("A", "1")
    b = create_product("B", "2")
    item_a = client.post("/api/cart", json={"userId": "u1", "productId": a["id"]}).json()
    client.post("/api/cart", json={"userId": "u1", "productId": b["id"]})
    client.post("/api/cart", json={"userId": "u2", "productId": a["id"]})

    resp = client.delete(f"/api/cart/u1/{item_a['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Cart item removed"}

    assert [i["productId"] for i in client.get("/api/cart/u1").json()] == [b["id"]]
    assert [i["productId"] for i in client.get("/api/cart/u2").json()] == [a["id"]]


def test_remove_requires_matching_owner(client, create_product):
    product = create_product()
    item = client.post("/api/cart", json={"userId": "u1", "productId": product["id"]}).json()

    resp = client.delete(f"/api/cart/u2/{item['id']}")
    assert resp.status_code == 200
    assert len(client.get("/api/cart/u1").json()) == 1


def test_remove_missing_item_is_noop(client):
    resp = client.delete("/api/cart/u1/missing")
    assert resp.status_code == 200


def test_cart_listing_drops_dangling_items(app, client, create_product):
    product = create_product()
    client.post("/api/cart", json={"userId": "u1", "productId": product["id"]})

    # удаляем товар в обход каскада
    with app.state.engine.begin() as conn:
        conn.exec_driver_sql("PRAGMA foreign_keys=OFF")
        conn.exec_driver_sql("DELETE FROM products")

    assert client.get("/api/cart/u1").json() == []


def test_concurrent_adds_merge_into_one_row(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'race.db'}")
    Base.metadata.create_all(bind=engine)
    session_factory = make_session_factory(engine)

    db = session_factory()
    product = Product(name="Widget", price=1.0, image_url="u")
    db.add(product)
    db.commit()
    product_id = product.id
    db.close()

    def add_one(_):
        session = session_factory()
        try:
            return CartRepo(session).add_or_increment("u1", product_id, 1).quantity
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(add_one, range(16)))

    db = session_factory()
    try:
        rows = db.query(CartItem).filter(CartItem.user_id == "u1").all()
        assert len(rows) == 1
        assert rows[0].quantity == 16
    finally:
        db.close()
        engine.dispose()
