from urllib.parse import parse_qs, urlparse

from config import CHECKOUT_HANDLE
from tests.conftest import GENERATED


def sign_in_shopper(client):
    res = client.post("/auth/signin", json={"email": "jane@example.com", "password": "pw"})
    assert res.status_code == 200
    return {"Authorization": f"Bearer {res.json()['access_token']}"}


def test_root(client):
    assert client.get("/").json() == {"message": "Texpress Storefront API"}


def test_storage_diagnostics(client):
    body = client.get("/test").json()
    assert body["storage"] == "MemoryStore"
    assert body["products"] == 3


def test_list_products_with_derived_fields(client):
    products = client.get("/products").json()
    assert [p["id"] for p in products] == ["1", "2", "3"]
    first, second = products[0], products[1]
    assert first["rating"] == 5.0
    assert first["displayPrice"] == "$59.99"
    assert second["displayPrice"] == "$120"


def test_products_follow_currency_setting(client):
    res = client.patch("/settings", json={"currency": "CAD"})
    assert res.json()["currency"] == "CAD"
    assert client.get("/products/2").json()["displayPrice"] == "C$166"


def test_unknown_product_is_404(client):
    assert client.get("/products/nope").status_code == 404


def test_sign_in_flow(client):
    assert client.post("/auth/signin", json={"email": "", "password": ""}).status_code == 400
    assert client.get("/auth/me").status_code == 401
    sign_in_shopper(client)
    assert client.get("/auth/me").json() == {"email": "jane@example.com", "isAdmin": False}
    client.post("/auth/signout")
    assert client.get("/auth/me").status_code == 401


def test_admin_routes_require_admin_token(client):
    assert client.post("/products", json={"name": "Desk"}).status_code == 401
    bad = {"Authorization": "Bearer garbage"}
    assert client.post("/products", json={"name": "Desk"}, headers=bad).status_code == 401
    shopper = sign_in_shopper(client)
    assert client.post("/products", json={"name": "Desk"}, headers=shopper).status_code == 403
    assert client.delete("/products/1", headers=shopper).status_code == 403


def test_admin_product_crud(client, admin_headers):
    res = client.post("/products", json={"name": "Desk", "price": 80, "weight": 12}, headers=admin_headers)
    assert res.status_code == 200
    created = res.json()
    assert created["description"] == GENERATED
    assert created["category"] == "General"

    res = client.patch(f"/products/{created['id']}", json={"price": 50}, headers=admin_headers)
    assert res.json()["price"] == 50
    assert res.json()["name"] == "Desk"

    assert client.patch("/products/nope", json={"price": 1}, headers=admin_headers).status_code == 404
    assert client.post("/products", json={"price": -1}, headers=admin_headers).status_code == 422

    client.post("/cart", json={"product_id": created["id"]})
    assert client.delete(f"/products/{created['id']}", headers=admin_headers).json() == {"ok": True}
    assert client.get("/cart").json()["count"] == 0
    assert client.delete("/products/nope", headers=admin_headers).status_code == 404


def test_reviews(client):
    res = client.post("/products/2/reviews", json={"rating": 5, "comment": "Great!"})
    assert res.status_code == 401

    sign_in_shopper(client)
    assert client.post("/products/2/reviews", json={"rating": 5, "comment": "  "}).status_code == 400
    assert client.post("/products/2/reviews", json={"rating": 9, "comment": "Wow"}).status_code == 400
    assert client.post("/products/nope/reviews", json={"rating": 5, "comment": "Wow"}).status_code == 404

    res = client.post("/products/2/reviews", json={"rating": 4, "comment": "Roomy."})
    assert res.status_code == 200
    body = res.json()
    assert body["rating"] == 4.0
    assert body["reviews"][0]["userName"] == "jane"


def test_cart_flow(client):
    client.post("/cart", json={"product_id": "2"})
    client.post("/cart", json={"product_id": "2"})
    client.post("/cart", json={"product_id": "gone"})
    cart = client.get("/cart").json()
    assert cart["count"] == 3
    assert [p["id"] for p in cart["items"]] == ["2", "2"]
    assert cart["total"] == "$240"

    assert client.delete("/cart/10").json()["removed"] is False
    assert client.delete("/cart/2").json() == {"ok": True, "removed": True, "count": 2}


def test_cart_checkout(client):
    assert client.get("/cart/checkout").status_code == 400
    client.post("/cart", json={"product_id": "2"})
    url = client.get("/cart/checkout").json()["url"]
    assert url.startswith(f"https://m.me/{CHECKOUT_HANDLE}?text=")
    text = parse_qs(urlparse(url).query)["text"][0]
    assert "- Leather Weekend Bag ($120)" in text
    assert "Total: $120" in text


def test_buy_now_link(client):
    url = client.get("/products/3/buy").json()["url"]
    text = parse_qs(urlparse(url).query)["text"][0]
    assert "Name: Smart Watch S2" in text
    assert "Price: $89.5" in text


def test_routes_run_on_the_event_loop():
    import inspect
    import main

    for route in (main.sign_in, main.sign_out, main.update_product, main.delete_product, main.add_review,
                  main.add_to_cart, main.remove_from_cart, main.update_settings, main.get_catalog):
        assert inspect.iscoroutinefunction(route), route.__name__


def test_admin_token_stops_working_after_sign_out(client, admin_headers):
    client.post("/auth/signout")
    assert client.post("/products", json={"name": "Desk"}, headers=admin_headers).status_code == 401
    assert client.delete("/products/1", headers=admin_headers).status_code == 401
    assert client.get("/products/1").status_code == 200


def test_admin_token_stops_working_when_someone_else_signs_in(client, admin_headers):
    sign_in_shopper(client)
    assert client.patch("/products/1", json={"price": 1}, headers=admin_headers).status_code == 401


def test_patch_with_empty_images_keeps_pictures(client, admin_headers):
    before = client.get("/products/1").json()["images"]
    res = client.patch("/products/1", json={"images": []}, headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["images"] == before
