import json

from fastapi.testclient import TestClient

import crud
import main


def test_categories_are_ordered(client):
    r = client.get("/api/categories")
    assert r.status_code == 200
    orders = [c["order"] for c in r.json()]
    assert orders == sorted(orders)
    assert r.json()[0]["id"] == "promocao"


def test_products_filter_by_category(client):
    r = client.get("/api/products", params={"categoryId": "sorvetes"})
    assert r.status_code == 200
    assert {p["categoryId"] for p in r.json()} == {"sorvetes"}
    assert "basePrice" in r.json()[0]


def test_products_search(client):
    r = client.get("/api/products", params={"q": "MORANGO"})
    assert [p["id"] for p in r.json()] == ["milkshake-morango"]


def test_product_not_found(client):
    assert client.get("/api/products/nada").status_code == 404


def test_price_endpoint(client):
    r = client.post("/api/products/acai-tradicional/price",
                    json={"size": "500ml", "selectedToppings": ["Nutella", "Kiwi"], "quantity": 3})
    assert r.status_code == 200
    assert r.json() == {"unitPrice": 24.0, "totalPrice": 72.0, "totalDisplay": "R$ 72,00", "errors": []}


def test_add_to_cart_reprices_on_server(client):
    r = client.post("/api/cart", json={
        "productId": "acai-tradicional",
        "productName": "qualquer",
        "size": "300ml",
        "price": 1.0,
        "quantity": 2,
        "selectedToppings": ["Granola", "Nutella"],
    })
    assert r.status_code == 201
    body = r.json()
    assert body["price"] == 16.0
    assert body["productName"] == "Açaí Tradicional"
    assert body["quantity"] == 2
    assert body["id"]


def test_add_to_cart_requires_size(client):
    r = client.post("/api/cart", json={"productId": "acai-tradicional", "quantity": 1})
    assert r.status_code == 400
    assert client.get("/api/cart").json() == []


def test_add_to_cart_clamps_quantity(client):
    r = client.post("/api/cart", json={"productId": "sorvete-casquinha", "quantity": 0})
    assert r.status_code == 201
    assert r.json()["quantity"] == 1


def test_add_unknown_product_uses_client_snapshot(client):
    r = client.post("/api/cart", json={"productId": "x", "productName": "Especial", "price": 9.5, "quantity": 1})
    assert r.status_code == 201
    assert r.json()["price"] == 9.5
    r = client.post("/api/cart", json={"productId": "x", "quantity": 1})
    assert r.status_code == 400


def test_cart_snapshot_survives_price_change(client):
    item = client.post("/api/cart", json={"productId": "sorvete-casquinha"}).json()
    client.put("/api/admin/products/sorvete-casquinha", json={"basePrice": 99.0})
    assert client.get("/api/cart").json()[0]["price"] == item["price"] == 6.0


def test_cart_remove_and_clear(client):
    a = client.post("/api/cart", json={"productId": "sorvete-casquinha"}).json()
    client.post("/api/cart", json={"productId": "sorvete-casquinha", "quantity": 2})
    assert client.get("/api/cart/summary").json()["itemCount"] == 2

    assert client.delete(f"/api/cart/{a['id']}").status_code == 204
    assert len(client.get("/api/cart").json()) == 1

    assert client.delete("/api/cart").status_code == 204
    assert client.get("/api/cart/summary").json() == {
        "subtotal": 0.0, "deliveryFee": 0.0, "total": 0.0, "itemCount": 0, "totalDisplay": "R$ 0,00",
    }


def test_cart_summary(client):
    client.post("/api/cart", json={"productId": "acai-tradicional", "size": "500ml"})
    client.post("/api/cart", json={"productId": "acai-tradicional", "size": "300ml", "quantity": 2})
    assert client.get("/api/cart/summary").json() == {
        "subtotal": 48.0, "deliveryFee": 5.0, "total": 53.0, "itemCount": 2, "totalDisplay": "R$ 53,00",
    }


CHECKOUT = {
    "name": "João Silva",
    "rua": "Rua Principal",
    "numero": "123",
    "cep": "78000-000",
    "paymentMethod": "dinheiro",
    "needsChange": True,
    "changeAmount": 100.0,
    "latitude": -15.6,
    "longitude": -56.1,
}


def test_checkout_empty_cart(client):
    assert client.post("/api/checkout", json=CHECKOUT).status_code == 400


def test_checkout_invalid_form(client):
    client.post("/api/cart", json={"productId": "sorvete-casquinha"})
    r = client.post("/api/checkout", json=dict(CHECKOUT, cep="123", paymentMethod="boleto"))
    assert r.status_code == 422


def test_checkout_message(client):
    client.post("/api/cart", json={"productId": "sorvete-casquinha", "quantity": 2})
    r = client.post("/api/checkout", json=CHECKOUT)
    assert r.status_code == 200
    body = r.json()
    assert body["summary"]["total"] == 17.0
    assert body["changeDue"] == 83.0
    assert "2x Casquinha - R$ 12.00" in body["message"]
    assert "Cliente: João Silva" in body["message"]
    assert "https://www.google.com/maps?q=-15.6,-56.1" in body["message"]
    assert body["url"].startswith("https://wa.me/")


def test_admin_crud(client):
    r = client.post("/api/admin/products", json={
        "name": "Picolé",
        "categoryId": "sorvetes",
        "basePrice": 4.5,
        "sizes": "",
        "toppings": "Granola, Banana ,",
    })
    assert r.status_code == 201
    novo = r.json()
    assert novo["toppings"] == ["Granola", "Banana"]
    assert novo["sizes"] is None

    r = client.put(f"/api/admin/products/{novo['id']}", json={"basePrice": 5.0})
    assert r.json()["basePrice"] == 5.0
    assert r.json()["name"] == "Picolé"

    assert client.delete(f"/api/admin/products/{novo['id']}").status_code == 204
    assert client.get(f"/api/products/{novo['id']}").status_code == 404
    assert client.put("/api/admin/products/nada", json={"name": "x"}).status_code == 404


def test_admin_create_with_topping_groups(client):
    groups = [{"id": "g", "title": "G", "description": "", "maxSelections": 1, "required": False,
               "items": [{"name": "Nutella", "price": 5.0}]}]
    novo = client.post("/api/admin/products", json={
        "name": "Copo", "categoryId": "acai", "basePrice": 10.0, "toppingGroups": json.dumps(groups),
    }).json()
    r = client.post(f"/api/products/{novo['id']}/price", json={"selectedToppings": ["Nutella"]})
    assert r.json()["unitPrice"] == 15.0


def test_admin_login(client, monkeypatch):
    monkeypatch.setattr(main, "ADMIN_PASSWORD", "segredo")
    assert client.post("/api/admin/login", json={"password": "errada"}).status_code == 401
    r = client.post("/api/admin/login", json={"password": "segredo"})
    assert r.status_code == 200
    assert main._verify_admin_token(r.json()["token"])


def test_admin_enforced_requires_token(client, monkeypatch):
    monkeypatch.setattr(main, "ADMIN_ENFORCE", True)
    monkeypatch.setattr(main, "ADMIN_PASSWORD", "segredo")
    payload = {"name": "Picolé", "categoryId": "sorvetes", "basePrice": 4.5}
    client.cookies.clear()
    assert client.post("/api/admin/products", json=payload).status_code == 401

    token = main._create_admin_token("admin")
    r = client.post("/api/admin/products", json=payload, headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 201


def test_admin_token_rejects_tampering(monkeypatch):
    monkeypatch.setattr(main, "ADMIN_PASSWORD", "segredo")
    token = main._create_admin_token("admin")
    user, ts, sig = token.split(":")
    assert not main._verify_admin_token(f"outro:{ts}:{sig}")
    assert not main._verify_admin_token("lixo")
    assert not main._verify_admin_token(f"{user}:{int(ts) - 200000}:{sig}")


def test_admin_update_rejects_null_required_fields(client):
    r = client.put("/api/admin/products/sorvete-casquinha", json={"basePrice": None, "name": None})
    assert r.status_code == 422

    produto = client.get("/api/products/sorvete-casquinha").json()
    assert produto["name"] == "Casquinha"
    assert produto["basePrice"] == 6.0
    assert client.post("/api/cart", json={"productId": "sorvete-casquinha"}).status_code == 201
    assert client.get("/api/products", params={"q": "x"}).status_code == 200


def test_admin_update_can_clear_optional_fields(client):
    r = client.put("/api/admin/products/sorvete-pote", json={"sizes": None, "description": None})
    assert r.status_code == 200
    assert r.json()["sizes"] is None
    assert r.json()["id"] == "sorvete-pote"


def test_unexpected_error_returns_json_500(client, monkeypatch):
    def quebrado(db):
        raise RuntimeError("store indisponível")

    monkeypatch.setattr(crud, "get_carrinho", quebrado)
    r = TestClient(main.app, raise_server_exceptions=False).get("/api/cart/summary")
    assert r.status_code == 500
    assert r.headers["content-type"].startswith("application/json")
    assert r.json() == {"detail": "Internal server error"}


def test_size_not_stored_for_product_without_sizes(client):
    r = client.post("/api/cart", json={"productId": "sorvete-casquinha", "size": "500ml"})
    assert r.status_code == 201
    assert r.json()["size"] is None
    assert r.json()["price"] == 6.0


def test_unknown_size_not_stored(client):
    r = client.post("/api/cart", json={"productId": "milkshake-morango", "size": "200ml"})
    assert r.status_code == 201
    assert r.json()["size"] is None
    assert r.json()["price"] == 18.0


def test_add_to_cart_requires_required_group(client):
    r = client.post("/api/cart", json={"productId": "barca-acai", "selectedToppings": ["Nutella"]})
    assert r.status_code == 400
    assert any("Frutas" in e for e in r.json()["detail"]["errors"])

    r = client.post("/api/cart", json={"productId": "barca-acai", "selectedToppings": ["Kiwi", "Nutella"]})
    assert r.status_code == 201
    assert r.json()["price"] == 53.0


def test_store_info(client, monkeypatch):
    monkeypatch.setattr(main, "STORE_NAME", "Horizonte - Sorvete e Açaí")
    r = client.get("/api/store")
    assert r.status_code == 200
    body = r.json()
    assert body["name"] == "Horizonte - Sorvete e Açaí"
    assert body["deliveryFee"] == 5.0
    assert body["whatsappLink"].startswith("https://wa.me/") or body["whatsappLink"] == "#"
    assert set(body) == {"name", "whatsappLink", "phoneDisplay", "deliveryFee"}
