from conftest import create_customer, create_product, register

def test_product_crud(client):
    headers = register(client)
    product = create_product(client, headers, stock=5, price=12.5)
    assert product["price"] == 12.5
    assert product["stock_quantity"] == 5

    resp = client.put(f"/products/{product['id']}", headers=headers, json={
        "name": "Gadget",
        "description": "Renamed",
        "price": 20,
        "stock_quantity": 8,
    })
    assert resp.status_code == 200
    assert resp.json()["message"] == "Product updated successfully."
    assert resp.json()["data"]["name"] == "Gadget"
    assert resp.json()["data"]["stock_quantity"] == 8

    listing = client.get("/products", headers=headers).json()["data"]
    assert [p["id"] for p in listing] == [product["id"]]

    resp = client.delete(f"/products/{product['id']}", headers=headers)
    assert resp.status_code == 200
    assert client.get(f"/products/{product['id']}", headers=headers).status_code == 404

def test_product_rejects_negative_stock_and_price(client):
    headers = register(client)
    resp = client.post("/products", headers=headers, json={
        "name": "Widget", "description": "x", "price": -1, "stock_quantity": -2,
    })
    assert resp.status_code == 422
    errors = resp.json()["errors"]
    assert "price" in errors
    assert "stock_quantity" in errors

def test_products_are_tenant_scoped(client):
    owner = register(client)
    product = create_product(client, owner)
    intruder = register(client, tenant_name="Globex")

    assert client.get("/products", headers=intruder).json()["data"] == []
    assert client.get(f"/products/{product['id']}", headers=intruder).status_code == 404
    assert client.delete(f"/products/{product['id']}", headers=intruder).status_code == 404

def test_referenced_product_and_customer_cannot_be_deleted(client):
    headers = register(client)
    product = create_product(client, headers)
    customer = create_customer(client, headers)
    client.post("/orders", headers=headers, json={
        "product_id": product["id"], "customer_id": customer["id"], "quantity": 1,
    })

    resp = client.delete(f"/products/{product['id']}", headers=headers)
    assert resp.status_code == 403
    resp = client.delete(f"/customers/{customer['id']}", headers=headers)
    assert resp.status_code == 403

def test_customer_crud(client):
    headers = register(client)
    customer = create_customer(client, headers)

    resp = client.put(f"/customers/{customer['id']}", headers=headers, json={
        "name": "Jane Roe", "email": customer["email"], "phone": "555-0199",
    })
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Jane Roe"

    resp = client.get(f"/customers/{customer['id']}", headers=headers)
    assert resp.json()["data"]["phone"] == "555-0199"

    assert client.delete(f"/customers/{customer['id']}", headers=headers).status_code == 200
    assert client.get("/customers", headers=headers).json()["data"] == []

def test_customer_email_is_unique_across_tenants(client):
    owner = register(client)
    customer = create_customer(client, owner)
    intruder = register(client, tenant_name="Globex")

    resp = client.post("/customers", headers=intruder, json={
        "name": "Copycat", "email": customer["email"], "phone": "555-0100",
    })
    assert resp.status_code == 422
    assert resp.json()["errors"] == {"email": ["The email has already been taken."]}

def test_customers_are_tenant_scoped(client):
    owner = register(client)
    customer = create_customer(client, owner)
    intruder = register(client, tenant_name="Globex")

    assert client.get(f"/customers/{customer['id']}", headers=intruder).status_code == 404
    assert client.get("/customers", headers=intruder).json()["data"] == []
