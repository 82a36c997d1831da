import os

# Must be set before the app modules build their engine and settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ["RELEASE_STOCK_ON_DELETE"] = "true"

from decimal import Decimal
import itertools

import pytest
from fastapi.testclient import TestClient

from app.application.identity_service import clear_identity_cache
from app.domain.models import Base, Customer, Product, Tenant
from app.infrastructure.db import SessionLocal, engine

_counter = itertools.count(1)

@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(engine)
    clear_identity_cache()
    yield
    Base.metadata.drop_all(engine)

@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()

@pytest.fixture
def client():
    from app.main import app
    with TestClient(app) as c:
        yield c

def seed_tenant(db, name="Acme"):
    tenant = Tenant(name=name)
    db.add(tenant)
    db.commit()
    return tenant

def seed_product(db, tenant, stock=10, price="50.00", name="Widget"):
    product = Product(
        tenant_id=tenant.id,
        name=name,
        description=f"{name} description",
        price=Decimal(price),
        stock_quantity=stock,
    )
    db.add(product)
    db.commit()
    return product

def seed_customer(db, tenant, name="Jane Doe"):
    n = next(_counter)
    customer = Customer(tenant_id=tenant.id, name=name, email=f"customer{n}@example.com", phone="555-0100")
    db.add(customer)
    db.commit()
    return customer

def register(client, tenant_name="Acme"):
    """Register a fresh tenant over the API and return its auth headers."""
    n = next(_counter)
    resp = client.post("/register", json={
        "name": f"Owner {n}",
        "email": f"owner{n}@example.com",
        "tenant_name": tenant_name,
        "password": "secret123",
        "password_confirmation": "secret123",
    })
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['data']['token']}"}

def create_product(client, headers, stock=10, price=50):
    resp = client.post("/products", headers=headers, json={
        "name": "Widget",
        "description": "A widget",
        "price": price,
        "stock_quantity": stock,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]

def create_customer(client, headers):
    n = next(_counter)
    resp = client.post("/customers", headers=headers, json={
        "name": "Jane Doe",
        "email": f"jane{n}@example.com",
        "phone": "555-0100",
    })
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]
