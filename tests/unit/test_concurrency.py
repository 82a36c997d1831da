import threading

import pytest

from app.application.commands import CreateOrderCommand
from app.application.order_service import OrderService
from app.domain.errors import InsufficientStock
from app.domain.models import Base, Order, Product
from app.infrastructure.db import build_engine, build_session_factory
from conftest import seed_customer, seed_product, seed_tenant

@pytest.fixture
def file_sessions(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'commerce.db'}")
    Base.metadata.create_all(engine)
    yield build_session_factory(engine)
    engine.dispose()

def test_concurrent_orders_cannot_oversell_last_unit(file_sessions):
    setup = file_sessions()
    tenant = seed_tenant(setup)
    product = seed_product(setup, tenant, stock=1)
    customer = seed_customer(setup, tenant)
    command = CreateOrderCommand(tenant.id, product.id, customer.id, 1)
    setup.close()

    barrier = threading.Barrier(2)
    results = []
    lock = threading.Lock()

    def place_order():
        session = file_sessions()
        try:
            barrier.wait()
            OrderService(session).create(command)
            outcome = "created"
        except InsufficientStock:
            outcome = "refused"
        finally:
            session.close()
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=place_order) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert sorted(results) == ["created", "refused"]

    check = file_sessions()
    assert check.get(Product, product.id).stock_quantity == 0
    assert check.query(Order).count() == 1
    check.close()
