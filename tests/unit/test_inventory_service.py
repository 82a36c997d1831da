import pytest

from app.application.inventory_service import InventoryService
from app.domain.errors import InsufficientStock, ValidationError
from app.infrastructure.repositories import SqlProductRepository
from conftest import seed_product, seed_tenant

@pytest.fixture
def product(db):
    return seed_product(db, seed_tenant(db), stock=10)

@pytest.fixture
def ledger(db):
    return InventoryService(SqlProductRepository(db))

def test_reserve_decrements_stock(db, ledger, product):
    ledger.reserve(product, 4)
    db.commit()
    assert product.stock_quantity == 6

def test_reserve_whole_stock(db, ledger, product):
    ledger.reserve(product, 10)
    assert product.stock_quantity == 0

def test_reserve_more_than_stock_fails_and_keeps_stock(db, ledger, product):
    with pytest.raises(InsufficientStock) as exc:
        ledger.reserve(product, 11)
    db.rollback()
    db.refresh(product)
    assert product.stock_quantity == 10
    assert exc.value.requested == 11
    assert exc.value.available == 10
    assert exc.value.status_code == 422

@pytest.mark.parametrize("amount", [0, -3])
def test_reserve_requires_positive_amount(ledger, product, amount):
    with pytest.raises(ValidationError):
        ledger.reserve(product, amount)
    assert product.stock_quantity == 10

def test_release_increments_stock(ledger, product):
    ledger.release(product, 5)
    assert product.stock_quantity == 15

def test_release_zero_is_a_no_op(ledger, product):
    ledger.release(product, 0)
    assert product.stock_quantity == 10

def test_release_rejects_negative_amount(ledger, product):
    with pytest.raises(ValidationError):
        ledger.release(product, -1)

def test_adjust_negative_delta_reserves(ledger, product):
    ledger.adjust(product, -3)
    assert product.stock_quantity == 7

def test_adjust_positive_delta_releases(ledger, product):
    ledger.adjust(product, 2)
    assert product.stock_quantity == 12

def test_adjust_zero_leaves_stock(ledger, product):
    ledger.adjust(product, 0)
    assert product.stock_quantity == 10

def test_adjust_rejects_reservation_beyond_stock(ledger, product):
    with pytest.raises(InsufficientStock):
        ledger.adjust(product, -11)
    assert product.stock_quantity == 10

def test_guarded_decrement_reports_refusal(db, product):
    repo = SqlProductRepository(db)
    assert repo.decrement_stock(product, 11) is False
    assert product.stock_quantity == 10
    assert repo.decrement_stock(product, 10) is True
    assert product.stock_quantity == 0
