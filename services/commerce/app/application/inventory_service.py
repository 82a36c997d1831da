"""Inventory ledger: the only writer of ``Product.stock_quantity`` for order flows.

The ledger does not commit. It runs inside the caller's unit of work so a
stock movement and the order mutation it backs land together or not at all.
"""

from shared.core import get_logger
from app.domain.errors import InsufficientStock, ValidationError
from app.domain.models import Product
from app.domain.ports import ProductRepository

logger = get_logger(__name__)

class InventoryService:
    def __init__(self, products: ProductRepository):
        self.products = products

    def reserve(self, product: Product, amount: int) -> Product:
        """Take ``amount`` units out of stock to back an order."""
        if amount <= 0:
            raise ValidationError("Validation Error", {"quantity": ["The quantity must be at least 1."]})
        if product.stock_quantity < amount or not self.products.decrement_stock(product, amount):
            logger.warning(
                "Stock reservation refused",
                extra={'extra_fields': {
                    'product_id': product.id,
                    'requested': amount,
                    'available': product.stock_quantity,
                }},
            )
            raise InsufficientStock(amount, product.stock_quantity, product.id)
        logger.info(
            "Stock reserved",
            extra={'extra_fields': {'product_id': product.id, 'amount': amount, 'stock': product.stock_quantity}},
        )
        return product

    def release(self, product: Product, amount: int) -> Product:
        """Give ``amount`` previously reserved units back to stock."""
        if amount < 0:
            raise ValidationError("Validation Error", {"quantity": ["The released amount cannot be negative."]})
        if amount == 0:
            return product
        self.products.increment_stock(product, amount)
        logger.info(
            "Stock released",
            extra={'extra_fields': {'product_id': product.id, 'amount': amount, 'stock': product.stock_quantity}},
        )
        return product

    def adjust(self, product: Product, delta: int) -> Product:
        """Move stock by ``delta``: negative reserves ``-delta`` units, positive releases ``delta``."""
        if delta < 0:
            return self.reserve(product, -delta)
        return self.release(product, delta)
