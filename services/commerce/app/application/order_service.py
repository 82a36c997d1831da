from typing import List, Optional, Union
from sqlalchemy.orm import Session
from shared.core import get_logger
from app.core_settings import get_settings
from app.domain.errors import Forbidden, InsufficientStock, NotFound, ValidationError
from app.domain.models import LOCKED_STATUSES, Order, OrderStatus, Product, can_transition
from app.infrastructure.unit_of_work import UnitOfWork
from .commands import CreateOrderCommand, DeleteOrderCommand, UpdateOrderCommand, UpdateOrderStatusCommand
from .inventory_service import InventoryService
from .schemas import OrderRead

logger = get_logger(__name__)

class OrderService:
    """Order workflow: every command runs as one unit of work and returns a snapshot.

    Stock is reserved from the product when an order is placed or its quantity
    grows, and released when the quantity shrinks, the order is canceled, or
    (with ``release_on_delete``) the order is deleted while still holding stock.
    """

    def __init__(self, db: Session, release_on_delete: Optional[bool] = None):
        self.db = db
        if release_on_delete is None:
            release_on_delete = get_settings().RELEASE_STOCK_ON_DELETE
        self.release_on_delete = release_on_delete

    def list(self, tenant_id: int) -> List[OrderRead]:
        with UnitOfWork(self.db) as uow:
            return [OrderRead.from_order(o) for o in uow.orders.list(tenant_id)]

    def get(self, tenant_id: int, order_id: int) -> OrderRead:
        with UnitOfWork(self.db) as uow:
            return OrderRead.from_order(self._load_order(uow, tenant_id, order_id))

    def create(self, command: CreateOrderCommand) -> OrderRead:
        self._validate_quantity(command.quantity)
        with UnitOfWork(self.db) as uow:
            product = uow.products.get(command.tenant_id, command.product_id, for_update=True)
            customer = uow.customers.get(command.tenant_id, command.customer_id)
            errors = {}
            if product is None:
                errors["product_id"] = ["The selected product_id is invalid."]
            if customer is None:
                errors["customer_id"] = ["The selected customer_id is invalid."]
            if errors:
                raise NotFound("Product or customer not found.", errors)

            if product.stock_quantity < command.quantity:
                raise InsufficientStock(command.quantity, product.stock_quantity, product.id)

            total_price = product.price * command.quantity
            InventoryService(uow.products).reserve(product, command.quantity)
            order = uow.orders.add(Order(
                tenant_id=command.tenant_id,
                product_id=product.id,
                customer_id=customer.id,
                quantity=command.quantity,
                total_price=total_price,
                status=OrderStatus.PENDING.value,
            ))
            snapshot = self._snapshot(order)
            uow.commit()

        logger.info(
            "Order created",
            extra={'extra_fields': {
                'tenant_id': command.tenant_id,
                'order_id': snapshot.id,
                'product_id': command.product_id,
                'quantity': command.quantity,
                'total_price': snapshot.total_price,
            }},
        )
        return snapshot

    def update(self, command: UpdateOrderCommand) -> OrderRead:
        with UnitOfWork(self.db) as uow:
            order = self._load_order(uow, command.tenant_id, command.order_id, for_update=True)
            current = OrderStatus(order.status)
            if current in LOCKED_STATUSES:
                raise Forbidden("Order cannot be updated once it has been shipped or delivered.")

            if command.quantity is not None:
                self._validate_quantity(command.quantity)
            new_status = self._parse_status(command.status) if command.status is not None else None
            if new_status is not None:
                self._check_transition(current, new_status)
            if command.quantity is not None and current == OrderStatus.CANCELED:
                raise Forbidden("Canceled orders cannot be modified.")

            product = self._load_order_product(uow, order)
            ledger = InventoryService(uow.products)
            old_quantity = order.quantity

            if command.quantity is not None:
                diff = command.quantity - order.quantity
                if diff > 0 and product.stock_quantity < diff:
                    raise InsufficientStock(diff, product.stock_quantity, product.id)
                ledger.adjust(product, -diff)
                order.quantity = command.quantity
                order.total_price = product.price * command.quantity

            if new_status is not None:
                self._apply_status(order, product, new_status, ledger)

            snapshot = self._snapshot(order)
            uow.commit()

        logger.info(
            "Order updated",
            extra={'extra_fields': {
                'tenant_id': command.tenant_id,
                'order_id': command.order_id,
                'old_quantity': old_quantity,
                'quantity': snapshot.quantity,
                'status': snapshot.status.value,
            }},
        )
        return snapshot

    def update_status(self, command: UpdateOrderStatusCommand) -> OrderRead:
        with UnitOfWork(self.db) as uow:
            order = self._load_order(uow, command.tenant_id, command.order_id, for_update=True)
            current = OrderStatus(order.status)
            new_status = self._parse_status(command.status)
            self._check_transition(current, new_status)
            product = None
            if new_status == OrderStatus.CANCELED and order.holds_stock:
                product = self._load_order_product(uow, order)
            self._apply_status(order, product, new_status, InventoryService(uow.products))
            snapshot = self._snapshot(order)
            uow.commit()

        logger.info(
            "Order status updated",
            extra={'extra_fields': {
                'tenant_id': command.tenant_id,
                'order_id': command.order_id,
                'from': current.value,
                'to': new_status.value,
            }},
        )
        return snapshot

    def delete(self, command: DeleteOrderCommand) -> None:
        with UnitOfWork(self.db) as uow:
            order = self._load_order(uow, command.tenant_id, command.order_id, for_update=True)
            released = 0
            if self.release_on_delete and order.holds_stock:
                product = self._load_order_product(uow, order)
                InventoryService(uow.products).release(product, order.quantity)
                released = order.quantity
            uow.orders.delete(order)
            uow.commit()

        logger.info(
            "Order deleted",
            extra={'extra_fields': {
                'tenant_id': command.tenant_id,
                'order_id': command.order_id,
                'released': released,
            }},
        )

    def _load_order(self, uow: UnitOfWork, tenant_id: int, order_id: int, for_update: bool = False) -> Order:
        order = uow.orders.get(tenant_id, order_id, for_update=for_update)
        if order is None:
            raise NotFound("Order not found.")
        return order

    def _load_order_product(self, uow: UnitOfWork, order: Order) -> Product:
        product = uow.products.get(order.tenant_id, order.product_id, for_update=True)
        if product is None:
            raise NotFound("Product associated with this order not found.")
        return product

    def _apply_status(self, order: Order, product: Optional[Product], status: OrderStatus,
                      ledger: InventoryService) -> None:
        # Canceling gives the reservation back; shipping keeps it as consumed stock
        if status == OrderStatus.CANCELED and order.holds_stock:
            ledger.release(product, order.quantity)
        order.status = status.value

    def _snapshot(self, order: Order) -> OrderRead:
        self.db.flush()
        self.db.refresh(order)
        return OrderRead.from_order(order)

    @staticmethod
    def _validate_quantity(quantity) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError("Validation Error", {"quantity": ["The quantity must be at least 1."]})

    @staticmethod
    def _parse_status(status: Union[str, OrderStatus]) -> OrderStatus:
        try:
            return OrderStatus(status)
        except ValueError:
            raise ValidationError(
                "Validation Error",
                {"status": [f"The selected status is invalid. Allowed: {', '.join(OrderStatus.values())}."]},
            )

    @staticmethod
    def _check_transition(current: OrderStatus, new: OrderStatus) -> None:
        if not can_transition(current, new):
            raise Forbidden(f"Order status cannot change from {current.value} to {new.value}.")
