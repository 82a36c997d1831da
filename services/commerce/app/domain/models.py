from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy import String, ForeignKey, Numeric, Integer, Text, DateTime, CheckConstraint, Index, func
from decimal import Decimal
from enum import Enum
from typing import Optional
import datetime

class Base(DeclarativeBase):
    pass

class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSED = "processed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELED = "canceled"

    @classmethod
    def values(cls) -> list[str]:
        return [s.value for s in cls]

# Orders in these states can no longer be edited through a full update
LOCKED_STATUSES = {OrderStatus.SHIPPED, OrderStatus.DELIVERED}

# Orders whose quantity is still reserved against the product and not yet shipped
RESERVING_STATUSES = {OrderStatus.PENDING, OrderStatus.PROCESSED}

ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {
        OrderStatus.PENDING, OrderStatus.PROCESSED, OrderStatus.SHIPPED,
        OrderStatus.DELIVERED, OrderStatus.CANCELED,
    },
    OrderStatus.PROCESSED: {
        OrderStatus.PENDING, OrderStatus.PROCESSED, OrderStatus.SHIPPED,
        OrderStatus.DELIVERED, OrderStatus.CANCELED,
    },
    OrderStatus.SHIPPED: {OrderStatus.SHIPPED, OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: {OrderStatus.DELIVERED},
    OrderStatus.CANCELED: {OrderStatus.CANCELED},
}

def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    return new in ALLOWED_TRANSITIONS[current]

class TimestampMixin:
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

class Tenant(TimestampMixin, Base):
    __tablename__ = "tenants"
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))

    def __repr__(self) -> str:
        return f"<Tenant id={self.id} name={self.name}>"

class User(TimestampMixin, Base):
    __tablename__ = "users"
    id: Mapped[int] = mapped_column(primary_key=True)
    tenant_id: Mapped[int] = mapped_column(ForeignKey("tenants.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    # Bumped on logout; tokens carrying an older version are rejected
    token_version: Mapped[int] = mapped_column(Integer, default=0)
    tenant: Mapped[Tenant] = relationship("Tenant")

class Customer(TimestampMixin, Base):
    __tablename__ = "customers"
    id: Mapped[int] = mapped_column(primary_key=True)
    tenant_id: Mapped[int] = mapped_column(ForeignKey("tenants.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(255))
    # Unique across all tenants, not per tenant
    email: Mapped[str] = mapped_column(String(255), unique=True)
    phone: Mapped[str] = mapped_column(String(20))

class Product(TimestampMixin, Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )
    id: Mapped[int] = mapped_column(primary_key=True)
    tenant_id: Mapped[int] = mapped_column(ForeignKey("tenants.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    stock_quantity: Mapped[int] = mapped_column(Integer, default=0)

class Order(TimestampMixin, Base):
    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_orders_quantity_positive"),
        Index("idx_orders_tenant_product", "tenant_id", "product_id"),
    )
    id: Mapped[int] = mapped_column(primary_key=True)
    tenant_id: Mapped[int] = mapped_column(ForeignKey("tenants.id", ondelete="CASCADE"), index=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="RESTRICT"))
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id", ondelete="RESTRICT"))
    quantity: Mapped[int] = mapped_column(Integer)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    status: Mapped[str] = mapped_column(String(30), default=OrderStatus.PENDING.value)
    product: Mapped[Product] = relationship("Product")
    customer: Mapped[Customer] = relationship("Customer")
    tenant: Mapped[Tenant] = relationship("Tenant")

    @property
    def holds_stock(self) -> bool:
        return OrderStatus(self.status) in RESERVING_STATUSES
