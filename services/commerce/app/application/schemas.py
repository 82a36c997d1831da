from pydantic import BaseModel, Field, model_validator
from datetime import datetime
from decimal import Decimal
from typing import Optional
from app.domain.models import Order, OrderStatus

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

# Identity

class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(max_length=255, pattern=EMAIL_PATTERN)
    tenant_name: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=6, max_length=72)
    password_confirmation: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.password_confirmation:
            raise ValueError("The password confirmation does not match.")
        return self

class LoginRequest(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=1)

class TokenRead(BaseModel):
    token: str
    name: str

# Catalog

class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    stock_quantity: int = Field(ge=0)

class ProductRead(BaseModel):
    id: int
    tenant_id: int
    name: str
    description: Optional[str] = None
    price: float
    stock_quantity: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        frozen = True

class CustomerCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(max_length=255, pattern=EMAIL_PATTERN)
    phone: str = Field(min_length=1, max_length=20)

class CustomerRead(BaseModel):
    id: int
    tenant_id: int
    name: str
    email: str
    phone: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        frozen = True

# Orders

class OrderCreate(BaseModel):
    product_id: int
    customer_id: int
    quantity: int = Field(ge=1)

class OrderUpdate(BaseModel):
    # Range and enum checks run in the workflow, after the order lookup and lock check
    quantity: Optional[int] = None
    status: Optional[str] = None

class OrderStatusUpdate(BaseModel):
    status: str

class OrderProductRead(BaseModel):
    id: int
    product_name: str
    description: Optional[str] = None
    price: float
    # Current stock of the product, not the ordered quantity
    quantity: int

    class Config:
        frozen = True

class OrderCustomerRead(BaseModel):
    id: int
    customer_name: str
    email: str
    phone: str

    class Config:
        frozen = True

class OrderTenantRead(BaseModel):
    id: int
    tenant_name: str

    class Config:
        frozen = True

class OrderRead(BaseModel):
    """Immutable view of an order as it stood when its command finished."""
    id: int
    product_id: int
    customer_id: int
    tenant_id: int
    quantity: int
    total_price: float
    status: OrderStatus
    product: Optional[OrderProductRead] = None
    customer: Optional[OrderCustomerRead] = None
    tenant: Optional[OrderTenantRead] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        frozen = True

    @classmethod
    def from_order(cls, order: Order) -> "OrderRead":
        product, customer, tenant = order.product, order.customer, order.tenant
        return cls(
            id=order.id,
            product_id=order.product_id,
            customer_id=order.customer_id,
            tenant_id=order.tenant_id,
            quantity=order.quantity,
            total_price=float(order.total_price),
            status=OrderStatus(order.status),
            product=OrderProductRead(
                id=product.id,
                product_name=product.name,
                description=product.description,
                price=float(product.price),
                quantity=product.stock_quantity,
            ) if product else None,
            customer=OrderCustomerRead(
                id=customer.id,
                customer_name=customer.name,
                email=customer.email,
                phone=customer.phone,
            ) if customer else None,
            tenant=OrderTenantRead(id=tenant.id, tenant_name=tenant.name) if tenant else None,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )

class OrderStatusRead(BaseModel):
    id: int
    status: OrderStatus
