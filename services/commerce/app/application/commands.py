"""Write commands accepted by the order workflow.

Each command names the tenant it acts for; services never read the tenant
from ambient request state.
"""

from dataclasses import dataclass
from typing import Optional

@dataclass(frozen=True)
class CreateOrderCommand:
    tenant_id: int
    product_id: int
    customer_id: int
    quantity: int

@dataclass(frozen=True)
class UpdateOrderCommand:
    tenant_id: int
    order_id: int
    quantity: Optional[int] = None
    status: Optional[str] = None

@dataclass(frozen=True)
class UpdateOrderStatusCommand:
    tenant_id: int
    order_id: int
    status: str

@dataclass(frozen=True)
class DeleteOrderCommand:
    tenant_id: int
    order_id: int
