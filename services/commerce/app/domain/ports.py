"""Persistence ports used by the application services.

Every lookup takes the caller's tenant id; a row owned by another tenant is
indistinguishable from a missing one.
"""

from typing import Optional, Protocol, Sequence

from app.domain.models import Customer, Order, Product, Tenant, User

class TenantRepository(Protocol):
    def get(self, tenant_id: int) -> Optional[Tenant]: ...
    def add(self, tenant: Tenant) -> Tenant: ...

class UserRepository(Protocol):
    def get(self, user_id: int) -> Optional[User]: ...
    def get_by_email(self, email: str) -> Optional[User]: ...
    def add(self, user: User) -> User: ...

class CustomerRepository(Protocol):
    def get(self, tenant_id: int, customer_id: int) -> Optional[Customer]: ...
    def list(self, tenant_id: int) -> Sequence[Customer]: ...
    def email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool: ...
    def add(self, customer: Customer) -> Customer: ...
    def delete(self, customer: Customer) -> None: ...

class ProductRepository(Protocol):
    def get(self, tenant_id: int, product_id: int, for_update: bool = False) -> Optional[Product]: ...
    def list(self, tenant_id: int) -> Sequence[Product]: ...
    def add(self, product: Product) -> Product: ...
    def delete(self, product: Product) -> None: ...
    def decrement_stock(self, product: Product, amount: int) -> bool:
        """Take ``amount`` units only if that many are in stock; False otherwise."""
        ...
    def increment_stock(self, product: Product, amount: int) -> None: ...

class OrderRepository(Protocol):
    def get(self, tenant_id: int, order_id: int, for_update: bool = False) -> Optional[Order]: ...
    def list(self, tenant_id: int) -> Sequence[Order]: ...
    def add(self, order: Order) -> Order: ...
    def delete(self, order: Order) -> None: ...
    def exists_for_product(self, tenant_id: int, product_id: int) -> bool: ...
    def exists_for_customer(self, tenant_id: int, customer_id: int) -> bool: ...
