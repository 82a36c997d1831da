"""
Transaction boundary for one application command

Usage:
    with UnitOfWork(db) as uow:
        product = uow.products.get(tenant_id, product_id, for_update=True)
        ...
        uow.commit()

Leaving the block without ``commit()``, or with an exception, rolls back
everything done through the session since the block was entered.
"""

from sqlalchemy.orm import Session
from shared.core import get_logger
from app.domain.ports import (
    CustomerRepository,
    OrderRepository,
    ProductRepository,
    TenantRepository,
    UserRepository,
)
from app.infrastructure.repositories import (
    SqlCustomerRepository,
    SqlOrderRepository,
    SqlProductRepository,
    SqlTenantRepository,
    SqlUserRepository,
)

logger = get_logger(__name__)

class UnitOfWork:
    def __init__(self, session: Session):
        self.session = session
        self.tenants: TenantRepository = SqlTenantRepository(session)
        self.users: UserRepository = SqlUserRepository(session)
        self.customers: CustomerRepository = SqlCustomerRepository(session)
        self.products: ProductRepository = SqlProductRepository(session)
        self.orders: OrderRepository = SqlOrderRepository(session)
        self._committed = False

    def __enter__(self) -> "UnitOfWork":
        self._committed = False
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is not None:
            self.rollback()
            logger.debug(
                "UnitOfWork rolled back due to exception",
                extra={'extra_fields': {'exception': exc_type.__name__}},
            )
        elif not self._committed:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()
        self._committed = True

    def rollback(self) -> None:
        self.session.rollback()
