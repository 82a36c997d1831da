from sqlalchemy.orm import Session
from shared.core import get_logger
from app.domain.errors import Forbidden, NotFound, ValidationError
from app.domain.models import Customer
from app.infrastructure.unit_of_work import UnitOfWork
from .schemas import CustomerCreate, CustomerRead

logger = get_logger(__name__)

class CustomerService:
    def __init__(self, db: Session):
        self.db = db

    def list(self, tenant_id: int):
        with UnitOfWork(self.db) as uow:
            return [CustomerRead.model_validate(c) for c in uow.customers.list(tenant_id)]

    def get(self, tenant_id: int, customer_id: int) -> CustomerRead:
        with UnitOfWork(self.db) as uow:
            return CustomerRead.model_validate(self._load(uow, tenant_id, customer_id))

    def create(self, tenant_id: int, data: CustomerCreate) -> CustomerRead:
        with UnitOfWork(self.db) as uow:
            self._ensure_email_free(uow, data.email)
            customer = uow.customers.add(Customer(
                tenant_id=tenant_id,
                name=data.name,
                email=data.email,
                phone=data.phone,
            ))
            self.db.refresh(customer)
            snapshot = CustomerRead.model_validate(customer)
            uow.commit()
        logger.info("Customer created", extra={'extra_fields': {'tenant_id': tenant_id, 'customer_id': snapshot.id}})
        return snapshot

    def update(self, tenant_id: int, customer_id: int, data: CustomerCreate) -> CustomerRead:
        with UnitOfWork(self.db) as uow:
            customer = self._load(uow, tenant_id, customer_id)
            self._ensure_email_free(uow, data.email, exclude_id=customer.id)
            customer.name = data.name
            customer.email = data.email
            customer.phone = data.phone
            self.db.flush()
            self.db.refresh(customer)
            snapshot = CustomerRead.model_validate(customer)
            uow.commit()
        logger.info("Customer updated", extra={'extra_fields': {'tenant_id': tenant_id, 'customer_id': customer_id}})
        return snapshot

    def delete(self, tenant_id: int, customer_id: int) -> None:
        with UnitOfWork(self.db) as uow:
            customer = self._load(uow, tenant_id, customer_id)
            if uow.orders.exists_for_customer(tenant_id, customer_id):
                raise Forbidden("Customer is still referenced by orders.")
            uow.customers.delete(customer)
            uow.commit()
        logger.info("Customer deleted", extra={'extra_fields': {'tenant_id': tenant_id, 'customer_id': customer_id}})

    def _load(self, uow: UnitOfWork, tenant_id: int, customer_id: int) -> Customer:
        customer = uow.customers.get(tenant_id, customer_id)
        if customer is None:
            raise NotFound("Customer not found.")
        return customer

    @staticmethod
    def _ensure_email_free(uow: UnitOfWork, email: str, exclude_id=None) -> None:
        if uow.customers.email_taken(email, exclude_id=exclude_id):
            raise ValidationError("Validation Error", {"email": ["The email has already been taken."]})
