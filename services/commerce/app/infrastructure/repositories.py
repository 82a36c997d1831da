from typing import Optional
from sqlalchemy.orm import Session, joinedload
from app.domain.models import Customer, Order, Product, Tenant, User

class SqlTenantRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, tenant_id: int) -> Optional[Tenant]:
        return self.db.get(Tenant, tenant_id)

    def add(self, tenant: Tenant) -> Tenant:
        self.db.add(tenant)
        self.db.flush()  # assign id
        return tenant

class SqlUserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def add(self, user: User) -> User:
        self.db.add(user)
        self.db.flush()
        return user

class SqlCustomerRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, tenant_id: int, customer_id: int) -> Optional[Customer]:
        return self.db.query(Customer).filter(
            Customer.id == customer_id, Customer.tenant_id == tenant_id
        ).first()

    def list(self, tenant_id: int):
        return self.db.query(Customer).filter(Customer.tenant_id == tenant_id).order_by(Customer.id).all()

    def email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        # Not tenant scoped: customer emails are unique system-wide
        query = self.db.query(Customer.id).filter(Customer.email == email)
        if exclude_id is not None:
            query = query.filter(Customer.id != exclude_id)
        return query.first() is not None

    def add(self, customer: Customer) -> Customer:
        self.db.add(customer)
        self.db.flush()
        return customer

    def delete(self, customer: Customer) -> None:
        self.db.delete(customer)
        self.db.flush()

class SqlProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, tenant_id: int, product_id: int, for_update: bool = False) -> Optional[Product]:
        query = self.db.query(Product).filter(Product.id == product_id, Product.tenant_id == tenant_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def list(self, tenant_id: int):
        return self.db.query(Product).filter(Product.tenant_id == tenant_id).order_by(Product.id).all()

    def add(self, product: Product) -> Product:
        self.db.add(product)
        self.db.flush()
        return product

    def delete(self, product: Product) -> None:
        self.db.delete(product)
        self.db.flush()

    def decrement_stock(self, product: Product, amount: int) -> bool:
        # Guarded in SQL so the check and the write cannot be split by another writer
        updated = self.db.query(Product).filter(
            Product.id == product.id,
            Product.stock_quantity >= amount,
        ).update(
            {Product.stock_quantity: Product.stock_quantity - amount},
            synchronize_session=False,
        )
        self.db.refresh(product)
        return updated == 1

    def increment_stock(self, product: Product, amount: int) -> None:
        self.db.query(Product).filter(Product.id == product.id).update(
            {Product.stock_quantity: Product.stock_quantity + amount},
            synchronize_session=False,
        )
        self.db.refresh(product)

class SqlOrderRepository:
    def __init__(self, db: Session):
        self.db = db

    def _scoped(self, tenant_id: int):
        return self.db.query(Order).options(
            joinedload(Order.product), joinedload(Order.customer), joinedload(Order.tenant)
        ).filter(Order.tenant_id == tenant_id)

    def get(self, tenant_id: int, order_id: int, for_update: bool = False) -> Optional[Order]:
        if for_update:
            # FOR UPDATE cannot be combined with the outer joins of the eager loads
            return self.db.query(Order).filter(
                Order.id == order_id, Order.tenant_id == tenant_id
            ).with_for_update().first()
        return self._scoped(tenant_id).filter(Order.id == order_id).first()

    def list(self, tenant_id: int):
        return self._scoped(tenant_id).order_by(Order.id).all()

    def add(self, order: Order) -> Order:
        self.db.add(order)
        self.db.flush()
        return order

    def delete(self, order: Order) -> None:
        self.db.delete(order)
        self.db.flush()

    def exists_for_product(self, tenant_id: int, product_id: int) -> bool:
        return self.db.query(Order.id).filter(
            Order.tenant_id == tenant_id, Order.product_id == product_id
        ).first() is not None

    def exists_for_customer(self, tenant_id: int, customer_id: int) -> bool:
        return self.db.query(Order.id).filter(
            Order.tenant_id == tenant_id, Order.customer_id == customer_id
        ).first() is not None
