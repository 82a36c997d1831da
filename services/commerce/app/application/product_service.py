from sqlalchemy.orm import Session
from shared.core import get_logger
from app.domain.errors import Forbidden, NotFound
from app.domain.models import Product
from app.infrastructure.unit_of_work import UnitOfWork
from .schemas import ProductCreate, ProductRead

logger = get_logger(__name__)

class ProductService:
    def __init__(self, db: Session):
        self.db = db

    def list(self, tenant_id: int):
        with UnitOfWork(self.db) as uow:
            return [ProductRead.model_validate(p) for p in uow.products.list(tenant_id)]

    def get(self, tenant_id: int, product_id: int) -> ProductRead:
        with UnitOfWork(self.db) as uow:
            return ProductRead.model_validate(self._load(uow, tenant_id, product_id))

    def create(self, tenant_id: int, data: ProductCreate) -> ProductRead:
        with UnitOfWork(self.db) as uow:
            product = uow.products.add(Product(tenant_id=tenant_id, **data.model_dump()))
            self.db.refresh(product)
            snapshot = ProductRead.model_validate(product)
            uow.commit()
        logger.info("Product created", extra={'extra_fields': {'tenant_id': tenant_id, 'product_id': snapshot.id}})
        return snapshot

    def update(self, tenant_id: int, product_id: int, data: ProductCreate) -> ProductRead:
        with UnitOfWork(self.db) as uow:
            product = self._load(uow, tenant_id, product_id, for_update=True)
            product.name = data.name
            product.description = data.description
            product.price = data.price
            # Direct stock edits are a restock/correction, outside the order ledger
            product.stock_quantity = data.stock_quantity
            self.db.flush()
            self.db.refresh(product)
            snapshot = ProductRead.model_validate(product)
            uow.commit()
        logger.info("Product updated", extra={'extra_fields': {'tenant_id': tenant_id, 'product_id': product_id}})
        return snapshot

    def delete(self, tenant_id: int, product_id: int) -> None:
        with UnitOfWork(self.db) as uow:
            product = self._load(uow, tenant_id, product_id, for_update=True)
            if uow.orders.exists_for_product(tenant_id, product_id):
                raise Forbidden("Product is still referenced by orders.")
            uow.products.delete(product)
            uow.commit()
        logger.info("Product deleted", extra={'extra_fields': {'tenant_id': tenant_id, 'product_id': product_id}})

    def _load(self, uow: UnitOfWork, tenant_id: int, product_id: int, for_update: bool = False) -> Product:
        product = uow.products.get(tenant_id, product_id, for_update=for_update)
        if product is None:
            raise NotFound("Product not found.")
        return product
