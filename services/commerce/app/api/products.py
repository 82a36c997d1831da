from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.api.deps import current_identity
from app.api.responses import send_response
from app.application.identity_service import Identity
from app.application.product_service import ProductService
from app.application.schemas import ProductCreate
from app.infrastructure.db import get_db

router = APIRouter(prefix="/products", tags=["products"])

@router.get("")
def list_products(identity: Identity = Depends(current_identity), db: Session = Depends(get_db)):
    return send_response(ProductService(db).list(identity.tenant_id), "Products retrieved successfully.")

@router.post("", status_code=201)
def create_product(payload: ProductCreate, identity: Identity = Depends(current_identity),
                   db: Session = Depends(get_db)):
    product = ProductService(db).create(identity.tenant_id, payload)
    return send_response(product, "Product created successfully.", 201)

@router.get("/{product_id}")
def get_product(product_id: int, identity: Identity = Depends(current_identity), db: Session = Depends(get_db)):
    return send_response(ProductService(db).get(identity.tenant_id, product_id), "Product retrieved successfully.")

@router.put("/{product_id}")
def update_product(product_id: int, payload: ProductCreate, identity: Identity = Depends(current_identity),
                   db: Session = Depends(get_db)):
    product = ProductService(db).update(identity.tenant_id, product_id, payload)
    return send_response(product, "Product updated successfully.")

@router.delete("/{product_id}")
def delete_product(product_id: int, identity: Identity = Depends(current_identity), db: Session = Depends(get_db)):
    ProductService(db).delete(identity.tenant_id, product_id)
    return send_response([], "Product deleted successfully.")
