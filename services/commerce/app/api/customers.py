from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.api.deps import current_identity
from app.api.responses import send_response
from app.application.customer_service import CustomerService
from app.application.identity_service import Identity
from app.application.schemas import CustomerCreate
from app.infrastructure.db import get_db

router = APIRouter(prefix="/customers", tags=["customers"])

@router.get("")
def list_customers(identity: Identity = Depends(current_identity), db: Session = Depends(get_db)):
    return send_response(CustomerService(db).list(identity.tenant_id), "Customers retrieved successfully.")

@router.post("", status_code=201)
def create_customer(payload: CustomerCreate, identity: Identity = Depends(current_identity),
                    db: Session = Depends(get_db)):
    customer = CustomerService(db).create(identity.tenant_id, payload)
    return send_response(customer, "Customer created successfully.", 201)

@router.get("/{customer_id}")
def get_customer(customer_id: int, identity: Identity = Depends(current_identity), db: Session = Depends(get_db)):
    return send_response(CustomerService(db).get(identity.tenant_id, customer_id), "Customer retrieved successfully.")

@router.put("/{customer_id}")
def update_customer(customer_id: int, payload: CustomerCreate, identity: Identity = Depends(current_identity),
                    db: Session = Depends(get_db)):
    customer = CustomerService(db).update(identity.tenant_id, customer_id, payload)
    return send_response(customer, "Customer updated successfully.")

@router.delete("/{customer_id}")
def delete_customer(customer_id: int, identity: Identity = Depends(current_identity),
                    db: Session = Depends(get_db)):
    CustomerService(db).delete(identity.tenant_id, customer_id)
    return send_response([], "Customer deleted successfully.")
