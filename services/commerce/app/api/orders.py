from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.api.deps import current_identity
from app.api.responses import send_response
from app.application.commands import (
    CreateOrderCommand,
    DeleteOrderCommand,
    UpdateOrderCommand,
    UpdateOrderStatusCommand,
)
from app.application.identity_service import Identity
from app.application.order_service import OrderService
from app.application.schemas import OrderCreate, OrderStatusRead, OrderStatusUpdate, OrderUpdate
from app.infrastructure.db import get_db

router = APIRouter(prefix="/orders", tags=["orders"])

@router.get("")
def list_orders(identity: Identity = Depends(current_identity), db: Session = Depends(get_db)):
    """List the orders of the caller's tenant."""
    return send_response(OrderService(db).list(identity.tenant_id), "Orders retrieved successfully.")

@router.post("", status_code=201)
def create_order(payload: OrderCreate, identity: Identity = Depends(current_identity),
                 db: Session = Depends(get_db)):
    order = OrderService(db).create(CreateOrderCommand(
        tenant_id=identity.tenant_id,
        product_id=payload.product_id,
        customer_id=payload.customer_id,
        quantity=payload.quantity,
    ))
    return send_response(order, "Order created successfully.", 201)

@router.get("/{order_id}")
def get_order(order_id: int, identity: Identity = Depends(current_identity), db: Session = Depends(get_db)):
    return send_response(OrderService(db).get(identity.tenant_id, order_id), "Order retrieved successfully.")

@router.put("/{order_id}")
def update_order(order_id: int, payload: OrderUpdate, identity: Identity = Depends(current_identity),
                 db: Session = Depends(get_db)):
    """Change quantity and/or status; shipped or delivered orders are locked."""
    order = OrderService(db).update(UpdateOrderCommand(
        tenant_id=identity.tenant_id,
        order_id=order_id,
        quantity=payload.quantity,
        status=payload.status,
    ))
    return send_response(order, "Order updated successfully.")

@router.put("/{order_id}/status")
def update_order_status(order_id: int, payload: OrderStatusUpdate,
                        identity: Identity = Depends(current_identity), db: Session = Depends(get_db)):
    order = OrderService(db).update_status(UpdateOrderStatusCommand(
        tenant_id=identity.tenant_id,
        order_id=order_id,
        status=payload.status,
    ))
    return send_response(OrderStatusRead(id=order.id, status=order.status), "Order status updated successfully.")

@router.delete("/{order_id}")
def delete_order(order_id: int, identity: Identity = Depends(current_identity), db: Session = Depends(get_db)):
    OrderService(db).delete(DeleteOrderCommand(tenant_id=identity.tenant_id, order_id=order_id))
    return send_response([], "Order deleted successfully.")
