# marketplace/api/routers/orders.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from marketplace.api.auth import get_current_user_id
from marketplace.data.database import get_db
from marketplace.domain.schemas import OrderOut, OrderUpdateIn
from marketplace.services.order_service import OrderService

router = APIRouter(prefix="/cart/orders", tags=["orders"])


def get_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(db)


@router.get("", response_model=List[OrderOut])
def list_orders(
    user_id: UUID = Depends(get_current_user_id),
    svc: OrderService = Depends(get_service),
):
    """Order history, newest first."""
    return svc.list_orders(user_id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    svc: OrderService = Depends(get_service),
):
    return svc.get_order(user_id, order_id)


@router.put("/{order_id}", response_model=OrderOut)
def update_order(
    order_id: UUID,
    payload: OrderUpdateIn,
    user_id: UUID = Depends(get_current_user_id),
    svc: OrderService = Depends(get_service),
):
    return svc.update_order_status(user_id, order_id, payload)
