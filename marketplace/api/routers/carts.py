# marketplace/api/routers/carts.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from marketplace.api.auth import get_current_user_id
from marketplace.data.database import get_db
from marketplace.domain.schemas import AddItemIn, CartOut, CheckoutIn, CheckoutOut, UpdateItemIn
from marketplace.services.cart_service import CartService
from marketplace.services.checkout_service import CheckoutService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session = Depends(get_db)) -> CartService:
    return CartService(db)


def get_checkout_service(db: Session = Depends(get_db)) -> CheckoutService:
    return CheckoutService(db)


@router.get("", response_model=CartOut)
def get_cart(
    user_id: UUID = Depends(get_current_user_id),
    svc: CartService = Depends(get_service),
):
    return svc.get_cart(user_id)


@router.post("/add", response_model=CartOut)
def add_item(
    payload: AddItemIn,
    user_id: UUID = Depends(get_current_user_id),
    svc: CartService = Depends(get_service),
):
    return svc.add_item(user_id, payload.product_id, payload.quantity)


@router.put("/item/{item_id}", response_model=CartOut)
def update_item(
    item_id: UUID,
    payload: UpdateItemIn,
    user_id: UUID = Depends(get_current_user_id),
    svc: CartService = Depends(get_service),
):
    return svc.update_item_quantity(user_id, item_id, payload.quantity)


@router.delete("/item/{item_id}", response_model=CartOut)
def remove_item(
    item_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    svc: CartService = Depends(get_service),
):
    return svc.remove_item(user_id, item_id)


@router.delete("/clear", response_model=CartOut)
def clear_cart(
    user_id: UUID = Depends(get_current_user_id),
    svc: CartService = Depends(get_service),
):
    return svc.clear(user_id)


@router.post("/checkout", response_model=CheckoutOut, status_code=201)
def checkout(
    payload: Optional[CheckoutIn] = None,
    user_id: UUID = Depends(get_current_user_id),
    svc: CheckoutService = Depends(get_checkout_service),
):
    """
    Turns the cart into a confirmed order with tracking info.
    Nothing is written unless every step succeeds.
    """
    address = payload.shipping_address if payload else None
    return svc.checkout(user_id, address)
