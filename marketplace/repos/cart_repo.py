# marketplace/repos/cart_repo.py
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from marketplace.data.models.cart import CartModel
from marketplace.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: UUID, expand: bool = False) -> CartModel | None:
        """Cart with its lines; expand=True also loads each line's live product."""
        loader = selectinload(CartModel.items)
        if expand:
            loader = loader.selectinload(CartItemModel.product)
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id).options(loader)
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.flush()
        return cart

    def flush(self):
        self.db.flush()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
