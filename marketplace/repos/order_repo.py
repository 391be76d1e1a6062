# marketplace/repos/order_repo.py
from uuid import UUID

from sqlalchemy import select, exists
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from marketplace.data.models.order import OrderModel
from marketplace.data.models.order_item import OrderItemModel
from marketplace.domain.errors import DuplicateOrderNumberError


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def _select(self, expand: bool):
        loader = selectinload(OrderModel.items)
        if expand:
            loader = loader.selectinload(OrderItemModel.product)
        return select(OrderModel).options(loader)

    def order_number_exists(self, order_number: str) -> bool:
        return self.db.execute(
            select(exists().where(OrderModel.order_number == order_number))
        ).scalar()

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        try:
            self.db.flush()
        except IntegrityError as exc:
            self.db.rollback()
            if "order_number" in str(exc.orig):
                raise DuplicateOrderNumberError(order.order_number) from exc
            raise
        return order

    def get_order(self, order_id: UUID, expand: bool = False) -> OrderModel | None:
        return self.db.execute(
            self._select(expand).where(OrderModel.id == order_id)
        ).scalar_one_or_none()

    def list_for_user(self, user_id: UUID, expand: bool = False) -> list[OrderModel]:
        return list(self.db.execute(
            self._select(expand)
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.created_at.desc())
        ).scalars().all())

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
