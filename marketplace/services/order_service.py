# marketplace/services/order_service.py
from uuid import UUID

from sqlalchemy.orm import Session

from marketplace.data.models.order import OrderModel
from marketplace.domain.enums import OrderStatus, can_transition
from marketplace.domain.errors import ConflictError, NotFoundError, ValidationError
from marketplace.domain.schemas import OrderOut, OrderUpdateIn
from marketplace.repos.order_repo import OrderRepo
from marketplace.utils import settings
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Order history and fulfilment status.
    Lines carry their own price/title/image; the joined product is display only.
    """

    def __init__(self, db: Session, enforce_transitions: bool | None = None):
        self.repo = OrderRepo(db)
        if enforce_transitions is None:
            enforce_transitions = settings.ENFORCE_ORDER_TRANSITIONS
        self.enforce_transitions = enforce_transitions

    def list_orders(self, user_id: UUID) -> list[OrderOut]:
        orders = self.repo.list_for_user(user_id, expand=True)
        return [OrderOut.model_validate(o) for o in orders]

    def get_order(self, user_id: UUID, order_id: UUID) -> OrderOut:
        return OrderOut.model_validate(self._owned(user_id, order_id))

    def update_order_status(self, user_id: UUID, order_id: UUID, changes: OrderUpdateIn) -> OrderOut:
        """Partial update: omitted or empty fields keep their current value."""
        order = self._owned(user_id, order_id)

        if changes.status:
            target = self._parse_status(changes.status)
            current = OrderStatus(order.status)
            if self.enforce_transitions and not can_transition(current, target):
                raise ConflictError(f"Cannot change order status from {current.value} to {target.value}")
            order.status = target.value

        order.tracking_number = changes.tracking_number or order.tracking_number
        order.estimated_delivery = changes.estimated_delivery or order.estimated_delivery
        order.notes = changes.notes or order.notes

        self.repo.commit()
        logger.info(f"Order {order.order_number} updated, status {order.status}")

        return OrderOut.model_validate(order)

    def _owned(self, user_id: UUID, order_id: UUID) -> OrderModel:
        order = self.repo.get_order(order_id, expand=True)
        # someone else's order is reported exactly like a missing one
        if not order or order.user_id != user_id:
            raise NotFoundError("Order not found")
        return order

    @staticmethod
    def _parse_status(value: str) -> OrderStatus:
        try:
            return OrderStatus(value.strip().lower())
        except ValueError:
            allowed = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(f"Invalid order status '{value}', expected one of: {allowed}")
