# marketplace/services/checkout_service.py
from dataclasses import dataclass
from datetime import datetime, timezone, timedelta
from decimal import Decimal
from typing import Callable
from uuid import UUID

from sqlalchemy.orm import Session

from marketplace.data.models.order import OrderModel
from marketplace.data.models.order_item import OrderItemModel
from marketplace.data.unit_of_work import UnitOfWork
from marketplace.domain.enums import OrderStatus, ProductStatus
from marketplace.domain.errors import (
    DuplicateOrderNumberError,
    EmptyCartError,
    UnavailableProductError,
)
from marketplace.domain.numbers import generate_order_number, generate_tracking_number
from marketplace.domain.schemas import CheckoutOut, OrderOut, ShippingAddress
from marketplace.repos.order_repo import OrderRepo
from marketplace.repos.user_repo import UserRepo
from marketplace.services.notification_service import NotificationService
from marketplace.utils.logging import get_logger
from marketplace.utils.retry import conflict_retry
from marketplace.utils.settings import DEFAULT_PRODUCT_IMAGE, DELIVERY_ESTIMATE_DAYS

logger = get_logger(__name__)


@dataclass(frozen=True)
class OrderLine:
    """Snapshot of one cart line taken before anything is written."""

    product_id: UUID
    quantity: int
    price: Decimal
    title: str
    image: str

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


def _line_image(product) -> str:
    if product.image:
        return product.image
    images = product.images or []
    if images and images[0].get("url"):
        return images[0]["url"]
    return DEFAULT_PRODUCT_IMAGE


class CheckoutService:
    """
    Use Case: cart -> order.

    1. load the cart joined with live products
    2. reject an empty cart / any unavailable product (before any write)
    3. snapshot lines, total them, reserve a unique order number
    4. persist the order (pending), mark each product sold with a
       conditional write, confirm with tracking info, empty the cart
    5. commit once; notify the buyer after the commit

    Step 4 runs inside one UnitOfWork, so a failure anywhere in it leaves
    no order, no sold product and an untouched cart.
    """

    def __init__(
        self,
        db: Session,
        notifier: NotificationService | None = None,
        order_numbers: Callable[[], str] = generate_order_number,
        tracking_numbers: Callable[[], str] = generate_tracking_number,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.db = db
        self.orders = OrderRepo(db)
        self.users = UserRepo(db)
        self.notifier = notifier or NotificationService()
        self.order_numbers = order_numbers
        self.tracking_numbers = tracking_numbers
        self.now = now

    def checkout(self, user_id: UUID, shipping_address: ShippingAddress | None = None) -> CheckoutOut:
        address = (shipping_address or ShippingAddress()).model_dump()

        with UnitOfWork(self.db) as uow:
            cart = uow.carts.get_by_user(user_id, expand=True)

            logger.info(
                f"Checkout for user {user_id}: cart={'yes' if cart else 'no'}, "
                f"lines={len(cart.items) if cart else 0}"
            )

            if not cart or not cart.items:
                raise EmptyCartError()

            for item in cart.items:
                if item.product is None or item.product.status != ProductStatus.AVAILABLE.value:
                    title = item.product.title if item.product else None
                    raise UnavailableProductError(item.product_id, title)

            lines = [
                OrderLine(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    price=Decimal(item.product.price),
                    title=item.product.title,
                    image=_line_image(item.product),
                )
                for item in cart.items
            ]
            total = sum((line.subtotal for line in lines), Decimal("0.00"))
            placed_at = self.now()

            order = self._create_order(uow, user_id, lines, total, address, placed_at)
            logger.info(f"Order {order.order_number} created (pending), total {total}")

            for line in lines:
                if not uow.products.mark_sold_if_available(line.product_id, user_id):
                    # lost the race to another buyer; the rollback undoes the order too
                    raise UnavailableProductError(line.product_id, line.title)
            logger.info(f"Order {order.order_number}: {len(lines)} product(s) marked sold")

            order.tracking_number = self.tracking_numbers()
            order.estimated_delivery = placed_at + timedelta(days=DELIVERY_ESTIMATE_DAYS)
            order.status = OrderStatus.CONFIRMED.value

            cart.items.clear()
            cart.total_amount = Decimal("0.00")
            cart.item_count = 0
            uow.db.flush()

        logger.info(
            f"Order {order.order_number} confirmed, tracking {order.tracking_number}, "
            f"cart {cart.id} cleared"
        )

        result = OrderOut.model_validate(self.orders.get_order(order.id, expand=True))
        buyer = self.users.get_user(user_id)
        self.notifier.send_order_confirmation(buyer.email if buyer else None, result)

        return CheckoutOut(
            message="Order created successfully",
            order=result,
            order_number=result.order_number,
            tracking_number=result.tracking_number,
            estimated_delivery=result.estimated_delivery,
        )

    def _create_order(self, uow, user_id, lines, total, address, placed_at) -> OrderModel:
        @conflict_retry()
        def attempt() -> OrderModel:
            number = self.order_numbers()
            if uow.orders.order_number_exists(number):
                logger.warning(f"Order number {number} already taken, regenerating")
                raise DuplicateOrderNumberError(number)
            return uow.orders.create_order(
                OrderModel(
                    order_number=number,
                    user_id=user_id,
                    status=OrderStatus.PENDING.value,
                    total_amount=total,
                    shipping_address=address,
                    created_at=placed_at,
                    updated_at=placed_at,
                    items=[
                        OrderItemModel(
                            position=pos,
                            product_id=line.product_id,
                            quantity=line.quantity,
                            price=line.price,
                            title=line.title,
                            image=line.image,
                        )
                        for pos, line in enumerate(lines)
                    ],
                )
            )

        return attempt()
