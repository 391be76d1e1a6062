# marketplace/services/cart_service.py
from uuid import UUID

from sqlalchemy.orm import Session

from marketplace.data.models.cart import CartModel
from marketplace.data.models.cart_item import CartItemModel
from marketplace.domain.enums import ProductStatus
from marketplace.domain.errors import ConflictError, NotFoundError, ValidationError
from marketplace.domain.ids import parse_product_id
from marketplace.domain.schemas import CartOut
from marketplace.domain.totals import recompute_totals
from marketplace.repos.cart_repo import CartRepo
from marketplace.repos.product_repo import ProductRepo
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


def _check_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError("Quantity must be at least 1")
    return quantity


class CartService:
    """
    Use cases for the per-user cart.

    Every mutation ends with `_recompute`: totals are derived from the live
    product prices, never from a price stored on the line.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    # =====================================================
    # QUERY
    # =====================================================
    def get_cart(self, user_id: UUID) -> CartOut:
        """Returns the user's cart, creating an empty one on first access."""
        cart = self._get_or_create(user_id)
        self.repo.commit()
        return CartOut.model_validate(cart)

    # =====================================================
    # COMMANDS
    # =====================================================
    def add_item(self, user_id: UUID, product_id, quantity=1) -> CartOut:
        pid = parse_product_id(product_id)
        quantity = _check_quantity(quantity)

        product = self.products.get(pid)
        if not product:
            raise NotFoundError("Product not found")

        if product.status != ProductStatus.AVAILABLE.value:
            raise ConflictError("Product is not available")

        if product.seller_id == user_id:
            raise ConflictError("Cannot add your own product to cart")

        cart = self._get_or_create(user_id)

        existing = next((i for i in cart.items if i.product_id == pid), None)
        if existing:
            logger.info(
                f"Product {pid} already in cart {cart.id}, quantity "
                f"{existing.quantity} -> {existing.quantity + quantity}"
            )
            existing.quantity += quantity
        else:
            logger.info(f"Adding product {pid} x{quantity} to cart {cart.id}")
            cart.items.append(CartItemModel(product_id=pid, quantity=quantity))

        return self._save(cart)

    def update_item_quantity(self, user_id: UUID, item_id: UUID, quantity) -> CartOut:
        quantity = _check_quantity(quantity)

        cart = self.repo.get_by_user(user_id, expand=True)
        if not cart:
            raise NotFoundError("Cart not found")

        item = self._find_item(cart, item_id)
        item.quantity = quantity
        logger.info(f"Cart {cart.id} item {item_id} quantity set to {quantity}")

        return self._save(cart)

    def remove_item(self, user_id: UUID, item_id: UUID) -> CartOut:
        cart = self.repo.get_by_user(user_id, expand=True)
        if not cart:
            raise NotFoundError("Cart not found")

        item = self._find_item(cart, item_id)
        cart.items.remove(item)
        logger.info(f"Removed item {item_id} from cart {cart.id}")

        return self._save(cart)

    def clear(self, user_id: UUID) -> CartOut:
        cart = self.repo.get_by_user(user_id, expand=True)
        if not cart:
            raise NotFoundError("Cart not found")

        cart.items.clear()
        logger.info(f"Cleared cart {cart.id}")

        return self._save(cart)

    # =====================================================
    # helpers
    # =====================================================
    def _get_or_create(self, user_id: UUID) -> CartModel:
        cart = self.repo.get_by_user(user_id, expand=True)
        if cart:
            return cart

        cart = self.repo.create_cart(CartModel(user_id=user_id, total_amount=0, item_count=0))
        logger.info(f"Created cart {cart.id} for user {user_id}")
        return cart

    @staticmethod
    def _find_item(cart: CartModel, item_id: UUID) -> CartItemModel:
        item = next((i for i in cart.items if i.id == item_id), None)
        if not item:
            raise NotFoundError("Item not found in cart")
        return item

    def _recompute(self, cart: CartModel) -> None:
        lookup = self.products.price_lookup(i.product_id for i in cart.items)
        totals = recompute_totals(cart.items, lookup)
        cart.total_amount = totals.total
        cart.item_count = totals.count

    def _save(self, cart: CartModel) -> CartOut:
        # flush first so freshly appended lines can load their product
        self.repo.flush()
        self._recompute(cart)
        self.repo.commit()
        return CartOut.model_validate(cart)
