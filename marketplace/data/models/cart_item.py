# marketplace/data/models/cart_item.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, DateTime, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from marketplace.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    cart_id = Column(Uuid, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    # no FK: a listing can be deleted while it sits in someone's cart
    product_id = Column(Uuid, nullable=False)

    quantity = Column(Integer, nullable=False, default=1)
    added_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    cart = relationship("CartModel", back_populates="items")
    product = relationship(
        "ProductModel",
        primaryjoin="foreign(CartItemModel.product_id) == ProductModel.id",
        viewonly=True,
    )

    __table_args__ = (UniqueConstraint("cart_id", "product_id", name="u_cart_product"),)
