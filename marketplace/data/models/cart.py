# marketplace/data/models/cart.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, DateTime, Numeric, Uuid
from sqlalchemy.orm import relationship

from marketplace.data.database import Base


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # one cart per user
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, unique=True)

    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    item_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.added_at",
    )
