# marketplace/data/models/order.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, ForeignKey, String, DateTime, Numeric, JSON, Text, Uuid
from sqlalchemy.orm import relationship

from marketplace.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_number = Column(String(32), nullable=False, unique=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    status = Column(String(20), nullable=False, default="pending")  # pending, confirmed, shipped, delivered, cancelled
    total_amount = Column(Numeric(10, 2), nullable=False)

    shipping_address = Column(JSON, nullable=False, default=dict)
    tracking_number = Column(String(32), nullable=True)
    estimated_delivery = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.position",
    )
