# marketplace/data/models/order_item.py
import uuid

from sqlalchemy import Column, Integer, ForeignKey, String, Numeric, Uuid
from sqlalchemy.orm import relationship

from marketplace.data.database import Base


class OrderItemModel(Base):
    """Point-in-time copy of a purchased listing; outlives the listing itself."""

    __tablename__ = "order_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id = Column(Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    product_id = Column(Uuid, nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    title = Column(String(100), nullable=False)
    image = Column(String, nullable=False)

    order = relationship("OrderModel", back_populates="items")
    product = relationship(
        "ProductModel",
        primaryjoin="foreign(OrderItemModel.product_id) == ProductModel.id",
        viewonly=True,
    )
