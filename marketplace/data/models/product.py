# marketplace/data/models/product.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, ForeignKey, Numeric, JSON, Uuid
from sqlalchemy.orm import relationship

from marketplace.data.database import Base
from marketplace.utils.settings import DEFAULT_PRODUCT_IMAGE


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=False)
    category = Column(String(40), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)

    # primary image url + full list of {url, public_id, width, height, format}
    image = Column(String, nullable=False, default=DEFAULT_PRODUCT_IMAGE)
    images = Column(JSON, nullable=False, default=list)

    seller_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    buyer_id = Column(Uuid, ForeignKey("users.id"), nullable=True, index=True)

    status = Column(String(20), nullable=False, default="available", index=True)  # available, pending, sold
    condition = Column(String(20), nullable=False)
    location = Column(String(200), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    seller = relationship("UserModel", foreign_keys=[seller_id])
    buyer = relationship("UserModel", foreign_keys=[buyer_id])
