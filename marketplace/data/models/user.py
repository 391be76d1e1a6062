# marketplace/data/models/user.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Uuid

from marketplace.data.database import Base


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
