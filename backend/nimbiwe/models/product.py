"""Product model"""
import uuid

from sqlalchemy import Column, String, DateTime, JSON

from nimbiwe.core.database import Base
from nimbiwe.models.timestamps import utcnow


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False, index=True)
    category = Column(String(100), index=True)
    units_allowed = Column(JSON, nullable=False)  # e.g. ["kg", "basket"]
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
