"""Market model"""
import uuid

from sqlalchemy import Column, String, Numeric, DateTime

from nimbiwe.core.database import Base
from nimbiwe.models.timestamps import utcnow


class Market(Base):
    __tablename__ = "markets"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False, index=True)
    city = Column(String(100), nullable=False, index=True)
    lat = Column(Numeric(10, 7), nullable=False)
    lon = Column(Numeric(10, 7), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
