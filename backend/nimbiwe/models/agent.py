"""Agent model (field agents and administrators)"""
import uuid

from sqlalchemy import Column, String, DateTime, Enum

from nimbiwe.core.database import Base
from nimbiwe.models.enums import Role
from nimbiwe.models.timestamps import utcnow


class Agent(Base):
    __tablename__ = "agents"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    phone = Column(String(20), unique=True, nullable=False, index=True)
    role = Column(Enum(Role, name="role", native_enum=False), nullable=False, default=Role.AGENT)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
