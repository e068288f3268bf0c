"""Validation model (immutable audit record of an admin decision)"""
import uuid

from sqlalchemy import Column, String, Text, DateTime, Enum, ForeignKey

from nimbiwe.core.database import Base
from nimbiwe.models.enums import ValidationDecision
from nimbiwe.models.timestamps import utcnow


class Validation(Base):
    __tablename__ = "validations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    price_entry_id = Column(String(36), ForeignKey("price_entries.id"), nullable=False, index=True)
    admin_id = Column(String(36), ForeignKey("agents.id"), nullable=False, index=True)
    decision = Column(Enum(ValidationDecision, name="validation_decision", native_enum=False), nullable=False)
    reason = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow)
