"""Price Entry model (the ledger of agent submissions)"""
import uuid

from sqlalchemy import (
    Column,
    String,
    Numeric,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from nimbiwe.core.database import Base
from nimbiwe.models.enums import EntryStatus, Unit
from nimbiwe.models.timestamps import utcnow


class PriceEntry(Base):
    """
    One observed price of a product at a market.

    Rows are inserted by the sync pipeline and only their status changes
    afterwards, through admin validation. They are never deleted.
    """
    __tablename__ = "price_entries"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Client-generated idempotency token
    client_id = Column(String(64), nullable=False)

    agent_id = Column(String(36), ForeignKey("agents.id"), nullable=False)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)
    market_id = Column(String(36), ForeignKey("markets.id"), nullable=False)

    # Measurement
    unit = Column(Enum(Unit, name="unit", native_enum=False), nullable=False)
    price_value = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False)

    # Context
    lat = Column(Numeric(10, 7), nullable=False)
    lon = Column(Numeric(10, 7), nullable=False)
    photo_url = Column(String)
    captured_at = Column(DateTime(timezone=True), nullable=False)
    captured_day = Column(Date, nullable=False)  # server-local date of captured_at

    status = Column(
        Enum(EntryStatus, name="entry_status", native_enum=False),
        nullable=False,
        default=EntryStatus.pending,
        index=True,
    )

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    product = relationship("Product")
    market = relationship("Market")
    agent = relationship("Agent")

    __table_args__ = (
        UniqueConstraint("client_id", name="uq_price_entries_client_id"),
        UniqueConstraint(
            "product_id", "market_id", "unit", "captured_day", "price_value",
            name="uq_price_entries_content",
        ),
        Index("ix_price_entries_quota", "agent_id", "product_id", "market_id", "captured_at"),
        Index("ix_price_entries_status_created", "status", "created_at"),
    )
