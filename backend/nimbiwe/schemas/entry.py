"""Price entry request/response schemas"""
import re
from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import ConfigDict, Field, field_validator

from nimbiwe.models.enums import EntryStatus, Unit, ValidationDecision
from nimbiwe.schemas.base import CamelModel

ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")

SyncStatus = Literal['accepted', 'rejected', 'duplicate', 'limit_exceeded']


class EntrySubmission(CamelModel):
    """One price observation as sent by the mobile app"""
    model_config = ConfigDict(extra='forbid')

    client_id: str = Field(..., min_length=1, max_length=64, description="Client-generated idempotency key")
    agent_id: Optional[UUID] = Field(None, description="Defaults to the authenticated agent")
    product_id: UUID
    market_id: UUID
    unit: Unit
    price_value: Decimal = Field(..., ge=1, max_digits=12, decimal_places=2, examples=[1500])
    currency: str = Field(..., pattern=r'^[A-Z]{3}$', description="ISO 4217 code", examples=["XOF"])
    photo_url: Optional[str] = Field(None, max_length=2048)
    lat: float = Field(..., ge=-90, le=90, examples=[6.3654])
    lon: float = Field(..., ge=-180, le=180, examples=[2.4183])
    captured_at: datetime = Field(..., examples=["2025-12-04T10:00:00Z"])

    @field_validator('captured_at', mode='before')
    @classmethod
    def captured_at_must_be_string(cls, value):
        # Numbers and numeric strings would otherwise be read as unix timestamps
        if not isinstance(value, str) or not ISO_DATE_PREFIX.match(value):
            raise ValueError('capturedAt must be an ISO 8601 date-time string')
        return value


class SyncOutcome(CamelModel):
    """Per-item result of a sync batch"""
    client_id: str
    status: SyncStatus
    reason: Optional[str] = None
    id: Optional[str] = None


class ValidateEntryRequest(CamelModel):
    decision: ValidationDecision
    reason: Optional[str] = Field(None, max_length=1000)


class EntryResponse(CamelModel):
    id: str
    client_id: str
    agent_id: str
    product_id: str
    market_id: str
    unit: Unit
    price_value: float
    currency: str
    lat: float
    lon: float
    photo_url: Optional[str] = None
    captured_at: datetime
    status: EntryStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductSummary(CamelModel):
    id: str
    name: str
    category: Optional[str] = None


class MarketSummary(CamelModel):
    id: str
    name: str
    city: str


class AgentSummary(CamelModel):
    id: str
    name: str
    phone: str


class PendingEntryResponse(EntryResponse):
    """Pending entry with the display data an admin reviews it against"""
    product: ProductSummary
    market: MarketSummary
    agent: AgentSummary


class PendingEntryListResponse(CamelModel):
    entries: List[PendingEntryResponse]
    page: int
    limit: int
    total: int
