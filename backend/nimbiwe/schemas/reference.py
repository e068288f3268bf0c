"""Product, market and agent schemas"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from nimbiwe.models.enums import Role, Unit
from nimbiwe.schemas.base import CamelModel


class ProductCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255, examples=["Tomate"])
    category: Optional[str] = Field(None, max_length=100, examples=["Légumes"])
    units_allowed: List[Unit] = Field(..., min_length=1, examples=[["kg", "basket"]])


class ProductResponse(CamelModel):
    id: str
    name: str
    category: Optional[str] = None
    units_allowed: List[Unit]
    created_at: Optional[datetime] = None


class MarketCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255, examples=["Marché Dantokpa"])
    city: str = Field(..., min_length=1, max_length=100, examples=["Cotonou"])
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class MarketResponse(CamelModel):
    id: str
    name: str
    city: str
    lat: float
    lon: float
    created_at: Optional[datetime] = None


class AgentCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255, examples=["Jean Dupont"])
    phone: str = Field(..., pattern=r'^\+?\d{8,15}$', examples=["+22997123456"])
    role: Role = Role.AGENT


class AgentResponse(CamelModel):
    id: str
    name: str
    phone: str
    role: Role
    created_at: Optional[datetime] = None
