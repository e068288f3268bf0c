"""Market endpoints"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from nimbiwe.core.database import get_db
from nimbiwe.core.security import get_current_agent
from nimbiwe.models.agent import Agent
from nimbiwe.models.market import Market
from nimbiwe.schemas.reference import MarketCreateRequest, MarketResponse

router = APIRouter()


@router.get("/", response_model=List[MarketResponse])
async def list_markets(
    city: Optional[str] = Query(None, description="Filter by city"),
    db: AsyncSession = Depends(get_db),
):
    """List markets, optionally filtered by city."""
    query = select(Market)

    if city:
        query = query.where(Market.city == city)

    result = await db.execute(query.order_by(Market.name))
    return [MarketResponse.model_validate(m) for m in result.scalars().all()]


@router.post("/", response_model=MarketResponse, status_code=201)
async def create_market(
    data: MarketCreateRequest,
    agent: Agent = Depends(get_current_agent),
    db: AsyncSession = Depends(get_db),
):
    """Create a market at the given GPS coordinates."""
    market = Market(name=data.name, city=data.city, lat=data.lat, lon=data.lon)
    db.add(market)
    await db.commit()
    await db.refresh(market)

    return MarketResponse.model_validate(market)
