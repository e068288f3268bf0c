"""Shared test helpers: throwaway databases, reference rows, payload builders"""
import asyncio
import uuid
from datetime import datetime
from types import SimpleNamespace

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import nimbiwe.models  # noqa: F401
from nimbiwe.core.database import Base, enable_sqlite_foreign_keys
from nimbiwe.models import Agent, Market, Product, Role, Unit


def make_session_factory(db_path) -> tuple:
    # NullPool: no connection outlives the event loop that opened it
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    enable_sqlite_foreign_keys(engine)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    return engine, factory


async def create_schema(engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def create_reference_data(factory) -> SimpleNamespace:
    """One agent, one admin, one product and two markets."""
    async with factory() as session:
        agent = Agent(name="Test Agent", phone="+22900000000", role=Role.AGENT)
        admin = Agent(name="Test Admin", phone="+22900000099", role=Role.ADMIN)
        product = Product(name="Tomate", category="Légumes", units_allowed=[Unit.kg.value, Unit.basket.value])
        market = Market(name="Marché Dantokpa", city="Cotonou", lat=6.3654, lon=2.4183)
        other_market = Market(name="Marché Ganhi", city="Cotonou", lat=6.3589, lon=2.4312)
        session.add_all([agent, admin, product, market, other_market])
        await session.commit()

        return SimpleNamespace(
            agent_id=agent.id,
            admin_id=admin.id,
            product_id=product.id,
            market_id=market.id,
            other_market_id=other_market.id,
        )


def entry_payload(refs: SimpleNamespace, **overrides) -> dict:
    """A valid wire-format (camelCase) submission."""
    payload = {
        "clientId": f"mobile-{uuid.uuid4()}",
        "productId": refs.product_id,
        "marketId": refs.market_id,
        "unit": "kg",
        "priceValue": 1500,
        "currency": "XOF",
        "lat": 6.3654,
        "lon": 2.4183,
        "capturedAt": datetime.now().astimezone().isoformat(),
    }
    payload.update(overrides)
    return payload


def run(coro):
    """Run a coroutine from a synchronous (TestClient) test."""
    return asyncio.run(coro)
