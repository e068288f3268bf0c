"""Seed service for initial reference data"""
from sqlalchemy import select

from nimbiwe.core.database import AsyncSessionLocal
from nimbiwe.core.logging import get_logger
from nimbiwe.models.agent import Agent
from nimbiwe.models.enums import Role, Unit
from nimbiwe.models.market import Market
from nimbiwe.models.product import Product

logger = get_logger(__name__)


async def seed_data(session_factory=AsyncSessionLocal):
    """Seed products, Cotonou markets and agents if the database is empty"""
    async with session_factory() as db:
        # Check if already seeded
        result = await db.execute(select(Product).limit(1))
        if result.scalar_one_or_none():
            return  # Already seeded

        products = [
            Product(name='Tomate', category='Légumes', units_allowed=[Unit.kg.value, Unit.basket.value]),
            Product(name='Oignon', category='Légumes', units_allowed=[Unit.kg.value, Unit.piece.value]),
            Product(name='Riz', category='Céréales', units_allowed=[Unit.kg.value]),
        ]

        markets = [
            Market(name='Marché Dantokpa', city='Cotonou', lat=6.3654, lon=2.4183),
            Market(name='Marché St Michel', city='Cotonou', lat=6.3702, lon=2.4289),
            Market(name='Marché Ganhi', city='Cotonou', lat=6.3589, lon=2.4312),
            Market(name='Marché Missebo', city='Cotonou', lat=6.3845, lon=2.4156),
            Market(name='Marché Tokpa', city='Cotonou', lat=6.3612, lon=2.4267),
        ]

        agents = [
            Agent(name='Jean Dupont', phone='+22997123456', role=Role.AGENT),
            Agent(name='Marie Koffi', phone='+22997654321', role=Role.AGENT),
            Agent(name='Administrateur', phone='+22990000001', role=Role.ADMIN),
        ]

        db.add_all(products)
        db.add_all(markets)
        db.add_all(agents)
        await db.commit()
        logger.info(
            "Database seeded with sample data",
            extra={"products": len(products), "markets": len(markets), "agents": len(agents)},
        )
