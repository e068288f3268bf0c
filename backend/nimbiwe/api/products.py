"""Product endpoints"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from nimbiwe.core.database import get_db
from nimbiwe.core.security import get_current_agent
from nimbiwe.models.agent import Agent
from nimbiwe.models.product import Product
from nimbiwe.schemas.reference import ProductCreateRequest, ProductResponse

router = APIRouter()


@router.get("/", response_model=List[ProductResponse])
async def list_products(db: AsyncSession = Depends(get_db)):
    """List all products."""
    result = await db.execute(select(Product).order_by(Product.name))
    return [ProductResponse.model_validate(p) for p in result.scalars().all()]


@router.post("/", response_model=ProductResponse, status_code=201)
async def create_product(
    data: ProductCreateRequest,
    agent: Agent = Depends(get_current_agent),
    db: AsyncSession = Depends(get_db),
):
    """Create a product."""
    product = Product(
        name=data.name,
        category=data.category,
        units_allowed=[unit.value for unit in data.units_allowed],
    )
    db.add(product)
    await db.commit()
    await db.refresh(product)

    return ProductResponse.model_validate(product)
