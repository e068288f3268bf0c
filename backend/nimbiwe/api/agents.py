"""Agent endpoints (administrators only)"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from nimbiwe.core.database import get_db
from nimbiwe.core.security import require_admin
from nimbiwe.models.agent import Agent
from nimbiwe.schemas.reference import AgentCreateRequest, AgentResponse

router = APIRouter()


@router.get("/", response_model=List[AgentResponse])
async def list_agents(
    admin: Agent = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(Agent).order_by(Agent.name))
    return [AgentResponse.model_validate(a) for a in result.scalars().all()]


@router.post("/", response_model=AgentResponse, status_code=201)
async def create_agent(
    data: AgentCreateRequest,
    admin: Agent = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    agent = Agent(name=data.name, phone=data.phone, role=data.role)
    db.add(agent)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="An agent with this phone already exists")
    await db.refresh(agent)

    return AgentResponse.model_validate(agent)
