"""Auth endpoints - phone OTP login and token refresh"""
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from nimbiwe.core.config import settings
from nimbiwe.core.database import get_db
from nimbiwe.core.errors import AuthenticationError
from nimbiwe.core.logging import get_logger
from nimbiwe.core.rate_limit import limiter
from nimbiwe.core.security import get_current_agent
from nimbiwe.models.agent import Agent
from nimbiwe.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    TokenResponse,
    VerifyRequest,
)
from nimbiwe.services.auth_service import AuthService

router = APIRouter()
logger = get_logger("services.auth")


def _unauthorized(exc: AuthenticationError) -> HTTPException:
    return HTTPException(status_code=401, detail=str(exc), headers={"WWW-Authenticate": "Bearer"})


@router.post("/login", response_model=LoginResponse)
@limiter.limit(f"{settings.AUTH_RATE_LIMIT_PER_HOUR}/hour")
async def login(
    request: Request,
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Request a one-time code for a phone number."""
    return await AuthService(db, logger).login(data.phone)


@router.post("/verify", response_model=TokenResponse)
@limiter.limit(f"{settings.AUTH_RATE_LIMIT_PER_HOUR}/hour")
async def verify(
    request: Request,
    data: VerifyRequest,
    db: AsyncSession = Depends(get_db),
):
    """Exchange a valid one-time code for access and refresh tokens."""
    try:
        return await AuthService(db, logger).verify(data.phone, data.otp)
    except AuthenticationError as exc:
        raise _unauthorized(exc)


@router.post("/refresh", response_model=TokenResponse)
@limiter.limit(f"{settings.REFRESH_RATE_LIMIT_PER_HOUR}/hour")
async def refresh(
    request: Request,
    data: RefreshRequest,
    db: AsyncSession = Depends(get_db),
):
    """Rotate a refresh token. The presented token cannot be used again."""
    try:
        return await AuthService(db, logger).refresh(data.refresh_token)
    except AuthenticationError as exc:
        raise _unauthorized(exc)


@router.post("/logout", status_code=204)
async def logout(
    agent: Agent = Depends(get_current_agent),
    db: AsyncSession = Depends(get_db),
):
    """Revoke every refresh token of the calling agent."""
    await AuthService(db, logger).revoke_all_tokens(agent.id)
    return Response(status_code=204)
