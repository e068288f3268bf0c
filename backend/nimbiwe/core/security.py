"""Bearer token issuance/verification and FastAPI auth dependencies"""
import hashlib
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nimbiwe.core.config import settings
from nimbiwe.core.database import get_db
from nimbiwe.core.errors import AuthenticationError
from nimbiwe.models.agent import Agent
from nimbiwe.models.enums import Role

ACCESS = "access"
REFRESH = "refresh"

bearer_scheme = HTTPBearer(auto_error=False)


def _encode(agent_id: str, role: Role, token_type: str, secret: str, ttl: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": agent_id,
        "role": role.value,
        "type": token_type,
        "jti": str(uuid.uuid4()),
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)


def create_access_token(agent_id: str, role: Role) -> str:
    return _encode(
        agent_id, role, ACCESS, settings.JWT_SECRET,
        timedelta(seconds=settings.ACCESS_TOKEN_TTL_SECONDS),
    )


def create_refresh_token(agent_id: str, role: Role) -> str:
    return _encode(
        agent_id, role, REFRESH, settings.JWT_REFRESH_SECRET,
        timedelta(days=settings.REFRESH_TOKEN_TTL_DAYS),
    )


def decode_token(token: str, token_type: str = ACCESS) -> Dict[str, Any]:
    """
    Verify signature, expiry and token type.

    Raises:
        AuthenticationError: If the token is invalid for any reason
    """
    secret = settings.JWT_SECRET if token_type == ACCESS else settings.JWT_REFRESH_SECRET
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError("Invalid token") from exc

    if payload.get("type") != token_type or not payload.get("sub"):
        raise AuthenticationError("Invalid token")
    return payload


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_agent(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Agent:
    """Resolve the bearer access token to an existing agent."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthorized("Not authenticated")

    try:
        payload = decode_token(credentials.credentials, ACCESS)
    except AuthenticationError as exc:
        raise _unauthorized(str(exc))

    result = await db.execute(select(Agent).where(Agent.id == payload["sub"]))
    agent = result.scalar_one_or_none()
    if agent is None:
        raise _unauthorized("Unknown agent")
    return agent


async def require_admin(agent: Agent = Depends(get_current_agent)) -> Agent:
    if agent.role != Role.ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Administrator role required")
    return agent
