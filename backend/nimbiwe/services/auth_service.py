"""Auth Service - phone OTP login and rotating refresh tokens"""
import logging
import secrets
from datetime import timedelta

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from nimbiwe.core.config import settings
from nimbiwe.core.errors import AuthenticationError
from nimbiwe.core.security import (
    REFRESH,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_token,
)
from nimbiwe.models.agent import Agent
from nimbiwe.models.auth import OtpCode, RefreshToken
from nimbiwe.models.enums import Role
from nimbiwe.models.timestamps import utcnow
from nimbiwe.schemas.auth import LoginResponse, TokenResponse


class AuthService:
    def __init__(self, db: AsyncSession, logger: logging.Logger):
        self.db = db
        self.logger = logger

    async def login(self, phone: str) -> LoginResponse:
        """Issue a fresh 6-digit OTP, invalidating any outstanding one."""
        now = utcnow()
        await self.db.execute(
            update(OtpCode)
            .where(OtpCode.phone == phone, OtpCode.used == False, OtpCode.expires_at > now)  # noqa: E712
            .values(used=True)
        )

        code = f"{secrets.randbelow(900000) + 100000}"
        self.db.add(OtpCode(
            phone=phone,
            code=code,
            expires_at=now + timedelta(seconds=settings.OTP_TTL_SECONDS),
        ))
        await self.db.commit()

        # No SMS gateway yet; the code is only visible in development logs
        if settings.ENVIRONMENT == "development":
            self.logger.info("OTP issued", extra={"phone": phone, "otp": code})
        else:
            self.logger.info("OTP issued", extra={"phone": phone})

        return LoginResponse(message="OTP sent", expires_in=settings.OTP_TTL_SECONDS)

    async def verify(self, phone: str, code: str) -> TokenResponse:
        result = await self.db.execute(
            select(OtpCode)
            .where(
                OtpCode.phone == phone,
                OtpCode.code == code,
                OtpCode.used == False,  # noqa: E712
                OtpCode.expires_at > utcnow(),
            )
            .order_by(OtpCode.created_at.desc())
            .limit(1)
        )
        otp = result.scalar_one_or_none()
        if otp is None:
            raise AuthenticationError("Invalid or expired OTP")

        otp.used = True

        result = await self.db.execute(select(Agent).where(Agent.phone == phone))
        agent = result.scalar_one_or_none()
        if agent is None:
            agent = Agent(phone=phone, name="New Agent", role=Role.AGENT)
            self.db.add(agent)
            await self.db.flush()
            self.logger.info("Agent created on first login", extra={"agentId": agent.id})

        return await self._issue_tokens(agent.id, agent.role)

    async def refresh(self, refresh_token: str) -> TokenResponse:
        """Rotate a refresh token: the presented one is revoked, a new pair issued."""
        try:
            payload = decode_token(refresh_token, REFRESH)
        except AuthenticationError as exc:
            raise AuthenticationError("Invalid refresh token") from exc

        result = await self.db.execute(
            select(RefreshToken).where(
                RefreshToken.token_hash == hash_token(refresh_token),
                RefreshToken.agent_id == payload["sub"],
                RefreshToken.revoked == False,  # noqa: E712
                RefreshToken.expires_at > utcnow(),
            )
        )
        stored = result.scalar_one_or_none()
        if stored is None:
            raise AuthenticationError("Invalid refresh token")

        stored.revoked = True

        result = await self.db.execute(select(Agent).where(Agent.id == payload["sub"]))
        agent = result.scalar_one_or_none()
        if agent is None:
            await self.db.rollback()
            raise AuthenticationError("Invalid refresh token")

        return await self._issue_tokens(agent.id, agent.role)

    async def revoke_all_tokens(self, agent_id: str) -> None:
        await self.db.execute(
            update(RefreshToken)
            .where(RefreshToken.agent_id == agent_id, RefreshToken.revoked == False)  # noqa: E712
            .values(revoked=True)
        )
        await self.db.commit()

    async def _issue_tokens(self, agent_id: str, role: Role) -> TokenResponse:
        access_token = create_access_token(agent_id, role)
        refresh_token = create_refresh_token(agent_id, role)

        self.db.add(RefreshToken(
            agent_id=agent_id,
            token_hash=hash_token(refresh_token),
            expires_at=utcnow() + timedelta(days=settings.REFRESH_TOKEN_TTL_DAYS),
        ))
        await self.db.commit()

        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=settings.ACCESS_TOKEN_TTL_SECONDS,
        )
