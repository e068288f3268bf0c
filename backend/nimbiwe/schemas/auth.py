"""Authentication schemas"""
from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    phone: str = Field(..., pattern=r'^\+?\d{8,15}$', examples=["+22997123456"])


class LoginResponse(BaseModel):
    message: str
    expires_in: int  # seconds


class VerifyRequest(BaseModel):
    phone: str = Field(..., pattern=r'^\+?\d{8,15}$')
    otp: str = Field(..., pattern=r'^\d{6}$')


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    expires_in: int  # access token lifetime, seconds
    token_type: str = "bearer"
