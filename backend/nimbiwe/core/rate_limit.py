"""Shared slowapi limiter (the decorators and app.state must use the same instance)"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from nimbiwe.core.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
