"""Nimbiwe - FastAPI backend for market price collection"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from nimbiwe.api import admin, agents, auth, health, markets, products, sync
from nimbiwe.core.config import settings
from nimbiwe.core.database import engine
from nimbiwe.core.logging import get_logger, setup_logging
from nimbiwe.core.middleware import RequestIdMiddleware
from nimbiwe.core.rate_limit import limiter

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup - initialize database
    from nimbiwe.core.database import init_db
    await init_db()

    # Seed sample data
    if settings.SEED_DATA:
        from nimbiwe.services.seed_service import seed_data
        await seed_data()

    logger.info("Application started", extra={"environment": settings.ENVIRONMENT})
    yield
    # Shutdown
    await engine.dispose()


app = FastAPI(
    title="Nimbiwe API",
    description="Market price collection and validation for Benin",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Malformed payloads are client errors for the whole request
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS for the admin frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestIdMiddleware)

# Routes
app.include_router(health.router, tags=["Health"])
app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(products.router, prefix="/products", tags=["Products"])
app.include_router(markets.router, prefix="/markets", tags=["Markets"])
app.include_router(agents.router, prefix="/agents", tags=["Agents"])
app.include_router(sync.router, prefix="/sync", tags=["Sync"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])
