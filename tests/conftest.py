"""
Pytest configuration and shared fixtures.

Every test gets its own SQLite database file. Service tests use the async
``db``/``refs`` fixtures; HTTP tests use ``api``, which wires a TestClient to
a fresh database through a ``get_db`` dependency override.
"""
import os
from types import SimpleNamespace

# Must be set before nimbiwe.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_nimbiwe.db")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_DATA"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from nimbiwe.core.database import get_db
from nimbiwe.core.security import create_access_token
from nimbiwe.models import Role
from tests.helpers import create_reference_data, create_schema, make_session_factory, run


# =======================
# SERVICE-LEVEL FIXTURES
# =======================

@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine, factory = make_session_factory(tmp_path / "service.db")
    await create_schema(engine)
    yield factory
    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def refs(session_factory) -> SimpleNamespace:
    return await create_reference_data(session_factory)


# =======================
# HTTP FIXTURES
# =======================

@pytest.fixture
def api(tmp_path):
    """TestClient bound to a fresh database, plus ids, auth headers and a session factory."""
    from nimbiwe.main import app

    engine, factory = make_session_factory(tmp_path / "api.db")
    run(create_schema(engine))
    refs = run(create_reference_data(factory))

    async def override_get_db():
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    yield SimpleNamespace(
        client=TestClient(app),
        refs=refs,
        factory=factory,
        agent_headers={"Authorization": f"Bearer {create_access_token(refs.agent_id, Role.AGENT)}"},
        admin_headers={"Authorization": f"Bearer {create_access_token(refs.admin_id, Role.ADMIN)}"},
    )

    app.dependency_overrides.clear()
    run(engine.dispose())
