from contextlib import asynccontextmanager

import pytest
from httpx import ASGITransport, AsyncClient

# Registers every table on the metadata
import party_rsvp.email_service.orm_models  # noqa: F401
import party_rsvp.events.repository.orm_models  # noqa: F401
import party_rsvp.rsvps.repository.orm_models  # noqa: F401
from party_rsvp.config.database import async_session_maker, engine
from party_rsvp.main import app
from party_rsvp.models.base import BaseModel


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def client_factory():
    """Build a client with FastAPI dependency overrides.

    Usage:
        async with client_factory({get_rsvp_lifecycle: lambda: lifecycle}) as client:
            ...
    """

    @asynccontextmanager
    async def factory(overrides: dict | None = None):
        app.dependency_overrides.update(overrides or {})
        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
        finally:
            app.dependency_overrides.clear()

    return factory


@pytest.fixture
async def db_session():
    """A session on a freshly created schema. Nothing is committed."""
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)
        await conn.run_sync(BaseModel.metadata.create_all)

    session = async_session_maker()
    try:
        yield session
    finally:
        await session.close()
        async with engine.begin() as conn:
            await conn.run_sync(BaseModel.metadata.drop_all)
