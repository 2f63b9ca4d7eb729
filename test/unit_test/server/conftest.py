from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient


@pytest_asyncio.fixture(name="client")
async def client_fixture() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the ASGI app.

    The lifespan does not run under ``ASGITransport``, so nothing is
    registered at startup. Unhandled exceptions are rendered as responses
    instead of being re-raised into the test.
    """
    from learninggrowth.server.main import app

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://localhost") as client:
        yield client
