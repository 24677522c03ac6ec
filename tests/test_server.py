"""
Tests for the application shell: health endpoints, error mapping and
the run_server / close_server lifecycle.
"""

import httpx
import pytest

from api.server import close_server, create_app, run_server
from core.storage import StorageError
from core.storage.mongodb import MongoDBPostRepository


class UnreachableRepository(MongoDBPostRepository):
    """Repository whose store is down after startup."""

    async def find_all(self):
        raise StorageError("find_all", "connection refused")

    async def count(self):
        raise StorageError("count", "connection refused")


@pytest.mark.asyncio(loop_scope="session")
async def test_health_check(http_client):
    res = await http_client.get("/health")

    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


@pytest.mark.asyncio(loop_scope="session")
async def test_readiness_check(http_client):
    res = await http_client.get("/ready")

    assert res.status_code == 200
    assert res.json()["checks"]["database"] == "ok"


@pytest.mark.asyncio(loop_scope="session")
async def test_storage_error_maps_to_500():
    """Driver failures surface as a generic 500 without details."""
    app = create_app(UnreachableRepository())
    transport = httpx.ASGITransport(app=app)

    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        res = await client.get("/posts")
        ready = await client.get("/ready")

    assert res.status_code == 500
    assert res.json() == {"message": "Internal server error"}
    assert ready.status_code == 503


@pytest.mark.asyncio(loop_scope="session")
async def test_run_and_close_server(isolated_repository):
    """run_server returns once accepting; close_server releases the port."""
    running = await run_server(create_app(isolated_repository))

    assert running.port > 0
    async with httpx.AsyncClient(base_url=running.base_url) as client:
        res = await client.get("/health")
    assert res.status_code == 200

    await close_server(running)

    assert running.task.done()
    with pytest.raises(httpx.ConnectError):
        async with httpx.AsyncClient(base_url=running.base_url) as client:
            await client.get("/health")
