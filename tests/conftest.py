"""
Pytest configuration and fixtures.

The API suite runs against a live uvicorn server on the session event
loop. The store is an in-memory mongomock-motor client unless
TEST_MONGODB_URL points at a real MongoDB.
"""

import os
import sys
from pathlib import Path

import httpx
import pytest_asyncio

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set test environment
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("MONGODB_DATABASE", "blog_posts_test")

from api.server import close_server, create_app, run_server  # noqa: E402
from core.storage.mongodb import MongoDBPostRepository  # noqa: E402
from factories import generate_post_record  # noqa: E402


SEED_COUNT = 11
TEST_DATABASE = os.environ["MONGODB_DATABASE"]


def _make_client():
    url = os.environ.get("TEST_MONGODB_URL")
    if url:
        from motor.motor_asyncio import AsyncIOMotorClient
        return AsyncIOMotorClient(url, serverSelectionTimeoutMS=5000, tz_aware=True)

    from mongomock_motor import AsyncMongoMockClient
    return AsyncMongoMockClient(tz_aware=True)


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def post_repository():
    """Repository shared by the server and the assertions."""
    client = _make_client()
    repository = MongoDBPostRepository(database_name=TEST_DATABASE, client=client)
    await repository.setup()
    await repository.drop_all()
    yield repository
    await repository.close()
    if os.environ.get("TEST_MONGODB_URL"):
        client.close()


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def live_server(post_repository):
    """Serve the API for the whole session."""
    app = create_app(post_repository)
    running = await run_server(app)
    yield running
    await close_server(running)


@pytest_asyncio.fixture(loop_scope="session")
async def http_client(live_server):
    async with httpx.AsyncClient(base_url=live_server.base_url) as client:
        yield client


@pytest_asyncio.fixture(loop_scope="session")
async def seeded_posts(live_server, post_repository):
    """Seed random posts before the test and drop the database after it."""
    posts = await post_repository.insert_many(
        [generate_post_record() for _ in range(SEED_COUNT)]
    )
    yield posts
    await post_repository.drop_all()


@pytest_asyncio.fixture(loop_scope="session")
async def isolated_repository():
    """A repository on its own in-memory client, not shared with the server."""
    from mongomock_motor import AsyncMongoMockClient

    repository = MongoDBPostRepository(
        database_name="blog_posts_unit",
        client=AsyncMongoMockClient(tz_aware=True),
    )
    await repository.setup()
    yield repository
    await repository.drop_all()
    await repository.close()
