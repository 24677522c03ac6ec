"""
Database setup script.

Connects to the configured store and creates the posts collection
indexes. Safe to run repeatedly.

Usage:
    python -m scripts.setup_db
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.config import settings
from core.logging import configure_logging, get_logger
from core.storage import StorageError, create_post_repository


logger = get_logger(__name__)


async def setup_database() -> int:
    """Create indexes and report how many posts are stored."""
    repository = create_post_repository(settings)

    logger.info(
        "Setting up database",
        url=settings.mongodb_url,
        database=settings.mongodb_database,
    )

    try:
        await repository.setup()
        total = await repository.count()
    except StorageError as exc:
        logger.error("Database setup failed", error=str(exc))
        return 1
    finally:
        await repository.close()

    logger.info("Database setup complete", posts=total)
    return 0


if __name__ == "__main__":
    configure_logging()
    sys.exit(asyncio.run(setup_database()))
