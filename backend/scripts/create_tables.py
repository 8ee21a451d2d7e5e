"""Script to create the catalog tables from the SQLAlchemy models."""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.infrastructure.config.settings import get_settings  # noqa: E402
from src.infrastructure.database.session import Database  # noqa: E402
from src.infrastructure.logging import get_logger  # noqa: E402
from src.modules.book.models import Book  # noqa: E402,F401
from src.modules.copy.models import Copy  # noqa: E402,F401

logger = get_logger(__name__)


async def main() -> None:
    """Create database tables."""
    database = Database.from_settings(get_settings())
    logger.info("Creating database tables...")

    try:
        await database.connect()
        await database.create_tables()
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database tables: {str(e)}", exc_info=True)
        sys.exit(1)
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
