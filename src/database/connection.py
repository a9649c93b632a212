"""
Database connection and pool management
"""

import asyncpg
import logging
from pathlib import Path

from config import settings

logger = logging.getLogger(__name__)

SCHEMA_FILE = Path(__file__).parent / "schema.sql"

# Global database pool
db_pool = None

async def init_database():
    """Initialize database connection pool"""
    global db_pool
    if not settings.DATABASE_URL:
        raise ValueError("DATABASE_URL environment variable is required")

    db_pool = await asyncpg.create_pool(
        settings.DATABASE_URL,
        min_size=settings.DB_POOL_MIN_SIZE,
        max_size=settings.DB_POOL_MAX_SIZE,
        command_timeout=settings.DB_COMMAND_TIMEOUT,
        statement_cache_size=0  # pgbouncer compatibility
    )

    # Test connection
    async with db_pool.acquire() as conn:
        await conn.fetchval("SELECT 1")
        if settings.APPLY_SCHEMA:
            await apply_schema(conn)

    logger.info("Database initialized successfully")


async def apply_schema(conn):
    """Create catalog tables that do not exist yet"""
    ddl = SCHEMA_FILE.read_text(encoding="utf-8")
    await conn.execute(ddl)
    logger.info(f"Applied schema from {SCHEMA_FILE.name}")


async def close_database():
    """Close database connection pool"""
    global db_pool
    if db_pool:
        await db_pool.close()
        db_pool = None
    logger.info("Database connections closed")

def get_db_pool():
    """Get the database pool instance"""
    return db_pool
