"""
Configuration settings for the Library Catalog
"""

import os
import logging

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Configure logging
logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)

# Environment configuration
ENV = os.getenv("ENV", "PROD")  # PROD, QA or DEV
DATABASE_URL = os.getenv("DATABASE_URL")
PORT = int(os.getenv("PORT", 8080))

# Connection pool configuration
DB_POOL_MIN_SIZE = int(os.getenv("DB_POOL_MIN_SIZE", 2))
DB_POOL_MAX_SIZE = int(os.getenv("DB_POOL_MAX_SIZE", 10))
DB_COMMAND_TIMEOUT = float(os.getenv("DB_COMMAND_TIMEOUT", 60))

# Apply database/schema.sql on startup (CREATE ... IF NOT EXISTS only)
APPLY_SCHEMA = os.getenv("APPLY_SCHEMA", "true").lower() in ("true", "1", "yes")

# URL prefix shared by every catalog page
CATALOG_PREFIX = "/catalog"

logger.info(f"Environment: {ENV}")

# DATABASE_URL is enforced when the pool is created so the app can be imported without it
if not DATABASE_URL:
    logger.warning("DATABASE_URL not set - database pool cannot be initialized")

# CORS settings
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:8080").split(",")
    if origin.strip()
]
