"""
Library Catalog Server
Server-rendered pages for managing book copies and genres
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from config.settings import ALLOWED_ORIGINS, CATALOG_PREFIX
from database.connection import init_database, close_database
from api.routes import health, catalog, book_instances, genres
from utils.error_handling import setup_error_handling

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    await init_database()
    yield
    await close_database()

# FastAPI app initialization
app = FastAPI(
    title="Library Catalog",
    description="Catalog pages for books, book copies and genres",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Setup centralized error handling
setup_error_handling(app)

@app.get("/", include_in_schema=False)
async def root():
    return RedirectResponse(url=CATALOG_PREFIX)

# Include routes
app.include_router(health.router, tags=["Health"])
app.include_router(catalog.router, prefix=CATALOG_PREFIX, tags=["Catalog"])
app.include_router(book_instances.router, prefix=CATALOG_PREFIX, tags=["Book Instances"])
app.include_router(genres.router, prefix=CATALOG_PREFIX, tags=["Genres"])

# Server startup is handled by main.py at the project root
