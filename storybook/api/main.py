"""FastAPI application for the Consistent Storybook Generator."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import arq_pool
from .config import DATABASE_URL, configure_logging
from .database import db
from .routes import characters, stories

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    configure_logging()

    # Startup: database pool, schema and job queue (only if DATABASE_URL is configured)
    if DATABASE_URL:
        pool = await db.open_pool()
        await db.init_db(pool)
        logger.info("Database initialized")

        await arq_pool.open_pool()
        logger.info("Job queue connected")
    else:
        logger.warning("DATABASE_URL not set - database and job queue not initialized")

    yield

    # Shutdown
    await arq_pool.close_pool()
    await db.close_pool()


app = FastAPI(
    title="Consistent Storybook Generator API",
    description="""
Generate illustrated children's storybooks whose characters, places and
objects look the same on every page.

## Features
- **Story + cast**: pages and a canonical entity list from a short brief
- **Consistent illustrations**: each page is drawn in order, reusing the
  first illustration of every entity as a visual reference
- **Styles**: nine art styles, color or monochrome, four age ranges

## Workflow
1. POST `/stories` with a title and description to start generation
2. Poll GET `/stories/{id}` until status is `completed` or `failed`
3. Fetch page images via `/stories/{id}/pages/{n}/image`
    """,
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for web frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(stories.router, prefix="/stories", tags=["Stories"])
app.include_router(characters.router, prefix="/characters", tags=["Characters"])


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
