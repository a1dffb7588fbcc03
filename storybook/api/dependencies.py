"""FastAPI dependency injection for services and repositories."""

from typing import Annotated, AsyncGenerator

import asyncpg
from fastapi import Depends

from .database.db import get_pool
from .database.repository import StoryRepository
from .services.preview_service import PreviewService
from .services.story_service import StoryService


# Database connection dependency
async def get_connection() -> AsyncGenerator[asyncpg.Connection, None]:
    """Acquire a connection from the shared pool for one request."""
    async with get_pool().acquire() as conn:
        yield conn


# Repository - requires connection
def get_repository(
    conn: Annotated[asyncpg.Connection, Depends(get_connection)]
) -> StoryRepository:
    """Get a StoryRepository instance with injected connection."""
    return StoryRepository(conn)


# Service - depends on repository
def get_story_service(
    repo: Annotated[StoryRepository, Depends(get_repository)]
) -> StoryService:
    """Get a StoryService instance with injected repository."""
    return StoryService(repo)


# Type aliases for cleaner route signatures
Repository = Annotated[StoryRepository, Depends(get_repository)]
Service = Annotated[StoryService, Depends(get_story_service)]


# Preview service - no database needed
def get_preview_service() -> PreviewService:
    """Get a PreviewService instance."""
    return PreviewService()


Previews = Annotated[PreviewService, Depends(get_preview_service)]
