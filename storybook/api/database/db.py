"""PostgreSQL connection management using an asyncpg pool."""

from typing import Optional

import asyncpg

from ..config import DATABASE_URL

SCHEMA = """
CREATE TABLE IF NOT EXISTS stories (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT NOT NULL,
    story_type TEXT NOT NULL,
    age_range TEXT NOT NULL,
    page_count INTEGER NOT NULL,
    art_style TEXT NOT NULL,
    color_mode TEXT NOT NULL DEFAULT 'color',
    layout_type TEXT NOT NULL DEFAULT 'side_by_side',
    llm_model TEXT,
    status TEXT NOT NULL DEFAULT 'pending',
    word_count INTEGER,
    progress_json TEXT,
    error_message TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    started_at TIMESTAMPTZ,
    completed_at TIMESTAMPTZ
);

CREATE TABLE IF NOT EXISTS story_pages (
    story_id TEXT NOT NULL REFERENCES stories(id) ON DELETE CASCADE,
    page_number INTEGER NOT NULL,
    text TEXT NOT NULL,
    entity_ids_json TEXT NOT NULL DEFAULT '[]',
    image_prompt TEXT,
    image_path TEXT,
    PRIMARY KEY (story_id, page_number)
);

CREATE TABLE IF NOT EXISTS story_entities (
    story_id TEXT NOT NULL REFERENCES stories(id) ON DELETE CASCADE,
    entity_id TEXT NOT NULL,
    name TEXT NOT NULL,
    type TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    reference_image_path TEXT,
    generation_id TEXT,
    appears_in_pages_json TEXT NOT NULL DEFAULT '[]',
    PRIMARY KEY (story_id, entity_id)
);

CREATE INDEX IF NOT EXISTS idx_stories_status_created ON stories (status, created_at DESC);
"""

_pool: Optional[asyncpg.Pool] = None


def get_dsn() -> str:
    """PostgreSQL DSN in asyncpg format."""
    # Accept SQLAlchemy-style URLs too
    return DATABASE_URL.replace("+asyncpg", "")


def _check_configured() -> None:
    """Raise an error if the database is not configured."""
    if not DATABASE_URL:
        raise RuntimeError(
            "Database not configured. Set DATABASE_URL environment variable "
            "to a PostgreSQL connection string."
        )


async def open_pool(min_size: int = 1, max_size: int = 5) -> asyncpg.Pool:
    """Create the shared connection pool."""
    global _pool
    _check_configured()
    if _pool is None:
        _pool = await asyncpg.create_pool(get_dsn(), min_size=min_size, max_size=max_size)
    return _pool


def get_pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Ensure the API server is running.")
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


async def init_db(pool: Optional[asyncpg.Pool] = None) -> None:
    """Initialize database - create all tables."""
    pool = pool or get_pool()
    async with pool.acquire() as conn:
        await conn.execute(SCHEMA)
