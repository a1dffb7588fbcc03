"""Database layer: asyncpg pool and story repository."""

from .db import close_pool, get_pool, init_db, open_pool
from .repository import StoryRepository

__all__ = [
    "StoryRepository",
    "close_pool",
    "get_pool",
    "init_db",
    "open_pool",
]
