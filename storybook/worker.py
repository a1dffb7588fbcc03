"""
ARQ worker for background story generation.

Run with: arq storybook.worker.WorkerSettings
"""

import logging
from typing import Any

import asyncpg
from arq import cron
from arq.connections import RedisSettings
from dotenv import load_dotenv

# Load environment variables before importing app modules
load_dotenv()

from storybook.api.config import REDIS_URL, configure_logging  # noqa: E402
from storybook.api.database.db import get_dsn  # noqa: E402
from storybook.api.database.repository import StoryRepository  # noqa: E402
from storybook.api.services.story_generation import generate_story  # noqa: E402
from storybook.core.types import StoryBrief, StoryConfig  # noqa: E402

logger = logging.getLogger(__name__)


async def generate_story_task(
    ctx: dict[str, Any],
    story_id: str,
    title: str,
    description: str,
    story_type: str = "adventure",
    age_range: str = "6-8",
    page_count: int = 5,
    art_style: str = "watercolor",
    color_mode: str = "color",
    layout_type: str = "side_by_side",
) -> dict[str, Any]:
    """
    ARQ task for generating an illustrated story.

    This is a thin wrapper around the standalone generate_story function,
    which marks the story failed before the exception reaches ARQ.

    Returns:
        Dict with story_id, status and page count
    """
    job_id = ctx.get("job_id", "unknown")
    logger.info(f"Starting story generation job {job_id} for story {story_id}")

    brief = StoryBrief(
        title=title,
        description=description,
        story_type=story_type,
        age_range=age_range,
        page_count=page_count,
    )
    config = StoryConfig(
        age_range=age_range,
        art_style=art_style,
        color_mode=color_mode,
        layout_type=layout_type,
        story_type=story_type,
    )

    try:
        story = await generate_story(story_id=story_id, brief=brief, config=config)
        if story is None:
            logger.info(f"Skipped story generation job {job_id}, story {story_id} is no longer pending")
            return {"story_id": story_id, "status": "skipped", "page_count": 0}
        logger.info(f"Completed story generation job {job_id} for story {story_id}")
        return {"story_id": story_id, "status": "completed", "page_count": story.page_count}

    except Exception as e:
        logger.error(f"Failed story generation job {job_id} for story {story_id}: {e}")
        # Re-raise so ARQ marks the job as failed
        raise


async def cleanup_stale_jobs_task(ctx: dict[str, Any]) -> dict[str, Any]:
    """Cron task that marks stories stuck in pending or running as failed."""
    dsn = get_dsn()
    if not dsn:
        logger.warning("DATABASE_URL not set, skipping stale job cleanup")
        return {"cleaned_stories": 0}

    conn = await asyncpg.connect(dsn)
    try:
        count = await StoryRepository(conn).cleanup_stale_stories()
        if count > 0:
            logger.info(f"Cleaned up {count} stale story job(s)")
        return {"cleaned_stories": count}
    finally:
        await conn.close()


async def startup(ctx: dict[str, Any]) -> None:
    """Called when worker starts up."""
    configure_logging()
    logger.info("ARQ worker starting up")


async def shutdown(ctx: dict[str, Any]) -> None:
    """Called when worker shuts down."""
    logger.info("ARQ worker shutting down")


class WorkerSettings:
    """ARQ worker configuration."""

    functions = [generate_story_task]

    cron_jobs = [
        cron(cleanup_stale_jobs_task, minute=set(range(0, 60, 5))),
    ]

    on_startup = startup
    on_shutdown = shutdown

    redis_settings = RedisSettings.from_dsn(REDIS_URL)

    max_jobs = 2  # Story generation is resource-intensive
    job_timeout = 1800  # 30 minutes, pages are illustrated one at a time

    # A failed story is never retried; the user starts a new one
    max_tries = 1

    health_check_interval = 30
