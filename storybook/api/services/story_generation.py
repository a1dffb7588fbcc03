"""
Standalone story generation logic.

This module contains the story generation function called from the ARQ
worker. It handles its own database connections to avoid event loop
conflicts, and runs the blocking pipeline in a thread.
"""

import asyncio
import time
from datetime import datetime, timezone
from typing import Callable, Optional

import asyncpg

from storybook.core.types import GeneratedStory, StoryBrief, StoryConfig
from ..config import STORIES_DIR, story_logger
from ..database.db import get_dsn
from ..database.repository import StoryRepository
from .progress_tracker import ProgressTracker


def build_story_generator():
    """Build the pipeline with the configured LM, Gemini images and local storage."""
    # Import here to avoid slow startup
    from storybook.config import get_inference_lm
    from storybook.core.modules.image_provider import GeminiImageProvider
    from storybook.core.programs.story_generator import StoryGenerator
    from storybook.core.storage import LocalImageStore

    return StoryGenerator(
        image_provider=GeminiImageProvider(),
        image_store=LocalImageStore(STORIES_DIR),
        lm=get_inference_lm(),
    )


def build_text_generator():
    """Build a text-only pipeline; no image client is needed."""
    from storybook.config import get_inference_lm
    from storybook.core.programs.story_generator import StoryGenerator

    return StoryGenerator(lm=get_inference_lm())


async def generate_story(
    story_id: str,
    brief: StoryBrief,
    config: StoryConfig,
    on_progress: Optional[Callable[[str, str, int, int], None]] = None,
) -> Optional[GeneratedStory]:
    """
    Generate an illustrated story and save it to the database.

    The story record must already exist in pending status. On any failure
    the record is marked failed with the error message and the exception
    propagates; nothing partial is saved. Returns None without generating
    when the story is no longer pending.

    Args:
        story_id: ID of the story record, also the image directory key
        brief: Title, description, story type, age range and page count
        config: Art style, color mode, layout and age range
        on_progress: Optional callback for progress updates
    """
    start_time = time.time()

    # Dedicated pool for this task
    pool = await asyncpg.create_pool(get_dsn(), min_size=1, max_size=2)
    tracker = ProgressTracker(story_id, pool)

    try:
        async with pool.acquire() as conn:
            claimed = await StoryRepository(conn).mark_running(story_id, datetime.now(timezone.utc))
        if not claimed:
            story_logger.generation_skipped(story_id)
            return None

        story_logger.generation_started(story_id, brief.page_count)

        await tracker.update_async("extraction", "Writing your story...")

        generator = build_story_generator()
        loop = asyncio.get_running_loop()

        # Called from the worker thread running the pipeline
        def progress_callback(stage: str, detail: str, completed: int, total: int):
            asyncio.run_coroutine_threadsafe(
                tracker.update_async(stage, detail, completed, total),
                loop,
            )
            if stage == "extraction" and completed == total:
                story_logger.stage_completed(story_id, "extraction", time.time() - start_time)
            if stage == "illustrations" and 0 < completed <= total and detail.startswith("Illustrated page"):
                story_logger.page_illustrated(story_id, completed, total)
            if on_progress:
                on_progress(stage, detail, completed, total)

        story = await asyncio.to_thread(
            generator.generate,
            brief,
            config,
            story_id,
            on_progress=progress_callback,
        )

        async with pool.acquire() as conn:
            await StoryRepository(conn).save_completed_story(
                story_id=story_id,
                word_count=story.word_count,
                pages=[page.to_dict() for page in story.pages],
                entities=[entity.to_dict() for entity in story.entities],
            )

        story_logger.generation_completed(story_id, time.time() - start_time)
        return story

    except Exception as e:
        story_logger.generation_failed(story_id, e, stage=tracker.last_stage)
        await tracker.update_async("failed", f"Generation failed: {type(e).__name__}")

        async with pool.acquire() as conn:
            await StoryRepository(conn).update_status(
                story_id,
                "failed",
                completed_at=datetime.now(timezone.utc),
                error_message=str(e),
            )
        raise

    finally:
        await pool.close()
