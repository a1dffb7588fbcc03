"""Progress tracker for story generation."""

import json
import logging
import time
from datetime import datetime, timezone
from typing import Optional

import asyncpg

from ..database.repository import StoryRepository

logger = logging.getLogger(__name__)

# Stage weight mapping for percentage calculation
STAGE_WEIGHTS = {
    "extraction": (0, 20),
    "illustrations": (20, 100),
}


class ProgressTracker:
    """
    Tracks and persists story generation progress.

    Writes go through the task's own asyncpg pool. Updates within the same
    stage are debounced unless they finish the stage.
    """

    def __init__(
        self,
        story_id: str,
        pool: asyncpg.Pool,
        min_update_interval: float = 0.5,
    ):
        self.story_id = story_id
        self.pool = pool
        self.min_update_interval = min_update_interval

        self.last_update_time: Optional[float] = None
        self.last_stage: Optional[str] = None

    async def update_async(
        self,
        stage: str,
        detail: str,
        completed: Optional[int] = None,
        total: Optional[int] = None,
    ) -> None:
        """
        Update progress.

        Args:
            stage: Current pipeline stage
            detail: Human-readable message
            completed: Items completed in current stage
            total: Total items in current stage
        """
        now = time.monotonic()

        is_stage_change = stage != self.last_stage
        is_completion = completed is not None and total is not None and completed == total

        if not is_stage_change and not is_completion and self.last_update_time:
            if now - self.last_update_time < self.min_update_interval:
                return

        progress_data = {
            "stage": stage,
            "stage_detail": detail,
            "percentage": self._calculate_percentage(stage, completed, total),
            "completed": completed,
            "total": total,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }

        try:
            async with self.pool.acquire() as conn:
                await StoryRepository(conn).update_progress(self.story_id, json.dumps(progress_data))
        except (asyncpg.PostgresError, OSError) as e:
            # Progress updates are non-critical
            logger.warning(f"Failed to update progress for {self.story_id}: {e}")

        self.last_update_time = now
        self.last_stage = stage

    def _calculate_percentage(
        self,
        stage: str,
        completed: Optional[int],
        total: Optional[int],
    ) -> int:
        """Calculate weighted percentage based on stage and progress."""
        if stage not in STAGE_WEIGHTS:
            return 0

        start_pct, end_pct = STAGE_WEIGHTS[stage]

        if completed is not None and total is not None and total > 0:
            return int(start_pct + (end_pct - start_pct) * (completed / total))

        return start_pct
