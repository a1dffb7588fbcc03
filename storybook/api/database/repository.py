"""Repository for story CRUD operations using raw asyncpg SQL."""

import json
from datetime import datetime, timezone
from typing import Optional

import asyncpg

from ..models.enums import JobStatus
from ..models.responses import (
    EntityResponse,
    StoryPageResponse,
    StoryProgressResponse,
    StoryResponse,
)

# Stories stuck longer than this are marked failed by the worker.
# Queued jobs wait behind max_jobs slots of up to 30 minutes each.
STALE_PENDING_MINUTES = 360
STALE_RUNNING_MINUTES = 35


class StoryRepository:
    """Repository for story persistence operations."""

    def __init__(self, conn: asyncpg.Connection):
        self.conn = conn

    async def create_story(
        self,
        story_id: str,
        title: str,
        description: str,
        story_type: str,
        age_range: str,
        page_count: int,
        art_style: str,
        color_mode: str,
        layout_type: str,
        llm_model: Optional[str] = None,
    ) -> None:
        """Create a new story record in pending status."""
        await self.conn.execute(
            """
            INSERT INTO stories
                (id, title, description, story_type, age_range, page_count,
                 art_style, color_mode, layout_type, llm_model, status)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, 'pending')
            """,
            story_id,
            title,
            description,
            story_type,
            age_range,
            page_count,
            art_style,
            color_mode,
            layout_type,
            llm_model,
        )

    async def update_status(
        self,
        story_id: str,
        status: str,
        started_at: Optional[datetime] = None,
        completed_at: Optional[datetime] = None,
        error_message: Optional[str] = None,
    ) -> None:
        """Update story status and timestamps."""
        await self.conn.execute(
            """
            UPDATE stories
            SET status = $2,
                started_at = COALESCE($3, started_at),
                completed_at = COALESCE($4, completed_at),
                error_message = COALESCE($5, error_message)
            WHERE id = $1
            """,
            story_id,
            status,
            started_at,
            completed_at,
            error_message,
        )

    async def mark_running(self, story_id: str, started_at: datetime) -> bool:
        """Move a pending story to running.

        Returns False when the story is no longer pending, e.g. the stale
        cleanup already failed it or it was deleted.
        """
        result = await self.conn.execute(
            """
            UPDATE stories
            SET status = 'running',
                started_at = $2,
                error_message = NULL
            WHERE id = $1 AND status = 'pending'
            """,
            story_id,
            started_at,
        )
        return result.split()[-1] != "0"

    async def update_progress(self, story_id: str, progress_json: str) -> None:
        """Update story progress JSON."""
        await self.conn.execute(
            "UPDATE stories SET progress_json = $2 WHERE id = $1",
            story_id,
            progress_json,
        )

    async def save_completed_story(
        self,
        story_id: str,
        word_count: int,
        pages: list[dict],
        entities: list[dict],
    ) -> None:
        """Save pages and entities and mark the story completed, in one transaction.

        pages and entities use the shape of StoryPage.to_dict() and
        Entity.to_dict().
        """
        async with self.conn.transaction():
            await self.conn.execute(
                """
                UPDATE stories
                SET word_count = $2,
                    page_count = $3,
                    status = 'completed',
                    completed_at = $4,
                    error_message = NULL
                WHERE id = $1
                """,
                story_id,
                word_count,
                len(pages),
                datetime.now(timezone.utc),
            )

            page_data = [
                (
                    story_id,
                    p["page_number"],
                    p["text"],
                    json.dumps(p.get("entity_ids", [])),
                    p.get("image_prompt"),
                    p.get("image_url"),
                )
                for p in pages
            ]
            await self.conn.executemany(
                """
                INSERT INTO story_pages
                    (story_id, page_number, text, entity_ids_json, image_prompt, image_path)
                VALUES ($1, $2, $3, $4, $5, $6)
                """,
                page_data,
            )

            if entities:
                entity_data = [
                    (
                        story_id,
                        e["id"],
                        e["name"],
                        e["type"],
                        e.get("description", ""),
                        e.get("reference_image"),
                        e.get("generation_id"),
                        json.dumps(e.get("appears_in_pages", [])),
                    )
                    for e in entities
                ]
                await self.conn.executemany(
                    """
                    INSERT INTO story_entities
                        (story_id, entity_id, name, type, description,
                         reference_image_path, generation_id, appears_in_pages_json)
                    VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
                    """,
                    entity_data,
                )

    async def get_story(self, story_id: str) -> Optional[StoryResponse]:
        """Get a story by ID with its pages and entities."""
        story = await self.conn.fetchrow(
            "SELECT * FROM stories WHERE id = $1",
            story_id,
        )
        if not story:
            return None

        pages = await self.conn.fetch(
            """
            SELECT * FROM story_pages
            WHERE story_id = $1
            ORDER BY page_number
            """,
            story_id,
        )

        entities = await self.conn.fetch(
            "SELECT * FROM story_entities WHERE story_id = $1 ORDER BY entity_id",
            story_id,
        )

        return self._record_to_response(story, pages, entities)

    async def get_page_image_path(self, story_id: str, page_number: int) -> Optional[str]:
        """Stored image path for one page, if the page was illustrated."""
        return await self.conn.fetchval(
            "SELECT image_path FROM story_pages WHERE story_id = $1 AND page_number = $2",
            story_id,
            page_number,
        )

    async def list_stories(
        self,
        limit: int = 20,
        offset: int = 0,
        status: Optional[str] = None,
    ) -> tuple[list[StoryResponse], int]:
        """List stories with pagination and optional status filter."""
        if status:
            total = await self.conn.fetchval(
                "SELECT COUNT(*) FROM stories WHERE status = $1",
                status,
            )
            stories = await self.conn.fetch(
                """
                SELECT * FROM stories
                WHERE status = $1
                ORDER BY created_at DESC
                LIMIT $2 OFFSET $3
                """,
                status,
                limit,
                offset,
            )
        else:
            total = await self.conn.fetchval("SELECT COUNT(*) FROM stories")
            stories = await self.conn.fetch(
                """
                SELECT * FROM stories
                ORDER BY created_at DESC
                LIMIT $1 OFFSET $2
                """,
                limit,
                offset,
            )

        return [self._record_to_response(s) for s in stories], total or 0

    async def delete_story(self, story_id: str) -> bool:
        """Delete a story and all related data (cascades via FK)."""
        result = await self.conn.execute(
            "DELETE FROM stories WHERE id = $1",
            story_id,
        )
        # Result is like "DELETE 1" or "DELETE 0"
        return result.split()[-1] != "0"

    async def cleanup_stale_stories(self) -> int:
        """Mark stories stuck in pending or running as failed."""
        result = await self.conn.execute(
            """
            UPDATE stories
            SET status = 'failed',
                completed_at = now(),
                error_message = 'Generation timed out'
            WHERE (status = 'pending' AND created_at < now() - make_interval(mins => $1))
               OR (status = 'running' AND started_at < now() - make_interval(mins => $2))
            """,
            STALE_PENDING_MINUTES,
            STALE_RUNNING_MINUTES,
        )
        return int(result.split()[-1])

    def _record_to_response(
        self,
        story: asyncpg.Record,
        pages: Optional[list[asyncpg.Record]] = None,
        entities: Optional[list[asyncpg.Record]] = None,
    ) -> StoryResponse:
        """Convert asyncpg Records to the response model."""
        story_id = story["id"]

        page_responses = None
        if pages:
            page_responses = [
                StoryPageResponse(
                    page_number=p["page_number"],
                    text=p["text"],
                    word_count=len(p["text"].split()),
                    entity_ids=json.loads(p["entity_ids_json"] or "[]"),
                    image_prompt=p["image_prompt"],
                    image_url=f"/stories/{story_id}/pages/{p['page_number']}/image"
                    if p["image_path"]
                    else None,
                )
                for p in pages
            ]

        entity_responses = None
        if entities:
            entity_responses = []
            for e in entities:
                appears_in_pages = json.loads(e["appears_in_pages_json"] or "[]")
                reference_url = None
                if e["reference_image_path"] and appears_in_pages:
                    reference_url = f"/stories/{story_id}/pages/{appears_in_pages[0]}/image"
                entity_responses.append(EntityResponse(
                    id=e["entity_id"],
                    name=e["name"],
                    type=e["type"],
                    description=e["description"],
                    appears_in_pages=appears_in_pages,
                    reference_image_url=reference_url,
                    generation_id=e["generation_id"],
                ))

        progress = None
        if story["progress_json"]:
            progress = StoryProgressResponse(**json.loads(story["progress_json"]))

        return StoryResponse(
            id=story_id,
            status=JobStatus(story["status"]),
            title=story["title"],
            description=story["description"],
            story_type=story["story_type"],
            age_range=story["age_range"],
            page_count=story["page_count"],
            art_style=story["art_style"],
            color_mode=story["color_mode"],
            layout_type=story["layout_type"],
            llm_model=story["llm_model"],
            created_at=story["created_at"],
            started_at=story["started_at"],
            completed_at=story["completed_at"],
            word_count=story["word_count"],
            pages=page_responses,
            entities=entity_responses,
            progress=progress,
            error_message=story["error_message"],
        )
