"""Story endpoints."""

import logging
import shutil
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import FileResponse

from storybook.core.errors import GenerationFailure
from ..config import STORIES_DIR
from ..dependencies import Previews, Repository, Service
from ..models.enums import JobStatus
from ..models.requests import CreateStoryRequest, PreviewStoryRequest
from ..models.responses import (
    CreateStoryResponse,
    EntityResponse,
    PreviewStoryResponse,
    StoryListResponse,
    StoryPageResponse,
    StoryResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/",
    response_model=CreateStoryResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Create a new story",
    description="Start an illustrated story generation job. Returns immediately with an ID that can be polled for status.",
)
async def create_story(request: CreateStoryRequest, service: Service):
    """Start a new story generation job."""
    story_id = await service.create_story_job(request)

    return CreateStoryResponse(
        id=story_id,
        status=JobStatus.PENDING,
    )


@router.post(
    "/preview",
    response_model=PreviewStoryResponse,
    summary="Preview story text",
    description="Write the story pages and extract the entity cast without generating illustrations.",
)
async def preview_story(request: PreviewStoryRequest, previews: Previews):
    """Generate story text and entities synchronously."""
    try:
        story = await previews.preview_story(request)
    except GenerationFailure as e:
        logger.error(f"Preview failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e),
        )

    return PreviewStoryResponse(
        title=story.title,
        word_count=story.word_count,
        pages=[
            StoryPageResponse(
                page_number=page.page_number,
                text=page.text,
                word_count=page.word_count,
                entity_ids=page.entity_ids,
            )
            for page in story.pages
        ],
        entities=[
            EntityResponse(
                id=entity.id,
                name=entity.name,
                type=entity.type.value,
                description=entity.description,
                appears_in_pages=entity.appears_in_pages,
            )
            for entity in story.entities
        ],
    )


@router.get(
    "/",
    response_model=StoryListResponse,
    summary="List all stories",
    description="Get a paginated list of all stories, optionally filtered by status.",
)
async def list_stories(
    repo: Repository,
    limit: int = Query(default=20, ge=1, le=100, description="Maximum number of stories to return"),
    offset: int = Query(default=0, ge=0, description="Number of stories to skip"),
    status: Optional[JobStatus] = Query(default=None, description="Filter by status (pending, running, completed, failed)"),
):
    """List all stories with pagination and optional status filter."""
    stories, total = await repo.list_stories(
        limit=limit,
        offset=offset,
        status=status.value if status else None,
    )

    return StoryListResponse(
        stories=stories,
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/{story_id}",
    response_model=StoryResponse,
    summary="Get a story",
    description="Get a story by ID. Poll this endpoint to check generation status.",
)
async def get_story(story_id: str, repo: Repository):
    """Get a story by ID."""
    story = await repo.get_story(story_id)

    if not story:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Story {story_id} not found",
        )

    return story


@router.get(
    "/{story_id}/pages/{page_number}/image",
    summary="Get page illustration",
    description="Get the illustration image for a specific page.",
    responses={
        200: {"content": {"image/png": {}}},
        404: {"description": "Image not found"},
    },
)
async def get_page_image(story_id: str, page_number: int, repo: Repository):
    """Get a page illustration image."""
    image_path = await repo.get_page_image_path(story_id, page_number)

    if not image_path or not Path(image_path).exists():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Image for page {page_number} not found",
        )

    return FileResponse(image_path, media_type="image/png")


@router.delete(
    "/{story_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a story",
    description="Delete a story and all associated files.",
)
async def delete_story(story_id: str, repo: Repository):
    """Delete a story and its files."""
    deleted = await repo.delete_story(story_id)

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Story {story_id} not found",
        )

    story_dir = STORIES_DIR / story_id
    if story_dir.exists():
        shutil.rmtree(story_dir)
