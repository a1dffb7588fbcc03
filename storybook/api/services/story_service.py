"""Story service for creating generation jobs."""

import uuid

from ..database.repository import StoryRepository
from ..arq_pool import get_pool as get_arq_pool
from ..models.requests import CreateStoryRequest


class StoryService:
    """Service for creating and managing story generation jobs."""

    def __init__(self, repo: StoryRepository):
        self.repo = repo

    async def create_story_job(self, request: CreateStoryRequest) -> str:
        """
        Create a new story generation job.

        Creates a pending record in the database and enqueues an ARQ job
        to generate the story in the background.

        Returns:
            The story ID which can be used to poll for status.
        """
        # Import here to avoid circular imports
        from storybook.config import get_inference_model_name

        story_id = str(uuid.uuid4())

        await self.repo.create_story(
            story_id=story_id,
            title=request.title,
            description=request.description,
            story_type=request.story_type.value,
            age_range=request.age_range.value,
            page_count=request.page_count,
            art_style=request.art_style.value,
            color_mode=request.color_mode.value,
            layout_type=request.layout_type.value,
            llm_model=get_inference_model_name(),
        )

        arq_pool = get_arq_pool()
        await arq_pool.enqueue_job(
            "generate_story_task",
            story_id=story_id,
            title=request.title,
            description=request.description,
            story_type=request.story_type.value,
            age_range=request.age_range.value,
            page_count=request.page_count,
            art_style=request.art_style.value,
            color_mode=request.color_mode.value,
            layout_type=request.layout_type.value,
        )

        return story_id
