"""Synchronous-request generations that skip the job queue and the database."""

import asyncio
import re

from storybook.core.types import Entity, EntityType, GeneratedImage, GeneratedStory, StoryBrief
from ..models.requests import CharacterPortraitRequest, PreviewStoryRequest
from .story_generation import build_story_generator, build_text_generator


class PreviewService:
    """Text-only story previews and standalone character portraits."""

    async def preview_story(self, request: PreviewStoryRequest) -> GeneratedStory:
        """Write the story text and cast without illustrating it."""
        brief = StoryBrief(
            title=request.title,
            description=request.description,
            story_type=request.story_type.value,
            age_range=request.age_range.value,
            page_count=request.page_count,
        )
        generator = build_text_generator()
        return await asyncio.to_thread(generator.generate_text_only, brief)

    async def generate_portrait(self, request: CharacterPortraitRequest) -> GeneratedImage:
        """Generate a reference portrait for one character."""
        name = request.name.strip()
        entity = Entity(
            id=re.sub(r"\W+", "_", name.lower()).strip("_") or "character",
            name=name,
            type=EntityType.CHARACTER,
            description=request.description.strip(),
        )
        generator = build_story_generator()
        return await asyncio.to_thread(
            generator.generate_character_portrait,
            entity,
            request.art_style.value,
            request.color_mode.value,
        )
