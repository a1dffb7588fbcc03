"""Services for story generation."""

from .story_service import StoryService
from .preview_service import PreviewService
from .story_generation import generate_story

__all__ = ["StoryService", "PreviewService", "generate_story"]
