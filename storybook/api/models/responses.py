"""Pydantic models for API responses."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .enums import JobStatus


class StoryPageResponse(BaseModel):
    """A single page of the story: text plus one illustration."""

    page_number: int
    text: str
    word_count: int
    entity_ids: list[str] = Field(default_factory=list)
    image_prompt: Optional[str] = None
    image_url: Optional[str] = None


class EntityResponse(BaseModel):
    """A character, location or object kept visually consistent."""

    id: str
    name: str
    type: str
    description: str
    appears_in_pages: list[int] = Field(default_factory=list)
    reference_image_url: Optional[str] = None  # Page illustration where it first appears
    generation_id: Optional[str] = None


class StoryProgressResponse(BaseModel):
    """Progress tracking for story generation."""

    stage: str  # extraction, illustrations, failed
    stage_detail: str
    percentage: int = 0  # 0-100, weighted by stage
    completed: Optional[int] = None
    total: Optional[int] = None
    updated_at: Optional[datetime] = None


class StoryResponse(BaseModel):
    """Full story response with all data."""

    id: str
    status: JobStatus
    title: str
    description: str
    story_type: str
    age_range: str
    page_count: int
    art_style: str
    color_mode: str
    layout_type: str
    llm_model: Optional[str] = None
    created_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    # Populated when completed
    word_count: Optional[int] = None
    pages: Optional[list[StoryPageResponse]] = None
    entities: Optional[list[EntityResponse]] = None

    # Populated while running
    progress: Optional[StoryProgressResponse] = None

    # Error info
    error_message: Optional[str] = None


class StoryListResponse(BaseModel):
    """Paginated list of stories."""

    stories: list[StoryResponse]
    total: int
    limit: int
    offset: int


class CreateStoryResponse(BaseModel):
    """Response for story creation."""

    id: str
    status: JobStatus


class PreviewStoryResponse(BaseModel):
    """Text-only story with its entity cast."""

    title: str
    word_count: int
    pages: list[StoryPageResponse]
    entities: list[EntityResponse]
