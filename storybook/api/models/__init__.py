"""Pydantic models for API requests and responses."""

from .enums import AgeRangeOption, ArtStyle, ColorModeOption, JobStatus, LayoutType, StoryType
from .requests import CharacterPortraitRequest, CreateStoryRequest, PreviewStoryRequest
from .responses import (
    CreateStoryResponse,
    EntityResponse,
    PreviewStoryResponse,
    StoryListResponse,
    StoryPageResponse,
    StoryProgressResponse,
    StoryResponse,
)

__all__ = [
    "CreateStoryRequest",
    "PreviewStoryRequest",
    "CharacterPortraitRequest",
    "StoryResponse",
    "StoryListResponse",
    "CreateStoryResponse",
    "PreviewStoryResponse",
    "StoryPageResponse",
    "StoryProgressResponse",
    "EntityResponse",
    "JobStatus",
    "StoryType",
    "AgeRangeOption",
    "ArtStyle",
    "ColorModeOption",
    "LayoutType",
]
