"""Pydantic models for API requests."""

from pydantic import BaseModel, Field

from .enums import AgeRangeOption, ArtStyle, ColorModeOption, LayoutType, StoryType


class StoryBriefRequest(BaseModel):
    """Fields shared by every request that writes a story."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Title of the storybook",
        examples=["The Kind Fox"],
    )
    description: str = Field(
        ...,
        min_length=10,
        max_length=5000,
        description="What the story should be about",
        examples=["A fox helps a lost owl find its way home through the forest"],
    )
    story_type: StoryType = Field(default=StoryType.ADVENTURE, description="Tone of the story")
    age_range: AgeRangeOption = Field(default=AgeRangeOption.EARLY_READER, description="Reader age range")
    page_count: int = Field(default=5, ge=1, le=20, description="Number of pages to write")


class CreateStoryRequest(StoryBriefRequest):
    """Request body for creating a new illustrated story."""

    art_style: ArtStyle = Field(default=ArtStyle.WATERCOLOR, description="Illustration style")
    color_mode: ColorModeOption = Field(
        default=ColorModeOption.COLOR,
        description="Monochrome falls back to color for color-only styles",
    )
    layout_type: LayoutType = Field(default=LayoutType.SIDE_BY_SIDE)


class PreviewStoryRequest(StoryBriefRequest):
    """Request body for a text-only story preview."""


class CharacterPortraitRequest(BaseModel):
    """Request body for a standalone character reference portrait."""

    name: str = Field(..., min_length=1, max_length=100, examples=["Fox"])
    description: str = Field(
        ...,
        min_length=3,
        max_length=2000,
        examples=["A small orange fox with a fluffy white-tipped tail and a green scarf"],
    )
    art_style: ArtStyle = Field(default=ArtStyle.WATERCOLOR)
    color_mode: ColorModeOption = Field(default=ColorModeOption.COLOR)
