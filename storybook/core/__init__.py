# Consistent Storybook Generator - Core Domain

# Re-export types for convenient access
from .types import (
    StyleDefinition,
    EntityType,
    Entity,
    StoryBrief,
    StoryConfig,
    StoryPage,
    ExtractedStory,
    ConsistencyReport,
    ReferenceImage,
    ComposedPrompt,
    GeneratedImage,
    GeneratedStory,
)
from .errors import GenerationFailure, ExtractionFailure, ImageGenerationFailure

__all__ = [
    "StyleDefinition",
    "EntityType",
    "Entity",
    "StoryBrief",
    "StoryConfig",
    "StoryPage",
    "ExtractedStory",
    "ConsistencyReport",
    "ReferenceImage",
    "ComposedPrompt",
    "GeneratedImage",
    "GeneratedStory",
    "GenerationFailure",
    "ExtractionFailure",
    "ImageGenerationFailure",
]
