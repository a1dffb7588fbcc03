# DSPy Signatures for storybook generation

from .story_entities import StoryEntitiesSignature

__all__ = [
    "StoryEntitiesSignature",
]
