"""
Configuration module for the Consistent Storybook Generator.
"""

from .llm import configure_dspy, get_inference_lm, get_inference_model_name
from .story import STORY_CONSTANTS
from .image import (
    IMAGE_CONSTANTS,
    get_image_client,
    get_image_model,
    get_image_config,
    extract_image_from_response,
    extract_text_from_response,
)

__all__ = [
    # LLM
    "configure_dspy",
    "get_inference_lm",
    "get_inference_model_name",
    # Story
    "STORY_CONSTANTS",
    # Image
    "IMAGE_CONSTANTS",
    "get_image_client",
    "get_image_model",
    "get_image_config",
    "extract_image_from_response",
    "extract_text_from_response",
]
