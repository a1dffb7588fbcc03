"""
Image generation configuration for the Consistent Storybook Generator.

Uses Gemini image generation ("Nano Banana") for page illustrations.
"""

import base64
import os

from dotenv import load_dotenv
from google import genai
from google.genai.types import GenerateContentConfig, Modality

# Load environment variables from .env file
load_dotenv()

# Image generation constants
IMAGE_CONSTANTS = {
    "model": "gemini-2.5-flash-image",
    "max_reference_images": 3,  # Leading reference images per page
    "max_prompt_length": 1000,
    "prompt_wrapper_length": 200,  # Reserved for the template around the scene block
}


def get_image_client() -> genai.Client:
    """
    Get the Gemini client for illustration generation.

    Uses GEMINI_API_KEY, falling back to GOOGLE_API_KEY.
    """
    api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
    if not api_key:
        raise ValueError("GEMINI_API_KEY or GOOGLE_API_KEY not found in environment. Set it in .env file.")

    return genai.Client(api_key=api_key)


def get_image_model() -> str:
    """Get the image model ID."""
    return os.getenv("STORYBOOK_IMAGE_MODEL") or IMAGE_CONSTANTS["model"]


def get_image_config() -> GenerateContentConfig:
    """Get the default config for image generation."""
    return GenerateContentConfig(
        response_modalities=[Modality.TEXT, Modality.IMAGE]
    )


def extract_image_from_response(response) -> bytes:
    """
    Extract image bytes from a Gemini API response.

    Args:
        response: The response from genai.Client.models.generate_content()

    Returns:
        Image bytes (PNG/JPEG)

    Raises:
        ValueError: If no image found in response
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        raise ValueError("No candidates returned from Gemini")

    content = candidates[0].content
    if not content or not content.parts:
        raise ValueError("No content parts in Gemini response")

    for part in content.parts:
        if getattr(part, "inline_data", None) and part.inline_data.data:
            data = part.inline_data.data
            return base64.b64decode(data) if isinstance(data, str) else data

    raise ValueError("No image data found in Gemini response")


def extract_text_from_response(response) -> str | None:
    """Return any text parts the model sent alongside the image."""
    candidates = getattr(response, "candidates", None)
    if not candidates or not candidates[0].content or not candidates[0].content.parts:
        return None
    texts = [part.text for part in candidates[0].content.parts if getattr(part, "text", None)]
    return "\n".join(texts).strip() or None
