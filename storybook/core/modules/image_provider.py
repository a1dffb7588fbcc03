"""
Image provider adapters for page and portrait illustrations.

The Gemini adapter sends reference images as inline images ahead of the
prompt text in a single multimodal request. No retries happen here; a
failed call surfaces as ImageGenerationFailure.
"""

import logging
from io import BytesIO
from typing import Optional, Protocol, Sequence

from PIL import Image

from storybook.config import (
    extract_image_from_response,
    extract_text_from_response,
    get_image_client,
    get_image_config,
    get_image_model,
)
from ..errors import ImageGenerationFailure
from ..types import GeneratedImage, ReferenceImage

logger = logging.getLogger(__name__)


class ImageProvider(Protocol):
    """Anything that can turn a prompt plus reference images into an image."""

    def generate(
        self,
        prompt: str,
        reference_images: Sequence[ReferenceImage] = (),
    ) -> GeneratedImage:
        ...


class GeminiImageProvider:
    """
    Generate illustrations with Gemini image generation.

    Args:
        client: Optional genai client. Built from the environment when omitted.
        model: Optional model id override.
    """

    def __init__(self, client=None, model: Optional[str] = None):
        self.client = client if client is not None else get_image_client()
        self.model = model or get_image_model()
        self.config = get_image_config()

    def _build_contents(self, prompt: str, reference_images: Sequence[ReferenceImage]) -> list:
        """Reference images first, prompt text last."""
        contents = []
        for reference in reference_images:
            pil_image = Image.open(BytesIO(reference.image_bytes))
            pil_image.load()
            contents.append(pil_image)
        contents.append(prompt)
        return contents

    def generate(
        self,
        prompt: str,
        reference_images: Sequence[ReferenceImage] = (),
    ) -> GeneratedImage:
        try:
            contents = self._build_contents(prompt, reference_images)
        except (OSError, ValueError) as e:
            raise ImageGenerationFailure("Could not decode reference image", str(e)) from e

        logger.info(
            "Requesting illustration from %s (%d reference images, %d prompt chars)",
            self.model,
            len(reference_images),
            len(prompt),
        )

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=contents,
                config=self.config,
            )
        except Exception as e:
            raise ImageGenerationFailure("Image generation request failed", str(e)) from e

        try:
            image_bytes = extract_image_from_response(response)
        except ValueError as e:
            raise ImageGenerationFailure("No image returned from image generation provider", str(e)) from e

        return GeneratedImage(
            image_bytes=image_bytes,
            revised_prompt=extract_text_from_response(response),
            generation_id=getattr(response, "response_id", None),
        )
