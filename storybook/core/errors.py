"""
Failures raised by the story generation pipeline.

Provider-facing failures carry a human-readable message plus the original
provider error text. None of them are retried inside the pipeline.
"""

from typing import Optional


class GenerationFailure(Exception):
    """Base class for story generation failures."""

    def __init__(self, message: str, provider_error: Optional[str] = None):
        self.message = message
        self.provider_error = provider_error
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.provider_error:
            return f"{self.message}: {self.provider_error}"
        return self.message


class ExtractionFailure(GenerationFailure):
    """The text provider returned no content, or content that failed parsing."""


class ImageGenerationFailure(GenerationFailure):
    """The image provider produced no image for a page."""

    def __init__(
        self,
        message: str,
        provider_error: Optional[str] = None,
        page_number: Optional[int] = None,
    ):
        self.page_number = page_number
        super().__init__(message, provider_error)
