"""
Integration tests for image generation with real API calls.

Run with: pytest tests/integration/test_image_generation.py -v
"""

from io import BytesIO

import pytest
from PIL import Image

from storybook.config import extract_image_from_response, get_image_client, get_image_config, get_image_model
from storybook.core.modules.image_provider import GeminiImageProvider
from storybook.core.modules.illustration_styles import get_style_by_name
from storybook.core.modules.prompt_composer import PromptComposer
from storybook.core.types import Entity, EntityType, ReferenceImage


@pytest.mark.requires_google_api
@pytest.mark.slow
class TestExtractImageFromResponseReal:
    """Tests that exercise extract_image_from_response with real API responses."""

    def test_extracts_image_from_real_response(self):
        """Verify extraction works with actual Gemini API response structure."""
        client = get_image_client()

        response = client.models.generate_content(
            model=get_image_model(),
            contents="Generate a simple red circle on white background",
            config=get_image_config(),
        )

        image_bytes = extract_image_from_response(response)

        assert isinstance(image_bytes, bytes)
        assert len(image_bytes) > 1000  # Real images are at least a few KB

        img = Image.open(BytesIO(image_bytes))
        assert img.size[0] > 0
        assert img.size[1] > 0


@pytest.mark.requires_google_api
@pytest.mark.slow
class TestGeminiImageProviderReal:
    """Portrait then reference-guided page with the real provider."""

    @pytest.fixture
    def pip(self):
        return Entity(
            id="pip",
            name="Pip",
            type=EntityType.CHARACTER,
            description="A small round orange kitten with big green eyes. Wears a blue collar with a tiny bell.",
        )

    def test_portrait_then_reference_page(self, pip):
        provider = GeminiImageProvider()
        composer = PromptComposer()

        portrait = provider.generate(
            composer.compose_character_portrait(pip, get_style_by_name("3d_cartoon"))
        )
        assert Image.open(BytesIO(portrait.image_bytes)).size[0] > 0

        reference = ReferenceImage(locator="pip.png", image_bytes=portrait.image_bytes, page_number=1)
        page = provider.generate("Pip chasing a butterfly in a sunny garden. No text.", [reference])

        assert Image.open(BytesIO(page.image_bytes)).size[0] > 0
