"""Pytest fixtures for unit tests."""

import os
from io import BytesIO

import pytest
from unittest.mock import AsyncMock

# Unit tests never touch Postgres or Redis; must be set before app import
os.environ["DATABASE_URL"] = ""

from dotenv import find_dotenv, load_dotenv  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from PIL import Image  # noqa: E402

# Load environment variables (find_dotenv searches parent directories)
load_dotenv(find_dotenv())

from storybook.api.main import app  # noqa: E402
from storybook.api.database.repository import StoryRepository  # noqa: E402
from storybook.api.services.preview_service import PreviewService  # noqa: E402
from storybook.api.services.story_service import StoryService  # noqa: E402
from storybook.api.dependencies import (  # noqa: E402
    get_preview_service,
    get_repository,
    get_story_service,
)
from storybook.core.errors import ImageGenerationFailure  # noqa: E402
from storybook.core.types import (  # noqa: E402
    Entity,
    EntityType,
    ExtractedStory,
    GeneratedImage,
    StoryConfig,
    StoryPage,
)


# =============================================================================
# Domain fixtures
# =============================================================================


def make_png(color: str = "orange") -> bytes:
    """Encode a tiny solid-color PNG."""
    buffer = BytesIO()
    Image.new("RGB", (8, 8), color).save(buffer, format="PNG")
    return buffer.getvalue()


class FakeImageProvider:
    """Records every call and returns a distinct PNG per call.

    fail_on_call is the 1-based call number that raises instead.
    """

    def __init__(self, fail_on_call: int | None = None):
        self.calls: list[dict] = []
        self.fail_on_call = fail_on_call

    def generate(self, prompt, reference_images=()):
        self.calls.append({
            "prompt": prompt,
            "reference_images": tuple(reference_images),
        })
        call_number = len(self.calls)
        if self.fail_on_call == call_number:
            raise ImageGenerationFailure("No image returned from image generation provider", "blocked")
        return GeneratedImage(
            image_bytes=f"image-{call_number}".encode(),
            generation_id=f"gen-{call_number}",
        )


class InMemoryImageStore:
    """ImageStore that keeps bytes in a dict keyed by locator."""

    def __init__(self):
        self.saved: dict[str, bytes] = {}

    def save(self, story_key, page_number, image_bytes):
        locator = f"memory://{story_key}/page_{page_number:02d}.png"
        self.saved[locator] = image_bytes
        return locator

    def load(self, locator):
        return self.saved[locator]


@pytest.fixture
def fake_provider():
    return FakeImageProvider()


@pytest.fixture
def failing_provider():
    """Factory for a provider that fails on the given 1-based call."""
    return lambda fail_on_call: FakeImageProvider(fail_on_call=fail_on_call)


@pytest.fixture
def memory_store():
    return InMemoryImageStore()


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def fox():
    return Entity(
        id="fox",
        name="Fox",
        type=EntityType.CHARACTER,
        description=(
            "SPECIES/TYPE: fox. PRIMARY COLOR SCHEME: bright orange, white, green. "
            "BODY SHAPE: small and slender. Fluffy tail with a white tip. "
            "SIGNATURE CLOTHING/ACCESSORIES: wears a green scarf."
        ),
    )


@pytest.fixture
def owl():
    return Entity(
        id="owl",
        name="Owl",
        type=EntityType.CHARACTER,
        description="A round brown owl with big yellow eyes and soft feathers.",
    )


@pytest.fixture
def forest():
    return Entity(
        id="forest",
        name="Whispering Forest",
        type=EntityType.LOCATION,
        description="Tall pine trees with mossy green floors and golden evening light.",
    )


@pytest.fixture
def lantern():
    return Entity(
        id="lantern",
        name="Lantern",
        type=EntityType.OBJECT,
        description="A small brass lantern with a warm yellow glow.",
    )


@pytest.fixture
def kind_fox_story(fox):
    """Three pages; Fox appears on pages 1 and 3 only."""
    return ExtractedStory(
        entities=[fox],
        pages=[
            StoryPage(page_number=1, text="Fox found a little lost bird.", entity_ids=["fox"]),
            StoryPage(page_number=2, text="The wind blew through the trees.", entity_ids=[]),
            StoryPage(page_number=3, text="Fox walked the bird home.", entity_ids=["fox"]),
        ],
    )


@pytest.fixture
def forest_story(fox, owl, forest, lantern):
    """Four pages with characters, a recurring location and a one-off object."""
    return ExtractedStory(
        entities=[fox, owl, forest, lantern],
        pages=[
            StoryPage(page_number=1, text="Fox lived in the Whispering Forest.", entity_ids=["fox", "forest"]),
            StoryPage(page_number=2, text="Owl was lost and cold.", entity_ids=["owl"]),
            StoryPage(page_number=3, text="Fox lit the lantern for Owl.", entity_ids=["fox", "owl", "lantern"]),
            StoryPage(page_number=4, text="Together they walked through the forest.", entity_ids=["owl", "fox", "forest"]),
        ],
    )


@pytest.fixture
def story_config():
    return StoryConfig(age_range="3-5", art_style="watercolor")


# =============================================================================
# API fixtures
# =============================================================================


@pytest.fixture
def mock_repository():
    """Create a mock repository for unit tests."""
    return AsyncMock(spec=StoryRepository)


@pytest.fixture
def mock_service(mock_repository):
    """Create a mock service for unit tests."""
    return AsyncMock(spec=StoryService)


@pytest.fixture
def mock_previews():
    """Create a mock preview service for unit tests."""
    return AsyncMock(spec=PreviewService)


@pytest.fixture
def client_with_mocks(mock_repository, mock_service, mock_previews):
    """TestClient with mocked dependencies."""
    app.dependency_overrides[get_repository] = lambda: mock_repository
    app.dependency_overrides[get_story_service] = lambda: mock_service
    app.dependency_overrides[get_preview_service] = lambda: mock_previews

    with TestClient(app) as client:
        yield client, mock_repository, mock_service, mock_previews

    app.dependency_overrides.clear()
