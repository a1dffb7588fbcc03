"""
Main DSPy Program for generating entity-consistent illustrated storybooks.

Pipeline:
1. Generate the pages and their entity cast in one structured LLM call
2. Analyze which entities recur and where each first appears
3. Illustrate the pages one by one, reusing first-appearance images as
   references for later pages

The pipeline is all-or-nothing: a failure at any stage propagates and no
partial story is returned. Nothing is retried here.
"""

import logging
from typing import Optional

import dspy

from storybook.config import STORY_CONSTANTS
from ..storage import ImageStore
from ..types import (
    Entity,
    ExtractedStory,
    GeneratedImage,
    GeneratedStory,
    StoryBrief,
    StoryConfig,
)
from ..modules.consistency_tracker import analyze, annotate_appearances
from ..modules.illustration_styles import get_style_by_name, resolve_color_mode
from ..modules.image_provider import ImageProvider
from ..modules.page_illustrator import PageIllustrator, ProgressCallback
from ..modules.prompt_composer import PromptComposer
from ..modules.story_extractor import StoryExtractor

logger = logging.getLogger(__name__)


class StoryGenerator(dspy.Module):
    """
    Complete storybook generation pipeline.

    Args:
        image_provider: Image adapter. Required for illustrated generation.
        image_store: Image storage. Required for illustrated generation.
        lm: Optional explicit LM to use. If provided, bypasses global
            dspy.configure() state. Useful for testing and explicit control.
        composer: Optional PromptComposer shared by pages and portraits.
    """

    def __init__(
        self,
        image_provider: Optional[ImageProvider] = None,
        image_store: Optional[ImageStore] = None,
        lm: dspy.LM = None,
        composer: Optional[PromptComposer] = None,
    ):
        super().__init__()
        self.extractor = StoryExtractor(lm=lm)
        self.composer = composer or PromptComposer()
        self.image_provider = image_provider
        self.image_store = image_store

    def forward(
        self,
        brief: StoryBrief,
        config: StoryConfig,
        story_key: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> GeneratedStory:
        return self.generate(brief, config, story_key, on_progress=on_progress)

    def extract(self, brief: StoryBrief) -> ExtractedStory:
        """Generate pages and entities for a brief."""
        max_pages = STORY_CONSTANTS["max_page_count"]
        if brief.page_count > max_pages:
            raise ValueError(f"page_count must be at most {max_pages}, got {brief.page_count}")
        return self.extractor(brief)

    def generate_text_only(self, brief: StoryBrief, config: Optional[StoryConfig] = None) -> GeneratedStory:
        """
        Generate the story text and cast without illustrations.

        Entities come back with appears_in_pages filled in and no references.
        """
        config = config or _default_config(brief)
        extracted = self.extract(brief)
        report = analyze(extracted.pages)
        annotate_appearances(extracted.entities, report)

        logger.info(
            "Text-only story '%s': %d pages, %d recurring entities",
            brief.title,
            len(extracted.pages),
            len(report.recurring),
        )
        return GeneratedStory(
            brief=brief,
            config=config,
            pages=extracted.pages,
            entities=extracted.entities,
        )

    def generate(
        self,
        brief: StoryBrief,
        config: StoryConfig,
        story_key: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> GeneratedStory:
        """
        Generate a complete illustrated storybook.

        Args:
            brief: Title, description, story type, age range and page count
            config: Age range, art style, color mode and layout
            story_key: Directory key for stored images (usually the story id)
            on_progress: Optional callback(stage, detail, completed, total)

        Returns:
            GeneratedStory whose pages carry image locators and whose
            entities carry their reference images

        Raises:
            ExtractionFailure: If the text provider fails or returns bad content
            ImageGenerationFailure: If any page illustration fails
        """
        illustrator = self._illustrator()

        if on_progress:
            on_progress("extraction", "Writing your story...", 0, 1)

        extracted = self.extract(brief)

        if on_progress:
            on_progress("extraction", "Story text complete", 1, 1)

        report = analyze(extracted.pages)
        logger.info(
            "Story '%s': %d entities, %d recurring",
            brief.title,
            len(extracted.entities),
            len(report.recurring),
        )

        illustrated = illustrator.illustrate_story(
            story=extracted,
            report=report,
            config=config,
            story_key=story_key,
            on_progress=on_progress,
        )

        return GeneratedStory(
            brief=brief,
            config=config,
            pages=illustrated.pages,
            entities=illustrated.entities,
        )

    def generate_character_portrait(
        self,
        entity: Entity,
        art_style: str,
        color_mode: str = "color",
    ) -> GeneratedImage:
        """Generate a standalone reference portrait for one character."""
        if self.image_provider is None:
            raise ValueError("An image provider is required for portrait generation")

        style = get_style_by_name(art_style)
        prompt = self.composer.compose_character_portrait(
            entity,
            style,
            resolve_color_mode(art_style, color_mode),
        )
        logger.info("Generating portrait for %s", entity.name)
        return self.image_provider.generate(prompt)

    def _illustrator(self) -> PageIllustrator:
        if self.image_provider is None or self.image_store is None:
            raise ValueError("An image provider and image store are required for illustrated generation")
        return PageIllustrator(self.image_provider, self.image_store, self.composer)


def _default_config(brief: StoryBrief) -> StoryConfig:
    return StoryConfig(
        age_range=brief.age_range,
        art_style=STORY_CONSTANTS["default_art_style"],
        color_mode=STORY_CONSTANTS["default_color_mode"],
        layout_type=STORY_CONSTANTS["default_layout_type"],
        story_type=brief.story_type,
    )
