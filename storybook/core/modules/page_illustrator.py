"""
Module for generating page illustrations one page at a time.

Pages are illustrated strictly in order. The illustration of the page on
which an entity first appears becomes that entity's reference image, and
every later page that shows the entity sends the reference ahead of its
prompt. Because page N may depend on page N-1, nothing runs in parallel.

Progress is tracked in an immutable IllustrationState; each transition
returns a new state. Any page failure fails the whole story and the
remaining pages are never attempted.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Iterable, Optional

from ..errors import ImageGenerationFailure
from ..storage import ImageStore
from ..types import (
    ConsistencyReport,
    Entity,
    ExtractedStory,
    GeneratedImage,
    ReferenceImage,
    StoryConfig,
    StoryPage,
)
from .age_guidance import get_age_guidance
from .consistency_tracker import annotate_appearances
from .illustration_styles import get_style_by_name, resolve_color_mode
from .image_provider import ImageProvider
from .prompt_composer import PromptComposer

logger = logging.getLogger(__name__)

# Callback(stage, detail, completed, total)
ProgressCallback = Callable[[str, str, int, int], None]


class GenerationStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class IllustrationState:
    """Snapshot of illustration progress for one story."""

    status: GenerationStatus = GenerationStatus.PENDING
    current_page_index: Optional[int] = None
    completed_pages: tuple[int, ...] = ()
    references: dict[str, ReferenceImage] = field(default_factory=dict)
    # entity id -> generation id of the image that established it
    generation_ids: dict[str, str] = field(default_factory=dict)
    failed_page_index: Optional[int] = None
    error: Optional[str] = None

    def start(self) -> "IllustrationState":
        return replace(self, status=GenerationStatus.IN_PROGRESS, current_page_index=None)

    def begin_page(self, page_index: int) -> "IllustrationState":
        return replace(self, current_page_index=page_index)

    def record_page(
        self,
        page_number: int,
        reference: ReferenceImage,
        establishes: Iterable[str],
    ) -> "IllustrationState":
        """
        Record a finished page and the entities it establishes.

        A reference, once set for an entity, is never replaced.
        """
        references = dict(self.references)
        generation_ids = dict(self.generation_ids)
        for entity_id in establishes:
            if entity_id not in references:
                references[entity_id] = reference
                if reference.generation_id:
                    generation_ids[entity_id] = reference.generation_id

        return replace(
            self,
            completed_pages=self.completed_pages + (page_number,),
            references=references,
            generation_ids=generation_ids,
        )

    def complete(self) -> "IllustrationState":
        return replace(self, status=GenerationStatus.COMPLETED, current_page_index=None)

    def fail(self, page_index: int, error: Optional[str] = None) -> "IllustrationState":
        return replace(
            self,
            status=GenerationStatus.FAILED,
            failed_page_index=page_index,
            error=error,
        )


@dataclass
class IllustratedStory:
    """Pages with images attached, entities with references, and the final state."""

    pages: list[StoryPage]
    entities: list[Entity]
    state: IllustrationState


class PageIllustrator:
    """
    Illustrate every page of an extracted story in order.

    Args:
        image_provider: Adapter that turns prompts plus references into images.
        image_store: Where generated page images are written.
        composer: Optional PromptComposer; a default one is built otherwise.
    """

    def __init__(
        self,
        image_provider: ImageProvider,
        image_store: ImageStore,
        composer: Optional[PromptComposer] = None,
    ):
        self.image_provider = image_provider
        self.image_store = image_store
        self.composer = composer or PromptComposer()

    def illustrate_story(
        self,
        story: ExtractedStory,
        report: ConsistencyReport,
        config: StoryConfig,
        story_key: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> IllustratedStory:
        """
        Generate one illustration per page, serially.

        Raises:
            ImageGenerationFailure: If any page fails. No later page is attempted.
        """
        style = get_style_by_name(config.art_style)
        color_mode = resolve_color_mode(config.art_style, config.color_mode)
        age_guidance = get_age_guidance(config.age_range)
        entity_map = story.entity_map()
        total = len(story.pages)

        state = IllustrationState().start()
        illustrated_pages: list[StoryPage] = []

        if on_progress:
            on_progress("illustrations", f"Generating {total} page illustrations...", 0, total)

        for page_index, page in enumerate(story.pages):
            state = state.begin_page(page_index)

            prompt = self.composer.compose(
                page=page,
                all_entities=entity_map,
                recurring=report.recurring,
                first_appearance=report.first_appearance,
                style=style,
                age_guidance=age_guidance,
                reference_images=state.references,
                is_first_page=page_index == 0,
                is_last_page=page_index == total - 1,
                page_index=page_index,
                color_mode=color_mode,
            )

            logger.info(
                "Illustrating page %d of %d (%d references)",
                page.page_number,
                total,
                len(prompt.reference_images),
            )

            try:
                image = self.image_provider.generate(prompt.text, prompt.reference_images)
                locator = self._store(story_key, page.page_number, image)
            except ImageGenerationFailure as e:
                if e.page_number is None:
                    e.page_number = page.page_number
                state = state.fail(page_index, str(e))
                logger.error("Page %d illustration failed: %s", page.page_number, e)
                if on_progress:
                    on_progress("failed", f"Page {page.page_number} failed", page_index, total)
                raise

            reference = ReferenceImage(
                locator=locator,
                image_bytes=image.image_bytes,
                page_number=page.page_number,
                generation_id=image.generation_id,
            )
            state = state.record_page(
                page.page_number,
                reference,
                report.first_appears_on(page_index),
            )

            illustrated_pages.append(replace(
                page,
                entity_ids=list(page.entity_ids),
                image_prompt=prompt.text,
                image_url=locator,
            ))

            if on_progress:
                on_progress("illustrations", f"Illustrated page {page.page_number}", page_index + 1, total)

        state = state.complete()
        entities = self._attach_references(story.entities, state, report)

        if on_progress:
            on_progress("illustrations", "All illustrations complete", total, total)

        return IllustratedStory(pages=illustrated_pages, entities=entities, state=state)

    def _store(self, story_key: str, page_number: int, image: GeneratedImage) -> str:
        try:
            return self.image_store.save(story_key, page_number, image.image_bytes)
        except OSError as e:
            raise ImageGenerationFailure(
                "Could not store illustration", str(e), page_number=page_number
            ) from e

    def _attach_references(
        self,
        entities: list[Entity],
        state: IllustrationState,
        report: ConsistencyReport,
    ) -> list[Entity]:
        updated = []
        for entity in entities:
            reference = state.references.get(entity.id)
            updated.append(replace(
                entity,
                reference_image=reference.locator if reference else None,
                generation_id=state.generation_ids.get(entity.id),
                appears_in_pages=list(entity.appears_in_pages),
            ))
        annotate_appearances(updated, report)
        return updated
