"""
DSPy Module for extracting a page-by-page narrative and its entity cast.

A single structured-generation call returns the story pages together with
the canonical entities (characters, locations, objects) and, for every
page, the ids of the entities present on it. The JSON is validated with
pydantic; anything missing or malformed fails the extraction outright.
"""

import logging
import re
from typing import Optional

import dspy
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from storybook.config import STORY_CONSTANTS
from ..errors import ExtractionFailure
from ..types import Entity, EntityType, ExtractedStory, StoryBrief, StoryPage
from ..signatures.story_entities import StoryEntitiesSignature
from .age_guidance import AgeGuidance, get_age_guidance

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL | re.IGNORECASE)


# =============================================================================
# Payload schema
# =============================================================================


class EntityPayload(BaseModel):
    """One entry of the entities[] array."""

    id: str = Field(min_length=1)
    name: str
    type: EntityType
    description: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        return str(value).strip() if value is not None else value

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class PagePayload(BaseModel):
    """One entry of the pages[] array."""

    model_config = ConfigDict(populate_by_name=True)

    text: str
    entities_present: list[str] = Field(default_factory=list, alias="entitiesPresent")

    @field_validator("entities_present", mode="before")
    @classmethod
    def _coerce_ids(cls, value):
        if value is None:
            return []
        if isinstance(value, list):
            return [str(item).strip() for item in value if item is not None]
        return value


class StoryPayload(BaseModel):
    """Top-level JSON object returned by the text provider."""

    entities: list[EntityPayload] = Field(default_factory=list)
    pages: list[PagePayload]


# =============================================================================
# Extractor
# =============================================================================


class StoryExtractor(dspy.Module):
    """
    Generate a story and extract its canonical entity cast in one call.

    Args:
        lm: Optional explicit LM to use. If provided, bypasses global
            dspy.configure() state.
        max_main_characters: Cap on main characters requested from the model.
    """

    def __init__(
        self,
        lm: Optional[dspy.LM] = None,
        max_main_characters: int = STORY_CONSTANTS["max_main_characters"],
    ):
        super().__init__()
        self._lm = lm
        self.max_main_characters = max_main_characters
        self.generate = dspy.Predict(StoryEntitiesSignature)

    def forward(self, brief: StoryBrief) -> ExtractedStory:
        """
        Generate the story pages and entities for a brief.

        Raises:
            ValueError: If the brief asks for fewer than one page.
            ExtractionFailure: If the provider fails or returns unusable content.
        """
        if brief.page_count < 1:
            raise ValueError(f"page_count must be at least 1, got {brief.page_count}")

        guidance = get_age_guidance(brief.age_range)

        logger.info(
            "Extracting story '%s' (%d pages, ages %s)",
            brief.title,
            brief.page_count,
            guidance.age_range,
        )

        try:
            if self._lm is not None:
                with dspy.context(lm=self._lm):
                    result = self._request(brief, guidance)
            else:
                result = self._request(brief, guidance)
        except Exception as e:
            raise ExtractionFailure("Text generation request failed", str(e)) from e

        return self.parse_story(getattr(result, "story_json", None), brief.page_count)

    def _request(self, brief: StoryBrief, guidance: AgeGuidance):
        return self.generate(
            title=brief.title,
            description=brief.description,
            story_type=brief.story_type,
            age_range=guidance.age_range,
            page_count=brief.page_count,
            writing_guidelines=guidance.to_writing_guidelines(),
            max_main_characters=self.max_main_characters,
        )

    def parse_story(self, raw_output: Optional[str], expected_pages: int) -> ExtractedStory:
        """Validate the raw JSON text and build the extracted story."""
        if raw_output is None or not str(raw_output).strip():
            raise ExtractionFailure("No content returned from text generation provider")

        text = str(raw_output).strip()
        fenced = _CODE_FENCE.match(text)
        if fenced:
            text = fenced.group(1)

        try:
            payload = StoryPayload.model_validate_json(text)
        except ValidationError as e:
            raise ExtractionFailure("Story content failed schema validation", str(e)) from e

        if not payload.pages:
            raise ExtractionFailure("Story content contained no pages")

        entities = self._build_entities(payload.entities)
        known_ids = {entity.id for entity in entities}
        pages = self._build_pages(payload.pages, known_ids)

        if len(pages) != expected_pages:
            logger.warning("Expected %d pages, got %d", expected_pages, len(pages))

        character_count = sum(1 for entity in entities if entity.is_character)
        if character_count > self.max_main_characters:
            logger.warning(
                "Story has %d characters, more than the %d requested",
                character_count,
                self.max_main_characters,
            )

        logger.info("Extracted %d entities across %d pages", len(entities), len(pages))
        return ExtractedStory(entities=entities, pages=pages)

    def _build_entities(self, payloads: list[EntityPayload]) -> list[Entity]:
        entities: list[Entity] = []
        seen: set[str] = set()
        for item in payloads:
            if item.id in seen:
                logger.warning("Duplicate entity id %r, keeping the first definition", item.id)
                continue
            seen.add(item.id)
            entities.append(Entity(
                id=item.id,
                name=item.name.strip(),
                type=item.type,
                description=item.description.strip(),
            ))
        return entities

    def _build_pages(self, payloads: list[PagePayload], known_ids: set[str]) -> list[StoryPage]:
        pages: list[StoryPage] = []
        for index, item in enumerate(payloads):
            entity_ids: list[str] = []
            for entity_id in item.entities_present:
                if entity_id not in known_ids:
                    logger.warning(
                        "Page %d references unknown entity %r, dropping it",
                        index + 1,
                        entity_id,
                    )
                    continue
                if entity_id not in entity_ids:
                    entity_ids.append(entity_id)
            pages.append(StoryPage(
                page_number=index + 1,
                text=item.text.strip(),
                entity_ids=entity_ids,
            ))
        return pages
