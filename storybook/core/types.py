"""
Centralized domain types for the Consistent Storybook Generator.

All dataclasses that are used across multiple modules are defined here
to make data flow explicit and avoid circular imports.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


# =============================================================================
# Style Types
# =============================================================================


@dataclass
class StyleDefinition:
    """Complete definition of an illustration style."""

    name: str
    description: str  # Long-form visual descriptor injected into every prompt
    label: str = ""  # The style key as selected by the user

    def to_prompt_block(self) -> str:
        return self.description.strip()


# =============================================================================
# Entity Types
# =============================================================================


class EntityType(str, Enum):
    """Kinds of things the narrative must render consistently."""

    CHARACTER = "character"
    LOCATION = "location"
    OBJECT = "object"


@dataclass
class Entity:
    """A character, location, or object tracked for visual consistency.

    reference_image is the locator of the image generated on the entity's
    first-appearance page. It is written once and never replaced.
    """

    id: str
    name: str
    type: EntityType
    description: str
    reference_image: Optional[str] = None
    generation_id: Optional[str] = None
    appears_in_pages: list[int] = field(default_factory=list)

    @property
    def is_character(self) -> bool:
        return self.type == EntityType.CHARACTER

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "description": self.description,
            "reference_image": self.reference_image,
            "generation_id": self.generation_id,
            "appears_in_pages": list(self.appears_in_pages),
        }


# =============================================================================
# Story Structure Types
# =============================================================================


@dataclass
class StoryBrief:
    """The short user brief a story is generated from."""

    title: str
    description: str
    story_type: str
    age_range: str
    page_count: int


@dataclass
class StoryConfig:
    """Generation configuration that shapes illustration prompts."""

    age_range: str
    art_style: str
    color_mode: str = "color"
    layout_type: str = "side_by_side"
    story_type: str = "adventure"


@dataclass
class StoryPage:
    """One unit of narrative plus one illustration.

    page_number is 1-based. entity_ids lists the entities present in the
    text of this page, in the order the text generator reported them.
    """

    page_number: int
    text: str
    entity_ids: list[str] = field(default_factory=list)
    image_prompt: str = ""
    image_url: Optional[str] = None

    @property
    def word_count(self) -> int:
        return len(self.text.split())

    def to_dict(self) -> dict:
        return {
            "page_number": self.page_number,
            "text": self.text,
            "entity_ids": list(self.entity_ids),
            "image_prompt": self.image_prompt,
            "image_url": self.image_url,
        }

    def __str__(self) -> str:
        return f"Page {self.page_number}: {self.text}"


@dataclass
class ExtractedStory:
    """Pages and entities produced by the narrative extraction call."""

    entities: list[Entity]
    pages: list[StoryPage]

    def entity_map(self) -> dict[str, Entity]:
        return {entity.id: entity for entity in self.entities}

    def get_entity(self, entity_id: str) -> Optional[Entity]:
        for entity in self.entities:
            if entity.id == entity_id:
                return entity
        return None

    @property
    def characters(self) -> list[Entity]:
        return [entity for entity in self.entities if entity.is_character]

    def to_dict(self) -> dict:
        return {
            "entities": [entity.to_dict() for entity in self.entities],
            "pages": [page.to_dict() for page in self.pages],
        }


@dataclass(frozen=True)
class ConsistencyReport:
    """Result of analyzing which entities recur across pages.

    first_appearance holds 0-based page indexes; appearances holds
    1-based page numbers.
    """

    frequency: dict[str, int]
    first_appearance: dict[str, int]
    recurring: frozenset[str]
    appearances: dict[str, list[int]] = field(default_factory=dict)

    def is_recurring(self, entity_id: str) -> bool:
        return entity_id in self.recurring

    def first_appears_on(self, page_index: int) -> list[str]:
        """Entity ids whose first appearance is the given 0-based page index."""
        return [
            entity_id
            for entity_id, index in self.first_appearance.items()
            if index == page_index
        ]


# =============================================================================
# Image Types
# =============================================================================


@dataclass(frozen=True)
class ReferenceImage:
    """A previously generated illustration used as visual ground truth."""

    locator: str
    image_bytes: bytes
    page_number: int
    generation_id: Optional[str] = None


@dataclass(frozen=True)
class ComposedPrompt:
    """Prompt text plus the reference images that must precede it."""

    text: str
    reference_images: tuple[ReferenceImage, ...] = ()

    @property
    def reference_locators(self) -> list[str]:
        return [ref.locator for ref in self.reference_images]


@dataclass
class GeneratedImage:
    """Image provider response for a single illustration."""

    image_bytes: bytes
    revised_prompt: Optional[str] = None
    generation_id: Optional[str] = None
    mime_type: str = "image/png"


# =============================================================================
# Complete Story Types
# =============================================================================


@dataclass
class GeneratedStory:
    """Complete generated story with all metadata."""

    brief: StoryBrief
    config: StoryConfig
    pages: list[StoryPage]
    entities: list[Entity]

    @property
    def title(self) -> str:
        return self.brief.title

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def word_count(self) -> int:
        return sum(page.word_count for page in self.pages)

    @property
    def full_text(self) -> str:
        return "\n\n".join(page.text for page in self.pages)

    def to_dict(self) -> dict:
        return {
            "title": self.brief.title,
            "description": self.brief.description,
            "story_type": self.config.story_type,
            "age_range": self.config.age_range,
            "art_style": self.config.art_style,
            "color_mode": self.config.color_mode,
            "layout_type": self.config.layout_type,
            "pages": [page.to_dict() for page in self.pages],
            "entities": [entity.to_dict() for entity in self.entities],
        }

    def to_formatted_string(self, include_image_prompts: bool = False) -> str:
        """Format the story for display/output."""
        lines = [
            f"# {self.title}",
            "",
            f"*{self.brief.description}*",
            "",
            "---",
            "",
        ]

        for page in self.pages:
            lines.append(f"**Page {page.page_number}**")
            lines.append("")
            lines.append(page.text)

            if page.image_url:
                lines.append("")
                lines.append(f"![Page {page.page_number}]({page.image_url})")

            if include_image_prompts and page.image_prompt:
                lines.append("")
                lines.append("```")
                lines.append(page.image_prompt)
                lines.append("```")

            lines.append("")
            lines.append("---")
            lines.append("")

        lines.append("*The End*")
        lines.append("")
        lines.append("---")
        lines.append(f"Word count: {self.word_count}")
        lines.append(f"Pages: {self.page_count}")
        lines.append(f"Age range: {self.config.age_range}")
        lines.append(f"Illustration style: {self.config.art_style} ({self.config.color_mode})")

        if self.entities:
            lines.append("")
            lines.append("Cast:")
            for entity in self.entities:
                pages = ", ".join(str(n) for n in entity.appears_in_pages) or "none"
                lines.append(f"- {entity.name} ({entity.type.value}), pages: {pages}")

        return "\n".join(lines)
