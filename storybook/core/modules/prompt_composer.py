"""
Composition of image-generation prompts for story pages.

The composer is pure: identical arguments always give byte-identical
prompt text. It decides which entities a page must show (its own plus
every recurring entity), compresses their descriptions into design
cards, varies camera and pose by page position, and wraps everything in
the art style, age guidance and the no-text constraints.

Prompt shape differs between the first page, which establishes the
character designs, and later pages, which must match them and may lead
with reference images from earlier pages.
"""

from dataclasses import dataclass
from typing import Mapping, Sequence

from storybook.config import IMAGE_CONSTANTS, STORY_CONSTANTS
from ..types import (
    ComposedPrompt,
    Entity,
    EntityType,
    ReferenceImage,
    StoryPage,
    StyleDefinition,
)
from .age_guidance import AgeGuidance
from .illustration_styles import get_color_mode_directive
from .visual_descriptors import extract_visual_attributes, summarize_design_card, truncate_text


# Camera angles and compositions for interior pages
CAMERA_ANGLES = [
    "wide establishing shot showing the full scene",
    "medium shot focusing on character interactions",
    "close-up on character faces showing emotions",
    "bird's-eye view looking down on the scene",
    "low angle looking up at characters",
    "over-the-shoulder perspective",
    "dynamic diagonal composition",
]

# Pose and action variety for interior pages
POSE_VARIETY = [
    "characters in motion/action",
    "characters interacting with objects",
    "characters gesturing expressively",
    "characters in relaxed/casual poses",
    "characters showing strong emotions through body language",
]

OPENING_COMPOSITION = "wide establishing shot showing the full scene and environment"
OPENING_POSE = "characters introduced clearly with their full figures visible"
OPENING_VARIATION = "This is the OPENING scene - establish the setting and introduce the main characters."

CLOSING_COMPOSITION = "warm, conclusive composition focusing on character emotions"
CLOSING_POSE = "characters together in warm, contented poses"
CLOSING_VARIATION = (
    "This is the FINAL scene - create a satisfying, conclusive image. "
    "Characters should appear resolved and happy."
)

INTERIOR_VARIATION = (
    "This is an INTERIOR scene. Make this visually DISTINCT from the other pages: "
    "vary camera distance, character positions, background details and lighting."
)

REFERENCE_PREAMBLE = (
    "Use the reference image(s) above as strict visual ground truth. "
    "Characters, locations and objects shown in them must look exactly the same in this illustration."
)

NO_TEXT_CONSTRAINTS = [
    "Absolutely NO TEXT anywhere in the image: no letters, words, numbers, names, labels, captions, titles, signs or speech bubbles",
    "Child-friendly illustration suitable for a storybook",
    "Bright, cohesive and consistent with the chosen art style",
    "The art style characteristics listed above are MANDATORY",
]


@dataclass(frozen=True)
class SceneDirectives:
    """Camera, pose and framing instructions for one page."""

    variation: str
    composition: str
    pose: str


def scene_directives(page_index: int, is_first_page: bool, is_last_page: bool) -> SceneDirectives:
    """
    Select scene-variety directives for a 0-based page index.

    The first page always gets the opening shot and the last page the
    closing shot; first-page rules win for a single-page story. Interior
    pages cycle both lists from (page_index - 1).
    """
    if is_first_page:
        return SceneDirectives(OPENING_VARIATION, OPENING_COMPOSITION, OPENING_POSE)
    if is_last_page:
        return SceneDirectives(CLOSING_VARIATION, CLOSING_COMPOSITION, CLOSING_POSE)

    interior_index = max(page_index - 1, 0)
    return SceneDirectives(
        INTERIOR_VARIATION,
        CAMERA_ANGLES[interior_index % len(CAMERA_ANGLES)],
        POSE_VARIETY[interior_index % len(POSE_VARIETY)],
    )


class PromptComposer:
    """
    Build the final image-generation prompt for each page.

    Args:
        max_prompt_length: Provider prompt budget in characters.
        wrapper_length: Part of the budget reserved for the template, the
            rest is available to the scene block.
        max_reference_images: Cap on leading reference images per page.
        max_detailed_characters: Characters described in the scene block;
            the rest are listed by name only.
    """

    def __init__(
        self,
        max_prompt_length: int = IMAGE_CONSTANTS["max_prompt_length"],
        wrapper_length: int = IMAGE_CONSTANTS["prompt_wrapper_length"],
        max_reference_images: int = IMAGE_CONSTANTS["max_reference_images"],
        max_detailed_characters: int = STORY_CONSTANTS["max_main_characters"],
    ):
        self.scene_budget = max(max_prompt_length - wrapper_length, 0)
        self.max_reference_images = max_reference_images
        self.max_detailed_characters = max_detailed_characters

    # === Entity selection ===

    def select_entities(
        self,
        page: StoryPage,
        all_entities: Mapping[str, Entity],
        recurring: frozenset[str] | set[str],
        first_appearance: Mapping[str, int],
    ) -> list[Entity]:
        """Page entities first, then recurring entities missing from the page."""
        selected: list[Entity] = []
        seen: set[str] = set()

        for entity_id in page.entity_ids:
            entity = all_entities.get(entity_id)
            if entity is not None and entity_id not in seen:
                selected.append(entity)
                seen.add(entity_id)

        forced = sorted(
            (entity_id for entity_id in recurring if entity_id not in seen),
            key=lambda entity_id: (first_appearance.get(entity_id, len(first_appearance)), entity_id),
        )
        for entity_id in forced:
            entity = all_entities.get(entity_id)
            if entity is not None:
                selected.append(entity)
                seen.add(entity_id)

        return selected

    def select_reference_images(
        self,
        page: StoryPage,
        reference_images: Mapping[str, ReferenceImage],
        first_appearance: Mapping[str, int],
    ) -> tuple[ReferenceImage, ...]:
        """Established references for entities present on this page."""
        candidates = [
            entity_id for entity_id in dict.fromkeys(page.entity_ids)
            if entity_id in reference_images
        ]
        candidates.sort(key=lambda entity_id: (first_appearance.get(entity_id, 0), entity_id))

        selected: list[ReferenceImage] = []
        locators: set[str] = set()
        for entity_id in candidates:
            reference = reference_images[entity_id]
            if reference.locator in locators:
                continue
            selected.append(reference)
            locators.add(reference.locator)
            if len(selected) >= self.max_reference_images:
                break
        return tuple(selected)

    # === Prompt blocks ===

    def _character_summary(self, entity: Entity) -> str:
        attributes = extract_visual_attributes(entity.description, limit=2)
        if attributes:
            return ". ".join(attributes)
        return truncate_text(entity.description, 100)

    def build_scene_block(self, page: StoryPage, entities: Sequence[Entity]) -> str:
        """Page text plus the cast, trimmed to the scene budget."""
        characters = [e for e in entities if e.type == EntityType.CHARACTER]
        locations = [e for e in entities if e.type == EntityType.LOCATION]
        objects = [e for e in entities if e.type == EntityType.OBJECT]

        lines = [page.text.strip()]

        if characters:
            lines.append("")
            lines.append("CHARACTERS:")
            for entity in characters[: self.max_detailed_characters]:
                lines.append(f"- {entity.name}: {self._character_summary(entity)}")
            if len(characters) > self.max_detailed_characters:
                others = ", ".join(e.name for e in characters[self.max_detailed_characters:])
                lines.append(f"- Others: {others}")

        if locations:
            lines.append("")
            lines.append("SETTING: " + ", ".join(e.name for e in locations))

        if objects:
            lines.append("")
            lines.append("OBJECTS: " + ", ".join(e.name for e in objects))

        return truncate_text("\n".join(lines), self.scene_budget)

    def build_design_specifications(self, entities: Sequence[Entity]) -> str:
        characters = [e for e in entities if e.type == EntityType.CHARACTER]
        if not characters:
            return ""

        lines = ["CHARACTER DESIGN SPECIFICATIONS:"]
        for entity in characters:
            lines.append(summarize_design_card(entity.description).to_prompt_line(entity.name))
        lines.append("")
        lines.append("MAINTAIN EXACT APPEARANCE: Colors, shapes, and materials must be identical in every scene.")
        return "\n".join(lines)

    # === Composition ===

    def compose(
        self,
        page: StoryPage,
        all_entities: Mapping[str, Entity],
        recurring: frozenset[str] | set[str],
        first_appearance: Mapping[str, int],
        style: StyleDefinition,
        age_guidance: AgeGuidance,
        reference_images: Mapping[str, ReferenceImage],
        is_first_page: bool,
        is_last_page: bool,
        page_index: int,
        color_mode: str = "color",
    ) -> ComposedPrompt:
        """
        Compose the prompt for one page.

        Returns:
            ComposedPrompt whose reference_images must be sent to the image
            provider ahead of the prompt text.
        """
        entities = self.select_entities(page, all_entities, recurring, first_appearance)
        references = self.select_reference_images(page, reference_images, first_appearance)
        directives = scene_directives(page_index, is_first_page, is_last_page)
        character_names = [e.name for e in entities if e.type == EntityType.CHARACTER]

        sections: list[str] = []

        if references:
            sections.append(REFERENCE_PREAMBLE)

        sections.append("Create a children's book illustration.")

        style_lines = ["=== ART STYLE (MUST FOLLOW EXACTLY) ===", style.to_prompt_block()]
        color_directive = get_color_mode_directive(color_mode)
        if color_directive:
            style_lines.append("")
            style_lines.append(color_directive)
        sections.append("\n".join(style_lines))

        if is_first_page:
            sections.append(
                "IMPORTANT: This is the FIRST page - establish definitive character designs "
                "that will be maintained throughout the story."
            )
        elif character_names:
            sections.append(
                f"CRITICAL: Characters ({', '.join(character_names)}) must appear EXACTLY "
                "as established in previous illustrations."
            )
        else:
            sections.append(
                "CRITICAL: Every recurring location and object must appear EXACTLY "
                "as established in previous illustrations."
            )

        sections.append("=== SCENE ===\n" + self.build_scene_block(page, entities))

        sections.append(
            "=== SCENE VARIETY ===\n"
            f"{directives.variation}\n"
            f"CAMERA/COMPOSITION: {directives.composition}\n"
            f"CHARACTER POSES: Show {directives.pose}."
        )

        sections.append(
            f"=== AGE-APPROPRIATE ILLUSTRATION STYLE (for {age_guidance.age_range} year olds) ===\n"
            + age_guidance.to_illustration_guidelines()
        )

        design_specs = self.build_design_specifications(entities)
        if design_specs:
            sections.append(design_specs)

        requirements = ["=== REQUIREMENTS ==="]
        if is_first_page:
            requirements.append("- Clear, distinctive character features")
        else:
            requirements.append("- Every visual detail of each character must match their previous appearances precisely")
        requirements.extend(f"- {constraint}" for constraint in NO_TEXT_CONSTRAINTS)
        sections.append("\n".join(requirements))

        return ComposedPrompt(text="\n\n".join(sections), reference_images=references)

    def compose_character_portrait(
        self,
        entity: Entity,
        style: StyleDefinition,
        color_mode: str = "color",
    ) -> str:
        """Prompt for a standalone character reference portrait."""
        card = summarize_design_card(entity.description)
        lines = [
            "Create a character reference portrait for a children's book.",
            "",
            "=== ART STYLE (MUST FOLLOW EXACTLY) ===",
            style.to_prompt_block(),
        ]
        color_directive = get_color_mode_directive(color_mode)
        if color_directive:
            lines.extend(["", color_directive])
        lines.extend([
            "",
            f"CHARACTER: {entity.name}",
            f"DESCRIPTION: {entity.description}",
            card.to_prompt_line("DESIGN CARD"),
            "",
            "Show the character in a neutral standing pose, front-facing view, full body visible.",
            "Clean white background. Focus on establishing clear, distinctive character features.",
            f"- {NO_TEXT_CONSTRAINTS[0]}",
        ])
        return "\n".join(lines)
