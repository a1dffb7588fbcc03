"""
Age-bracket guidance for story text and illustrations.

Each bracket pairs writing guidance (vocabulary, complexity, themes,
sentence length) with illustration guidance (visual style, scene
complexity, color palette). Unknown brackets fall back to 6-8.
"""

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class AgeRange(Enum):
    """Supported reader age brackets."""

    TODDLER = "0-2"
    PRESCHOOL = "3-5"
    EARLY_READER = "6-8"
    MIDDLE_GRADE = "9-12"


DEFAULT_AGE_RANGE = AgeRange.EARLY_READER


@dataclass(frozen=True)
class AgeGuidance:
    """Writing and illustration guidance for one age bracket."""

    age_range: str
    vocabulary: str
    complexity: str
    themes: str
    sentence_length: str
    visual_style: str
    scene_complexity: str
    color_palette: str

    def to_writing_guidelines(self) -> str:
        """Render the block embedded in the text-generation request."""
        return (
            f"VOCABULARY: {self.vocabulary}\n"
            f"STORY COMPLEXITY: {self.complexity}\n"
            f"THEMES: {self.themes}\n"
            f"SENTENCE LENGTH: {self.sentence_length}"
        )

    def to_illustration_guidelines(self) -> str:
        """Render the block embedded in image prompts."""
        return (
            f"VISUAL STYLE: {self.visual_style}\n"
            f"SCENE COMPLEXITY: {self.scene_complexity}\n"
            f"COLOR PALETTE: {self.color_palette}"
        )


AGE_GUIDANCE: dict[AgeRange, AgeGuidance] = {

    AgeRange.TODDLER: AgeGuidance(
        age_range="0-2",
        vocabulary="Use only the simplest words (1-2 syllables). Repeat key words often. Use animal sounds and onomatopoeia (woof, splash, yay!).",
        complexity="Very simple sentences, 3-6 words each. No complex plot - focus on simple actions and feelings.",
        themes="Focus on familiar concepts: animals, family, colors, shapes, daily routines, hugs, and love.",
        sentence_length="Maximum 6 words per sentence. 1-2 sentences per page.",
        visual_style="Very simple, bold shapes. Minimal background details. Large, friendly-looking characters with big eyes and smiles.",
        scene_complexity="Maximum 2-3 elements in the scene. Uncluttered compositions. Focus on one main action.",
        color_palette="Primary colors (red, blue, yellow) with high contrast. Bright and cheerful.",
    ),

    AgeRange.PRESCHOOL: AgeGuidance(
        age_range="3-5",
        vocabulary="Use simple, everyday words. Some fun new words are okay but explain through context. Include rhymes and repetition.",
        complexity="Simple sentences with basic cause-and-effect. Clear beginning, middle, and happy ending.",
        themes="Friendship, sharing, being brave, family, animals, magic, and simple adventures. Gentle lessons about kindness.",
        sentence_length="5-12 words per sentence. 2-4 sentences per page.",
        visual_style="Cute, rounded characters. Friendly expressions. Simple but colorful backgrounds.",
        scene_complexity="3-5 main elements. Simple scenes that are easy to 'read' at a glance. Clear focal point.",
        color_palette="Bright, happy colors. Soft pastels mixed with vibrant accents.",
    ),

    AgeRange.EARLY_READER: AgeGuidance(
        age_range="6-8",
        vocabulary="Age-appropriate vocabulary with some challenging words. Can include light humor and wordplay.",
        complexity="Multi-step plots with clear story arcs. Characters can face and overcome obstacles. Include dialogue.",
        themes="Adventure, friendship, problem-solving, being different is okay, teamwork, courage. Can handle mild suspense.",
        sentence_length="8-15 words per sentence. 3-5 sentences per page.",
        visual_style="More detailed characters with expressive faces. Dynamic poses. Interesting backgrounds with more elements.",
        scene_complexity="Can include more scene details. Action-oriented compositions. Environmental storytelling.",
        color_palette="Full color palette. Can include shadows and highlights for depth.",
    ),

    AgeRange.MIDDLE_GRADE: AgeGuidance(
        age_range="9-12",
        vocabulary="Richer vocabulary with descriptive language. Metaphors and figurative language are appropriate.",
        complexity="Complex plots with subplots possible. Characters show growth and make meaningful choices. Moral complexity is fine.",
        themes="Identity, responsibility, justice, loyalty, growing up. Can explore emotions like disappointment or worry with resolution.",
        sentence_length="10-20 words per sentence. 4-6 sentences per page.",
        visual_style="Detailed, semi-realistic or stylized art. Characters with nuanced expressions. Rich, atmospheric backgrounds.",
        scene_complexity="Complex scenes with multiple layers. Can include symbolism and visual metaphors.",
        color_palette="Sophisticated color palettes. Mood-appropriate lighting. Can use dramatic contrast.",
    ),
}


def get_age_guidance(age_range: str) -> AgeGuidance:
    """Get guidance for an age bracket string such as "3-5".

    Unknown or empty brackets fall back to the 6-8 guidance.
    """
    normalized = (age_range or "").strip().replace(" ", "")
    for bracket in AgeRange:
        if bracket.value == normalized:
            return AGE_GUIDANCE[bracket]
    logger.warning(
        "Unknown age range %r, falling back to %s guidance",
        age_range,
        DEFAULT_AGE_RANGE.value,
    )
    return AGE_GUIDANCE[DEFAULT_AGE_RANGE]
