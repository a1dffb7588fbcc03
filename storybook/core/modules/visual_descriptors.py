"""
Heuristic visual attribute extraction from free-text descriptions.

Best-effort keyword matching that turns a long design-card description
into a compact summary for image prompts. Every function has a generic
fallback when nothing matches, so a sparse description never breaks a
prompt.
"""

import re
from dataclasses import dataclass

COLOR_PATTERN = re.compile(
    r"\b(red|blue|green|yellow|orange|purple|pink|brown|black|white|gray|grey|"
    r"silver|gold|golden|rainbow|metallic)\b"
)

SHAPE_PATTERN = re.compile(
    r"\b(round|square|tall|short|thin|thick|small|large|compact|sleek|curved|angular|chubby|slender)\b"
)

# Checked in order, last match wins
MATERIAL_PATTERNS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"\b(metal|metallic|robots?|droids?)\b"), "metallic/robotic"),
    (re.compile(r"\b(scales?|scaled|scaly)\b"), "scaly"),
    (re.compile(r"\b(fur|furry|fluffy)\b"), "furry"),
    (re.compile(r"\b(feathers?|feathered)\b"), "feathered"),
]

VISUAL_KEYWORDS = (
    "hair", "eyes", "face", "skin", "fur", "clothing", "outfit", "wears", "wearing",
    "hat", "color", "colour", "height", "tall", "short", "build", "age",
    "young", "old", "child", "adult", "appearance",
)

DEFAULT_COLORS = "vibrant colors"
DEFAULT_SHAPE = "distinctive shape"
DEFAULT_MATERIAL = "standard"

ELLIPSIS = "..."


@dataclass(frozen=True)
class DesignCard:
    """Compact visual summary of a character."""

    colors: str
    body_shape: str
    material: str

    def to_prompt_line(self, name: str) -> str:
        return f"{name}: {self.colors} | {self.body_shape} | {self.material}"


def _unique(matches: list[str]) -> list[str]:
    ordered: list[str] = []
    for match in matches:
        if match not in ordered:
            ordered.append(match)
    return ordered


def summarize_design_card(description: str, max_colors: int = 3, max_shapes: int = 2) -> DesignCard:
    """Summarize a description into primary colors, body shape and material."""
    text = (description or "").lower()

    colors = _unique(COLOR_PATTERN.findall(text))[:max_colors]
    shapes = _unique(SHAPE_PATTERN.findall(text))[:max_shapes]

    material = DEFAULT_MATERIAL
    for pattern, label in MATERIAL_PATTERNS:
        if pattern.search(text):
            material = label

    return DesignCard(
        colors=", ".join(colors) or DEFAULT_COLORS,
        body_shape=", ".join(shapes) or DEFAULT_SHAPE,
        material=material,
    )


def extract_visual_attributes(description: str, limit: int = 2) -> list[str]:
    """Return up to `limit` sentences of the description that describe looks."""
    attributes: list[str] = []
    for sentence in re.split(r"[.!?\n]+", description or ""):
        cleaned = sentence.strip(" \t-•")
        if not cleaned or cleaned in attributes:
            continue
        lowered = cleaned.lower()
        if any(keyword in lowered for keyword in VISUAL_KEYWORDS):
            attributes.append(cleaned)
        if len(attributes) >= limit:
            break
    return attributes


def truncate_text(text: str, limit: int) -> str:
    """Trim text to at most `limit` characters, ending in an ellipsis.

    Cuts at the last whitespace before the limit so no word is split.
    """
    if len(text) <= limit:
        return text
    if limit <= len(ELLIPSIS):
        return ELLIPSIS[:limit]

    cut = text[: limit - len(ELLIPSIS)]
    boundary = cut.rfind(" ")
    newline = cut.rfind("\n")
    boundary = max(boundary, newline)
    if boundary > 0:
        cut = cut[:boundary]
    return cut.rstrip(" \t\n,;:") + ELLIPSIS
