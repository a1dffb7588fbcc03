"""
Illustration style definitions for storybook generation.

Each style carries a long-form descriptor that is pasted verbatim into
every image prompt so that all pages share one unmistakable look.
"""

import logging
from enum import Enum

from ..types import StyleDefinition

logger = logging.getLogger(__name__)


class IllustrationStyleType(Enum):
    """Available illustration styles."""

    ANIME = "anime"
    WATERCOLOR = "watercolor"
    CARTOON_3D = "3d_cartoon"
    PIXEL_ART = "pixel_art"
    COMIC_BOOK = "comic_book"
    MINIMALIST_CARICATURE = "minimalist_caricature"
    LINE_ART = "line_art"
    STICK_MAN = "stick_man"
    GOUACHE_TEXTURE = "gouache_texture"


class ColorMode(Enum):
    """Whether illustrations are rendered in color or grayscale."""

    COLOR = "color"
    MONOCHROME = "monochrome"


# Styles whose look depends on color; monochrome is not offered for them
COLOR_ONLY_STYLES: frozenset[IllustrationStyleType] = frozenset({
    IllustrationStyleType.WATERCOLOR,
    IllustrationStyleType.CARTOON_3D,
    IllustrationStyleType.GOUACHE_TEXTURE,
})


ILLUSTRATION_STYLES: dict[IllustrationStyleType, StyleDefinition] = {

    IllustrationStyleType.ANIME: StyleDefinition(
        name="Anime",
        label="anime",
        description="""Japanese anime style with:
- Large expressive eyes with detailed highlights and reflections
- Soft, smooth skin shading with cel-shaded shadows
- Vibrant, saturated colors with high contrast
- Clean, bold outlines with varying line weights
- Dynamic poses and exaggerated expressions
- Simplified but elegant backgrounds with soft gradients
- Hair rendered with flowing strands and glossy highlights
- Characters with slim proportions and pointed chins""",
    ),

    IllustrationStyleType.WATERCOLOR: StyleDefinition(
        name="Watercolor",
        label="watercolor",
        description="""Traditional watercolor painting style with:
- Soft, wet-on-wet blending with visible paint bleeds
- Translucent, layered washes of color
- Subtle color variations within areas (granulation)
- Soft, undefined edges that fade into white paper
- Gentle brushstrokes visible in texture
- Muted, pastel color palette with organic tones
- Loose, sketchy linework or no outlines
- White spaces left for highlights (paper showing through)
- Dreamy, ethereal atmosphere""",
    ),

    IllustrationStyleType.CARTOON_3D: StyleDefinition(
        name="3D Cartoon",
        label="3d_cartoon",
        description="""Pixar/Disney-style 3D animated look with:
- Smooth, rounded forms with subsurface scattering on skin
- Exaggerated proportions (large heads, big eyes)
- Soft ambient occlusion and global illumination
- Rich, saturated colors with subtle gradients
- Clean, polished surfaces with subtle texture
- Expressive, squash-and-stretch style poses
- Soft shadows and rim lighting
- Stylized but realistic materials
- Warm, inviting lighting like animated films""",
    ),

    IllustrationStyleType.PIXEL_ART: StyleDefinition(
        name="Pixel Art",
        label="pixel_art",
        description="""Retro pixel art style with:
- Limited color palette (8-16 colors maximum)
- Clear individual pixels visible (no anti-aliasing)
- Dithering patterns for shading and gradients
- Bold, simple shapes defined by pixel placement
- Nostalgic 16-bit video game aesthetic
- Black or dark outlines around characters
- Flat colors with minimal shading
- Chunky, blocky character designs
- Simple backgrounds with repeating tile patterns""",
    ),

    IllustrationStyleType.COMIC_BOOK: StyleDefinition(
        name="Comic Book",
        label="comic_book",
        description="""Classic comic book illustration style with:
- Bold, confident black ink outlines
- Ben-Day dots or halftone patterns for shading
- Flat, solid color fills with limited palette
- Dynamic action poses and dramatic angles
- Speed lines and motion effects
- Strong shadows with hard edges
- Expressive, exaggerated facial features
- Clear focal points in every composition
- Pop art influence with bold primary colors""",
    ),

    IllustrationStyleType.MINIMALIST_CARICATURE: StyleDefinition(
        name="Minimalist Caricature",
        label="minimalist_caricature",
        description="""Minimalist caricature style with:
- Simple, clean lines with minimal detail
- Exaggerated facial features and proportions
- Bold, confident single-weight outlines
- Large heads with simplified body shapes
- Flat colors with no gradients or shading
- Distinctive, memorable character silhouettes
- Playful, whimsical expressions
- Minimal background elements
- Focus on key identifying features""",
    ),

    IllustrationStyleType.LINE_ART: StyleDefinition(
        name="Line Art",
        label="line_art",
        description="""Pure line art illustration style with:
- Clean, precise ink lines as the primary element
- No color fills, only outlines and strokes
- Varying line weights for depth and emphasis
- Cross-hatching or stippling for shading
- White background with black lines
- Elegant, detailed linework
- Professional illustration quality
- Clear, readable compositions
- Artistic pen and ink aesthetic""",
    ),

    IllustrationStyleType.STICK_MAN: StyleDefinition(
        name="Stick Figure",
        label="stick_man",
        description="""Simple stick figure illustration style with:
- Basic stick figure representations of people
- Circle heads with simple dot eyes and curved smile
- Single lines for arms, legs, and body
- Very simple, child-like drawing style
- Minimal detail, maximum clarity
- Basic shapes for objects and backgrounds
- Black lines on white background
- Playful, accessible aesthetic
- Easy to understand visual storytelling""",
    ),

    IllustrationStyleType.GOUACHE_TEXTURE: StyleDefinition(
        name="Gouache Texture",
        label="gouache_texture",
        description="""Gouache and textured painting style with:
- Rich, opaque paint with visible brushwork
- Layered textures and impasto effects
- Matte, velvety finish characteristic of gouache
- Bold, saturated colors with depth
- Visible brush strokes adding character
- Paper or canvas texture showing through
- Traditional illustration book quality
- Warm, cozy feeling with organic textures
- Hand-painted, artisanal appearance""",
    ),
}


MONOCHROME_DIRECTIVE = """IMPORTANT: Create this illustration in BLACK AND WHITE / MONOCHROME only.
Use only grayscale values - pure black, pure white, and shades of gray.
No color whatsoever. Think classic black and white book illustrations."""


def _normalize(name: str) -> str:
    return (name or "").strip().lower().replace(" ", "_").replace("-", "_")


def find_style_type(name: str) -> IllustrationStyleType | None:
    """Look up a style type by name, or None if it is not a known style."""
    normalized = _normalize(name)
    for style_type in IllustrationStyleType:
        if style_type.value == normalized:
            return style_type
    return None


def get_style_by_name(name: str) -> StyleDefinition:
    """Get style definition by string name (case-insensitive).

    Unknown styles get a generic descriptor built from the requested label
    instead of failing.
    """
    style_type = find_style_type(name)
    if style_type is not None:
        return ILLUSTRATION_STYLES[style_type]

    label = (name or "").strip() or "colorful"
    logger.warning("Unknown art style %r, using generic style descriptor", name)
    return StyleDefinition(
        name=label,
        label=label,
        description=f"{label} illustration style with bright, child-friendly colors",
    )


def resolve_color_mode(art_style: str, color_mode: str) -> str:
    """Resolve the effective color mode for a style.

    Monochrome requested for a color-only style falls back to color, and
    unknown modes fall back to color.
    """
    normalized = _normalize(color_mode)
    if normalized != ColorMode.MONOCHROME.value:
        if normalized != ColorMode.COLOR.value:
            logger.warning("Unknown color mode %r, using color", color_mode)
        return ColorMode.COLOR.value

    style_type = find_style_type(art_style)
    if style_type in COLOR_ONLY_STYLES:
        logger.warning(
            "Style %s does not support monochrome, using color", style_type.value
        )
        return ColorMode.COLOR.value
    return ColorMode.MONOCHROME.value


def get_color_mode_directive(color_mode: str) -> str:
    """Return the grayscale directive for monochrome, empty for color."""
    if _normalize(color_mode) == ColorMode.MONOCHROME.value:
        return MONOCHROME_DIRECTIVE
    return ""


def get_all_styles_for_selection() -> str:
    """Format all styles as a bulleted list of keys and names."""
    lines = []
    for style_type, style_def in ILLUSTRATION_STYLES.items():
        lines.append(f"- {style_type.value}: {style_def.name}")
    return "\n".join(lines)
