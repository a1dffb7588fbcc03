#!/usr/bin/env python3
"""
CLI for generating illustrated children's storybooks.

Usage:
    python cli/generate_story.py "The Kind Fox" "A fox helps a lost owl find its way home"
    python cli/generate_story.py "Space Pals" "Two robots explore the moon" --pages 8 --style pixel_art
    python cli/generate_story.py "Bedtime Bear" "A bear who can't sleep" --text-only --stdout
    python cli/generate_story.py --list-styles
"""

import argparse
import json
import logging
import re
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from storybook.api.config import configure_logging  # noqa: E402
from storybook.config import STORY_CONSTANTS, get_inference_lm  # noqa: E402
from storybook.core.modules.age_guidance import AgeRange  # noqa: E402
from storybook.core.modules.illustration_styles import get_all_styles_for_selection  # noqa: E402
from storybook.core.programs.story_generator import StoryGenerator  # noqa: E402
from storybook.core.types import StoryBrief, StoryConfig  # noqa: E402


def main():
    parser = argparse.ArgumentParser(
        description="Generate an illustrated storybook with consistent characters",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python cli/generate_story.py "The Kind Fox" "A fox helps a lost owl find its way home"
    python cli/generate_story.py "Robot Friends" "A robot learns to share" --age 3-5 --style 3d_cartoon
    python cli/generate_story.py "Night Walk" "An owl's quiet adventure" --style line_art --color-mode monochrome
    python cli/generate_story.py "Snack Time" "Sharing snacks at the park" --text-only
        """,
    )

    parser.add_argument("title", type=str, nargs="?", help="Title of the storybook")
    parser.add_argument("description", type=str, nargs="?", help="What the story is about")

    parser.add_argument(
        "--pages", "-p",
        type=int,
        default=STORY_CONSTANTS["default_page_count"],
        help=f"Number of pages (default: {STORY_CONSTANTS['default_page_count']})",
    )

    parser.add_argument(
        "--age",
        type=str,
        default=STORY_CONSTANTS["default_age_range"],
        choices=[age.value for age in AgeRange],
        help=f"Reader age range (default: {STORY_CONSTANTS['default_age_range']})",
    )

    parser.add_argument(
        "--story-type",
        type=str,
        default="adventure",
        help="Kind of story, e.g. adventure, moral_lesson, fun_story (default: adventure)",
    )

    parser.add_argument(
        "--style",
        type=str,
        default=STORY_CONSTANTS["default_art_style"],
        help=f"Art style (default: {STORY_CONSTANTS['default_art_style']}). See --list-styles.",
    )

    parser.add_argument(
        "--color-mode",
        type=str,
        default=STORY_CONSTANTS["default_color_mode"],
        choices=["color", "monochrome"],
        help="Color or monochrome illustrations (default: color)",
    )

    parser.add_argument(
        "--output-dir", "-o",
        type=str,
        default=None,
        help="Output directory. Auto-generated under output/ if not specified.",
    )

    parser.add_argument(
        "--text-only",
        action="store_true",
        help="Write the story and cast without generating illustrations",
    )

    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the story to the terminal instead of saving files (text-only runs)",
    )

    parser.add_argument(
        "--list-styles",
        action="store_true",
        help="List the available art styles and exit",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print progress information",
    )

    args = parser.parse_args()

    if args.list_styles:
        print(get_all_styles_for_selection())
        return

    if not args.title or not args.description:
        parser.error("title and description are required")

    configure_logging(json_format=False, level=logging.INFO if args.verbose else logging.WARNING)

    brief = StoryBrief(
        title=args.title,
        description=args.description,
        story_type=args.story_type,
        age_range=args.age,
        page_count=args.pages,
    )
    config = StoryConfig(
        age_range=args.age,
        art_style=args.style,
        color_mode=args.color_mode,
        layout_type=STORY_CONSTANTS["default_layout_type"],
        story_type=args.story_type,
    )

    output_dir = _output_dir(args)

    if args.text_only:
        generator = StoryGenerator(lm=get_inference_lm())
        story = generator.generate_text_only(brief, config)
    else:
        from storybook.core.modules.image_provider import GeminiImageProvider
        from storybook.core.storage import LocalImageStore

        generator = StoryGenerator(
            image_provider=GeminiImageProvider(),
            image_store=LocalImageStore(output_dir.parent),
            lm=get_inference_lm(),
        )

        def on_progress(stage: str, detail: str, completed: int, total: int):
            if args.verbose:
                print(f"  [{stage}] {detail} ({completed}/{total})", file=sys.stderr)

        story = generator.generate(brief, config, output_dir.name, on_progress=on_progress)

    formatted = story.to_formatted_string(include_image_prompts=args.verbose)

    if args.stdout and args.text_only:
        print(formatted)
    else:
        output_dir.mkdir(parents=True, exist_ok=True)
        (output_dir / "story.md").write_text(formatted)
        (output_dir / "story.json").write_text(json.dumps(story.to_dict(), indent=2))
        print(f"Story saved to: {output_dir}")

    if args.verbose:
        print("\n--- Generation Summary ---", file=sys.stderr)
        print(f"Title: {story.title}", file=sys.stderr)
        print(f"Pages: {story.page_count}", file=sys.stderr)
        print(f"Word count: {story.word_count}", file=sys.stderr)
        print(f"Entities: {len(story.entities)}", file=sys.stderr)
        recurring = [e.name for e in story.entities if len(e.appears_in_pages) > 1]
        print(f"Recurring: {', '.join(recurring) or 'none'}", file=sys.stderr)


def _output_dir(args) -> Path:
    if args.output_dir:
        return Path(args.output_dir)
    slug = re.sub(r"[^a-z0-9]+", "_", args.title.lower())[:30].strip("_") or "story"
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return Path(__file__).parent.parent / "output" / f"{slug}_{timestamp}"


if __name__ == "__main__":
    main()
