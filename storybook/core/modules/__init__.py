# Narrative and entity extraction
from .story_extractor import StoryExtractor
from .consistency_tracker import analyze, annotate_appearances

# Prompting and illustration
from .prompt_composer import PromptComposer
from .image_provider import ImageProvider, GeminiImageProvider
from .page_illustrator import PageIllustrator, IllustrationState, IllustratedStory, GenerationStatus

__all__ = [
    # Narrative and entity extraction
    "StoryExtractor",
    "analyze",
    "annotate_appearances",
    # Prompting and illustration
    "PromptComposer",
    "ImageProvider",
    "GeminiImageProvider",
    "PageIllustrator",
    "IllustrationState",
    "IllustratedStory",
    "GenerationStatus",
]
